"""Label geometry: angle normalisation, orientation, baseline and alignment.

Every case analysis in this module is written exactly once, in terms of the
combinators from :mod:`axis_resolver.expr`.  When the label angle and the
axis orientation are both literals the combinators evaluate immediately and
a plain value comes back; when either is a
:class:`~axis_resolver.expr.SignalRef` the very same comparisons are emitted
as a render-time expression.  There is no second, hand-written expression
path that could drift from the literal one.

Angle buckets (after normalising into ``[0, 360)``)::

    x baseline   (45, 135) or (225, 315)   → "middle"
                 [0, 45] or [315, 360)     → near-bottom bucket
    y baseline   [0, 45], [315, 360), [135, 225]  → null / "middle"
                 [45, 135]                        → near-left bucket
    align        (a + start) % 180 == 0    → neutral (null for x, "center" for y)
                 (start, start + 180)      → forward half-turn

Inclusive and exclusive ends above are part of the contract: the literal and
the expression forms share them because they share the code.
"""

from __future__ import annotations

from typing import Any

from axis_resolver import expr as E
from axis_resolver.config import ChartConfig, get_axis_config
from axis_resolver.expr import is_signal_ref
from axis_resolver.types import (
    UNSET,
    AxisSpec,
    Channel,
    FieldOrDatumDef,
    FieldType,
    Orient,
    ScaleType,
)

#: Label angle used for x axes over nominal/ordinal fields when nothing else
#: is specified (vertical labels reading bottom-to-top).
DEFAULT_DISCRETE_X_LABEL_ANGLE = 270

_ALIGN_GEOMETRY: dict[Channel, tuple[int, str, Any]] = {
    # channel: (start angle, main orient, neutral alignment)
    Channel.X: (0, Orient.BOTTOM.value, None),
    Channel.Y: (90, Orient.LEFT.value, "center"),
}


def _orient_value(orient: Any) -> Any:
    """Plain string for enum orients; signals and strings pass through."""
    return orient.value if isinstance(orient, Orient) else orient


# ---------------------------------------------------------------------------
# Angle and orientation
# ---------------------------------------------------------------------------


def normalize_angle(angle: Any) -> Any:
    """Map *angle* into ``[0, 360)``; negative angles wrap around.

    Literal angles yield a number, signal angles yield the expression
    ``(((a % 360) + 360) % 360)``.
    """
    return E.mod(E.add(E.mod(angle, 360), 360), 360)


def default_orient(channel: Channel) -> str:
    """Bottom for x axes, left for y axes."""
    return Orient.BOTTOM.value if Channel(channel) is Channel.X else Orient.LEFT.value


def get_orient(
    axis: AxisSpec,
    channel: Channel,
    config: ChartConfig,
    *,
    scale_type: ScaleType | None = None,
) -> Any:
    """Resolve the axis orientation: explicit, then configured, then default."""
    if axis.orient is not UNSET:
        return _orient_value(axis.orient)
    configured, _ = get_axis_config(
        "orient", config, channel=channel, scale_type=scale_type, orient=UNSET, style=axis.style
    )
    if configured is not UNSET:
        return _orient_value(configured)
    return default_orient(channel)


def get_label_angle(
    axis: AxisSpec,
    channel: Channel,
    field_def: FieldOrDatumDef,
    config: ChartConfig,
    *,
    scale_type: ScaleType | None = None,
    orient: Any = UNSET,
) -> Any:
    """Resolve the label angle once per axis.

    Precedence: explicit axis value (signals pass through, literals are
    normalised) → configured value → 270 for x axes over nominal/ordinal
    fields → UNSET.
    """
    if axis.label_angle is not UNSET:
        return axis.label_angle if is_signal_ref(axis.label_angle) else normalize_angle(
            axis.label_angle
        )

    angle, _ = get_axis_config(
        "label_angle",
        config,
        channel=channel,
        scale_type=scale_type,
        orient=orient,
        style=axis.style,
    )
    if angle is not UNSET:
        return angle if is_signal_ref(angle) else normalize_angle(angle)

    if Channel(channel) is Channel.X and field_def.type in (FieldType.NOMINAL, FieldType.ORDINAL):
        return DEFAULT_DISCRETE_X_LABEL_ANGLE
    return UNSET


# ---------------------------------------------------------------------------
# Baseline and alignment
# ---------------------------------------------------------------------------


def default_label_baseline(
    angle: Any,
    orient: Any,
    channel: Channel,
    *,
    always_include_middle: bool = False,
) -> Any:
    """Default ``labelBaseline`` for a label *angle* on an axis at *orient*.

    Args:
        angle:                 Label angle in degrees (literal or signal);
                               UNSET yields UNSET.
        orient:                Axis orientation (literal or signal).
        channel:               ``x`` or ``y``.
        always_include_middle: y axes only: return ``"middle"`` instead of
                               ``None`` for near-horizontal labels.

    Returns:
        ``"top"``, ``"middle"``, ``"bottom"``, ``None``, or an expression
        evaluating to one of them.
    """
    if angle is UNSET:
        return UNSET

    a = normalize_angle(angle)
    orient = _orient_value(orient)

    if Channel(channel) is Channel.X:
        vertical = E.or_(
            E.between(45, a, 135, inclusive=False),
            E.between(225, a, 315, inclusive=False),
        )
        near_bottom = E.or_(E.le(a, 45), E.le(315, a))
        agree = E.iff(near_bottom, E.eq(orient, Orient.TOP.value))
        return E.cond(vertical, "middle", E.cond(agree, "bottom", "top"))

    horizontal = E.or_(
        E.le(a, 45),
        E.le(315, a),
        E.between(135, a, 225, inclusive=True),
    )
    near_left = E.between(45, a, 135, inclusive=True)
    agree = E.iff(near_left, E.eq(orient, Orient.LEFT.value))
    neutral = "middle" if always_include_middle else None
    return E.cond(horizontal, neutral, E.cond(agree, "top", "bottom"))


def default_label_align(angle: Any, orient: Any, channel: Channel) -> Any:
    """Default ``labelAlign`` for a label *angle* on an axis at *orient*.

    Returns ``None`` (x) or ``"center"`` (y) when labels run parallel or
    anti-parallel to the axis' neutral direction; otherwise ``"left"`` or
    ``"right"``.  A signal angle or orientation yields an expression.
    """
    if angle is UNSET:
        return UNSET

    start, main_orient, neutral = _ALIGN_GEOMETRY[Channel(channel)]
    a = normalize_angle(angle)
    orient = _orient_value(orient)

    shifted = E.add(a, start) if start else a
    aligned = E.eq(E.mod(shifted, 180), 0)
    forward = E.between(start, a, start + 180, inclusive=False)
    agree = E.iff(forward, E.eq(orient, main_orient))
    return E.cond(aligned, neutral, E.cond(agree, "left", "right"))
