"""Axis rule table: one resolver per axis property.

:func:`resolve_axis` is the entry point used by the chart-assembly stage.  It
walks the closed :class:`AxisProperty` set, dispatches each member through
``_RULE_REGISTRY`` and collects the results into a
:class:`~axis_resolver.types.ResolvedAxisComponent`.

Rules are pure functions of a :class:`~axis_resolver.context.ResolutionContext`.
The only cross-property dependency is the label angle: it is computed once
when the context is built, and the ``label_angle``, ``label_align`` and
``label_baseline`` rules all read that same value.

Override precedence:
    An explicit value on the axis spec is returned verbatim and no heuristic
    is consulted.  ``None`` counts as "not specified" for every property
    except ``title``, where it suppresses the title.  ``label_align`` and
    ``label_baseline`` only honour truthy overrides.  A field whose bin is
    ``"binned"`` upstream never gets grid lines, even with ``grid: true``.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Any

from axis_resolver.context import ResolutionContext
from axis_resolver.expr import is_signal_ref
from axis_resolver.geometry import default_label_align, default_label_baseline
from axis_resolver.heuristics import (
    default_grid,
    default_label_flush,
    default_label_overlap,
    default_tick_count,
    default_zindex,
    grid_scale,
    has_custom_format_type,
    is_time_formatted,
    number_format,
)
from axis_resolver.titles import resolve_title
from axis_resolver.types import UNSET, ResolvedAxisComponent, is_field_def, is_set
from axis_resolver.values import resolve_values

logger = logging.getLogger(__name__)

#: Format types that may be set on the axis itself.  Everything else is
#: applied by the encode block or not supported on axes.
_AXIS_FORMAT_TYPES = ("number", "time")


class AxisProperty(str, enum.Enum):
    """Every axis property the resolver produces."""

    SCALE = "scale"
    FORMAT = "format"
    FORMAT_TYPE = "format_type"
    GRID = "grid"
    GRID_SCALE = "grid_scale"
    LABEL_ALIGN = "label_align"
    LABEL_ANGLE = "label_angle"
    LABEL_BASELINE = "label_baseline"
    LABEL_FLUSH = "label_flush"
    LABEL_OVERLAP = "label_overlap"
    ORIENT = "orient"
    TICK_COUNT = "tick_count"
    TITLE = "title"
    VALUES = "values"
    ZINDEX = "zindex"


def _specified(value: Any) -> bool:
    return value is not UNSET and value is not None


def _format_in_encode_block(ctx: ResolutionContext) -> bool:
    # Temporal and custom formats are applied to the label text instead.
    return is_time_formatted(ctx.field_def) or has_custom_format_type(
        ctx.field_def, ctx.axis, ctx.config
    )


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _scale(ctx: ResolutionContext) -> Any:
    return ctx.scale_names.get(ctx.channel, UNSET)


def _format(ctx: ResolutionContext) -> Any:
    if _format_in_encode_block(ctx):
        return UNSET
    return number_format(ctx.field_def.type, ctx.axis.format, ctx.config)


def _format_type(ctx: ResolutionContext) -> Any:
    if _format_in_encode_block(ctx):
        return UNSET
    format_type = ctx.axis.format_type
    if is_signal_ref(format_type) or format_type in _AXIS_FORMAT_TYPES:
        return format_type
    if format_type:
        logger.debug("Dropping unsupported axis formatType %r.", format_type)
    return UNSET


def _grid(ctx: ResolutionContext) -> Any:
    if is_field_def(ctx.field_def) and ctx.field_def.is_binned:
        return False
    if _specified(ctx.axis.grid):
        return ctx.axis.grid
    return default_grid(ctx.scale_type, ctx.field_def)


def _grid_scale(ctx: ResolutionContext) -> Any:
    return grid_scale(ctx.scale_names, ctx.channel)


def _label_align(ctx: ResolutionContext) -> Any:
    return ctx.axis.label_align or default_label_align(ctx.label_angle, ctx.orient, ctx.channel)


def _label_angle(ctx: ResolutionContext) -> Any:
    return ctx.label_angle


def _label_baseline(ctx: ResolutionContext) -> Any:
    return ctx.axis.label_baseline or default_label_baseline(
        ctx.label_angle,
        ctx.orient,
        ctx.channel,
        always_include_middle=ctx.always_include_middle_baseline,
    )


def _label_flush(ctx: ResolutionContext) -> Any:
    if _specified(ctx.axis.label_flush):
        return ctx.axis.label_flush
    return default_label_flush(ctx.field_def.type, ctx.channel)


def _label_overlap(ctx: ResolutionContext) -> Any:
    if _specified(ctx.axis.label_overlap):
        return ctx.axis.label_overlap
    return default_label_overlap(ctx.field_def.type, ctx.scale_type)


def _orient(ctx: ResolutionContext) -> Any:
    return ctx.orient


def _tick_count(ctx: ResolutionContext) -> Any:
    if _specified(ctx.axis.tick_count):
        return ctx.axis.tick_count
    return default_tick_count(
        field_def=ctx.field_def,
        scale_type=ctx.scale_type,
        size=ctx.size,
        values=ctx.axis.values,
    )


def _title(ctx: ResolutionContext) -> Any:
    return resolve_title(ctx.axis, ctx.field_def, ctx.field_def2)


def _values(ctx: ResolutionContext) -> Any:
    return resolve_values(ctx.axis.values, ctx.field_def)


def _zindex(ctx: ResolutionContext) -> Any:
    if _specified(ctx.axis.zindex):
        return ctx.axis.zindex
    return default_zindex(ctx.mark, ctx.field_def)


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------

#: Maps every axis property → its rule.  Adding an AxisProperty member
#: without a rule fails at import time.
_RULE_REGISTRY: dict[AxisProperty, Callable[[ResolutionContext], Any]] = {
    AxisProperty.SCALE: _scale,
    AxisProperty.FORMAT: _format,
    AxisProperty.FORMAT_TYPE: _format_type,
    AxisProperty.GRID: _grid,
    AxisProperty.GRID_SCALE: _grid_scale,
    AxisProperty.LABEL_ALIGN: _label_align,
    AxisProperty.LABEL_ANGLE: _label_angle,
    AxisProperty.LABEL_BASELINE: _label_baseline,
    AxisProperty.LABEL_FLUSH: _label_flush,
    AxisProperty.LABEL_OVERLAP: _label_overlap,
    AxisProperty.ORIENT: _orient,
    AxisProperty.TICK_COUNT: _tick_count,
    AxisProperty.TITLE: _title,
    AxisProperty.VALUES: _values,
    AxisProperty.ZINDEX: _zindex,
}

_missing_rules = set(AxisProperty) - set(_RULE_REGISTRY)
assert not _missing_rules, f"Axis properties without a rule: {sorted(_missing_rules)}"

#: How each rule decides that an axis-spec override wins.  Properties not
#: listed treat ``None`` as "not specified".
_OVERRIDE_TESTS: dict[AxisProperty, Callable[[Any], bool]] = {
    AxisProperty.LABEL_ALIGN: bool,
    AxisProperty.LABEL_BASELINE: bool,
    AxisProperty.LABEL_ANGLE: is_set,
    AxisProperty.ORIENT: is_set,
    AxisProperty.TITLE: is_set,
    AxisProperty.VALUES: is_set,
}

#: Overrides that are transformed on the way through (normalised angle,
#: materialised tick values) and so never compare equal to the AxisSpec value.
_TRANSFORMED_OVERRIDES = frozenset(
    {AxisProperty.LABEL_ANGLE, AxisProperty.ORIENT, AxisProperty.VALUES}
)


def _from_override(prop: AxisProperty, ctx: ResolutionContext, value: Any) -> bool:
    specified = getattr(ctx.axis, prop.value, UNSET)
    if not _OVERRIDE_TESTS.get(prop, _specified)(specified) or value is UNSET:
        return False
    if prop in _TRANSFORMED_OVERRIDES:
        return True
    return value is specified or value == specified


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_property(prop: AxisProperty | str, ctx: ResolutionContext) -> Any:
    """Resolve a single axis property.

    Args:
        prop: An :class:`AxisProperty` member or its string value.
        ctx:  Resolution context for the axis.

    Returns:
        A literal value, an :class:`~axis_resolver.expr.Expr`, or
        :data:`~axis_resolver.types.UNSET` to leave the property to the
        renderer's default.

    Raises:
        ValueError: If *prop* names no axis property.
    """
    return _RULE_REGISTRY[AxisProperty(prop)](ctx)


def resolve_axis(ctx: ResolutionContext) -> ResolvedAxisComponent:
    """Resolve every axis property for the axis described by *ctx*."""
    resolved: dict[str, Any] = {}
    explicit: set[str] = set()
    for prop in AxisProperty:
        value = resolve_property(prop, ctx)
        resolved[prop.value] = value
        if _from_override(prop, ctx, value):
            explicit.add(prop.value)

    logger.debug(
        "Resolved %s axis: %d properties set, %d from explicit overrides",
        ctx.channel.value,
        sum(1 for value in resolved.values() if value is not UNSET),
        len(explicit),
    )
    return ResolvedAxisComponent(**resolved, explicit=frozenset(explicit))
