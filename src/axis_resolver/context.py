"""Per-axis resolution context.

One :class:`ResolutionContext` is built per axis per compile pass by the
chart-assembly stage, usually through :func:`build_context`, which performs
the two computations every rule depends on exactly once:

- the axis orientation (explicit → configured → channel default), and
- the label angle (explicit → configured → discrete-x default).

The context is frozen; rules read it and never modify it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from axis_resolver.config import ChartConfig
from axis_resolver.expr import SignalRef
from axis_resolver.geometry import default_orient, get_label_angle, get_orient
from axis_resolver.types import (
    UNSET,
    AxisSpec,
    Channel,
    FieldOrDatumDef,
    Mark,
    ScaleType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """Everything needed to resolve one positional axis.

    Attributes:
        channel:     ``x`` or ``y``.
        field_def:   Field or datum definition bound to the channel.
                     Mandatory; a missing definition is a programmer error.
        axis:        The user's partial axis spec.
        scale_type:  Type of the channel's scale.
        mark:        Mark type of the unit the axis belongs to.
        orient:      Axis orientation, literal or signal.  Falls back to the
                     channel default (bottom/left) when not supplied.
        label_angle: Precomputed label angle, literal, signal, or UNSET.
        size:        Size reference along the channel (``width``/``height``
                     signal, or a literal pixel length).
        config:      The compile pass's chart configuration.
        scale_names: Scale names by channel, for scales that exist.
        field_def2:  Definition bound to the secondary channel (``x2``/``y2``).
        always_include_middle_baseline:
                     Ask y-axis baselines for ``"middle"`` rather than
                     ``None`` on near-horizontal labels.
    """

    channel: Channel
    field_def: FieldOrDatumDef
    axis: AxisSpec = field(default_factory=AxisSpec)
    scale_type: ScaleType = ScaleType.LINEAR
    mark: Mark = Mark.POINT
    orient: Any = UNSET
    label_angle: Any = UNSET
    size: Any = UNSET
    config: ChartConfig = field(default_factory=ChartConfig)
    scale_names: Mapping[Channel, str] = field(default_factory=dict)
    field_def2: FieldOrDatumDef | None = None
    always_include_middle_baseline: bool = False

    def __post_init__(self) -> None:
        assert self.field_def is not None, f"{self.channel} axis requires a field definition"
        # Accept plain strings from callers; store the enum members.
        object.__setattr__(self, "channel", Channel(self.channel))
        object.__setattr__(self, "scale_type", ScaleType(self.scale_type))
        object.__setattr__(self, "mark", Mark(self.mark))
        if self.orient is UNSET:
            object.__setattr__(self, "orient", default_orient(self.channel))


def build_context(
    channel: Channel | str,
    field_def: FieldOrDatumDef,
    axis: AxisSpec | None = None,
    *,
    scale_type: ScaleType | str,
    mark: Mark | str,
    config: ChartConfig | None = None,
    size: Any = UNSET,
    scale_names: Mapping[Channel, str] | None = None,
    field_def2: FieldOrDatumDef | None = None,
    always_include_middle_baseline: bool = False,
) -> ResolutionContext:
    """Build a :class:`ResolutionContext`, computing orient and label angle.

    Args:
        channel:     ``x`` or ``y``.
        field_def:   Field or datum definition for the channel.
        axis:        User axis spec; an empty spec when ``None``.
        scale_type:  Scale type of the channel's scale.
        mark:        Mark type.
        config:      Chart configuration; empty when ``None``.
        size:        Size reference; defaults to the ``width``/``height``
                     signal for the channel.
        scale_names: Scale names by channel; defaults to a scale named after
                     the channel itself.
        field_def2:  Secondary channel definition, if any.
        always_include_middle_baseline: See :class:`ResolutionContext`.

    Returns:
        A frozen context ready for :func:`~axis_resolver.engine.resolve_axis`.
    """
    channel = Channel(channel)
    assert field_def is not None, f"{channel.value} axis requires a field definition"
    axis = axis if axis is not None else AxisSpec()
    config = config if config is not None else ChartConfig.default()
    scale_type = ScaleType(scale_type)

    orient = get_orient(axis, channel, config, scale_type=scale_type)
    label_angle = get_label_angle(
        axis, channel, field_def, config, scale_type=scale_type, orient=orient
    )
    logger.debug(
        "Built %s axis context: orient=%r label_angle=%r", channel.value, orient, label_angle
    )

    return ResolutionContext(
        channel=channel,
        field_def=field_def,
        axis=axis,
        scale_type=scale_type,
        mark=Mark(mark),
        orient=orient,
        label_angle=label_angle,
        size=SignalRef(channel.size_name) if size is UNSET else size,
        config=config,
        scale_names=dict(scale_names) if scale_names is not None else {channel: channel.value},
        field_def2=field_def2,
        always_include_middle_baseline=always_include_middle_baseline,
    )
