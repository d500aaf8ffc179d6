"""Tick, grid, overlap and format default rules.

Each function computes the *default* for one axis property and is only
consulted when the axis spec carries no explicit value for it.  All are pure
functions: no I/O, no shared state, no side effects.

Contract:
- Return :data:`~axis_resolver.types.UNSET` when the renderer's own default
  should apply.
- Never raise on well-formed input.  A missing collaborator input that a rule
  genuinely needs (e.g. the size reference for tick counts) is a programmer
  error and fails with :exc:`AssertionError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from axis_resolver import expr as E
from axis_resolver.config import ChartConfig
from axis_resolver.types import (
    UNSET,
    AxisSpec,
    Channel,
    FieldOrDatumDef,
    FieldType,
    Mark,
    ScaleType,
    is_discrete,
    is_field_def,
    is_set,
)

#: Time units coarse enough that the renderer's own tick count is better.
COARSE_TIME_UNITS: frozenset[str] = frozenset({"month", "hours", "day", "quarter"})

#: Approximate pixels per tick along the axis.
TICK_SPACING = 40
BINNED_TICK_SPACING = 10

#: Format types the renderer formats natively on the axis.
BUILTIN_FORMAT_TYPES: frozenset[str] = frozenset({"number", "time", "utc"})


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


def default_grid(scale_type: ScaleType, field_def: FieldOrDatumDef) -> bool:
    """Grid lines default on only for continuous domains over unbinned fields.

    Datum definitions never get a default grid.
    """
    return (
        not ScaleType(scale_type).has_discrete_domain
        and is_field_def(field_def)
        and not field_def.is_binning
    )


def grid_scale(scale_names: Mapping[Channel, str], channel: Channel) -> Any:
    """Name of the opposite channel's scale, so grid lines span the plot.

    UNSET when the chart has no scale on the opposite channel.
    """
    return scale_names.get(Channel(channel).opposite, UNSET)


# ---------------------------------------------------------------------------
# Ticks
# ---------------------------------------------------------------------------


def normalize_time_unit(time_unit: Any) -> str | None:
    """Return the bare unit name, stripping a ``utc`` prefix.

    Accepts a unit string (``"utcmonth"``) or a mapping with a ``unit`` key.
    """
    if not time_unit:
        return None
    unit = time_unit.get("unit") if isinstance(time_unit, Mapping) else time_unit
    if not isinstance(unit, str):
        return None
    return unit[3:] if unit.startswith("utc") else unit


def default_tick_count(
    *,
    field_def: FieldOrDatumDef,
    scale_type: ScaleType,
    size: Any,
    values: Any = UNSET,
) -> Any:
    """Default ``tickCount`` as an expression over the axis length.

    Returns UNSET when explicit tick values exist, for discrete or log
    scales, and for fields with a coarse time unit.  Binning fields get one
    tick per 10px (never more ticks than bins), everything else one per 40px.
    """
    scale_type = ScaleType(scale_type)
    has_values = values is not UNSET and values is not None
    if has_values or scale_type.has_discrete_domain or scale_type is ScaleType.LOG:
        return UNSET

    spacing = TICK_SPACING
    if is_field_def(field_def):
        if field_def.is_binning:
            spacing = BINNED_TICK_SPACING
        elif normalize_time_unit(field_def.time_unit) in COARSE_TIME_UNITS:
            return UNSET

    assert size is not UNSET and size is not None, "tickCount requires a size reference"
    return E.call("ceil", E.div(size, spacing))


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def default_label_overlap(field_type: FieldType, scale_type: ScaleType) -> Any:
    """Overlap removal strategy for labels.

    Nominal labels are left alone: there is no way to tell the reader which
    labels went missing.
    """
    if field_type == FieldType.NOMINAL:
        return UNSET
    if ScaleType(scale_type) is ScaleType.LOG:
        return "greedy"
    return True


def default_label_flush(field_type: FieldType, channel: Channel) -> Any:
    """Flush end labels for continuous x axes."""
    if Channel(channel) is Channel.X and field_type in (
        FieldType.QUANTITATIVE,
        FieldType.TEMPORAL,
    ):
        return True
    return UNSET


def default_zindex(mark: Mark, field_def: FieldOrDatumDef) -> int:
    """Draw the axis above rect marks over discrete fields (heatmap cells)."""
    if mark == Mark.RECT and is_discrete(field_def):
        return 1
    return 0


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


def is_time_formatted(field_def: FieldOrDatumDef) -> bool:
    """Temporal fields and time-unit fields are formatted in the encode block."""
    if field_def.type == FieldType.TEMPORAL:
        return True
    return is_field_def(field_def) and bool(field_def.time_unit)


def has_custom_format_type(
    field_def: FieldOrDatumDef, axis: AxisSpec, config: ChartConfig
) -> bool:
    """True when the label format type names a registered custom formatter."""
    format_type = axis.format_type if is_set(axis.format_type) else field_def.format_type
    return (
        config.custom_format_types
        and isinstance(format_type, str)
        and format_type not in BUILTIN_FORMAT_TYPES
    )


def number_format(field_type: FieldType, specified: Any, config: ChartConfig) -> Any:
    """Axis label number format.

    An explicit format (string or signal) wins; quantitative fields fall back
    to the configured number format; other types get none.
    """
    if isinstance(specified, str) or E.is_signal_ref(specified):
        return specified
    if field_type == FieldType.QUANTITATIVE and config.number_format is not None:
        return config.number_format
    return UNSET
