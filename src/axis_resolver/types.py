"""Immutable input and output types for axis property resolution.

These frozen dataclasses describe what the chart-assembly stage hands to the
resolver (field/datum definitions, the user's partial :class:`AxisSpec`) and
what it gets back (:class:`ResolvedAxisComponent`).  The resolution context
that ties them together lives in :mod:`axis_resolver.context`.

Design note: ``None`` is a *value* here, not an absence.  It renders as
``null`` and is meaningful for several properties (an explicitly suppressed
title, the neutral x-axis label alignment).  "Not supplied" and "not
resolved" are both spelled :data:`UNSET`.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Literal, Union

from axis_resolver.expr import coerce_signal, is_signal_ref

# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Unset(enum.Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


#: Marker for "not supplied" (inputs) and "unresolved" (outputs).  Falsy.
UNSET = _Unset.UNSET


def is_set(value: Any) -> bool:
    return value is not UNSET


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Channel(str, enum.Enum):
    """Positional encoding channel an axis belongs to."""

    X = "x"
    Y = "y"

    @property
    def opposite(self) -> Channel:
        return Channel.Y if self is Channel.X else Channel.X

    @property
    def size_name(self) -> str:
        """Name of the layout size signal along this channel."""
        return "width" if self is Channel.X else "height"


class FieldType(str, enum.Enum):
    QUANTITATIVE = "quantitative"
    ORDINAL = "ordinal"
    NOMINAL = "nominal"
    TEMPORAL = "temporal"


class ScaleType(str, enum.Enum):
    LINEAR = "linear"
    LOG = "log"
    POW = "pow"
    SQRT = "sqrt"
    SYMLOG = "symlog"
    IDENTITY = "identity"
    SEQUENTIAL = "sequential"
    TIME = "time"
    UTC = "utc"
    QUANTILE = "quantile"
    QUANTIZE = "quantize"
    THRESHOLD = "threshold"
    BIN_ORDINAL = "bin-ordinal"
    ORDINAL = "ordinal"
    POINT = "point"
    BAND = "band"

    @property
    def has_discrete_domain(self) -> bool:
        return self in _DISCRETE_DOMAIN_SCALES

    @property
    def is_quantitative(self) -> bool:
        return self in _QUANTITATIVE_SCALES

    @property
    def is_temporal(self) -> bool:
        return self in (ScaleType.TIME, ScaleType.UTC)


_DISCRETE_DOMAIN_SCALES = frozenset(
    {ScaleType.ORDINAL, ScaleType.BIN_ORDINAL, ScaleType.POINT, ScaleType.BAND}
)
_QUANTITATIVE_SCALES = frozenset(
    {ScaleType.LINEAR, ScaleType.LOG, ScaleType.POW, ScaleType.SQRT, ScaleType.SYMLOG}
)


class Mark(str, enum.Enum):
    AREA = "area"
    ARC = "arc"
    BAR = "bar"
    CIRCLE = "circle"
    GEOSHAPE = "geoshape"
    IMAGE = "image"
    LINE = "line"
    POINT = "point"
    RECT = "rect"
    RULE = "rule"
    SQUARE = "square"
    TEXT = "text"
    TICK = "tick"
    TRAIL = "trail"


class Orient(str, enum.Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


# ---------------------------------------------------------------------------
# Field and datum definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BinParams:
    """Binning parameters; their presence means the compiler performs binning."""

    maxbins: int | None = None
    step: float | None = None
    extent: tuple[float, float] | None = None


BinSpec = Union[bool, BinParams, Literal["binned"], None]


@dataclass(frozen=True)
class FieldDef:
    """A channel bound to a data field.

    Attributes:
        field:       Data field name.
        type:        Semantic measurement type.
        bin:         ``None``/``False`` for no binning, ``True`` or
                     :class:`BinParams` when the compiler bins the field,
                     ``"binned"`` when the data arrives already binned.
        time_unit:   Time unit such as ``"month"`` or ``"utcyearmonth"``.
        aggregate:   Aggregate operation name (``"sum"``, ``"mean"``, ...).
        title:       ``UNSET`` when absent; ``None`` or ``""`` when the title
                     is explicitly suppressed.
        format_type: Format type declared on the field definition.
    """

    field: str
    type: FieldType
    bin: BinSpec = None
    time_unit: str | None = None
    aggregate: str | None = None
    title: Any = UNSET
    format_type: Any = UNSET

    @property
    def is_binning(self) -> bool:
        return self.bin is True or isinstance(self.bin, BinParams)

    @property
    def is_binned(self) -> bool:
        return self.bin == "binned"


@dataclass(frozen=True)
class DatumDef:
    """A channel bound to a constant datum rather than a field."""

    datum: Any
    type: FieldType = FieldType.QUANTITATIVE
    title: Any = UNSET
    format_type: Any = UNSET


FieldOrDatumDef = Union[FieldDef, DatumDef]


@dataclass(frozen=True)
class FieldDefBase:
    """Structural identity of a field definition, used as a fallback title."""

    field: str
    aggregate: str | None = None
    bin: BinSpec = None
    time_unit: str | None = None


def is_field_def(definition: Any) -> bool:
    return isinstance(definition, FieldDef)


def is_discrete(definition: FieldOrDatumDef) -> bool:
    """Return whether *definition* has discrete values.

    Nominal and ordinal data are discrete, quantitative data only when the
    field is binned, temporal data never.
    """
    field_type = FieldType(definition.type)
    if field_type in (FieldType.NOMINAL, FieldType.ORDINAL):
        return True
    if field_type is FieldType.QUANTITATIVE:
        return is_field_def(definition) and bool(definition.bin)
    return False


# ---------------------------------------------------------------------------
# Axis specification (input)
# ---------------------------------------------------------------------------

#: camelCase renderer key → snake_case attribute, shared by AxisSpec and
#: ResolvedAxisComponent.
_CAMEL_TO_SNAKE: dict[str, str] = {
    "format": "format",
    "formatType": "format_type",
    "grid": "grid",
    "gridScale": "grid_scale",
    "labelAlign": "label_align",
    "labelAngle": "label_angle",
    "labelBaseline": "label_baseline",
    "labelFlush": "label_flush",
    "labelOverlap": "label_overlap",
    "orient": "orient",
    "scale": "scale",
    "style": "style",
    "tickCount": "tick_count",
    "title": "title",
    "values": "values",
    "zindex": "zindex",
}
_SNAKE_TO_CAMEL = {snake: camel for camel, snake in _CAMEL_TO_SNAKE.items()}


@dataclass(frozen=True)
class AxisSpec:
    """User-supplied partial axis overrides.

    Every attribute defaults to :data:`UNSET`.  A supplied value is either a
    literal or an :class:`~axis_resolver.expr.Expr` dynamic reference.
    """

    format: Any = UNSET
    format_type: Any = UNSET
    grid: Any = UNSET
    label_align: Any = UNSET
    label_angle: Any = UNSET
    label_baseline: Any = UNSET
    label_flush: Any = UNSET
    label_overlap: Any = UNSET
    orient: Any = UNSET
    style: Any = UNSET
    tick_count: Any = UNSET
    title: Any = UNSET
    values: Any = UNSET
    zindex: Any = UNSET

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AxisSpec:
        """Build an AxisSpec from a renderer-style mapping.

        Keys may be camelCase (``labelAngle``) or snake_case
        (``label_angle``).  ``{"signal": ...}`` values become
        :class:`~axis_resolver.expr.SignalRef`.  Keys this resolver does not
        handle are ignored; validation belongs to an earlier stage.
        """
        names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_TO_SNAKE.get(key, key)
            if name not in names:
                continue
            if isinstance(value, list):
                value = tuple(coerce_signal(v) for v in value)
            kwargs[name] = coerce_signal(value)
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Resolved component (output)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedAxisComponent:
    """Renderer-ready axis properties for one positional axis.

    Each attribute is a literal, an :class:`~axis_resolver.expr.Expr`, or
    :data:`UNSET` (no override; the renderer's own default applies).

    Attributes:
        explicit: Names of properties whose value came verbatim from an
                  explicit :class:`AxisSpec` override.  The chart-assembly
                  stage uses it to decide which values may yield to config.
    """

    scale: Any = UNSET
    format: Any = UNSET
    format_type: Any = UNSET
    grid: Any = UNSET
    grid_scale: Any = UNSET
    label_align: Any = UNSET
    label_angle: Any = UNSET
    label_baseline: Any = UNSET
    label_flush: Any = UNSET
    label_overlap: Any = UNSET
    orient: Any = UNSET
    tick_count: Any = UNSET
    title: Any = UNSET
    values: Any = UNSET
    zindex: Any = UNSET
    explicit: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict[str, Any]:
        """Return the renderer form: camelCase keys, UNSET omitted, signals as dicts."""
        out: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "explicit":
                continue
            value = getattr(self, f.name)
            if value is UNSET:
                continue
            out[_SNAKE_TO_CAMEL[f.name]] = _to_wire(value)
        return out


def _to_wire(value: Any) -> Any:
    if is_signal_ref(value):
        return value.to_dict()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, FieldDefBase):
        return {k: v for k, v in _field_def_base_items(value) if v is not None}
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


def _field_def_base_items(base: FieldDefBase) -> list[tuple[str, Any]]:
    return [
        ("field", base.field),
        ("aggregate", base.aggregate),
        ("bin", _to_wire_bin(base.bin)),
        ("timeUnit", base.time_unit),
    ]


def _to_wire_bin(bin_spec: BinSpec) -> Any:
    if isinstance(bin_spec, BinParams):
        return {k: v for k, v in asdict(bin_spec).items() if v is not None} or True
    return bin_spec or None
