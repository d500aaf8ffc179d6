"""Explicit tick values: map user literals into the field's domain representation.

Tick ``values`` on an axis are written in the user's terms (``"2020-01-01"``,
``{"month": 3}``, ``12``) but must reach the renderer in the scale's domain
representation.  For temporal fields that means a ``datetime(...)``
expression; every other value is already in domain form and is returned
unchanged.

DateTime objects
----------------
A mapping with any of the keys ``year``, ``quarter``, ``month``, ``date``,
``day``, ``hours``, ``minutes``, ``seconds``, ``milliseconds`` (plus an
optional ``utc`` flag) describes one point in time.  Missing parts default to
2012-01-01 00:00:00.000; 2012 is a leap year whose January 1st is a Sunday,
so ``{"day": "tue"}`` lands on a Tuesday.  Months and quarters are 1-based
here and zero-based in the emitted expression.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from axis_resolver import expr as E
from axis_resolver.heuristics import normalize_time_unit
from axis_resolver.types import UNSET, FieldOrDatumDef, FieldType, is_field_def

logger = logging.getLogger(__name__)

DEFAULT_YEAR = 2012

_MONTHS = tuple(
    "january february march april may june july august september october november december".split()
)
_DAYS = tuple("sunday monday tuesday wednesday thursday friday saturday".split())

_DATETIME_KEYS = frozenset(
    {"year", "quarter", "month", "date", "day", "hours", "minutes", "seconds", "milliseconds"}
)
_TIME_OF_DAY_KEYS = ("hours", "minutes", "seconds", "milliseconds")

#: Local time units that name a single DateTime part.
_SINGLE_TIME_UNITS = frozenset(_DATETIME_KEYS)

_DATE_FORMATS = ("%Y/%m/%d", "%m/%d/%Y", "%b %d, %Y", "%B %d, %Y", "%d %b %Y", "%d %B %Y")


# ---------------------------------------------------------------------------
# DateTime parts
# ---------------------------------------------------------------------------


def is_date_time(value: Any) -> bool:
    return isinstance(value, Mapping) and any(key in _DATETIME_KEYS for key in value)


def _name_index(value: str, names: Sequence[str]) -> int | None:
    lowered = value.lower()
    for index, name in enumerate(names):
        if lowered in (name, name[:3]):
            return index
    return None


def normalize_month(month: Any) -> Any:
    """1-based month number or name → zero-based month index."""
    if isinstance(month, str):
        index = _name_index(month, _MONTHS)
        if index is None:
            logger.debug("Ignoring unknown month name %r.", month)
            return 0
        return index
    return month - 1


def normalize_quarter(quarter: Any) -> int:
    """1-based quarter → zero-based quarter index."""
    try:
        quarter = int(quarter)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable quarter %r.", quarter)
        return 0
    if quarter > 4:
        logger.debug("Quarter %r is out of range; using it as-is.", quarter)
    return quarter - 1


def normalize_day(day: Any) -> Any:
    """Weekday number (0 = Sunday) or name → weekday index."""
    if isinstance(day, str):
        index = _name_index(day, _DAYS)
        if index is None:
            logger.debug("Ignoring unknown day name %r.", day)
            return 0
        return index
    return day % 7


def date_time_parts(value: Mapping[str, Any]) -> list[Any]:
    """Return ``[year, month, date, hours, minutes, seconds, milliseconds]``."""
    # Any other key, including ``utc``, disqualifies a standalone day.
    if "day" in value and len(value) > 1:
        logger.debug("Dropping 'day' from DateTime %r: it only works as a standalone unit.", value)
        value = {k: v for k, v in value.items() if k != "day"}

    parts: list[Any] = [value.get("year", DEFAULT_YEAR)]
    if "month" in value:
        parts.append(normalize_month(value["month"]))
    elif "quarter" in value:
        parts.append(normalize_quarter(value["quarter"]) * 3)
    else:
        parts.append(0)

    if "date" in value:
        parts.append(value["date"])
    elif "day" in value:
        parts.append(normalize_day(value["day"]) + 1)
    else:
        parts.append(1)

    parts.extend(value.get(unit, 0) for unit in _TIME_OF_DAY_KEYS)
    return parts


def date_time_to_expr(value: Mapping[str, Any]) -> E.Expr:
    """``datetime(...)`` (or ``utc(...)``) expression for a DateTime object."""
    return E.call("utc" if value.get("utc") else "datetime", *date_time_parts(value))


# ---------------------------------------------------------------------------
# Value materialisation
# ---------------------------------------------------------------------------


def _parses_as_date(text: str) -> bool:
    try:
        datetime.fromisoformat(text)
        return True
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


def value_expr(value: Any, *, time_unit: Any, field_type: FieldType) -> Any:
    """Domain expression for one value, or UNSET when the literal already fits."""
    unit = normalize_time_unit(time_unit)
    is_time = bool(unit) or field_type == FieldType.TEMPORAL

    value = E.coerce_signal(value)
    if E.is_signal_ref(value):
        return value
    if is_date_time(value):
        return date_time_to_expr(value)
    if is_time and isinstance(value, (str, int, float)) and not isinstance(value, bool):
        if unit in _SINGLE_TIME_UNITS and (
            (isinstance(value, (int, float)) and value < 10000)
            or (isinstance(value, str) and not _parses_as_date(value))
        ):
            return date_time_to_expr({unit: value})
        return E.call("datetime", value)
    return UNSET


def value_array(field_def: FieldOrDatumDef, values: Sequence[Any]) -> tuple[Any, ...]:
    """Map each explicit tick value into the field's domain representation."""
    time_unit = (
        field_def.time_unit if is_field_def(field_def) and not field_def.is_binning else None
    )
    out = []
    for value in values:
        expression = value_expr(value, time_unit=time_unit, field_type=field_def.type)
        out.append(value if expression is UNSET else expression)
    return tuple(out)


def resolve_values(axis_values: Any, field_def: FieldOrDatumDef) -> Any:
    """Resolve the axis ``values`` override.

    A literal list is materialised with :func:`value_array`, a signal passes
    through unchanged, anything else leaves ticks to the renderer.
    """
    if isinstance(axis_values, (list, tuple)):
        return value_array(field_def, axis_values)
    if E.is_signal_ref(axis_values):
        return axis_values
    return UNSET
