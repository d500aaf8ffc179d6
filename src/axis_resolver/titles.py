"""Axis title resolution for a channel and its paired secondary channel.

A positional channel (``x``) may pair with a range-endpoint channel (``x2``).
The axis title is taken, in order, from:

1. the axis spec's explicit ``title``, returned verbatim (``None`` and
   ``""`` suppress the title);
2. the field definitions' own titles, merged when both are set;
3. a structural descriptor of both field definitions
   (:class:`~axis_resolver.types.FieldDefBase` tuples) that the
   chart-assembly stage turns into text once it knows the final layout.
   :func:`default_title_text` renders such descriptors when needed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from axis_resolver import expr as E
from axis_resolver.types import (
    UNSET,
    AxisSpec,
    FieldDefBase,
    FieldOrDatumDef,
    is_field_def,
)

_TITLE_SEPARATOR = ", "


def _parts(title: Any) -> list[Any]:
    return list(title) if isinstance(title, (list, tuple)) else [title]


def merge_title(title1: Any, title2: Any) -> Any:
    """Combine two titles as ``"A, B"``.

    An empty or identical second title leaves the first untouched; an empty
    first title yields the second.  Signal titles merge into a string
    concatenation expression.
    """
    if title1 == title2 or not title2:
        return title1
    if not title1:
        return title2
    if E.is_signal_ref(title1) or E.is_signal_ref(title2):
        return E.add(E.add(E.lift(title1), _TITLE_SEPARATOR), E.lift(title2))
    return _TITLE_SEPARATOR.join(str(p) for p in [*_parts(title1), *_parts(title2)])


def get_field_def_title(
    field_def: FieldOrDatumDef | None, field_def2: FieldOrDatumDef | None
) -> Any:
    """Title declared on the field definitions themselves.

    Truthy titles merge; otherwise an explicit falsy title on either side
    (primary first) suppresses the title; UNSET when neither declares one.
    """
    title1 = field_def.title if field_def is not None else UNSET
    title2 = field_def2.title if field_def2 is not None else UNSET

    if title1 and title2:
        return merge_title(title1, title2)
    if title1:
        return title1
    if title2:
        return title2
    # falsy value to disable the title
    if title1 is not UNSET:
        return title1
    if title2 is not UNSET:
        return title2
    return UNSET


def to_field_def_base(field_def: FieldOrDatumDef) -> FieldDefBase:
    return FieldDefBase(
        field=field_def.field,
        aggregate=field_def.aggregate,
        bin=field_def.bin or None,
        time_unit=field_def.time_unit,
    )


def merge_title_field_defs(
    f1: Sequence[FieldDefBase], f2: Iterable[FieldDefBase]
) -> tuple[FieldDefBase, ...]:
    """Append descriptors from *f2* that are not already present in *f1*."""
    merged = list(f1)
    for candidate in f2:
        if candidate not in merged:
            merged.append(candidate)
    return tuple(merged)


def resolve_title(
    axis: AxisSpec,
    field_def: FieldOrDatumDef,
    field_def2: FieldOrDatumDef | None = None,
) -> Any:
    """Resolve the axis title (see module docstring for precedence).

    With no field definitions to describe (datum axes) the result is
    :data:`~axis_resolver.types.UNSET` rather than an empty descriptor list,
    so the renderer omits the title instead of receiving ``[]``.
    """
    if axis.title is not UNSET:
        return axis.title

    field_def_title = get_field_def_title(field_def, field_def2)
    if field_def_title is not UNSET:
        return field_def_title

    descriptors = merge_title_field_defs(
        [to_field_def_base(field_def)] if is_field_def(field_def) else [],
        [to_field_def_base(field_def2)] if is_field_def(field_def2) else [],
    )
    return descriptors or UNSET


def default_title_text(descriptors: Iterable[FieldDefBase]) -> str:
    """Human-readable text for structural title descriptors.

    ``sum`` of ``price`` → ``"Sum of price"``, binned ``age`` →
    ``"age (binned)"``, ``date`` by ``month`` → ``"date (month)"``; several
    descriptors are joined with ``", "``.
    """
    texts = []
    for base in descriptors:
        if base.aggregate == "count" and not base.field:
            text = "Count of Records"
        elif base.aggregate:
            text = f"{base.aggregate.title()} of {base.field}"
        elif base.bin:
            text = f"{base.field} (binned)"
        elif base.time_unit:
            text = f"{base.field} ({base.time_unit})"
        else:
            text = base.field
        texts.append(text)
    return _TITLE_SEPARATOR.join(texts)
