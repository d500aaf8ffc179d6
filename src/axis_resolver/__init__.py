"""Axis property resolver for positional chart axes.

Resolves the renderer-ready configuration of one x or y axis from a partial
user axis spec plus the chart context (field definition, scale type, mark,
size reference, config).  Literal inputs are evaluated at compile time;
signal inputs produce equivalent render-time expressions from the same rule
code.

Typical use::

    from axis_resolver import AxisSpec, FieldDef, build_context, resolve_axis

    ctx = build_context(
        "x",
        FieldDef(field="category", type="nominal"),
        AxisSpec.from_dict({"labelAngle": {"signal": "angle"}}),
        scale_type="band",
        mark="bar",
    )
    resolve_axis(ctx).to_dict()

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from axis_resolver.config import AxisConfig, ChartConfig, load_chart_config
from axis_resolver.context import ResolutionContext, build_context
from axis_resolver.engine import AxisProperty, resolve_axis, resolve_property
from axis_resolver.expr import Expr, SignalRef
from axis_resolver.types import (
    UNSET,
    AxisSpec,
    BinParams,
    Channel,
    DatumDef,
    FieldDef,
    FieldDefBase,
    FieldType,
    Mark,
    Orient,
    ResolvedAxisComponent,
    ScaleType,
)

# ---------------------------------------------------------------------------
# Package version, read from pyproject.toml via importlib.metadata.
#
# Falls back to the last released version when imported from a source tree
# that was never installed.
# ---------------------------------------------------------------------------
try:
    __version__: str = version("axis-resolver")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "UNSET",
    "AxisConfig",
    "AxisProperty",
    "AxisSpec",
    "BinParams",
    "Channel",
    "ChartConfig",
    "DatumDef",
    "Expr",
    "FieldDef",
    "FieldDefBase",
    "FieldType",
    "Mark",
    "Orient",
    "ResolutionContext",
    "ResolvedAxisComponent",
    "ScaleType",
    "SignalRef",
    "__version__",
    "build_context",
    "load_chart_config",
    "resolve_axis",
    "resolve_property",
]
