"""Chart configuration used as the source of axis defaults.

``ChartConfig`` is a frozen dataclass that mirrors the axis-related part of a
chart's ``config`` block.  It is built once per compile pass by the
chart-assembly stage and threaded through every
:class:`~axis_resolver.context.ResolutionContext`; there is no module-level
singleton.

Config blocks
-------------
Axis defaults live in named blocks, using the renderer's own key names::

    axis                               every axis
    axisX / axisY                      by channel
    axisTop / axisBottom / ...         by orientation
    axisBand / axisPoint               by scale type
    axisDiscrete                       band and point scales
    axisQuantitative / axisTemporal    continuous scales
    axisXBand / axisYDiscrete / ...    channel-qualified scale-type blocks

plus ``style`` blocks referenced by name from an axis (``axis.style``) or
from a config block's own ``style`` entry.

Lookup precedence (locked)
--------------------------
For one property, the first block that defines it wins:

1. Style blocks named by the axis spec (later names win over earlier ones).
2. Scale-type blocks, channel-qualified before plain
   (``axisXBand`` > ``axisXDiscrete`` > ``axisBand`` > ``axisDiscrete``).
3. Channel block > orientation block > generic ``axis`` block.
4. Style blocks named by the config blocks above.

Loading
-------
:meth:`ChartConfig.from_dict` parses an in-memory mapping and
:func:`load_chart_config` reads a YAML file.  Both raise :exc:`ValueError` on
schema problems; the loader raises :exc:`FileNotFoundError` for a missing
file.  Neither is caught here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from axis_resolver.expr import coerce_signal, is_signal_ref
from axis_resolver.types import UNSET, Channel, ScaleType

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Typed dataclasses
# ---------------------------------------------------------------------------

#: Scale-type blocks understood by :func:`axis_config_types`.
TYPE_BASED_BLOCKS: frozenset[str] = frozenset(
    {"axisBand", "axisPoint", "axisDiscrete", "axisQuantitative", "axisTemporal"}
)

#: Every accepted axis config block name.
AXIS_CONFIG_BLOCKS: frozenset[str] = frozenset(
    {"axis", "axisX", "axisY", "axisTop", "axisBottom", "axisLeft", "axisRight", "axisOrient"}
    | TYPE_BASED_BLOCKS
    | {f"axis{c}{t[4:]}" for c in ("X", "Y") for t in TYPE_BASED_BLOCKS}
)

_AXIS_CONFIG_KEYS: dict[str, str] = {
    "format": "format",
    "formatType": "format_type",
    "grid": "grid",
    "labelAlign": "label_align",
    "labelAngle": "label_angle",
    "labelBaseline": "label_baseline",
    "labelFlush": "label_flush",
    "labelOverlap": "label_overlap",
    "orient": "orient",
    "style": "style",
    "tickCount": "tick_count",
    "title": "title",
    "zindex": "zindex",
}


@dataclass(frozen=True)
class AxisConfig:
    """Defaults for one axis config block or style.

    Every property defaults to :data:`~axis_resolver.types.UNSET`.
    Renderer properties this resolver does not interpret (``labelColor``,
    ``tickSize``, ...) are preserved in ``extra`` for the chart-assembly
    stage.
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
    zindex: Any = UNSET
    extra: Mapping[str, Any] = field(default_factory=dict)

    def get(self, prop: str) -> Any:
        """Return the value for snake_case *prop*, or UNSET."""
        return getattr(self, prop, UNSET)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, block: str = "axis") -> AxisConfig:
        """Parse one config block.

        Args:
            data:  The block mapping, renderer (camelCase) keys.
            block: Block name, used in error messages only.

        Raises:
            ValueError: If *data* is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"config.{block} must be a mapping, got {type(data).__name__}.")
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            name = _AXIS_CONFIG_KEYS.get(key)
            if name is None:
                extra[key] = value
            else:
                kwargs[name] = coerce_signal(value)
        return cls(extra=extra, **kwargs)


@dataclass(frozen=True)
class ChartConfig:
    """Immutable, per-compile-pass chart configuration.

    Attributes:
        axis_configs:       Axis config blocks keyed by block name (see
                            module docstring).
        styles:             Named style blocks.
        number_format:      Default format string for quantitative axis
                            labels.  ``None`` leaves formatting to the
                            renderer.
        custom_format_types: When ``True``, a ``formatType`` other than
                            ``number``/``time`` names a registered custom
                            formatter, applied in the encode block rather
                            than on the axis.
    """

    axis_configs: Mapping[str, AxisConfig] = field(default_factory=dict)
    styles: Mapping[str, AxisConfig] = field(default_factory=dict)
    number_format: str | None = None
    custom_format_types: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChartConfig:
        """Parse the axis-related part of a chart ``config`` mapping.

        Keys owned by other collaborators (``mark``, ``legend``, ...) are
        ignored.  Unknown ``axis*`` block names are rejected so typos do not
        silently drop defaults.

        Raises:
            ValueError: On a non-mapping config, block or style, or an
                        unknown ``axis*`` block name.
        """
        if not isinstance(data, Mapping):
            raise ValueError("chart config must be a mapping at the top level.")

        axis_configs: dict[str, AxisConfig] = {}
        for key, value in data.items():
            if not isinstance(key, str) or not key.startswith("axis"):
                continue
            if key not in AXIS_CONFIG_BLOCKS:
                raise ValueError(
                    f"config: unknown axis config block {key!r}; expected one of "
                    f"{sorted(AXIS_CONFIG_BLOCKS)}."
                )
            axis_configs[key] = AxisConfig.from_dict(value, block=key)

        styles_raw = data.get("style") or {}
        if not isinstance(styles_raw, Mapping):
            raise ValueError("config.style must be a mapping of style name to properties.")
        styles = {
            str(name): AxisConfig.from_dict(block, block=f"style.{name}")
            for name, block in styles_raw.items()
        }

        number_format = data.get("numberFormat")
        return cls(
            axis_configs=axis_configs,
            styles=styles,
            number_format=None if number_format is None else str(number_format),
            custom_format_types=bool(data.get("customFormatTypes", False)),
        )

    @classmethod
    def default(cls) -> ChartConfig:
        """Return an empty configuration: every lookup falls through to the resolver."""
        return cls()


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def axis_config_types(channel: Channel, scale_type: ScaleType | None, orient: Any) -> list[str]:
    """Return config block names for an axis, highest precedence first."""
    scale_type = ScaleType(scale_type) if scale_type is not None else None
    if scale_type is ScaleType.BAND:
        type_based = ["axisDiscrete", "axisBand"]
    elif scale_type is ScaleType.POINT:
        type_based = ["axisDiscrete", "axisPoint"]
    elif scale_type is not None and scale_type.is_quantitative:
        type_based = ["axisQuantitative"]
    elif scale_type is not None and scale_type.is_temporal:
        type_based = ["axisTemporal"]
    else:
        type_based = []

    channel_block = f"axis{Channel(channel).value.upper()}"
    channel_type_based = [channel_block + name[4:] for name in type_based]
    renderer_blocks = ["axis"]
    if is_signal_ref(orient):
        renderer_blocks.append("axisOrient")
    elif orient is not UNSET and orient is not None:
        renderer_blocks.append(f"axis{str(getattr(orient, 'value', orient)).title()}")
    renderer_blocks.append(channel_block)

    # Later entries in each group win, so reverse into precedence order.
    return list(reversed(type_based + channel_type_based)) + list(reversed(renderer_blocks))


def get_style_config(prop: str, style: Any, styles: Mapping[str, AxisConfig]) -> Any:
    """Return *prop* from the named style(s); later styles win."""
    if style is UNSET or style is None:
        return UNSET
    names = [style] if isinstance(style, str) else list(style)
    value = UNSET
    for name in names:
        candidate = styles.get(name, AxisConfig()).get(prop)
        if candidate is not UNSET:
            value = candidate
    return value


def get_axis_config(
    prop: str,
    config: ChartConfig,
    *,
    channel: Channel,
    scale_type: ScaleType | None,
    orient: Any,
    style: Any = UNSET,
) -> tuple[Any, str | None]:
    """Look up the configured default for *prop* on one axis.

    Args:
        prop:       snake_case property name (``"label_angle"``).
        config:     The compile pass's chart configuration.
        channel:    Axis channel.
        scale_type: Scale type of the axis' scale.
        orient:     Axis orientation (literal, signal, or UNSET).
        style:      Style name(s) from the axis spec.

    Returns:
        ``(value, source)`` where *source* names the style or block that
        supplied the value, or ``(UNSET, None)`` when nothing is configured.
    """
    value = get_style_config(prop, style, config.styles)
    if value is not UNSET:
        return value, "style"

    block_names = axis_config_types(channel, scale_type, orient)
    for name in block_names:
        block = config.axis_configs.get(name)
        if block is not None and block.get(prop) is not UNSET:
            return block.get(prop), name

    for name in block_names:
        block = config.axis_configs.get(name)
        if block is None:
            continue
        value = get_style_config(prop, block.style, config.styles)
        if value is not UNSET:
            return value, f"{name}.style"

    return UNSET, None


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_chart_config(path: Path) -> ChartConfig:
    """Load a chart configuration from a YAML (or JSON) file.

    The file may either be the ``config`` mapping itself or a full chart
    specification with a top-level ``config`` key.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError:        On schema validation failure.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Chart config not found: {path}")

    with path.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{path.name} must be a YAML mapping at the top level.")
    if isinstance(raw.get("config"), Mapping):
        raw = raw["config"]

    config = ChartConfig.from_dict(raw)
    logger.info(
        "Loaded chart config from %s (%d axis blocks, %d styles)",
        path,
        len(config.axis_configs),
        len(config.styles),
    )
    return config

