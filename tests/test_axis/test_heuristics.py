"""Unit tests for tick, grid, overlap, flush, zindex and format defaults.

All heuristics are pure functions: no fixtures beyond the expression
evaluator, no mocks.
"""

import pytest

from axis_resolver.config import ChartConfig
from axis_resolver.expr import SignalRef, is_signal_ref
from axis_resolver.heuristics import (
    default_grid,
    default_label_flush,
    default_label_overlap,
    default_tick_count,
    default_zindex,
    grid_scale,
    has_custom_format_type,
    is_time_formatted,
    normalize_time_unit,
    number_format,
)
from axis_resolver.types import UNSET, AxisSpec, BinParams, DatumDef, FieldDef

_WIDTH = SignalRef("width")


class TestDefaultGrid:
    """Grid lines only for continuous, unbinned field definitions."""

    def test_continuous_field(self):
        assert default_grid("linear", FieldDef("a", "quantitative")) is True

    def test_discrete_scale(self):
        assert default_grid("band", FieldDef("a", "nominal")) is False

    def test_binning_field(self):
        assert default_grid("linear", FieldDef("a", "quantitative", bin=True)) is False

    def test_bin_params_count_as_binning(self):
        field_def = FieldDef("a", "quantitative", bin=BinParams(maxbins=20))
        assert default_grid("linear", field_def) is False

    def test_datum_never_gets_grid(self):
        assert default_grid("linear", DatumDef(5)) is False


class TestGridScale:
    """gridScale names the opposite channel's scale."""

    def test_opposite_scale_present(self):
        assert grid_scale({"x": "x", "y": "y"}, "x") == "y"

    def test_opposite_scale_missing(self):
        assert grid_scale({"x": "x"}, "x") is UNSET


class TestNormalizeTimeUnit:
    def test_strips_utc(self):
        assert normalize_time_unit("utcmonth") == "month"

    def test_mapping(self):
        assert normalize_time_unit({"unit": "day", "step": 2}) == "day"

    def test_empty(self):
        assert normalize_time_unit(None) is None


class TestDefaultTickCount:
    """tickCount heuristics over the size reference."""

    def test_continuous_uses_40px(self, evaluate):
        count = default_tick_count(
            field_def=FieldDef("a", "quantitative"), scale_type="linear", size=_WIDTH
        )
        assert is_signal_ref(count)
        assert count.to_dict() == {"signal": "ceil((width / 40))"}
        assert evaluate(count, width=200) == 5

    def test_binning_uses_10px(self, evaluate):
        count = default_tick_count(
            field_def=FieldDef("a", "quantitative", bin=True), scale_type="linear", size=_WIDTH
        )
        assert count.signal == "ceil((width / 10))"
        assert evaluate(count, width=95) == 10

    def test_literal_size_folds(self):
        count = default_tick_count(
            field_def=FieldDef("a", "quantitative"), scale_type="linear", size=410
        )
        assert count == 11

    @pytest.mark.parametrize("scale_type", ["band", "point", "ordinal", "log"])
    def test_unresolved_scales(self, scale_type):
        count = default_tick_count(
            field_def=FieldDef("a", "quantitative"), scale_type=scale_type, size=_WIDTH
        )
        assert count is UNSET

    def test_explicit_values_suppress(self):
        count = default_tick_count(
            field_def=FieldDef("a", "quantitative"),
            scale_type="linear",
            size=_WIDTH,
            values=(1, 2, 3),
        )
        assert count is UNSET

    def test_empty_values_still_suppress(self):
        count = default_tick_count(
            field_def=FieldDef("a", "quantitative"), scale_type="linear", size=_WIDTH, values=()
        )
        assert count is UNSET

    @pytest.mark.parametrize("time_unit", ["month", "hours", "day", "quarter", "utcmonth"])
    def test_coarse_time_units(self, time_unit):
        count = default_tick_count(
            field_def=FieldDef("t", "temporal", time_unit=time_unit),
            scale_type="time",
            size=_WIDTH,
        )
        assert count is UNSET

    def test_fine_time_unit(self):
        count = default_tick_count(
            field_def=FieldDef("t", "temporal", time_unit="yearmonthdate"),
            scale_type="time",
            size=_WIDTH,
        )
        assert count.signal == "ceil((width / 40))"

    def test_missing_size_is_programmer_error(self):
        with pytest.raises(AssertionError):
            default_tick_count(
                field_def=FieldDef("a", "quantitative"), scale_type="linear", size=UNSET
            )


class TestDefaultLabelOverlap:
    """labelOverlap strategy by type and scale."""

    def test_nominal_unresolved(self):
        assert default_label_overlap("nominal", "band") is UNSET

    def test_log_is_greedy(self):
        assert default_label_overlap("quantitative", "log") == "greedy"

    @pytest.mark.parametrize("field_type", ["quantitative", "temporal", "ordinal"])
    def test_otherwise_true(self, field_type):
        assert default_label_overlap(field_type, "linear") is True


class TestDefaultLabelFlush:
    @pytest.mark.parametrize("field_type", ["quantitative", "temporal"])
    def test_continuous_x(self, field_type):
        assert default_label_flush(field_type, "x") is True

    def test_y_unresolved(self):
        assert default_label_flush("quantitative", "y") is UNSET

    def test_nominal_x_unresolved(self):
        assert default_label_flush("nominal", "x") is UNSET


class TestDefaultZindex:
    """Axes draw above heatmap cells."""

    def test_rect_discrete(self):
        assert default_zindex("rect", FieldDef("a", "nominal")) == 1

    def test_rect_binned_quantitative(self):
        assert default_zindex("rect", FieldDef("a", "quantitative", bin=True)) == 1

    def test_rect_continuous(self):
        assert default_zindex("rect", FieldDef("a", "quantitative")) == 0

    def test_other_mark_discrete(self):
        assert default_zindex("bar", FieldDef("a", "nominal")) == 0

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            default_zindex("rect", FieldDef("a", "geojson"))


class TestFormats:
    """Format helpers used by the format rules."""

    def test_temporal_is_time_formatted(self):
        assert is_time_formatted(FieldDef("t", "temporal")) is True

    def test_time_unit_is_time_formatted(self):
        assert is_time_formatted(FieldDef("t", "ordinal", time_unit="month")) is True

    def test_quantitative_not_time_formatted(self):
        assert is_time_formatted(FieldDef("a", "quantitative")) is False

    def test_custom_format_type(self):
        config = ChartConfig(custom_format_types=True)
        axis = AxisSpec(format_type="currency")
        assert has_custom_format_type(FieldDef("a", "quantitative"), axis, config) is True

    def test_custom_format_type_requires_config_flag(self):
        axis = AxisSpec(format_type="currency")
        assert not has_custom_format_type(FieldDef("a", "quantitative"), axis, ChartConfig())

    def test_field_format_type_consulted(self):
        config = ChartConfig(custom_format_types=True)
        field_def = FieldDef("a", "quantitative", format_type="currency")
        assert has_custom_format_type(field_def, AxisSpec(), config) is True

    def test_number_format_explicit(self):
        assert number_format("quantitative", ".2f", ChartConfig()) == ".2f"

    def test_number_format_signal(self):
        fmt = SignalRef("fmt")
        assert number_format("quantitative", fmt, ChartConfig()) == fmt

    def test_number_format_from_config(self):
        assert number_format("quantitative", UNSET, ChartConfig(number_format="~s")) == "~s"

    def test_number_format_nominal_unresolved(self):
        assert number_format("nominal", UNSET, ChartConfig(number_format="~s")) is UNSET
