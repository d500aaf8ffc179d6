"""Unit tests for input parsing and output serialisation types."""

from __future__ import annotations

import pytest

from axis_resolver.expr import SignalRef
from axis_resolver.types import (
    UNSET,
    AxisSpec,
    BinParams,
    Channel,
    DatumDef,
    FieldDef,
    FieldDefBase,
    ResolvedAxisComponent,
    ScaleType,
    is_discrete,
    is_set,
)


@pytest.mark.unit
class TestUnset:
    def test_falsy(self):
        assert not UNSET

    def test_distinct_from_none(self):
        assert UNSET is not None
        assert is_set(None) is True
        assert is_set(UNSET) is False

    def test_repr(self):
        assert repr(UNSET) == "UNSET"


@pytest.mark.unit
class TestEnums:
    def test_channel_helpers(self):
        assert Channel.X.opposite is Channel.Y
        assert Channel.Y.size_name == "height"

    @pytest.mark.parametrize("scale_type", ["band", "point", "ordinal", "bin-ordinal"])
    def test_discrete_domains(self, scale_type):
        assert ScaleType(scale_type).has_discrete_domain

    @pytest.mark.parametrize("scale_type", ["linear", "log", "time", "utc"])
    def test_continuous_domains(self, scale_type):
        assert not ScaleType(scale_type).has_discrete_domain


@pytest.mark.unit
class TestFieldDefs:
    def test_binning_flags(self):
        assert FieldDef("a", "quantitative", bin=True).is_binning
        assert FieldDef("a", "quantitative", bin=BinParams(step=5)).is_binning
        assert not FieldDef("a", "quantitative", bin="binned").is_binning
        assert FieldDef("a", "quantitative", bin="binned").is_binned

    @pytest.mark.parametrize(
        "definition, expected",
        [
            (FieldDef("a", "nominal"), True),
            (FieldDef("a", "ordinal"), True),
            (FieldDef("a", "quantitative"), False),
            (FieldDef("a", "quantitative", bin=True), True),
            (FieldDef("a", "temporal"), False),
            (DatumDef(3), False),
            (DatumDef("a", type="nominal"), True),
        ],
    )
    def test_is_discrete(self, definition, expected):
        assert is_discrete(definition) is expected


@pytest.mark.unit
class TestAxisSpecFromDict:
    """Renderer-style mappings → AxisSpec."""

    def test_camel_case_keys(self):
        axis = AxisSpec.from_dict({"labelAngle": 45, "tickCount": 5, "grid": False})
        assert axis.label_angle == 45
        assert axis.tick_count == 5
        assert axis.grid is False
        assert axis.title is UNSET

    def test_snake_case_keys(self):
        assert AxisSpec.from_dict({"label_angle": 30}).label_angle == 30

    def test_signals_coerced(self):
        axis = AxisSpec.from_dict({"labelAngle": {"signal": "angle"}, "orient": {"signal": "o"}})
        assert axis.label_angle == SignalRef("angle")
        assert axis.orient == SignalRef("o")

    def test_values_list_becomes_tuple(self):
        axis = AxisSpec.from_dict({"values": [1, {"signal": "cut"}, {"year": 2020}]})
        assert axis.values == (1, SignalRef("cut"), {"year": 2020})

    def test_explicit_null_kept(self):
        assert AxisSpec.from_dict({"title": None}).title is None

    def test_unknown_keys_ignored(self):
        axis = AxisSpec.from_dict({"labelColor": "red", "domain": False})
        assert axis == AxisSpec()


@pytest.mark.unit
class TestResolvedAxisComponentToDict:
    """Wire form emitted to the chart-assembly stage."""

    def test_unset_omitted_and_keys_camel_cased(self):
        component = ResolvedAxisComponent(label_angle=270, tick_count=UNSET, grid_scale="y")
        assert component.to_dict() == {"labelAngle": 270, "gridScale": "y"}

    def test_null_kept(self):
        assert ResolvedAxisComponent(label_align=None).to_dict() == {"labelAlign": None}

    def test_expressions_rendered(self):
        component = ResolvedAxisComponent(tick_count=SignalRef("n"))
        assert component.to_dict() == {"tickCount": {"signal": "n"}}

    def test_values_rendered_recursively(self):
        component = ResolvedAxisComponent(values=(1, SignalRef("cut")))
        assert component.to_dict() == {"values": [1, {"signal": "cut"}]}

    def test_title_descriptors(self):
        component = ResolvedAxisComponent(
            title=(
                FieldDefBase("price", aggregate="sum"),
                FieldDefBase("age", bin=BinParams(maxbins=10)),
                FieldDefBase("flag", bin=True),
            )
        )
        assert component.to_dict() == {
            "title": [
                {"field": "price", "aggregate": "sum"},
                {"field": "age", "bin": {"maxbins": 10}},
                {"field": "flag", "bin": True},
            ]
        }

    def test_explicit_not_serialised(self):
        component = ResolvedAxisComponent(grid=False, explicit=frozenset({"grid"}))
        assert component.to_dict() == {"grid": False}
