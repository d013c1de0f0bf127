"""Tests for the record-based analysis entry point."""

import pytest

from geoforce.slope.analysis import (
    NOT_FOUND,
    SlopeInput,
    analyze_slope,
    bishop,
    compare_methods,
    fellenius,
    janbu,
    run_analysis,
    to_record,
)
from geoforce.slope.search import CriticalSurfaceResult, NotFound


BASE = {"height": 10, "slopeAngle": 30, "gamma": 18, "cohesion": 25, "frictionAngle": 25}


class TestSlopeInput:
    def test_from_camel_case(self):
        inp = SlopeInput.from_dict({**BASE, "ru": 0.2, "kh": 0.1, "nSlices": 15, "method": "janbu"})
        assert inp.height == 10
        assert inp.slope_angle == 30
        assert inp.friction_angle == 25
        assert inp.ru == 0.2
        assert inp.kh == 0.1
        assert inp.n_slices == 15
        assert inp.method == "janbu"

    def test_from_snake_case(self):
        inp = SlopeInput.from_dict({
            "height": 8, "slope_angle": 40, "unit_weight": 19,
            "c": 10, "phi": 30,
        })
        assert inp.slope_angle == 40
        assert inp.gamma == 19
        assert inp.cohesion == 10
        assert inp.friction_angle == 30

    def test_defaults(self):
        inp = SlopeInput.from_dict(BASE)
        assert inp.ru == 0.0
        assert inp.kh == 0.0
        assert inp.n_slices == 10
        assert inp.method == "bishop"

    def test_none_uses_default(self):
        inp = SlopeInput.from_dict({**BASE, "ru": None})
        assert inp.ru == 0.0

    def test_missing_field(self):
        with pytest.raises(KeyError, match="cohesion"):
            SlopeInput.from_dict({"height": 10, "slopeAngle": 30, "gamma": 18, "frictionAngle": 25})

    def test_validate_ok(self):
        SlopeInput.from_dict(BASE).validate()

    def test_validate_errors(self):
        inp = SlopeInput.from_dict({**BASE, "slopeAngle": 95, "height": -1, "method": "spencer"})
        with pytest.raises(ValueError) as exc:
            inp.validate()
        msg = str(exc.value)
        assert "height" in msg
        assert "slopeAngle" in msg
        assert "spencer" in msg

    def test_geometry_and_soil(self):
        inp = SlopeInput.from_dict({**BASE, "kh": 0.1})
        assert inp.geometry.height == 10
        assert inp.soil.kh == 0.1
        assert inp.soil.unit_weight == 18


class TestAnalyzeSlope:
    def test_output_record(self):
        out = analyze_slope(BASE)
        assert set(out) == {
            "method", "methodName", "FS", "criticalCenter",
            "criticalRadius", "slices", "status",
        }
        assert out["method"] == "bishop"
        assert out["FS"] > 0.5
        assert out["criticalRadius"] > 0
        assert set(out["criticalCenter"]) == {"x", "y"}
        assert out["status"] in ("stable", "marginal", "unstable")
        assert len(out["slices"]) >= 3

    def test_slice_records(self):
        out = analyze_slope(BASE)
        for s in out["slices"]:
            assert set(s) == {
                "index", "x", "width", "height", "weight",
                "baseAngle", "baseLength", "porePressure",
            }
            assert -90 < s["baseAngle"] < 90
            assert s["width"] > 0

    def test_rounding(self):
        result = run_analysis(BASE)
        out = to_record(result)
        assert out["FS"] == round(result.fos, 3)
        assert out["criticalRadius"] == round(result.circle.radius, 2)

    def test_method_override(self):
        assert analyze_slope({**BASE, "method": "bishop"}, "janbu")["method"] == "janbu"

    def test_shortcuts(self):
        assert bishop(BASE)["methodName"] == "Bishop Simplified"
        assert janbu(BASE)["methodName"] == "Janbu Simplified"
        assert fellenius(BASE)["methodName"] == "Fellenius (Ordinary)"

    def test_seismic_record(self):
        static = bishop(BASE)
        seismic = bishop({**BASE, "kh": 0.15})
        assert seismic["FS"] < static["FS"]

    def test_cohesion_record(self):
        low = bishop({**BASE, "cohesion": 10})
        high = bishop({**BASE, "cohesion": 50})
        assert high["FS"] > low["FS"]

    def test_compare_methods(self):
        out = compare_methods(BASE)
        assert set(out) == {"fellenius", "bishop", "janbu"}
        assert all(r["FS"] > 0 for r in out.values())

    def test_search_kwargs(self):
        result = run_analysis(BASE, workers=2)
        assert isinstance(result, CriticalSurfaceResult)
        assert result.fos == run_analysis(BASE).fos

    def test_not_found_record(self):
        out = analyze_slope({**BASE, "cohesion": 0, "frictionAngle": 0})
        assert out["FS"] is None
        assert out["status"] == NOT_FOUND
        assert "criticalCenter" not in out

    def test_invalid_input_not_found(self):
        result = run_analysis({**BASE, "slopeAngle": 0})
        assert isinstance(result, NotFound)
        assert analyze_slope({**BASE, "slopeAngle": 0})["status"] == NOT_FOUND
