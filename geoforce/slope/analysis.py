"""Record-in, record-out entry point for slope stability.

:func:`analyze_slope` takes a plain input record, as a web form or a
report builder would send it, runs the critical surface search and
returns a plain output record::

    record = {
        "height": 10, "slopeAngle": 30, "gamma": 18,
        "cohesion": 25, "frictionAngle": 25, "method": "bishop",
    }
    out = analyze_slope(record)
    out["FS"], out["status"], out["criticalCenter"]

Input validation is the caller's job (:meth:`SlopeInput.validate`);
the engine itself returns a ``not_found`` record on degenerate input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np

from geoforce.slope.lem import Method
from geoforce.slope.profile import SlopeGeometry, SoilProperties
from geoforce.slope.search import (
    CriticalSurfaceResult,
    NotFound,
    critical_surface,
)

NOT_FOUND = "not_found"

# record key -> accepted aliases
_KEYS: dict[str, tuple[str, ...]] = {
    "height": ("height", "H"),
    "slope_angle": ("slopeAngle", "slope_angle", "angle", "beta"),
    "gamma": ("gamma", "unit_weight"),
    "cohesion": ("cohesion", "c"),
    "friction_angle": ("frictionAngle", "friction_angle", "phi"),
    "ru": ("ru",),
    "kh": ("kh",),
    "n_slices": ("nSlices", "n_slices"),
    "method": ("method",),
}


@dataclass
class SlopeInput:
    """Input record of a slope stability analysis.

    Args:
        height: Slope height H (m).
        slope_angle: Slope angle β (degrees).
        gamma: Unit weight γ (kN/m³).
        cohesion: Cohesion c (kPa).
        friction_angle: Friction angle φ (degrees).
        ru: Pore-pressure ratio.
        kh: Pseudo-static seismic coefficient.
        n_slices: Slices per trial circle.
        method: ``"fellenius"``, ``"bishop"`` or ``"janbu"``.
    """

    height: float
    slope_angle: float
    gamma: float
    cohesion: float
    friction_angle: float
    ru: float = 0.0
    kh: float = 0.0
    n_slices: int = 10
    method: str = "bishop"

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> SlopeInput:
        """Build from a record with camelCase or snake_case keys.

        Raises:
            KeyError: If a required field is missing.
        """
        values: dict[str, Any] = {}
        for name, aliases in _KEYS.items():
            for key in aliases:
                if key in record and record[key] is not None:
                    values[name] = record[key]
                    break
        missing = [
            k for k in ("height", "slope_angle", "gamma", "cohesion", "friction_angle")
            if k not in values
        ]
        if missing:
            raise KeyError(f"Missing slope input fields: {missing}")
        if "n_slices" in values:
            values["n_slices"] = int(values["n_slices"])
        return cls(**values)

    def validate(self) -> None:
        """Check parameter domains.

        Raises:
            ValueError: Listing every invalid field.
        """
        errors = []
        if not self.height > 0:
            errors.append("height must be > 0")
        if not 0 < self.slope_angle < 90:
            errors.append("slopeAngle must be between 0 and 90 degrees")
        if not self.gamma > 0:
            errors.append("gamma must be > 0")
        if not self.cohesion >= 0:
            errors.append("cohesion must be >= 0")
        if not 0 <= self.friction_angle < 90:
            errors.append("frictionAngle must be between 0 and 90 degrees")
        if not self.ru >= 0:
            errors.append("ru must be >= 0")
        if not self.kh >= 0:
            errors.append("kh must be >= 0")
        if self.n_slices < 3:
            errors.append("nSlices must be >= 3")
        try:
            Method.parse(self.method)
        except ValueError as exc:
            errors.append(str(exc))
        if errors:
            raise ValueError("; ".join(errors))

    @property
    def geometry(self) -> SlopeGeometry:
        return SlopeGeometry(height=self.height, angle=self.slope_angle)

    @property
    def soil(self) -> SoilProperties:
        return SoilProperties(
            unit_weight=self.gamma,
            cohesion=self.cohesion,
            friction_angle=self.friction_angle,
            ru=self.ru,
            kh=self.kh,
        )


def _round(value: float, digits: int = 2) -> float:
    return round(float(value), digits)


def to_record(result: CriticalSurfaceResult | NotFound) -> dict[str, Any]:
    """Convert a search outcome to a plain output record."""
    if isinstance(result, NotFound):
        return {
            "method": result.method.value,
            "methodName": result.method.display_name,
            "FS": None,
            "status": NOT_FOUND,
            "reason": result.reason,
        }
    circle = result.circle
    return {
        "method": result.method.value,
        "methodName": result.method.display_name,
        "FS": _round(result.fos, 3),
        "criticalCenter": {"x": _round(circle.xc), "y": _round(circle.yc)},
        "criticalRadius": _round(circle.radius),
        "slices": [
            {
                "index": s.index,
                "x": _round(s.x_mid),
                "width": _round(s.width),
                "height": _round(s.height),
                "weight": _round(s.weight),
                "baseAngle": _round(np.degrees(s.alpha)),
                "baseLength": _round(s.base_length),
                "porePressure": _round(s.pore_pressure),
            }
            for s in result.slices
        ],
        "status": result.status.value,
    }


def run_analysis(
    data: SlopeInput | Mapping[str, Any],
    method: str | Method | None = None,
    **search_kwargs: Any,
) -> CriticalSurfaceResult | NotFound:
    """Run the critical surface search for an input record.

    Args:
        data: :class:`SlopeInput` or input record.
        method: Overrides the record's method.
        **search_kwargs: Passed to
            :func:`~geoforce.slope.search.critical_surface`
            (``grid``, ``workers``, ``refine``, ...).
    """
    inp = data if isinstance(data, SlopeInput) else SlopeInput.from_dict(data)
    return critical_surface(
        inp.geometry,
        inp.soil,
        method=method or inp.method,
        n_slices=inp.n_slices,
        **search_kwargs,
    )


def analyze_slope(
    data: SlopeInput | Mapping[str, Any],
    method: str | Method | None = None,
    **search_kwargs: Any,
) -> dict[str, Any]:
    """Run the analysis and return the output record."""
    return to_record(run_analysis(data, method, **search_kwargs))


def bishop(data: SlopeInput | Mapping[str, Any], **search_kwargs: Any) -> dict[str, Any]:
    return analyze_slope(data, Method.BISHOP, **search_kwargs)


def janbu(data: SlopeInput | Mapping[str, Any], **search_kwargs: Any) -> dict[str, Any]:
    return analyze_slope(data, Method.JANBU, **search_kwargs)


def fellenius(data: SlopeInput | Mapping[str, Any], **search_kwargs: Any) -> dict[str, Any]:
    return analyze_slope(data, Method.FELLENIUS, **search_kwargs)


def compare_methods(
    data: SlopeInput | Mapping[str, Any],
    **search_kwargs: Any,
) -> dict[str, dict[str, Any]]:
    """Output records of all three methods, keyed by method name."""
    return {m.value: analyze_slope(data, m, **search_kwargs) for m in Method}
