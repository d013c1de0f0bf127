"""Slope geometry and soil definition.

A :class:`SlopeGeometry` describes a simple planar slope rising from a
flat toe at the origin to a flat crest.  :class:`SoilProperties` holds
the homogeneous strength and weight parameters of the slope material.

Coordinates: x runs from the toe towards the crest, y is vertical.
The toe sits at ``(0, 0)`` and the crest edge at ``(L, H)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class SlopeGeometry:
    """Piecewise-linear ground profile of a single slope.

    Args:
        height: Slope height H (m).
        angle: Slope angle β from horizontal (degrees).

    Example::

        geom = SlopeGeometry(height=10.0, angle=30.0)
        geom.run                     # 17.32 m
        geom.ground_elevation(5.0)   # 2.89 m
    """

    height: float
    angle: float

    @property
    def beta_rad(self) -> float:
        return float(np.radians(self.angle))

    @property
    def run(self) -> float:
        """Horizontal length of the slope face L = H / tan(β)."""
        tan_beta = float(np.tan(self.beta_rad))
        if tan_beta == 0:
            return float("inf")
        return self.height / tan_beta

    @property
    def is_valid(self) -> bool:
        """True if H > 0 and 0 < β < 90."""
        return (
            np.isfinite(self.height)
            and np.isfinite(self.angle)
            and self.height > 0
            and 0.0 < self.angle < 90.0
        )

    def ground_elevation(self, x: Any) -> Any:
        """Ground surface elevation at *x*.

        Returns 0 at and left of the toe, ``x tan(β)`` on the face and
        H at and beyond the crest.  Accepts scalars or arrays.
        """
        if np.ndim(x) == 0:
            if x <= 0:
                return 0.0
            if x >= self.run:
                return float(self.height)
            return float(x * np.tan(self.beta_rad))
        x = np.asarray(x, dtype=float)
        return np.clip(x * np.tan(self.beta_rad), 0.0, self.height)

    def surface_points(
        self,
        x_min: float | None = None,
        x_max: float | None = None,
    ) -> np.ndarray:
        """Ground polyline vertices ``[(x, y), ...]`` from *x_min* to *x_max*.

        Defaults extend one run beyond toe and crest.
        """
        L = self.run
        x_min = -L if x_min is None else x_min
        x_max = 2.0 * L if x_max is None else x_max
        xs = [x_min] + [x for x in (0.0, L) if x_min < x < x_max] + [x_max]
        return np.array([(x, self.ground_elevation(x)) for x in xs])


@dataclass(frozen=True)
class SoilProperties:
    """Homogeneous soil parameters.

    Units only need to be consistent; the usual set is kN/m³ and kPa.

    Args:
        unit_weight: Total unit weight γ.
        cohesion: Cohesion c.
        friction_angle: Friction angle φ (degrees).
        ru: Pore-pressure ratio u / (γ h).
        kh: Pseudo-static horizontal seismic coefficient.
    """

    unit_weight: float
    cohesion: float = 0.0
    friction_angle: float = 30.0
    ru: float = 0.0
    kh: float = 0.0

    @property
    def gamma(self) -> float:
        return self.unit_weight

    @property
    def phi_rad(self) -> float:
        return float(np.radians(self.friction_angle))

    @property
    def tan_phi(self) -> float:
        return float(np.tan(self.phi_rad))
