"""Slice generation for the method of slices.

The part of a trial circle lying below the ground surface is cut into
vertical slices of equal width.  Each slice carries the geometric and
weight data needed by the LEM solvers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from geoforce.slope.profile import SlopeGeometry, SoilProperties
from geoforce.slope.surfaces import TrialCircle

logger = logging.getLogger(__name__)

#: Fewer valid slices than this and the circle is not a usable surface.
MIN_SLICES = 3


@dataclass(frozen=True)
class Slice:
    """A single vertical slice for limit-equilibrium analysis.

    Angles in radians; forces per unit length of slope.

    Attributes:
        index: 1-based position of the slice in the partition.
        x_mid: Horizontal midpoint of the slice.
        width: Slice width b (m).
        height: Height of the slice above its base at ``x_mid`` (m).
        alpha: Base inclination (rad), positive right of the centre.
        base_length: Length of the slice base l = b / cos(α).
        weight: Weight W = γ h b.
        pore_pressure: Pore pressure u = ru γ h at the base.
        y_base: Elevation of the slip surface at the midpoint.
        y_top: Ground surface elevation at the midpoint.
    """

    index: int
    x_mid: float
    width: float
    height: float
    alpha: float
    base_length: float
    weight: float
    pore_pressure: float
    y_base: float
    y_top: float


def slice_range(
    geometry: SlopeGeometry,
    circle: TrialCircle,
    clip: tuple[float, float] = (0.2, 1.5),
) -> tuple[float, float] | None:
    """Usable x-range of a circle.

    The circle span is clipped to ``[-clip[0] L, clip[1] L]`` so that
    slices far outside the slope are never formed.

    Returns:
        ``(x_min, x_max)`` or ``None`` if the range is empty.
    """
    L = geometry.run
    lo, hi = circle.span()
    x_min = max(lo, -clip[0] * L)
    x_max = min(hi, clip[1] * L)
    if not x_max > x_min:
        return None
    return (x_min, x_max)


def generate_slices(
    geometry: SlopeGeometry,
    soil: SoilProperties,
    circle: TrialCircle,
    n_slices: int = 10,
    min_height: float = 0.01,
    clip: tuple[float, float] = (0.2, 1.5),
) -> tuple[Slice, ...] | None:
    """Generate vertical slices along a trial circle.

    Args:
        geometry: Slope geometry.
        soil: Soil parameters (γ and ru are used).
        circle: Trial circle.
        n_slices: Number of equal-width slices across the usable range.
        min_height: Slices not taller than this are dropped.
        clip: Domain clip factors applied to the slope run.

    Returns:
        Slices ordered left to right, or ``None`` if the circle yields
        fewer than :data:`MIN_SLICES` valid slices.

    Raises:
        ValueError: If *n_slices* is not positive.
    """
    if n_slices < 1:
        raise ValueError(f"n_slices must be positive, got {n_slices}")

    xr = slice_range(geometry, circle, clip)
    if xr is None:
        return None
    x_min, x_max = xr

    b = (x_max - x_min) / n_slices
    gamma = soil.unit_weight
    slices: list[Slice] = []

    for i in range(n_slices):
        x_mid = x_min + (i + 0.5) * b
        y_base = circle.y_at(x_mid)
        if y_base is None:
            continue

        y_top = geometry.ground_elevation(x_mid)
        h = max(y_top - y_base, 0.0)
        # Circle is above the ground here
        if h <= min_height:
            continue

        alpha = circle.base_angle(x_mid)
        slices.append(Slice(
            index=i + 1,
            x_mid=float(x_mid),
            width=float(b),
            height=float(h),
            alpha=alpha,
            base_length=float(b / max(np.cos(alpha), 1e-10)),
            weight=float(gamma * h * b),
            pore_pressure=float(soil.ru * gamma * h),
            y_base=float(y_base),
            y_top=float(y_top),
        ))

    if len(slices) < MIN_SLICES:
        logger.debug(
            "Rejected circle (%.3f, %.3f, R=%.3f): %d valid slices",
            circle.xc, circle.yc, circle.radius, len(slices),
        )
        return None
    return tuple(slices)
