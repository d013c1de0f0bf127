"""Trial failure surfaces.

Only circular surfaces are searched.  A :class:`TrialCircle` is a pure
value: the search creates one per candidate and never mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class TrialCircle:
    """Circular slip surface.

    Args:
        xc: x-coordinate of the circle centre.
        yc: y-coordinate of the circle centre.
        radius: Circle radius R (m).
    """

    xc: float
    yc: float
    radius: float

    def y_at(self, x: float) -> float | None:
        """Return the y-coordinate of the *lower* arc at *x*.

        Returns ``None`` if *x* is outside the arc span.
        """
        dx = x - self.xc
        if abs(dx) > self.radius:
            return None
        return float(self.yc - np.sqrt(self.radius ** 2 - dx ** 2))

    def base_angle(self, x: float) -> float:
        """Inclination α of the arc base at *x* (radians).

        α is the angle of the radius through the base point, measured
        from the vertical.  Positive right of the centre.
        """
        dx = x - self.xc
        return float(np.arctan2(dx, np.sqrt(max(self.radius ** 2 - dx ** 2, 0.0))))

    def span(self) -> tuple[float, float]:
        """Horizontal extent ``(xc - R, xc + R)``."""
        return (self.xc - self.radius, self.xc + self.radius)

    def arc_points(self, x_min: float, x_max: float, n: int = 100) -> np.ndarray:
        """Points ``[(x, y), ...]`` along the lower arc between two abscissae."""
        lo, hi = self.span()
        xs = np.linspace(max(x_min, lo), min(x_max, hi), n)
        ys = self.yc - np.sqrt(np.maximum(self.radius ** 2 - (xs - self.xc) ** 2, 0.0))
        return np.column_stack([xs, ys])
