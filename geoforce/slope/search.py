"""Critical slip surface search.

A fixed grid of trial circles, scaled to the slope height and run, is
enumerated lazily in ``(xc, yc, R)`` order.  Every circle is sliced and
solved independently and the lowest FOS is retained.  Ties go to the
first circle in enumeration order, also when the evaluations run on a
thread pool.

An optional Nelder-Mead pass refines the grid optimum.
"""

from __future__ import annotations

import itertools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

import numpy as np

from geoforce.slope.lem import EquilibriumResult, Method, SolverOptions, solve
from geoforce.slope.profile import SlopeGeometry, SoilProperties
from geoforce.slope.slices import generate_slices
from geoforce.slope.surfaces import TrialCircle

logger = logging.getLogger(__name__)


class Stability(str, Enum):
    """Stability class of a factor of safety."""

    STABLE = "stable"
    MARGINAL = "marginal"
    UNSTABLE = "unstable"


def classify(fos: float) -> Stability:
    """≥ 1.5 stable, 1.0–1.5 marginal, < 1.0 unstable."""
    if fos >= 1.5:
        return Stability.STABLE
    if fos >= 1.0:
        return Stability.MARGINAL
    return Stability.UNSTABLE


@dataclass(frozen=True)
class SearchGrid:
    """Trial circle grid, as factors of the slope run L and height H.

    Args:
        xc_factors: Centre x as multiples of L.
        yc_factors: Centre y as multiples of H.
        r_factors: Radius as multiples of H.
        min_radius_ratio: Circles with R < ratio * yc are skipped.
        min_fos: Results at or below this FOS are discarded.
        max_fos: Results at or above this FOS are discarded.
    """

    xc_factors: tuple[float, ...] = (0.2, 0.4, 0.5, 0.6, 0.8)
    yc_factors: tuple[float, ...] = (0.8, 1.0, 1.2, 1.5, 2.0)
    r_factors: tuple[float, ...] = (0.8, 1.0, 1.2, 1.5, 1.8)
    min_radius_ratio: float = 0.5
    min_fos: float = 0.1
    max_fos: float = 100.0

    @property
    def size(self) -> int:
        return len(self.xc_factors) * len(self.yc_factors) * len(self.r_factors)


@dataclass(frozen=True)
class CriticalSurfaceResult:
    """Result of a critical surface search.

    Attributes:
        circle: The critical trial circle.
        equilibrium: FOS and slices of that circle.
        status: Stability class of the FOS.
        method: LEM method used.
        evaluated: Number of circles that produced a valid FOS.
        fos_grid: FOS of every enumerated circle (NaN where rejected
            or skipped), in enumeration order.
        centers: ``(xc, yc, R)`` of every enumerated circle.
        refined: True if the circle comes from local refinement.
    """

    circle: TrialCircle
    equilibrium: EquilibriumResult
    status: Stability
    method: Method
    evaluated: int = 0
    fos_grid: np.ndarray | None = None
    centers: np.ndarray | None = None
    refined: bool = False

    @property
    def fos(self) -> float:
        return self.equilibrium.fos

    @property
    def slices(self):
        return self.equilibrium.slices

    @property
    def found(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """No trial circle produced a valid factor of safety.

    Attributes:
        method: LEM method used.
        candidates: Number of trial circles enumerated.
        reason: Short description.
    """

    method: Method
    candidates: int = 0
    reason: str = "no valid trial circle"

    @property
    def found(self) -> bool:
        return False


def trial_circles(
    geometry: SlopeGeometry,
    grid: SearchGrid | None = None,
) -> Iterator[TrialCircle]:
    """Yield grid circles in ``(xc, yc, R)`` order.

    Circles with ``R < min_radius_ratio * yc`` are not yielded.
    """
    grid = grid or SearchGrid()
    H, L = geometry.height, geometry.run
    for fx, fy, fr in itertools.product(
        grid.xc_factors, grid.yc_factors, grid.r_factors,
    ):
        xc, yc, r = fx * L, fy * H, fr * H
        if r < grid.min_radius_ratio * yc:
            continue
        yield TrialCircle(xc=xc, yc=yc, radius=r)


def evaluate_circle(
    geometry: SlopeGeometry,
    soil: SoilProperties,
    circle: TrialCircle,
    method: str | Method = Method.BISHOP,
    n_slices: int = 10,
    options: SolverOptions | None = None,
    fos_bounds: tuple[float, float] = (0.1, 100.0),
) -> EquilibriumResult | None:
    """Slice and solve one trial circle.

    Returns:
        :class:`EquilibriumResult`, or ``None`` if the circle is
        rejected or its FOS lies outside *fos_bounds*.
    """
    slices = generate_slices(geometry, soil, circle, n_slices=n_slices)
    if slices is None:
        return None
    result = solve(method, soil, slices, circle.radius, options)
    if result is None:
        return None
    lo, hi = fos_bounds
    if not lo < result.fos < hi:
        logger.debug(
            "Discarded circle (%.3f, %.3f, R=%.3f): FOS %.4g",
            circle.xc, circle.yc, circle.radius, result.fos,
        )
        return None
    return result


def _fold_minimum(
    pairs: Iterable[tuple[TrialCircle, EquilibriumResult | None]],
) -> tuple[
    TrialCircle | None,
    EquilibriumResult | None,
    list[float],
    list[tuple[float, float, float]],
]:
    best_circle = None
    best = None
    all_fos: list[float] = []
    all_centers: list[tuple[float, float, float]] = []
    for circle, result in pairs:
        all_centers.append((circle.xc, circle.yc, circle.radius))
        if result is None:
            all_fos.append(np.nan)
            continue
        all_fos.append(result.fos)
        # Strict comparison: the first circle wins ties
        if best is None or result.fos < best.fos:
            best = result
            best_circle = circle
    return best_circle, best, all_fos, all_centers


def critical_surface(
    geometry: SlopeGeometry,
    soil: SoilProperties,
    method: str | Method = Method.BISHOP,
    n_slices: int = 10,
    grid: SearchGrid | None = None,
    options: SolverOptions | None = None,
    workers: int | None = None,
    refine: bool = False,
) -> CriticalSurfaceResult | NotFound:
    """Grid search for the critical circular slip surface.

    Args:
        geometry: Slope geometry.
        soil: Soil parameters.
        method: ``"fellenius"``, ``"bishop"`` or ``"janbu"``.
        n_slices: Number of slices per trial circle.
        grid: Trial circle grid.
        options: Solver iteration settings.
        workers: If greater than 1, evaluate circles on a thread pool
            of this size.  The result is identical to a sequential run.
        refine: Run :func:`refine_surface` from the grid optimum.

    Returns:
        :class:`CriticalSurfaceResult`, or :class:`NotFound` if the
        geometry is invalid or no circle gives a valid FOS.
    """
    method = Method.parse(method)
    grid = grid or SearchGrid()
    if not geometry.is_valid:
        logger.warning("Invalid slope geometry %s; no search performed", geometry)
        return NotFound(method=method, reason="invalid slope geometry")

    circles = list(trial_circles(geometry, grid))

    def evaluate(circle: TrialCircle) -> EquilibriumResult | None:
        return evaluate_circle(
            geometry, soil, circle, method, n_slices, options,
            (grid.min_fos, grid.max_fos),
        )

    if workers is not None and workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order
            results = list(executor.map(evaluate, circles))
    else:
        results = [evaluate(c) for c in circles]

    best_circle, best, all_fos, all_centers = _fold_minimum(zip(circles, results))
    evaluated = sum(1 for r in results if r is not None)

    if best is None:
        logger.warning(
            "%s search: no valid circle among %d candidates",
            method.display_name, len(circles),
        )
        return NotFound(method=method, candidates=len(circles))

    refined = False
    if refine:
        ref = refine_surface(
            geometry, soil, best_circle, method, n_slices, options,
            (grid.min_fos, grid.max_fos),
        )
        if ref is not None and ref[1].fos < best.fos:
            best_circle, best = ref
            refined = True

    logger.info(
        "%s search: FOS %.3f at (%.2f, %.2f) R=%.2f from %d/%d circles",
        method.display_name, best.fos, best_circle.xc, best_circle.yc,
        best_circle.radius, evaluated, len(circles),
    )
    return CriticalSurfaceResult(
        circle=best_circle,
        equilibrium=best,
        status=classify(best.fos),
        method=method,
        evaluated=evaluated,
        fos_grid=np.array(all_fos),
        centers=np.array(all_centers),
        refined=refined,
    )


def refine_surface(
    geometry: SlopeGeometry,
    soil: SoilProperties,
    start: TrialCircle,
    method: str | Method = Method.BISHOP,
    n_slices: int = 10,
    options: SolverOptions | None = None,
    fos_bounds: tuple[float, float] = (0.1, 100.0),
    max_iter: int = 200,
) -> tuple[TrialCircle, EquilibriumResult] | None:
    """Local refinement of a trial circle.

    Uses ``scipy.optimize.minimize`` (Nelder-Mead, deterministic) on
    ``(xc, yc, R)`` starting from *start*.  Rejected circles are given a
    large penalty.

    Returns:
        ``(circle, result)`` of the best circle found, or ``None`` if
        the optimum is not a valid circle.
    """
    from scipy.optimize import minimize

    method = Method.parse(method)
    penalty = 1e6

    def objective(params: np.ndarray) -> float:
        xc, yc, r = params
        if r <= 0:
            return penalty
        res = evaluate_circle(
            geometry, soil, TrialCircle(float(xc), float(yc), float(r)),
            method, n_slices, options, fos_bounds,
        )
        return penalty if res is None else res.fos

    opt = minimize(
        objective,
        x0=np.array([start.xc, start.yc, start.radius]),
        method="Nelder-Mead",
        options={"maxiter": max_iter, "xatol": 1e-3, "fatol": 1e-4},
    )
    circle = TrialCircle(float(opt.x[0]), float(opt.x[1]), float(opt.x[2]))
    if circle.radius <= 0:
        return None
    result = evaluate_circle(
        geometry, soil, circle, method, n_slices, options, fos_bounds,
    )
    if result is None:
        return None
    return circle, result
