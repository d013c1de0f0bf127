"""Limit Equilibrium Methods — method of slices.

Reduces the slices of one trial circle to a factor of safety (FOS):

fellenius
    Ordinary method of slices.  Moment equilibrium, interslice forces
    ignored.  Single pass.

bishop_simplified
    Moment equilibrium with horizontal interslice forces.  FOS appears
    on both sides of the equation and is found by fixed-point iteration.

janbu_simplified
    Horizontal force equilibrium.  Iterative like Bishop.  The
    empirical correction factor f₀ is not applied (f₀ = 1).

Every solver has the signature ``(soil, slices, radius, options)`` and
returns an :class:`EquilibriumResult`, or ``None`` when no positive
finite FOS can be formed (zero driving force, non-finite iterate).

The seismic term uses the pseudo-static coefficient kh.  For the
moment methods each slice contributes ``kh W (h/2) / R``; for Janbu,
a force method, it contributes ``kh W``.

References
----------
- Duncan, Wright & Brandon (2014), *Soil Strength and Slope Stability*,
  2nd ed., Wiley.
- Abramson, Lee, Sharma & Boyce (2001), *Slope Stability and
  Stabilization Methods*, 2nd ed., Wiley.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Sequence

import numpy as np

from geoforce.slope.profile import SoilProperties
from geoforce.slope.slices import Slice

logger = logging.getLogger(__name__)

# Driving sums at or below this are treated as zero.
_EPS_DRIVING = 1e-9


class Method(str, Enum):
    """Limit-equilibrium method."""

    FELLENIUS = "fellenius"
    BISHOP = "bishop"
    JANBU = "janbu"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str | Method) -> Method:
        """Return the member for *value* (case-insensitive).

        Raises:
            ValueError: If *value* names no method.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown method {value!r}. Choose from {[m.value for m in cls]}"
            ) from None


_DISPLAY_NAMES = {
    Method.FELLENIUS: "Fellenius (Ordinary)",
    Method.BISHOP: "Bishop Simplified",
    Method.JANBU: "Janbu Simplified",
}

_ALIASES = {
    "ordinary": "fellenius",
    "oms": "fellenius",
    "bishop_simplified": "bishop",
    "janbu_simplified": "janbu",
}


@dataclass(frozen=True)
class SolverOptions:
    """Iteration settings shared by the iterative methods.

    Args:
        fs_initial: Seed value F₀.
        tol: Stop when successive iterates differ by less than this.
        max_iter: Iteration cap.  The last estimate is returned when it
            is reached.
        min_denominator: Slices whose m_α (or n_α) is smaller in
            magnitude are left out of that step.
    """

    fs_initial: float = 1.5
    tol: float = 1e-3
    max_iter: int = 20
    min_denominator: float = 1e-3


@dataclass(frozen=True)
class EquilibriumResult:
    """FOS of one trial circle.

    Attributes:
        fos: Factor of safety.
        slices: Slices used to compute it.
        method: Method that produced it.
        iterations: Number of fixed-point steps (1 for Fellenius).
        converged: False if the iteration cap was reached.
        history: Seed followed by every iterate (iterative methods).
    """

    fos: float
    slices: tuple[Slice, ...]
    method: Method
    iterations: int = 1
    converged: bool = True
    history: tuple[float, ...] = ()


class _Terms(NamedTuple):
    """Per-slice quantities as arrays, built once per circle."""

    W: np.ndarray
    h: np.ndarray
    b: np.ndarray
    l: np.ndarray
    u: np.ndarray
    sin: np.ndarray
    cos: np.ndarray
    tan: np.ndarray


def _terms(slices: Sequence[Slice]) -> _Terms:
    alpha = np.array([s.alpha for s in slices])
    return _Terms(
        W=np.array([s.weight for s in slices]),
        h=np.array([s.height for s in slices]),
        b=np.array([s.width for s in slices]),
        l=np.array([s.base_length for s in slices]),
        u=np.array([s.pore_pressure for s in slices]),
        sin=np.sin(alpha),
        cos=np.cos(alpha),
        tan=np.tan(alpha),
    )


def _moment_driving(t: _Terms, soil: SoilProperties, radius: float) -> np.ndarray:
    """Per-slice driving terms W sin α + kh W (h/2) / R."""
    seismic = soil.kh * t.W * (t.h / 2.0) / radius if radius > 0 else 0.0
    return t.W * t.sin + seismic


def _valid(fos: float) -> bool:
    return bool(np.isfinite(fos)) and fos > 0


def _ratio(resisting: float, driving: float) -> float:
    if not driving > _EPS_DRIVING:
        return float("nan")
    return float(resisting / driving)


def _fixed_point(
    step: Callable[[float], float],
    options: SolverOptions,
) -> tuple[float, tuple[float, ...], bool] | None:
    """Iterate ``F_{k+1} = step(F_k)`` from ``options.fs_initial``.

    Returns:
        ``(fos, history, converged)`` or ``None`` if an iterate is not
        positive and finite.
    """
    F = options.fs_initial
    history = [F]
    for _ in range(options.max_iter):
        F_new = step(F)
        if not _valid(F_new):
            return None
        history.append(F_new)
        if abs(F_new - F) < options.tol:
            return F_new, tuple(history), True
        F = F_new
    return F, tuple(history), False


# ======================================================================
# Fellenius (Ordinary Method of Slices)
# ======================================================================


def fellenius(
    soil: SoilProperties,
    slices: Sequence[Slice],
    radius: float,
    options: SolverOptions | None = None,
) -> EquilibriumResult | None:
    """Ordinary method of slices.

    FOS = Σ [c l + max(N, 0) tan φ] / Σ [W sin α + kh W h / (2R)]

    where N = W cos α − u l.

    Args:
        soil: Soil parameters.
        slices: Slices of the trial circle.
        radius: Circle radius (seismic moment arm).
        options: Unused; accepted for a uniform signature.

    Returns:
        :class:`EquilibriumResult` or ``None``.
    """
    if not slices:
        return None
    t = _terms(slices)
    N = t.W * t.cos - t.u * t.l
    resisting = np.sum(soil.cohesion * t.l + np.maximum(N, 0.0) * soil.tan_phi)
    driving = np.sum(_moment_driving(t, soil, radius))

    fos = _ratio(resisting, driving)
    if not _valid(fos):
        return None
    return EquilibriumResult(fos=fos, slices=tuple(slices), method=Method.FELLENIUS)


# ======================================================================
# Bishop Simplified
# ======================================================================


def bishop_simplified(
    soil: SoilProperties,
    slices: Sequence[Slice],
    radius: float,
    options: SolverOptions | None = None,
) -> EquilibriumResult | None:
    """Bishop Simplified method for circular slip surfaces.

    FOS = Σ [(c b + (W − u b) tan φ) / m_α] / Σ [W sin α + kh W h / (2R)]

    where m_α = cos α + sin α tan φ / F.

    Args:
        soil: Soil parameters.
        slices: Slices of the trial circle.
        radius: Circle radius.
        options: Iteration settings.

    Returns:
        :class:`EquilibriumResult` or ``None``.
    """
    if not slices:
        return None
    options = options or SolverOptions()
    t = _terms(slices)
    tan_phi = soil.tan_phi
    numer = soil.cohesion * t.b + (t.W - t.u * t.b) * tan_phi
    driving = _moment_driving(t, soil, radius)

    def step(F: float) -> float:
        m_alpha = t.cos + t.sin * tan_phi / F
        keep = np.abs(m_alpha) >= options.min_denominator
        return _ratio(
            np.sum(numer[keep] / m_alpha[keep]),
            np.sum(driving[keep]),
        )

    return _iterate(step, slices, Method.BISHOP, options)


# ======================================================================
# Janbu Simplified
# ======================================================================


def janbu_simplified(
    soil: SoilProperties,
    slices: Sequence[Slice],
    radius: float,
    options: SolverOptions | None = None,
) -> EquilibriumResult | None:
    """Janbu Simplified method — force equilibrium only.

    FOS = Σ [(c b + (W − u b) tan φ) / n_α] / Σ [W tan α + kh W]

    where n_α = cos²α + sin α cos α tan φ / F.  No correction factor
    f₀ is applied.

    Args:
        soil: Soil parameters.
        slices: Slices of the trial circle.
        radius: Circle radius (unused by the force balance).
        options: Iteration settings.

    Returns:
        :class:`EquilibriumResult` or ``None``.
    """
    if not slices:
        return None
    options = options or SolverOptions()
    t = _terms(slices)
    tan_phi = soil.tan_phi
    numer = soil.cohesion * t.b + (t.W - t.u * t.b) * tan_phi
    driving = t.W * t.tan + soil.kh * t.W

    def step(F: float) -> float:
        n_alpha = t.cos ** 2 + t.sin * t.cos * tan_phi / F
        keep = np.abs(n_alpha) >= options.min_denominator
        return _ratio(
            np.sum(numer[keep] / n_alpha[keep]),
            np.sum(driving[keep]),
        )

    return _iterate(step, slices, Method.JANBU, options)


def _iterate(
    step: Callable[[float], float],
    slices: Sequence[Slice],
    method: Method,
    options: SolverOptions,
) -> EquilibriumResult | None:
    out = _fixed_point(step, options)
    if out is None:
        return None
    fos, history, converged = out
    if not converged:
        logger.debug(
            "%s did not converge in %d iterations (last FOS %.4f)",
            method.display_name, options.max_iter, fos,
        )
    return EquilibriumResult(
        fos=fos,
        slices=tuple(slices),
        method=method,
        iterations=len(history) - 1,
        converged=converged,
        history=history,
    )


Solver = Callable[
    [SoilProperties, Sequence[Slice], float, "SolverOptions | None"],
    "EquilibriumResult | None",
]

SOLVERS: dict[Method, Solver] = {
    Method.FELLENIUS: fellenius,
    Method.BISHOP: bishop_simplified,
    Method.JANBU: janbu_simplified,
}


def solve(
    method: str | Method,
    soil: SoilProperties,
    slices: Sequence[Slice],
    radius: float,
    options: SolverOptions | None = None,
) -> EquilibriumResult | None:
    """Run the solver registered for *method*."""
    return SOLVERS[Method.parse(method)](soil, slices, radius, options)
