"""Slope stability analysis.

Limit Equilibrium Methods (LEM) on circular slip surfaces for a single
homogeneous slope.

LEM — Method of Slices
~~~~~~~~~~~~~~~~~~~~~~
Divide the soil mass above a trial circle into vertical slices and
apply equilibrium equations.

Methods:
    - :func:`fellenius` — ordinary method, no iteration
    - :func:`bishop_simplified` — moment equilibrium, iterative
    - :func:`janbu_simplified` — force equilibrium, iterative

Critical surface
~~~~~~~~~~~~~~~~
:func:`critical_surface` scans a grid of trial circles scaled to the
slope and keeps the one with the lowest factor of safety.

Example::

    from geoforce.slope import (
        SlopeGeometry, SoilProperties, critical_surface,
    )

    geom = SlopeGeometry(height=10, angle=30)
    soil = SoilProperties(unit_weight=18, cohesion=25, friction_angle=25)

    result = critical_surface(geom, soil, method="bishop")
    if result.found:
        print(result.fos, result.circle, result.status)
"""

from geoforce.slope.profile import SlopeGeometry, SoilProperties
from geoforce.slope.surfaces import TrialCircle
from geoforce.slope.slices import MIN_SLICES, Slice, generate_slices
from geoforce.slope.lem import (
    SOLVERS,
    EquilibriumResult,
    Method,
    SolverOptions,
    bishop_simplified,
    fellenius,
    janbu_simplified,
    solve,
)
from geoforce.slope.search import (
    CriticalSurfaceResult,
    NotFound,
    SearchGrid,
    Stability,
    classify,
    critical_surface,
    evaluate_circle,
    refine_surface,
    trial_circles,
)
from geoforce.slope.analysis import (
    SlopeInput,
    analyze_slope,
    compare_methods,
    run_analysis,
    to_record,
)

__all__ = [
    "SlopeGeometry",
    "SoilProperties",
    "TrialCircle",
    "MIN_SLICES",
    "Slice",
    "generate_slices",
    "SOLVERS",
    "EquilibriumResult",
    "Method",
    "SolverOptions",
    "bishop_simplified",
    "fellenius",
    "janbu_simplified",
    "solve",
    "CriticalSurfaceResult",
    "NotFound",
    "SearchGrid",
    "Stability",
    "classify",
    "critical_surface",
    "evaluate_circle",
    "refine_surface",
    "trial_circles",
    "SlopeInput",
    "analyze_slope",
    "compare_methods",
    "run_analysis",
    "to_record",
]
