"""2-D plotting utilities.

Functions
---------
plot_cross_section
    Slope cross-section with the critical slip circle and its slices.
plot_fos_map
    Scatter of every trial centre coloured by its FOS.
"""

from __future__ import annotations

from typing import Any

import numpy as np


def plot_cross_section(
    geometry: Any,
    result: Any,
    ax: Any = None,
    show_slices: bool = True,
    title: str | None = None,
) -> Any:
    """Plot the slope and the critical slip circle.

    *result* is only read.

    Args:
        geometry: :class:`~geoforce.slope.profile.SlopeGeometry`.
        result: :class:`~geoforce.slope.search.CriticalSurfaceResult`
            or :class:`~geoforce.slope.search.NotFound`.
        ax: Matplotlib axes (creates new figure if None).
        show_slices: Draw the slice boundaries.
        title: Plot title.  Defaults to method and FOS.

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 5))

    L, H = geometry.run, geometry.height
    ground = geometry.surface_points(-0.5 * L, 2.0 * L)
    ax.fill_between(ground[:, 0], min(0.0, -0.5 * H), ground[:, 1],
                    color="tan", alpha=0.3)
    ax.plot(ground[:, 0], ground[:, 1], "k-", linewidth=2)

    if not result.found:
        ax.set_title(title or f"{result.method.display_name}: no solution found")
        _finish(ax)
        return ax

    circle = result.circle
    slices = result.slices
    x_lo = slices[0].x_mid - slices[0].width / 2
    x_hi = slices[-1].x_mid + slices[-1].width / 2
    arc = circle.arc_points(x_lo, x_hi)
    ax.plot(arc[:, 0], arc[:, 1], "r-", linewidth=2,
            label=f"FOS = {result.fos:.3f} ({result.status.value})")
    ax.plot(circle.xc, circle.yc, "r+", markersize=10)

    if show_slices:
        for s in slices:
            for x in (s.x_mid - s.width / 2, s.x_mid + s.width / 2):
                y_top = geometry.ground_elevation(x)
                y_base = circle.y_at(x)
                if y_base is not None and y_base < y_top:
                    ax.plot([x, x], [y_base, y_top], color="0.4", linewidth=0.6)

    ax.set_title(title or f"{result.method.display_name} — critical surface")
    ax.legend(loc="upper left")
    _finish(ax)
    return ax


def plot_fos_map(
    result: Any,
    ax: Any = None,
    cmap: str = "RdYlGn",
    vmin: float = 0.8,
    vmax: float = 3.0,
) -> Any:
    """Scatter of trial centres coloured by the lowest FOS at each centre.

    Args:
        result: :class:`~geoforce.slope.search.CriticalSurfaceResult`.
        ax: Matplotlib axes (creates new figure if None).
        cmap: Matplotlib colour map name.
        vmin: Lower colour limit.
        vmax: Upper colour limit.

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(7, 5))

    fos = np.asarray(result.fos_grid, dtype=float)
    centers = np.asarray(result.centers, dtype=float)
    valid = np.isfinite(fos)

    # Lowest FOS per (xc, yc) over all radii
    best: dict[tuple[float, float], float] = {}
    for (xc, yc, _), f in zip(centers[valid], fos[valid]):
        key = (xc, yc)
        best[key] = min(f, best.get(key, np.inf))

    if best:
        pts = np.array(list(best.keys()))
        sc = ax.scatter(pts[:, 0], pts[:, 1], c=list(best.values()),
                        cmap=cmap, vmin=vmin, vmax=vmax, s=40)
        plt.colorbar(sc, ax=ax, label="FOS")
    ax.plot(result.circle.xc, result.circle.yc, "k*", markersize=12)
    ax.set_title("Trial centres")
    _finish(ax)
    return ax


def _finish(ax: Any) -> None:
    ax.set_aspect("equal")
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
