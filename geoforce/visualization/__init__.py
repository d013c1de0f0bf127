"""Visualization: 2-D plotting of slope stability results."""

from geoforce.visualization.plot2d import plot_cross_section, plot_fos_map

__all__ = [
    "plot_cross_section",
    "plot_fos_map",
]
