"""
geoforce: slope stability engine for geotechnical design.

Subpackages
-----------
slope
    Limit-equilibrium slope stability (Fellenius, Bishop, Janbu) and
    critical slip circle search.
visualization
    Cross-section plots of the search result.
"""

from geoforce import (
    slope,
    visualization,
)

__version__ = "0.1.0"

__all__ = [
    "slope",
    "visualization",
]
