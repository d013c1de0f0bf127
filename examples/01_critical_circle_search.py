# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#   kernelspec:
#     display_name: Python 3
#     language: python
#     name: python3
# ---

# %% [markdown]
# # 01 — Critical Slip Circle Search
#
# Finds the circular failure surface with the minimum factor of safety
# for a 10 m high, 30° slope in a c-φ soil, with the three
# limit-equilibrium methods.
#
# **Module**: `geoforce.slope`

# %%
from geoforce.slope import (
    SlopeGeometry,
    SoilProperties,
    critical_surface,
    analyze_slope,
)

# %% [markdown]
# ## 1. Slope and Soil

# %%
geometry = SlopeGeometry(height=10.0, angle=30.0)
soil = SoilProperties(unit_weight=18.0, cohesion=25.0, friction_angle=25.0)

print(f"Slope run L = {geometry.run:.2f} m")

# %% [markdown]
# ## 2. Grid Search
#
# 5 × 5 × 5 trial circles scaled to H and L.  The grid optimum can be
# refined with a Nelder-Mead pass.

# %%
for method in ("fellenius", "bishop", "janbu"):
    result = critical_surface(geometry, soil, method=method, refine=True)
    c = result.circle
    print(f"{result.method.display_name:22s} FoS = {result.fos:.3f} "
          f"({result.status.value})  xc={c.xc:.2f} yc={c.yc:.2f} R={c.radius:.2f}")

# %% [markdown]
# ## 3. Seismic Loading

# %%
seismic = SoilProperties(unit_weight=18.0, cohesion=25.0, friction_angle=25.0, kh=0.15)
print(f"Bishop, kh = 0.15: FoS = {critical_surface(geometry, seismic).fos:.3f}")

# %% [markdown]
# ## 4. Record Interface
#
# The same analysis from a plain input record, as sent by a form.

# %%
record = {
    "height": 10, "slopeAngle": 30, "gamma": 18,
    "cohesion": 25, "frictionAngle": 25, "ru": 0.2, "method": "bishop",
}
out = analyze_slope(record)
print(out["FS"], out["status"], out["criticalCenter"], out["criticalRadius"])

# %% [markdown]
# ## 5. Cross-section

# %%
import matplotlib.pyplot as plt
from geoforce.visualization import plot_cross_section, plot_fos_map

result = critical_surface(geometry, soil, method="bishop")
fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))
plot_cross_section(geometry, result, ax=ax1)
plot_fos_map(result, ax=ax2)
plt.tight_layout()
plt.show()
