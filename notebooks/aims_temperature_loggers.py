# %% [markdown]
# # Reef Temperature Loggers: Monthly Means by Reef Zone
#
# ---
#
# ## 🎯 Overview
#
# Sea water temperature loggers are deployed on reefs across the Great Barrier
# Reef. Each deployment is identified by a **site** and a **subsite**, and the
# subsite label tells us where on the reef the logger sits:
#
# - `FL1`, `FL2`, ... → **reef flat** (shallow)
# - `SL1`, `SL2`, ... → **reef slope** (deeper)
# - anything else → **other**
#
# In this notebook we:
#
# 1. Open the logger dataset directly from S3 with **DuckDB + httpfs**
# 2. Build the list of distinct sites and classify them by reef zone
# 3. Optionally keep only sites inside a boundary polygon (**GeoPandas**)
# 4. Pull only the observations of those sites
# 5. Compute monthly means and plot them per reef zone
#
# ⚠️ Remote queries can take several minutes; only the selected sites are read.

# %%
import sys
from pathlib import Path

sys.path.append(str(Path.cwd().parent))

import pandas as pd
import matplotlib.pyplot as plt

from dataflows import temperature_loggers
from utils import settings
from utils.hamilton_driver import build_driver, execute_and_release

pd.set_option('display.max_columns', None)
pd.set_option('display.max_rows', 20)

# %% [markdown]
# ## 1. Sites and reef zones
#
# The dataflow is a Hamilton DAG; we ask for the nodes we want to inspect.

# %%
BOUNDARY_PATH = None  # e.g. "../data/reef_outline.gpkg"

config = {"site_selection": "region" if BOUNDARY_PATH else "all"}
inputs = {"dataset_address": settings.AIMS_TEMPERATURE_DATASET, "by_site": True}
if BOUNDARY_PATH:
    inputs["boundary_path"] = BOUNDARY_PATH

dr = build_driver([temperature_loggers], config=config)
sites = execute_and_release(dr, ["selected_sites"], inputs=inputs)["selected_sites"]
sites.head()

# %%
sites["category"].value_counts()

# %% [markdown]
# ## 2. Interactive map of the selected sites

# %%
site_map = execute_and_release(dr, ["site_map"], inputs=inputs)["site_map"]
site_map

# %% [markdown]
# ## 3. Monthly means
#
# Missing readings are excluded from both the mean and the count. A month
# with no valid reading does not appear at all, so the lines below show gaps
# as straight segments between the surrounding months.

# %%
results = execute_and_release(dr, ["monthly_temperature", "monthly_temperature_chart"], inputs=inputs)
monthly = results["monthly_temperature"]
monthly.head(20)

# %% [markdown]
# Readings at one exact logger position, e.g. to check a single deployment.

# %%
at_position = execute_and_release(
    dr,
    ["coordinate_observations"],
    inputs={**inputs, "query_coordinates": [(147.63, -18.83)]},
)["coordinate_observations"]
at_position.head()

# %%
results["monthly_temperature_chart"]
plt.show()

# %% [markdown]
# ## 4. Save outputs

# %%
outputs = execute_and_release(dr, ["temperature_outputs"], inputs={**inputs, "output_dir": settings.OUTPUT_DIR})
outputs["temperature_outputs"]
