# %% [markdown]
# # ABS Regional Statistics: Gender Share by LGA
#
# ---
#
# ## 🎯 Overview
#
# The ABS "Data by Region" release publishes hundreds of measures per Local
# Government Area (LGA). LGA codes have five digits: the first digit is the
# state/territory (3 = Queensland) and the remaining four the local area, so
# the Queensland LGAs are the codes **30000-39999**.
#
# We:
#
# 1. Find the population measures in the measure dictionary
# 2. Read only Queensland rows and the columns we need
# 3. Compute male/female percentages of the total population
# 4. Map total population on a logarithmic colour scale

# %%
import sys
from pathlib import Path

sys.path.append(str(Path.cwd().parent))

import matplotlib.pyplot as plt

from dataflows import regional_statistics
from utils import settings
from utils.hamilton_driver import build_driver, execute, execute_and_release

dr = build_driver([regional_statistics])

# %% [markdown]
# ## 1. Which codes hold population counts?

# %%
if settings.ABS_MEASURE_DICTIONARY:
    measures = execute(
        dr,
        ["matching_measures"],
        inputs={
            "measure_dictionary_address": settings.ABS_MEASURE_DICTIONARY,
            "measure_keyword": "estimated resident population",
        },
    )["matching_measures"]
    print(measures)

# %%
if settings.ABS_MEASURE_DICTIONARY:
    for code in (settings.MALE_POPULATION_COLUMN, settings.FEMALE_POPULATION_COLUMN):
        print(execute(
            dr,
            ["measure_description"],
            inputs={"measure_dictionary_address": settings.ABS_MEASURE_DICTIONARY, "measure_code": code},
        )["measure_description"])

# %% [markdown]
# ## 2. Gender percentages
#
# A region with a total population of 0 gets a non-finite percentage; it is
# kept in the table so it can be spotted.

# %%
inputs = {
    "dataset_address": settings.ABS_LGA_DATASET,
    "code_min": 30000,
    "code_max": 39999,
}
results = execute_and_release(dr, ["gender_percentage_table", "gender_bar_chart"], inputs=inputs)
results["gender_percentage_table"].head(20)

# %%
results["gender_bar_chart"]
plt.show()

# %% [markdown]
# ## 3. Choropleth of total population

# %%
choropleth = execute_and_release(dr, ["gender_choropleth"], inputs=inputs)["gender_choropleth"]
plt.show()

# %% [markdown]
# ## 4. Save outputs

# %%
execute_and_release(dr, ["regional_outputs"], inputs={**inputs, "output_dir": settings.OUTPUT_DIR})["regional_outputs"]
