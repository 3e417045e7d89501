#!/usr/bin/env python3
"""
Tests for monthly means and population percentages.
"""

import math

import numpy as np
import pandas as pd
import pytest

from utils.aggregation_operations import (
    gender_percentages,
    monthly_means,
    state_code,
    state_code_range,
)


def test_mean_excludes_missing_values():
    """[20, 22, NA, 24] in one month -> mean 22.0 over 3 observations."""
    obs = pd.DataFrame({
        "time": pd.to_datetime(["2021-06-01", "2021-06-02", "2021-06-03", "2021-06-04"]),
        "qc_val": [20.0, 22.0, None, 24.0],
        "category": ["reef flat"] * 4,
    })
    result = monthly_means(obs)
    assert len(result) == 1
    row = result.iloc[0]
    assert (row["year"], row["month"], row["category"]) == (2021, 6, "reef flat")
    assert row["mean_value"] == 22.0
    assert row["n_obs"] == 3


def test_all_missing_group_is_absent():
    obs = pd.DataFrame({
        "time": pd.to_datetime(["2021-01-10", "2021-02-10", "2021-03-10"]),
        "qc_val": [25.0, np.nan, 26.0],
        "category": ["reef slope"] * 3,
    })
    result = monthly_means(obs)
    assert list(result["month"]) == [1, 3]
    assert not result["mean_value"].isna().any()


def test_counts_sum_to_non_missing_rows(logger_frame):
    result = monthly_means(logger_frame, group_cols=("site",))
    assert result["n_obs"].sum() == logger_frame["qc_val"].notna().sum()


def test_mean_is_rounded_and_grouped_by_site():
    obs = pd.DataFrame({
        "time": pd.to_datetime(["2022-05-01", "2022-05-02", "2022-05-03", "2022-05-01"]),
        "qc_val": [25.0, 25.0, 25.5, 30.0],
        "category": ["reef flat"] * 4,
        "site": ["A", "A", "A", "B"],
    })
    result = monthly_means(obs, group_cols=("category", "site"), mean_col="mean_temperature")
    by_site = dict(zip(result["site"], result["mean_temperature"]))
    assert by_site == {"A": 25.17, "B": 30.0}


def test_empty_input_gives_empty_table():
    obs = pd.DataFrame({"time": pd.to_datetime([]), "qc_val": [], "category": []})
    result = monthly_means(obs)
    assert result.empty
    assert list(result.columns) == ["year", "month", "category", "mean_value", "n_obs"]


def test_gender_percentages():
    regions = pd.DataFrame({"erp_p_20": [1000, 3], "erp_m_20": [480, 1], "erp_f_20": [520, 2]})
    result = gender_percentages(regions)
    assert list(result["male_pct"]) == [48.0, 33.33]
    assert list(result["female_pct"]) == [52.0, 66.67]


def test_zero_population_propagates_non_finite():
    regions = pd.DataFrame({"erp_p_20": [0, 0], "erp_m_20": [0, 5], "erp_f_20": [0, 0]})
    result = gender_percentages(regions)
    assert math.isnan(result["male_pct"].iloc[0])
    assert math.isinf(result["male_pct"].iloc[1])
    assert len(result) == 2


def test_state_codes():
    assert state_code(35010) == 3
    assert state_code_range(3) == (30000, 39999)
    with pytest.raises(ValueError):
        state_code_range(0)
