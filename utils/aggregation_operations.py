"""
Aggregation utility module.

Monthly means for temperature observations and per-region population
ratios for the regional statistics.

These are utility functions (not Hamilton nodes) called by the dataflows.
"""

from typing import Dict, Sequence, Tuple

import numpy as np
import pandas as pd

from . import settings

# First digit of a five-digit ABS region code
STATE_NAMES: Dict[int, str] = {
    1: "New South Wales",
    2: "Victoria",
    3: "Queensland",
    4: "South Australia",
    5: "Western Australia",
    6: "Tasmania",
    7: "Northern Territory",
    8: "Australian Capital Territory",
    9: "Other Territories",
}


def state_code(region_code: int) -> int:
    """State/territory digit of a five-digit region code (e.g. 35010 -> 3)."""
    return int(region_code) // 10000


def state_code_range(state_digit: int) -> Tuple[int, int]:
    """Inclusive region code range of one state, e.g. 3 -> (30000, 39999)."""
    if state_digit not in STATE_NAMES:
        raise ValueError(f"Unknown state/territory digit: {state_digit}")
    return state_digit * 10000, state_digit * 10000 + 9999


def valid_measurements(observations: pd.DataFrame, value_col: str, time_col: str) -> pd.DataFrame:
    """Rows carrying both a measurement and a timestamp."""
    return observations.dropna(subset=[value_col, time_col])


def monthly_means(
    observations: pd.DataFrame,
    value_col: str = settings.VALUE_COLUMN,
    time_col: str = settings.TIME_COLUMN,
    group_cols: Sequence[str] = ("category",),
    mean_col: str = "mean_value",
    count_col: str = "n_obs",
) -> pd.DataFrame:
    """
    Mean and count of a measurement per (year, month, *group_cols).

    Missing measurements are removed before grouping, so they count towards
    neither the mean nor the count. A group left with no measurements has no
    row in the output (the month is a gap, not a zero).

    Args:
        observations: Materialized observation rows
        value_col: Measurement column
        time_col: Timestamp column
        group_cols: Grouping columns besides year and month
        mean_col: Output name of the mean column (rounded to 2 decimals)
        count_col: Output name of the count column

    Returns:
        pd.DataFrame: year, month, *group_cols, mean_col, count_col sorted chronologically
    """
    keys = ["year", "month", *group_cols]
    valid = valid_measurements(observations, value_col, time_col)
    excluded = len(observations) - len(valid)
    if excluded:
        print(f"   🧹 Excluded {excluded:,} rows with missing {value_col} or {time_col}")

    if valid.empty:
        return pd.DataFrame(
            {
                **{k: pd.Series(dtype="int64" if k in ("year", "month") else "object") for k in keys},
                mean_col: pd.Series(dtype="float64"),
                count_col: pd.Series(dtype="int64"),
            }
        )

    timestamps = pd.to_datetime(valid[time_col])
    frame = valid.assign(
        year=timestamps.dt.year.astype("int64"),
        month=timestamps.dt.month.astype("int64"),
        **{value_col: pd.to_numeric(valid[value_col])},
    )

    aggregates = (
        frame.groupby(keys, observed=True, sort=True)[value_col]
        .agg(["mean", "count"])
        .reset_index()
        .rename(columns={"mean": mean_col, "count": count_col})
    )
    aggregates[mean_col] = aggregates[mean_col].round(2)
    aggregates[count_col] = aggregates[count_col].astype("int64")

    print(f"   📊 {len(aggregates):,} monthly groups from {int(aggregates[count_col].sum()):,} observations")
    return aggregates


def gender_percentages(
    regions: pd.DataFrame,
    total_col: str = settings.TOTAL_POPULATION_COLUMN,
    male_col: str = settings.MALE_POPULATION_COLUMN,
    female_col: str = settings.FEMALE_POPULATION_COLUMN,
) -> pd.DataFrame:
    """
    Male and female share of the total population, per row, in percent.

    A zero total gives a non-finite percentage (inf, or NaN for 0/0). Those
    rows are kept and reported, not replaced.

    Returns:
        pd.DataFrame: the input with ``male_pct`` and ``female_pct`` columns added
    """
    result = regions.copy()
    total = pd.to_numeric(result[total_col]).astype("float64")

    with np.errstate(divide="ignore", invalid="ignore"):
        for count_col, pct_col in ((male_col, "male_pct"), (female_col, "female_pct")):
            count = pd.to_numeric(result[count_col]).astype("float64")
            result[pct_col] = (count / total * 100).round(2)

    non_finite = ~np.isfinite(result[["male_pct", "female_pct"]]).all(axis=1)
    zero_total = int((non_finite & (total == 0)).sum())
    if zero_total:
        print(f"   ⚠️  {zero_total} regions have a total population of 0; their percentages are not finite")
    return result
