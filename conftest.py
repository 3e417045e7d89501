"""
Shared pytest fixtures: small local Parquet datasets shaped like the remote ones.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
from shapely.geometry import box


@pytest.fixture
def logger_frame() -> pd.DataFrame:
    """Temperature logger rows for four deployments over three months."""
    rows = []
    deployments = [
        ("Davies Reef", "DAVFL1", 147.63, -18.83),
        ("Davies Reef", "DAVSL1", 147.64, -18.82),
        ("Heron Island", "HERFL2", 151.92, -23.44),
        ("Myrmidon Reef", "MYRXX9", 147.38, -18.27),
    ]
    for site, subsite, lon, lat in deployments:
        for day, value in (("2020-01-05", 26.0), ("2020-01-20", 28.0), ("2020-03-02", 27.5)):
            rows.append({"site": site, "subsite": subsite, "lon": lon, "lat": lat,
                         "time": pd.Timestamp(day), "qc_val": value})
    # Missing reading and a row without coordinates
    rows.append({"site": "Davies Reef", "subsite": "DAVFL1", "lon": 147.63, "lat": -18.83,
                 "time": pd.Timestamp("2020-02-10"), "qc_val": np.nan})
    rows.append({"site": "Lost Reef", "subsite": "LOSFL1", "lon": np.nan, "lat": np.nan,
                 "time": pd.Timestamp("2020-01-05"), "qc_val": 25.0})
    return pd.DataFrame(rows)


@pytest.fixture
def logger_parquet(tmp_path, logger_frame) -> str:
    path = tmp_path / "loggers.parquet"
    logger_frame.to_parquet(path, index=False)
    return str(path)


@pytest.fixture
def region_frame() -> pd.DataFrame:
    """Regional statistics rows straddling the Queensland code range."""
    codes = [29999, 30000, 35010, 39999, 40000]
    rows = []
    for i, code in enumerate(codes):
        rows.append({
            "lga_code_2021": code,
            "lga_name_2021": f"Region {code}",
            "year": 2021,
            "erp_p_20": [500, 1000, 25000, 0, 800][i],
            "erp_m_20": [250, 480, 12600, 0, 400][i],
            "erp_f_20": [250, 520, 12400, 0, 400][i],
            "geometry": box(140 + i, -20, 141 + i, -19).wkb,
        })
    return pd.DataFrame(rows)


@pytest.fixture
def region_parquet(tmp_path, region_frame) -> str:
    path = tmp_path / "regions.parquet"
    region_frame.to_parquet(path, index=False)
    return str(path)


@pytest.fixture
def dictionary_csv(tmp_path) -> str:
    """Measure dictionary with mixed-case headers, as exported from the ABS tables."""
    path = tmp_path / "measures.csv"
    pd.DataFrame({
        "Code": ["ERP_P_20", "ERP_M_20", "INC_MED"],
        "Description": ["Estimated resident population - Persons", "Estimated resident population - Males",
                        "Median income (excl. government pensions)"],
        "Unit": ["no.", "no.", "$"],
    }).to_csv(path, index=False)
    return str(path)
