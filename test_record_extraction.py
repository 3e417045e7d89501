#!/usr/bin/env python3
"""
Tests for the dataset connector and filtered record extraction.
"""

import duckdb
import pandas as pd
import pytest

from utils.dataset_connection import is_remote_address, open_dataset, quote_identifier
from utils.record_extraction import (
    observations_at_coordinates,
    observations_for_sites,
    records_in_code_range,
)


def test_open_dataset_lists_columns(logger_parquet):
    handle = open_dataset(logger_parquet)
    try:
        assert handle.columns() == ["site", "subsite", "lon", "lat", "time", "qc_val"]
    finally:
        handle.close()


def test_open_dataset_missing_file_is_fatal(tmp_path):
    with pytest.raises(duckdb.Error):
        open_dataset(str(tmp_path / "nope.parquet"))


def test_open_dataset_rejects_empty_address():
    with pytest.raises(ValueError):
        open_dataset("  ")


def test_address_helpers():
    assert is_remote_address("s3://bucket/data.parquet")
    assert is_remote_address("HTTPS://host/data.parquet")
    assert not is_remote_address("/tmp/data.parquet")
    assert quote_identifier('we"ird') == '"we""ird"'


def test_code_range_is_inclusive(tmp_path):
    """Codes 29999, 30000, 39999, 40000 filtered to 30000-39999 keep the middle two."""
    path = tmp_path / "codes.parquet"
    pd.DataFrame({"code": [29999, 30000, 39999, 40000], "name": list("abcd")}).to_parquet(path, index=False)
    handle = open_dataset(str(path))
    try:
        records = records_in_code_range(handle, "code", 30000, 39999, columns=["code"])
    finally:
        handle.close()
    assert list(records["code"]) == [30000, 39999]
    assert list(records.columns) == ["code"]


def test_code_range_accepts_text_codes(region_frame, tmp_path):
    path = tmp_path / "text_codes.parquet"
    region_frame.assign(lga_code_2021=region_frame["lga_code_2021"].astype(str)).to_parquet(path, index=False)
    handle = open_dataset(str(path))
    try:
        records = records_in_code_range(handle, "lga_code_2021", 30000, 39999)
    finally:
        handle.close()
    assert list(records["lga_code_2021"]) == ["30000", "35010", "39999"]


def test_code_range_skips_unparseable_codes(tmp_path):
    """A malformed code fails the range filter instead of aborting the read."""
    path = tmp_path / "mixed_codes.parquet"
    pd.DataFrame({"code": ["30000", "LGA35010", "39999", None]}).to_parquet(path, index=False)
    handle = open_dataset(str(path))
    try:
        records = records_in_code_range(handle, "code", 30000, 39999)
    finally:
        handle.close()
    assert list(records["code"]) == ["30000", "39999"]


def test_code_range_with_year_and_validation(region_parquet):
    handle = open_dataset(region_parquet)
    try:
        assert records_in_code_range(handle, "lga_code_2021", 30000, 39999,
                                     year_col="year", year=2019).empty
        with pytest.raises(ValueError):
            records_in_code_range(handle, "lga_code_2021", 40000, 30000)
        with pytest.raises(ValueError):
            records_in_code_range(handle, "lga_code_2021", 30000, 39999, year=2021)
    finally:
        handle.close()


def test_unknown_column_is_schema_error(region_parquet):
    handle = open_dataset(region_parquet)
    try:
        with pytest.raises(duckdb.BinderException):
            records_in_code_range(handle, "not_a_column", 30000, 39999)
    finally:
        handle.close()


def test_observations_join_on_site_and_subsite(logger_parquet):
    sites = pd.DataFrame({
        "site": ["Davies Reef", "Heron Island"],
        "subsite": ["DAVSL1", "HERFL2"],
        "category": ["reef slope", "reef flat"],
    })
    handle = open_dataset(logger_parquet)
    try:
        obs = observations_for_sites(handle, sites)
    finally:
        handle.close()

    assert len(obs) == 6
    assert set(zip(obs["subsite"], obs["category"])) == {("DAVSL1", "reef slope"), ("HERFL2", "reef flat")}
    assert list(obs.columns) == ["site", "subsite", "time", "qc_val", "category"]


def test_renamed_site_silently_matches_nothing(logger_parquet):
    sites = pd.DataFrame({"site": ["Davies reef"], "subsite": ["DAVSL1"]})
    handle = open_dataset(logger_parquet)
    try:
        obs = observations_for_sites(handle, sites)
    finally:
        handle.close()
    assert obs.empty


def test_observation_time_window(logger_parquet):
    sites = pd.DataFrame({"site": ["Davies Reef"], "subsite": ["DAVFL1"], "category": ["reef flat"]})
    handle = open_dataset(logger_parquet)
    try:
        obs = observations_for_sites(handle, sites, start="2020-01-10", end="2020-03-01")
    finally:
        handle.close()
    assert list(obs["time"].dt.strftime("%Y-%m-%d")) == ["2020-01-20", "2020-02-10"]


def test_observations_at_coordinates(logger_parquet):
    handle = open_dataset(logger_parquet)
    try:
        obs = observations_at_coordinates(handle, [(151.92, -23.44)], columns=["subsite", "qc_val"])
        none = observations_at_coordinates(handle, [])
    finally:
        handle.close()
    assert set(obs["subsite"]) == {"HERFL2"}
    assert len(obs) == 3
    assert none.empty
