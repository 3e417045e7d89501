"""
Filtered reads against an open dataset handle.

Every function pushes its filter down to DuckDB and materializes only the
matching rows into a pandas DataFrame. A filter that matches nothing returns
an empty frame; it is not an error.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from . import settings
from .dataset_connection import DatasetHandle, quote_identifier

SELECTED_SITES_RELATION = "selected_sites"


def _select_list(columns: Sequence[str], alias: str = "") -> str:
    prefix = f"{alias}." if alias else ""
    return ", ".join(f"{prefix}{quote_identifier(c)}" for c in columns)


def observations_for_sites(
    handle: DatasetHandle,
    sites: pd.DataFrame,
    *,
    site_col: str = settings.SITE_COLUMN,
    subsite_col: str = settings.SUBSITE_COLUMN,
    time_col: str = settings.TIME_COLUMN,
    value_col: str = settings.VALUE_COLUMN,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> pd.DataFrame:
    """
    Observations for the selected sites, joined on exact (site, subsite) equality.

    Coordinates are not compared at join time. A site or subsite spelled
    differently in ``sites`` than in the dataset simply matches no rows.

    Args:
        handle: Open dataset handle
        sites: Selected sites; needs site/subsite columns and may carry ``category``
        site_col: Site identifier column
        subsite_col: Subsite column
        time_col: Timestamp column
        value_col: Quality-controlled measurement column
        start: Inclusive lower bound on the timestamp (ISO date string)
        end: Exclusive upper bound on the timestamp (ISO date string)

    Returns:
        pd.DataFrame: site, subsite, time, value[, category] rows for the matching sites
    """
    key_columns = [site_col, subsite_col]
    carried = key_columns + (["category"] if "category" in sites.columns else [])
    selection = pd.DataFrame(sites[carried]).drop_duplicates(subset=key_columns)

    if selection.empty:
        print("   ⚠️  No sites selected; nothing to extract")
        return pd.DataFrame(columns=carried + [time_col, value_col])

    site, subsite = quote_identifier(site_col), quote_identifier(subsite_col)
    time, value = quote_identifier(time_col), quote_identifier(value_col)
    extra = ", s.category" if "category" in selection.columns else ""

    where: List[str] = []
    params: List[str] = []
    if start is not None:
        where.append(f"d.{time} >= CAST(? AS TIMESTAMP)")
        params.append(start)
    if end is not None:
        where.append(f"d.{time} < CAST(? AS TIMESTAMP)")
        params.append(end)
    where_sql = f" WHERE {' AND '.join(where)}" if where else ""

    sql = (
        f"SELECT d.{site}, d.{subsite}, d.{time}, d.{value}{extra} "
        f"FROM {handle.view} AS d "
        f"JOIN {SELECTED_SITES_RELATION} AS s "
        f"ON d.{site} = s.{site} AND d.{subsite} = s.{subsite}"
        f"{where_sql} "
        f"ORDER BY d.{site}, d.{subsite}, d.{time}"
    )

    print(f"📥 Extracting observations for {len(selection)} site/subsite pairs")
    handle.connection.register(SELECTED_SITES_RELATION, selection)
    try:
        observations = handle.query(sql, params)
    finally:
        handle.connection.unregister(SELECTED_SITES_RELATION)

    print(f"✅ Extracted {len(observations):,} observations")
    return observations


def records_in_code_range(
    handle: DatasetHandle,
    code_col: str,
    low: int,
    high: int,
    *,
    columns: Optional[Sequence[str]] = None,
    year_col: Optional[str] = None,
    year: Optional[int] = None,
) -> pd.DataFrame:
    """
    Rows whose numeric region code lies in ``[low, high]`` (both inclusive).

    Args:
        handle: Open dataset handle
        code_col: Region code column (numeric or numeric text)
        low: Lowest code kept
        high: Highest code kept
        columns: Columns to return (all columns when None)
        year_col: Observation period column, used with ``year``
        year: Keep only this observation period

    Raises:
        ValueError: If ``low > high`` or ``year`` is given without ``year_col``
    """
    if low > high:
        raise ValueError(f"Invalid code range: {low} > {high}")
    if year is not None and year_col is None:
        raise ValueError("year filter requires year_col")

    select_cols = _select_list(columns) if columns else "*"
    code = quote_identifier(code_col)
    sql = f"SELECT {select_cols} FROM {handle.view} WHERE TRY_CAST({code} AS BIGINT) BETWEEN ? AND ?"
    params: List[int] = [int(low), int(high)]
    if year is not None:
        sql += f" AND TRY_CAST({quote_identifier(year_col)} AS INTEGER) = ?"
        params.append(int(year))
    sql += f" ORDER BY {code}"

    print(f"📥 Extracting records with {code_col} in [{low}, {high}]" + (f", {year_col} = {year}" if year is not None else ""))
    records = handle.query(sql, params)
    print(f"✅ Extracted {len(records):,} records")
    return records


def observations_at_coordinates(
    handle: DatasetHandle,
    coordinates: Iterable[Tuple[float, float]],
    *,
    lon_col: str = settings.LON_COLUMN,
    lat_col: str = settings.LAT_COLUMN,
    columns: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Rows recorded exactly at one of the given (lon, lat) positions."""
    pairs = [(float(lon), float(lat)) for lon, lat in coordinates]
    if not pairs:
        return pd.DataFrame(columns=list(columns) if columns else [])

    lon, lat = quote_identifier(lon_col), quote_identifier(lat_col)
    select_cols = _select_list(columns) if columns else "*"
    predicate = " OR ".join(f"({lon} = ? AND {lat} = ?)" for _ in pairs)
    params = [value for pair in pairs for value in pair]

    print(f"📥 Extracting records at {len(pairs)} coordinate pairs")
    records = handle.query(f"SELECT {select_cols} FROM {handle.view} WHERE {predicate}", params)
    print(f"✅ Extracted {len(records):,} records")
    return records
