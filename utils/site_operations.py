"""
Logger site selection and reef zone classification.

Sites are the distinct (site, subsite) deployments of the temperature logger
dataset. The subsite label carries the deployment zone by naming convention:
``FL<digit>`` for the reef flat and ``SL<digit>`` for the reef slope.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any

import geopandas as gpd
import pandas as pd

from . import settings
from .dataset_connection import DatasetHandle, quote_identifier
from .geospatial_operations import points_from_coordinates


class ReefZone(str, Enum):
    REEF_FLAT = "reef flat"
    REEF_SLOPE = "reef slope"
    OTHER = "other"


# Order matters: first match wins
ZONE_PATTERNS = (
    (re.compile(r"FL\d", re.IGNORECASE), ReefZone.REEF_FLAT),
    (re.compile(r"SL\d", re.IGNORECASE), ReefZone.REEF_SLOPE),
)


def classify_subsite(subsite: Any) -> ReefZone:
    """Reef zone for a subsite label; anything unmatched (including missing labels) is OTHER."""
    if not isinstance(subsite, str):
        return ReefZone.OTHER
    for pattern, zone in ZONE_PATTERNS:
        if pattern.search(subsite):
            return zone
    return ReefZone.OTHER


def classify_subsites(subsites: pd.Series) -> pd.Series:
    return subsites.map(lambda label: classify_subsite(label).value)


def distinct_sites(
    handle: DatasetHandle,
    site_col: str = settings.SITE_COLUMN,
    subsite_col: str = settings.SUBSITE_COLUMN,
    lon_col: str = settings.LON_COLUMN,
    lat_col: str = settings.LAT_COLUMN,
) -> gpd.GeoDataFrame:
    """
    Distinct logger sites with coordinates and reef zone.

    Rows missing either coordinate are dropped. A (site, subsite) pair that was
    recorded at more than one position keeps the first position in sort order.

    Args:
        handle: Open dataset handle
        site_col: Site identifier column
        subsite_col: Subsite / logger label column
        lon_col: Longitude column
        lat_col: Latitude column

    Returns:
        gpd.GeoDataFrame: columns site, subsite, lon, lat, category, geometry (EPSG:4326)
    """
    site, subsite = quote_identifier(site_col), quote_identifier(subsite_col)
    lon, lat = quote_identifier(lon_col), quote_identifier(lat_col)

    print(f"🔍 Selecting distinct sites from {handle.address}")
    sites = handle.query(
        f"SELECT DISTINCT {site}, {subsite}, {lon}, {lat} FROM {handle.view} "
        f"WHERE {lon} IS NOT NULL AND {lat} IS NOT NULL "
        f"ORDER BY {site}, {subsite}, {lon}, {lat}"
    )

    initial_count = len(sites)
    sites = sites.drop_duplicates(subset=[site_col, subsite_col], keep="first").reset_index(drop=True)
    if len(sites) < initial_count:
        print(f"   🧹 Removed {initial_count - len(sites)} repeated positions for the same site/subsite")

    sites["category"] = classify_subsites(sites[subsite_col])
    counts = sites["category"].value_counts().to_dict()
    print(f"   📊 {len(sites)} sites: {counts}")

    return points_from_coordinates(sites, lon_col=lon_col, lat_col=lat_col, crs=settings.WGS84)
