"""
Hamilton dataflow for reef temperature logger exploration.

Objective: monthly mean sea water temperature per reef zone (and site) for a
selection of logger sites.

Key Functions:
- logger_sites() - distinct sites classified as reef flat / reef slope / other
- selected_sites() - all sites, or only those inside boundary polygons
- logger_observations() - observations joined on (site, subsite)
- coordinate_observations() - observations at exact (lon, lat) positions
- monthly_temperature() - monthly mean and observation count
Output: monthly aggregate table, faceted chart, interactive site map

Config:
- site_selection: "all" keeps every site, "region" keeps sites within the
  polygons read from ``boundary_path``
"""

from __future__ import annotations

from typing import Dict, Optional

import folium
import geopandas as gpd
import pandas as pd
from matplotlib.figure import Figure

from hamilton.function_modifiers import cache, tag, config

from utils import settings
from utils import aggregation_operations as aggregation
from utils import file_operations as files
from utils import geospatial_operations as geo
from utils import record_extraction as extraction
from utils import site_operations as sites_ops
from utils import visualizations as viz
from utils.dataset_connection import DatasetHandle, open_dataset


@tag(stage="source", data_type="connection")
@cache(behavior="disable")  # Connections are not serializable
def dataset_handle(dataset_address: str = settings.AIMS_TEMPERATURE_DATASET) -> DatasetHandle:
    """Handle over the temperature logger Parquet dataset."""
    return open_dataset(dataset_address)


@tag(stage="sites", data_type="geodataframe")
@cache(behavior="disable")
def logger_sites(dataset_handle: DatasetHandle) -> gpd.GeoDataFrame:
    """Distinct (site, subsite) deployments with coordinates and reef zone."""
    return sites_ops.distinct_sites(dataset_handle)


@tag(stage="sites", data_type="geodataframe")
@cache(behavior="disable")
def boundary_polygons(boundary_path: str, boundary_layer: Optional[str] = None) -> gpd.GeoDataFrame:
    """Polygons used to restrict the sites, e.g. a marine park or reef outline."""
    return geo.load_boundary_polygons(boundary_path, layer=boundary_layer)


@tag(stage="sites", data_type="geodataframe")
@config.when(site_selection="all")
@cache(behavior="disable")
def selected_sites__all(logger_sites: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Every logger site."""
    print(f"📍 Using all {len(logger_sites)} sites")
    return logger_sites


@tag(stage="sites", data_type="geodataframe")
@config.when(site_selection="region")
@cache(behavior="disable")
def selected_sites__region(
    logger_sites: gpd.GeoDataFrame,
    boundary_polygons: gpd.GeoDataFrame,
) -> gpd.GeoDataFrame:
    """
    Logger sites inside any of the boundary polygons.

    Args:
        logger_sites: Sites from logger_sites()
        boundary_polygons: Polygons from boundary_polygons()

    Returns:
        GeoDataFrame with the subset of sites, in the sites' CRS
    """
    inside = geo.points_within_polygons(logger_sites, boundary_polygons)
    print(f"📍 {len(inside)} of {len(logger_sites)} sites fall inside {len(boundary_polygons)} polygons")
    return inside


@tag(stage="extract", data_type="dataframe")
@cache(behavior="disable")
def logger_observations(
    dataset_handle: DatasetHandle,
    selected_sites: gpd.GeoDataFrame,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> pd.DataFrame:
    """Observations of the selected sites, optionally limited to [start_date, end_date)."""
    return extraction.observations_for_sites(
        dataset_handle,
        pd.DataFrame(selected_sites.drop(columns=selected_sites.geometry.name)),
        start=start_date,
        end=end_date,
    )


@tag(stage="extract", data_type="dataframe")
@cache(behavior="disable")
def coordinate_observations(dataset_handle: DatasetHandle, query_coordinates: list) -> pd.DataFrame:
    """Observations recorded exactly at the given (lon, lat) positions."""
    return extraction.observations_at_coordinates(
        dataset_handle,
        query_coordinates,
        columns=[
            settings.SITE_COLUMN,
            settings.SUBSITE_COLUMN,
            settings.LON_COLUMN,
            settings.LAT_COLUMN,
            settings.TIME_COLUMN,
            settings.VALUE_COLUMN,
        ],
    )


@tag(stage="aggregate", data_type="dataframe")
def monthly_temperature(logger_observations: pd.DataFrame, by_site: bool = True) -> pd.DataFrame:
    """
    Monthly mean temperature and observation count.

    Grouped by (year, month, category) and also by site when ``by_site`` is set.
    Months without any valid reading are absent.
    """
    group_cols = ("category", settings.SITE_COLUMN) if by_site else ("category",)
    print(f"🧮 Aggregating {len(logger_observations):,} observations by {', '.join(group_cols)}")
    return aggregation.monthly_means(
        logger_observations,
        value_col=settings.VALUE_COLUMN,
        time_col=settings.TIME_COLUMN,
        group_cols=group_cols,
        mean_col="mean_temperature",
        count_col="n_obs",
    )


@tag(stage="render", data_type="figure")
@cache(behavior="disable")
def monthly_temperature_chart(monthly_temperature: pd.DataFrame, by_site: bool = True) -> Figure:
    return viz.monthly_facet_chart(
        monthly_temperature,
        value_col="mean_temperature",
        facet_col="category",
        series_col=settings.SITE_COLUMN if by_site else None,
    )


@tag(stage="render", data_type="map")
@cache(behavior="disable")
def site_map(selected_sites: gpd.GeoDataFrame) -> folium.Map:
    return viz.interactive_site_map(selected_sites)


@tag(stage="write", data_type="file_paths")
@cache(behavior="disable")
def temperature_outputs(
    monthly_temperature: pd.DataFrame,
    monthly_temperature_chart: Figure,
    site_map: folium.Map,
    output_dir: Optional[str] = None,
    file_prefix: str = "aims_temperature",
) -> Dict[str, str]:
    """
    Files written for the run: CSV table, PNG chart and HTML site map.

    Nothing is written when ``output_dir`` is not set.
    """
    if not output_dir:
        print("ℹ️  No output directory given; skipping file output")
        return {}

    return {
        "table": str(files.write_aggregate_table(monthly_temperature, output_dir, f"{file_prefix}_monthly.csv")),
        "chart": str(files.save_figure(monthly_temperature_chart, output_dir, f"{file_prefix}_monthly.png")),
        "map": str(files.save_interactive_map(site_map, output_dir, f"{file_prefix}_sites.html")),
    }
