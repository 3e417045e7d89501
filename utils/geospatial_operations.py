"""
Geospatial operations utility module.

This module contains utility functions for turning tabular records into
GeoDataFrames, loading boundary polygons and filtering points by containment.

These are utility functions (not Hamilton nodes) that implement the actual
geospatial logic called by Hamilton nodes.
"""

from pathlib import Path
from typing import Optional, Union

import geopandas as gpd
import pandas as pd

from . import settings


def points_from_coordinates(
    df: pd.DataFrame,
    lon_col: str = settings.LON_COLUMN,
    lat_col: str = settings.LAT_COLUMN,
    crs: str = settings.WGS84,
) -> gpd.GeoDataFrame:
    """Point GeoDataFrame built from longitude/latitude columns."""
    return gpd.GeoDataFrame(
        df.copy(),
        geometry=gpd.points_from_xy(df[lon_col], df[lat_col]),
        crs=crs,
    )


def geometries_from_wkb(
    df: pd.DataFrame,
    column: str = settings.GEOMETRY_COLUMN,
    crs: str = settings.WGS84,
) -> gpd.GeoDataFrame:
    """
    GeoDataFrame from a column of WKB-encoded geometries.

    Rows with a missing geometry are kept with an empty (None) geometry.
    """
    data = df.copy()
    wkb_values = data[column].map(
        lambda value: bytes(value) if isinstance(value, (bytes, bytearray, memoryview)) else None
    )
    geometry = gpd.GeoSeries.from_wkb(wkb_values, crs=crs, index=data.index)
    data = data.drop(columns=[column])
    return gpd.GeoDataFrame(data, geometry=geometry, crs=crs)


def load_boundary_polygons(path: Union[str, Path], layer: Optional[str] = None) -> gpd.GeoDataFrame:
    """
    Load polygon boundaries (shapefile, GeoPackage, GeoJSON, GeoParquet).

    Raises:
        FileNotFoundError: If a local path does not exist
        ValueError: If the file carries no CRS
    """
    path_str = str(path)
    if "://" not in path_str and not Path(path_str).exists():
        raise FileNotFoundError(f"Boundary file not found: {path_str}")

    if path_str.endswith(".parquet"):
        polygons = gpd.read_parquet(path_str)
    elif layer is not None:
        polygons = gpd.read_file(path_str, layer=layer)
    else:
        polygons = gpd.read_file(path_str)

    if polygons.crs is None:
        raise ValueError(f"Boundary file has no coordinate reference system: {path_str}")

    print(f"   📄 Loaded {Path(path_str).name}: {len(polygons)} polygons ({polygons.crs})")
    return polygons


def points_within_polygons(
    points: gpd.GeoDataFrame,
    polygons: gpd.GeoDataFrame,
) -> gpd.GeoDataFrame:
    """
    Subset of points falling inside any of the polygons.

    Polygons are reprojected to the points' CRS when the two differ. Points
    outside every polygon are dropped without notice, and a point inside
    several polygons is returned once.

    Args:
        points: Point locations with a CRS
        polygons: Boundary polygons with a CRS

    Returns:
        gpd.GeoDataFrame: Rows of ``points`` (same columns, same CRS) inside the polygons

    Raises:
        ValueError: If either input has no CRS
    """
    if points.crs is None or polygons.crs is None:
        raise ValueError("Both points and polygons need a coordinate reference system")

    if len(polygons) == 0 or len(points) == 0:
        return points.iloc[0:0].copy()

    if polygons.crs != points.crs:
        print(f"   🔄 Converting polygons from {polygons.crs} to {points.crs}")
        polygons = polygons.to_crs(points.crs)

    joined = gpd.sjoin(
        points,
        polygons[[polygons.geometry.name]],
        how="inner",
        predicate="within",
    )
    inside = ~points.index.duplicated(keep="first") & points.index.isin(joined.index)
    return points.loc[inside].copy()
