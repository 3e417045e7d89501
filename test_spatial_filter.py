#!/usr/bin/env python3
"""
Tests for the point-in-polygon site filter.
"""

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import box

from utils.geospatial_operations import (
    geometries_from_wkb,
    load_boundary_polygons,
    points_from_coordinates,
    points_within_polygons,
)


@pytest.fixture
def points():
    df = pd.DataFrame({
        "site": ["A", "B", "C", "D"],
        "subsite": ["FL1", "SL1", "FL2", "XX1"],
        "lon": [147.5, 147.9, 151.9, 145.0],
        "lat": [-18.5, -18.9, -23.4, -15.0],
    })
    return points_from_coordinates(df, lon_col="lon", lat_col="lat", crs="EPSG:4326")


@pytest.fixture
def polygons():
    return gpd.GeoDataFrame(
        {"name": ["central", "southern"]},
        geometry=[box(147.0, -19.5, 148.5, -18.0), box(151.0, -24.0, 152.5, -23.0)],
        crs="EPSG:4326",
    )


def test_points_inside_any_polygon_are_kept(points, polygons):
    inside = points_within_polygons(points, polygons)
    assert list(inside["site"]) == ["A", "B", "C"]
    assert list(inside.columns) == list(points.columns)
    assert inside.crs == points.crs


def test_point_in_overlapping_polygons_returned_once(points, polygons):
    doubled = pd.concat([polygons, polygons], ignore_index=True)
    inside = points_within_polygons(points, gpd.GeoDataFrame(doubled, crs=polygons.crs))
    assert list(inside["site"]) == ["A", "B", "C"]


def test_zero_polygons_gives_empty_result(points, polygons):
    inside = points_within_polygons(points, polygons.iloc[0:0])
    assert inside.empty
    assert list(inside.columns) == list(points.columns)


def test_reprojection_matches_common_crs(points, polygons):
    """Polygons in another CRS select the same points as polygons in the points' CRS."""
    expected = set(points_within_polygons(points, polygons)["site"])

    projected_polygons = polygons.to_crs("EPSG:3857")
    assert set(points_within_polygons(points, projected_polygons)["site"]) == expected

    # Normalising the other way round gives the same set too
    projected_points = points.to_crs("EPSG:3857")
    assert set(points_within_polygons(projected_points, projected_polygons)["site"]) == expected


def test_missing_crs_rejected(points, polygons):
    no_crs = gpd.GeoDataFrame({"name": list(polygons["name"])}, geometry=list(polygons.geometry))
    with pytest.raises(ValueError):
        points_within_polygons(points, no_crs)


def test_geometries_from_wkb():
    df = pd.DataFrame({"code": [1, 2], "geometry": [box(0, 0, 1, 1).wkb, None]})
    gdf = geometries_from_wkb(df, column="geometry")
    assert gdf.crs.to_epsg() == 4326
    assert gdf.geometry.iloc[0].area == pytest.approx(1.0)
    assert gdf.geometry.iloc[1] is None


def test_load_boundary_polygons(tmp_path, polygons):
    path = tmp_path / "boundary.gpkg"
    polygons.to_file(path, driver="GPKG")
    loaded = load_boundary_polygons(path)
    assert len(loaded) == 2
    assert loaded.crs.to_epsg() == 4326

    with pytest.raises(FileNotFoundError):
        load_boundary_polygons(tmp_path / "missing.gpkg")
