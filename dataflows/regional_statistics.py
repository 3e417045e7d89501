"""
Hamilton dataflow for ABS regional (LGA) population statistics.

Objective: gender share of the estimated resident population for the Local
Government Areas of one state, mapped and charted.

Key Functions:
- region_records() - rows whose five-digit region code falls in a code range
- gender_percentage_table() - male/female percentage of the total, per region
- region_boundaries() - region polygons decoded from the WKB geometry column
- gender_choropleth() / gender_bar_chart() - static figures
- matching_measures() - measure-code dictionary search by keyword
- measure_description() - description and unit of one measure code
Output: percentage table (CSV) and figures (PNG)
"""

from __future__ import annotations

from typing import Dict, List, Optional

import geopandas as gpd
import pandas as pd
from matplotlib.figure import Figure

from hamilton.function_modifiers import cache, tag

from utils import settings
from utils import aggregation_operations as aggregation
from utils import file_operations as files
from utils import geospatial_operations as geo
from utils import metadata_lookup as lookup
from utils import record_extraction as extraction
from utils import visualizations as viz
from utils.dataset_connection import DatasetHandle, open_dataset

# Queensland LGAs
DEFAULT_CODE_MIN = 30000
DEFAULT_CODE_MAX = 39999


@tag(stage="source", data_type="connection")
@cache(behavior="disable")
def dataset_handle(dataset_address: str = settings.ABS_LGA_DATASET) -> DatasetHandle:
    """Handle over the regional statistics Parquet dataset."""
    return open_dataset(dataset_address)


@tag(stage="extract", data_type="dataframe")
@cache(behavior="disable")
def region_records(
    dataset_handle: DatasetHandle,
    code_min: int = DEFAULT_CODE_MIN,
    code_max: int = DEFAULT_CODE_MAX,
    observation_year: Optional[int] = None,
    include_geometry: bool = True,
) -> pd.DataFrame:
    """
    Region rows with a code in [code_min, code_max] and the population measures.

    Args:
        dataset_handle: Handle from dataset_handle()
        code_min: Lowest region code kept (inclusive)
        code_max: Highest region code kept (inclusive)
        observation_year: Keep only this observation period when set
        include_geometry: Also read the WKB geometry column

    Returns:
        pd.DataFrame with code, name, year, total/male/female counts[, geometry]
    """
    columns = [
        settings.REGION_CODE_COLUMN,
        settings.REGION_NAME_COLUMN,
        settings.REGION_YEAR_COLUMN,
        settings.TOTAL_POPULATION_COLUMN,
        settings.MALE_POPULATION_COLUMN,
        settings.FEMALE_POPULATION_COLUMN,
    ]
    if include_geometry:
        columns.append(settings.GEOMETRY_COLUMN)

    records = extraction.records_in_code_range(
        dataset_handle,
        settings.REGION_CODE_COLUMN,
        code_min,
        code_max,
        columns=columns,
        year_col=settings.REGION_YEAR_COLUMN,
        year=observation_year,
    )
    records["state"] = records[settings.REGION_CODE_COLUMN].map(
        lambda code: aggregation.STATE_NAMES.get(aggregation.state_code(code))
    )
    return records


@tag(stage="aggregate", data_type="dataframe")
def gender_percentage_table(region_records: pd.DataFrame) -> pd.DataFrame:
    """Per-region male/female percentage of the total population (2 decimals)."""
    percentages = aggregation.gender_percentages(
        region_records,
        total_col=settings.TOTAL_POPULATION_COLUMN,
        male_col=settings.MALE_POPULATION_COLUMN,
        female_col=settings.FEMALE_POPULATION_COLUMN,
    )
    return percentages.drop(columns=[settings.GEOMETRY_COLUMN], errors="ignore")


@tag(stage="spatial", data_type="geodataframe")
@cache(behavior="disable")
def region_boundaries(region_records: pd.DataFrame, region_crs: str = settings.WGS84) -> gpd.GeoDataFrame:
    """Region polygons with their measures; rows without geometry are dropped."""
    boundaries = geo.geometries_from_wkb(region_records, column=settings.GEOMETRY_COLUMN, crs=region_crs)
    missing = boundaries.geometry.isna()
    if missing.any():
        print(f"   ⚠️  Dropping {int(missing.sum())} regions without geometry")
    return boundaries[~missing]


@tag(stage="render", data_type="figure")
@cache(behavior="disable")
def gender_choropleth(
    region_boundaries: gpd.GeoDataFrame,
    choropleth_column: str = settings.TOTAL_POPULATION_COLUMN,
    choropleth_breaks: Optional[List[float]] = None,
) -> Figure:
    """Choropleth of a population measure on a fixed logarithmic scale."""
    return viz.choropleth_map(
        region_boundaries,
        value_col=choropleth_column,
        breaks=choropleth_breaks or viz.DEFAULT_LOG_BREAKS,
    )


@tag(stage="render", data_type="figure")
@cache(behavior="disable")
def gender_bar_chart(gender_percentage_table: pd.DataFrame) -> Figure:
    return viz.gender_percentage_chart(gender_percentage_table, name_col=settings.REGION_NAME_COLUMN)


@tag(stage="metadata", data_type="dataframe")
@cache(behavior="disable")
def measure_dictionary(measure_dictionary_address: str) -> pd.DataFrame:
    return lookup.load_measure_dictionary(measure_dictionary_address)


@tag(stage="metadata", data_type="dataframe")
def matching_measures(measure_dictionary: pd.DataFrame, measure_keyword: str) -> pd.DataFrame:
    """Measure codes whose description mentions ``measure_keyword``."""
    matches = lookup.lookup_measures(measure_dictionary, measure_keyword)
    print(f"🔍 {len(matches)} measures match '{measure_keyword}'")
    return matches


@tag(stage="metadata", data_type="dict")
def measure_description(measure_dictionary: pd.DataFrame, measure_code: str) -> Dict[str, str]:
    return lookup.describe_measure(measure_dictionary, measure_code)


@tag(stage="write", data_type="file_paths")
@cache(behavior="disable")
def regional_outputs(
    gender_percentage_table: pd.DataFrame,
    gender_choropleth: Figure,
    gender_bar_chart: Figure,
    output_dir: Optional[str] = None,
    file_prefix: str = "abs_lga",
) -> Dict[str, str]:
    """Files written for the run; nothing is written without ``output_dir``."""
    if not output_dir:
        print("ℹ️  No output directory given; skipping file output")
        return {}

    return {
        "table": str(files.write_aggregate_table(gender_percentage_table, output_dir, f"{file_prefix}_gender_pct.csv")),
        "choropleth": str(files.save_figure(gender_choropleth, output_dir, f"{file_prefix}_population_map.png")),
        "chart": str(files.save_figure(gender_bar_chart, output_dir, f"{file_prefix}_gender_pct.png")),
    }
