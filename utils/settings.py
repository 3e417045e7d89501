"""
Environment-driven defaults for the exploration pipelines.

Values come from a local .env file (if present) and the process environment.
Runner flags override these.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# Public GBR data lake objects (anonymous S3 access)
AIMS_TEMPERATURE_DATASET = os.getenv(
    "AIMS_TEMPERATURE_DATASET",
    "s3://gbr-dms-data-public/aims-temperature-loggers/data.parquet",
)
ABS_LGA_DATASET = os.getenv(
    "ABS_LGA_DATASET",
    "s3://gbr-dms-data-public/abs-regional-lga/data.parquet",
)
ABS_MEASURE_DICTIONARY = os.getenv("ABS_MEASURE_DICTIONARY")

S3_REGION = os.getenv("S3_REGION", "ap-southeast-2")
OUTPUT_DIR = os.getenv("EDA_OUTPUT_DIR", "outputs")

# Temperature logger columns
SITE_COLUMN = "site"
SUBSITE_COLUMN = "subsite"
LON_COLUMN = "lon"
LAT_COLUMN = "lat"
TIME_COLUMN = "time"
VALUE_COLUMN = "qc_val"

# ABS regional statistics columns
REGION_CODE_COLUMN = os.getenv("ABS_CODE_COLUMN", "lga_code_2021")
REGION_NAME_COLUMN = os.getenv("ABS_NAME_COLUMN", "lga_name_2021")
REGION_YEAR_COLUMN = os.getenv("ABS_YEAR_COLUMN", "year")
TOTAL_POPULATION_COLUMN = os.getenv("ABS_TOTAL_COLUMN", "erp_p_20")
MALE_POPULATION_COLUMN = os.getenv("ABS_MALE_COLUMN", "erp_m_20")
FEMALE_POPULATION_COLUMN = os.getenv("ABS_FEMALE_COLUMN", "erp_f_20")
GEOMETRY_COLUMN = "geometry"

WGS84 = "EPSG:4326"
