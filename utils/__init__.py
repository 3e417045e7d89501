"""
Utility functions used by the Hamilton dataflows.

Modules:
- dataset_connection: DuckDB handle over a (remote) Parquet dataset
- site_operations: logger site selection and reef zone classification
- geospatial_operations: point construction, WKB decoding, containment filter
- record_extraction: filtered reads materialized to pandas
- aggregation_operations: monthly means and population percentages
- visualizations: static charts, choropleth and Folium maps
- file_operations: CSV/PNG/HTML output
- metadata_lookup: measure-code dictionary search
- hamilton_driver: driver construction helpers
"""

__version__ = "0.1.0"
