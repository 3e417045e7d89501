"""
Dataflows package for the reef and regional statistics explorations.

This package contains Hamilton dataflow modules:
- temperature_loggers: reef temperature logger sites, observations and monthly means
- regional_statistics: LGA population records, gender percentages and maps

Each dataflow module follows Hamilton conventions:
- Function-based DAG definitions
- Dependency injection through parameter names
- Noun-named nodes
"""
