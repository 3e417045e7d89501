"""
Hamilton Driver helpers built around driver.Builder().

Usage:
    from dataflows import temperature_loggers
    from utils.hamilton_driver import build_driver, execute

    dr = build_driver([temperature_loggers], config={"site_selection": "all"})
    results = execute(dr, ["monthly_temperature"], inputs={"dataset_address": "..."})

Notes:
- Execution is sequential; the pipelines never enable dynamic execution.
- Caching is opt-in. Nodes holding connections, figures or maps disable it.
"""
from __future__ import annotations

from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Mapping, Optional, Sequence

from hamilton import driver

from .dataset_connection import DatasetHandle

HANDLE_NODE = "dataset_handle"


def build_driver(
    modules: Sequence[ModuleType],
    config: Optional[Mapping[str, Any]] = None,
    *,
    enable_cache: bool = False,
    cache_path: Optional[str] = None,
) -> driver.Driver:
    """
    Construct a Hamilton Driver using driver.Builder().

    Args:
        modules: Python modules that define Hamilton nodes.
        config: Configuration dict passed via .with_config().
        enable_cache: If True, call .with_cache().
        cache_path: Cache directory used when caching is enabled.

    Returns:
        A built hamilton.driver.Driver instance.
    """
    b = driver.Builder().with_modules(*modules)
    if config is not None:
        b = b.with_config(dict(config))
    if enable_cache:
        b = b.with_cache(path=cache_path) if cache_path else b.with_cache()
    return b.build()


def execute(
    dr: driver.Driver,
    outputs: Sequence[str],
    *,
    inputs: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Execute the DAG for the requested outputs and return {node_name: value}."""
    return dr.execute(list(outputs), inputs=dict(inputs or {}))


def execute_and_release(
    dr: driver.Driver,
    outputs: Sequence[str],
    *,
    inputs: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Execute the DAG, then close the dataset connection opened for the run.

    The ``dataset_handle`` node is requested alongside ``outputs`` so the
    handle built during execution is the one closed. It stays in the returned
    dict (closed) for callers that want to check it.
    """
    requested = list(outputs)
    if HANDLE_NODE not in requested:
        requested.append(HANDLE_NODE)
    results = execute(dr, requested, inputs=inputs)
    handle = results.get(HANDLE_NODE)
    if isinstance(handle, DatasetHandle):
        handle.close()
        print(f"🔒 Closed dataset connection: {handle.address}")
    return results


def visualize(
    dr: driver.Driver,
    outputs: Sequence[str],
    output_file_path: str,
    *,
    inputs: Optional[Mapping[str, Any]] = None,
) -> Path:
    """Render the execution path for ``outputs`` to an image (requires graphviz)."""
    path = Path(output_file_path)
    dr.visualize_execution(
        list(outputs),
        output_file_path=str(path),
        render_kwargs={"format": path.suffix.lstrip(".") or "png"},
        inputs=dict(inputs or {}),
    )
    print(f"📊 Pipeline DAG visualization saved to: {path}")
    return path
