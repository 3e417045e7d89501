"""
File output utility module.

Writes aggregate tables (CSV), charts (PNG) and interactive maps (HTML) into
an output directory, creating the directory when it does not exist yet.

These are utility functions (not Hamilton nodes) called by the sink nodes.
"""

from pathlib import Path
from typing import Union

import folium
import pandas as pd
from matplotlib.figure import Figure


def ensure_output_dir(output_dir: Union[str, Path]) -> Path:
    """Create the output directory (and parents) if missing."""
    path = Path(output_dir)
    if not path.exists():
        print(f"   📁 Creating output directory: {path}")
        path.mkdir(parents=True, exist_ok=True)
    return path


def write_aggregate_table(df: pd.DataFrame, output_dir: Union[str, Path], filename: str) -> Path:
    """
    Write a table as comma-separated values without the index.

    Args:
        df: Table to write
        output_dir: Destination directory (created if absent)
        filename: File name, e.g. ``monthly_temperature.csv``

    Returns:
        Path: Written file
    """
    path = ensure_output_dir(output_dir) / filename
    with open(path, "w", newline="", encoding="utf-8") as fh:
        df.to_csv(fh, index=False)
    print(f"💾 Table saved to: {path} ({len(df):,} rows)")
    return path


def save_figure(fig: Figure, output_dir: Union[str, Path], filename: str, dpi: int = 150) -> Path:
    path = ensure_output_dir(output_dir) / filename
    with open(path, "wb") as fh:
        fig.savefig(fh, format="png", dpi=dpi, bbox_inches="tight")
    print(f"💾 Chart saved to: {path}")
    return path


def save_interactive_map(folium_map: folium.Map, output_dir: Union[str, Path], filename: str) -> Path:
    path = ensure_output_dir(output_dir) / filename
    folium_map.save(str(path))
    print(f"💾 Interactive map saved to: {path}")
    return path
