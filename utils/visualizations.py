"""
Visualization utilities for logger temperatures and regional statistics.
This module provides static charts (matplotlib/seaborn), a choropleth map and
an interactive Folium map of logger sites.
"""

import warnings
from typing import List, Optional, Sequence
warnings.filterwarnings("ignore", category=UserWarning, module='folium')

import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib.pyplot as plt
from matplotlib.colors import BoundaryNorm
from matplotlib.figure import Figure
import seaborn as sns
import folium

from .site_operations import ReefZone

# Fixed, logarithmically spaced class breaks for population choropleths
DEFAULT_LOG_BREAKS: List[float] = [1e2, 1e3, 1e4, 1e5, 1e6]

ZONE_COLORS = {
    ReefZone.REEF_FLAT.value: "#1b9e77",
    ReefZone.REEF_SLOPE.value: "#7570b3",
    ReefZone.OTHER.value: "#d95f02",
}


def _month_start(aggregates: pd.DataFrame) -> pd.Series:
    return pd.to_datetime(
        pd.DataFrame({"year": aggregates["year"], "month": aggregates["month"], "day": 1})
    )


# ================= STATIC CHARTS =================

def monthly_facet_chart(
    aggregates: pd.DataFrame,
    value_col: str = "mean_temperature",
    facet_col: str = "category",
    series_col: Optional[str] = "site",
    title: str = "Monthly mean temperature",
    ylabel: str = "Temperature (°C)",
) -> Figure:
    """
    Faceted line chart of a monthly aggregate.

    Parameters:
    -----------
    aggregates : DataFrame
        Output of ``monthly_means`` (year, month, facet column, value column)
    value_col : str
        Column plotted on the y-axis
    facet_col : str
        One panel per distinct value of this column
    series_col : str or None
        One line per distinct value within a panel; ignored when absent
    title : str
        Figure title

    Returns:
    --------
    matplotlib.figure.Figure
    """
    sns.set_theme(style="darkgrid")
    data = aggregates.assign(month_start=_month_start(aggregates)).sort_values("month_start")
    facets = sorted(data[facet_col].dropna().unique()) if len(data) else []
    n_panels = max(len(facets), 1)

    fig, axes = plt.subplots(n_panels, 1, figsize=(12, 3.5 * n_panels), sharex=True, squeeze=False)
    has_series = series_col is not None and series_col in data.columns

    for ax, facet in zip(axes[:, 0], facets):
        panel = data[data[facet_col] == facet]
        if has_series:
            for series_name, series in panel.groupby(series_col, sort=True):
                ax.plot(series["month_start"], series[value_col], marker="o", markersize=3,
                        linewidth=1.2, label=str(series_name))
            if panel[series_col].nunique() > 1:
                ax.legend(fontsize=7, ncol=2, loc="upper left", bbox_to_anchor=(1.01, 1.0))
        else:
            ax.plot(panel["month_start"], panel[value_col], marker="o", markersize=3,
                    color=ZONE_COLORS.get(facet, "#333333"))
        ax.set_title(str(facet).title(), fontsize=11, fontweight="bold")
        ax.set_ylabel(ylabel)

    if not facets:
        axes[0, 0].text(0.5, 0.5, "No observations", ha="center", va="center",
                        transform=axes[0, 0].transAxes)

    axes[-1, 0].set_xlabel("Month")
    fig.suptitle(title, fontsize=14, fontweight="bold")
    fig.tight_layout()
    return fig


def gender_percentage_chart(
    percentages: pd.DataFrame,
    name_col: str,
    title: str = "Population by gender",
) -> Figure:
    """Horizontal stacked bars of male/female share per region."""
    data = percentages.sort_values(name_col, ascending=False)
    fig, ax = plt.subplots(figsize=(10, max(4, 0.25 * len(data))))
    ax.barh(data[name_col], data["female_pct"], color="#e7298a", label="Female")
    ax.barh(data[name_col], data["male_pct"], left=data["female_pct"], color="#66a61e", label="Male")
    ax.axvline(50, color="black", linewidth=0.8, linestyle="--")
    ax.set_xlabel("Share of total population (%)")
    ax.set_xlim(0, 100)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(loc="lower right")
    fig.tight_layout()
    return fig


def choropleth_map(
    regions: gpd.GeoDataFrame,
    value_col: str,
    breaks: Sequence[float] = DEFAULT_LOG_BREAKS,
    cmap: str = "viridis",
    title: Optional[str] = None,
) -> Figure:
    """
    Filled map of a per-region value on a logarithmic colour scale.

    Parameters:
    -----------
    regions : GeoDataFrame
        Region polygons with the value column
    value_col : str
        Column used for colouring
    breaks : sequence of float
        Fixed class boundaries, increasing; values beyond the ends use the
        extended colours
    cmap : str
        Matplotlib colormap name

    Returns:
    --------
    matplotlib.figure.Figure
    """
    boundaries = np.asarray(sorted(breaks), dtype=float)
    if len(boundaries) < 2:
        raise ValueError("choropleth needs at least two break points")

    colormap = plt.get_cmap(cmap)
    norm = BoundaryNorm(boundaries, ncolors=colormap.N, extend="both")

    fig, ax = plt.subplots(figsize=(10, 10))
    regions.plot(
        column=value_col,
        cmap=colormap,
        norm=norm,
        edgecolor="white",
        linewidth=0.3,
        ax=ax,
        missing_kwds={"color": "lightgrey", "label": "No data"},
    )
    colorbar = fig.colorbar(plt.cm.ScalarMappable(norm=norm, cmap=colormap), ax=ax,
                            shrink=0.6, extend="both")
    colorbar.set_ticks(boundaries)
    colorbar.set_ticklabels([f"{b:,.0f}" for b in boundaries])
    colorbar.set_label(value_col.replace("_", " "))

    ax.set_axis_off()
    ax.set_title(title or value_col.replace("_", " ").title(), fontsize=14, fontweight="bold")
    fig.tight_layout()
    return fig


# ================= FOLIUM VISUALIZATION FUNCTIONS =================

def interactive_site_map(sites: gpd.GeoDataFrame, zoom_start: int = 6,
                         title: str = "Temperature logger sites") -> folium.Map:
    """
    Create an interactive map of logger sites coloured by reef zone.

    Parameters:
    -----------
    sites : GeoDataFrame
        Point sites with ``site``, ``subsite`` and ``category`` columns
    zoom_start : int
        Initial zoom level for the map

    Returns:
    --------
    folium.Map
    """
    if sites.crs is not None and sites.crs != "EPSG:4326":
        sites = sites.to_crs("EPSG:4326")

    if len(sites):
        center = [sites.geometry.y.mean(), sites.geometry.x.mean()]
    else:
        center = [-18.0, 147.0]

    m = folium.Map(location=center, zoom_start=zoom_start, tiles='CartoDB positron')
    title_html = f'<h3 align="center" style="font-size:16px"><b>{title}</b></h3>'
    m.get_root().html.add_child(folium.Element(title_html))

    for _, row in sites.iterrows():
        category = row.get("category", ReefZone.OTHER.value)
        popup_text = f"Site: {row.get('site')}<br>Subsite: {row.get('subsite')}<br>Zone: {category}"
        folium.CircleMarker(
            location=[row.geometry.y, row.geometry.x],
            radius=5,
            color=ZONE_COLORS.get(category, "#333333"),
            fill=True,
            fill_opacity=0.8,
            popup=folium.Popup(popup_text, max_width=300),
        ).add_to(m)

    return m
