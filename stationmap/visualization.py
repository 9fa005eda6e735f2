"""Static and interactive renderings of the station map."""

import logging
from pathlib import Path
from typing import Optional, Union

import folium
import geopandas as gpd
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from . import config
from .binning import BIN_LABELS, bin_counts

logger = logging.getLogger(__name__)

BIN_COLORS = ["#fee5d9", "#fcae91", "#fb6a4a", "#de2d26", "#a50f15"]
STATE_EDGE = "#7f7f7f"
DMA_EDGE = "white"
STATION_COLOR = "#1f1f1f"


def render_station_map(
    states: gpd.GeoDataFrame,
    dmas: gpd.GeoDataFrame,
    stations: gpd.GeoDataFrame,
    labels: gpd.GeoDataFrame,
    output_path: Union[str, Path] = config.OUTPUT_PNG,
    title: Optional[str] = "Broadcast stations by media market",
    dpi: int = 300,
) -> Path:
    """Draw state borders, the DMA choropleth, station dots and labels to a PNG.

    All layers must share one projected CRS. An existing file at
    ``output_path`` is overwritten.
    """
    output_path = Path(output_path)
    dmas = dmas.copy()
    dmas["bin"] = bin_counts(dmas["stations"])

    fig, ax = plt.subplots(1, 1, figsize=(12, 8))
    try:
        dmas.plot(
            column="bin",
            categorical=True,
            cmap=ListedColormap(BIN_COLORS),
            linewidth=0.3,
            edgecolor=DMA_EDGE,
            legend=True,
            legend_kwds={"title": "Stations", "loc": "lower right", "frameon": False},
            ax=ax,
        )
        states.boundary.plot(ax=ax, color=STATE_EDGE, linewidth=0.5)
        stations.plot(ax=ax, color=STATION_COLOR, markersize=4, zorder=3)

        for _, row in labels.iterrows():
            ax.annotate(
                row["label"],
                xy=(row.geometry.x, row.geometry.y),
                xytext=(3, 3),
                textcoords="offset points",
                fontsize=6,
                zorder=4,
            )

        if not states.empty:
            minx, miny, maxx, maxy = states.total_bounds
            ax.set_xlim(minx, maxx)
            ax.set_ylim(miny, maxy)

        # Remove axes for a cleaner look
        ax.set_axis_off()
        if title:
            ax.set_title(title)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.tight_layout()
        fig.savefig(output_path, dpi=dpi)
    finally:
        plt.close(fig)

    logger.info(f"Saved map to {output_path}")
    return output_path


def write_interactive_map(
    dmas: gpd.GeoDataFrame,
    stations: gpd.GeoDataFrame,
    output_html: Union[str, Path],
) -> Path:
    """Write a folium choropleth of station counts with station markers."""
    output_html = Path(output_html)
    shapes = dmas[["DMA_Code", "stations", dmas.geometry.name]].to_crs(config.SOURCE_CRS)
    shapes["DMA_Code"] = shapes["DMA_Code"].astype("int64")
    points = stations.to_crs(config.SOURCE_CRS)

    m = folium.Map(location=[39.5, -98.35], zoom_start=4, tiles="cartodbpositron")
    folium.Choropleth(
        geo_data=shapes,
        data=shapes,
        columns=["DMA_Code", "stations"],
        key_on="feature.properties.DMA_Code",
        fill_color="Reds",
        bins=[1, 2, 3, 4, 5, max(int(shapes["stations"].max()), 5) + 1],
        fill_opacity=0.7,
        line_opacity=0.2,
        legend_name="Stations per DMA (" + ", ".join(BIN_LABELS) + ")",
    ).add_to(m)

    for _, row in points.iterrows():
        folium.CircleMarker(
            location=[row.geometry.y, row.geometry.x],
            radius=2,
            color=STATION_COLOR,
            fill=True,
            tooltip=str(row.get("Station", row["DMA_Short"])),
        ).add_to(m)

    output_html.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(output_html))
    logger.info(f"Saved interactive map to {output_html}")
    return output_html
