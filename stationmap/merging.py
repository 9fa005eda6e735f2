"""Per-DMA station counts and the join onto DMA polygons."""

import logging

import geopandas as gpd
import pandas as pd

from . import config

logger = logging.getLogger(__name__)


def count_stations_by_dma(stations: pd.DataFrame) -> pd.DataFrame:
    """Tally stations per DMA code."""
    counts = (
        stations.groupby("DMA_Code", sort=True)
        .agg(DMA=("DMA", "first"), stations=("DMA", "size"))
        .reset_index()
    )
    counts["DMA_Code"] = counts["DMA_Code"].astype("int64")
    counts["stations"] = counts["stations"].astype("int64")
    logger.info(f"{len(counts)} markets with at least one station")
    return counts


def join_counts(
    dma_shapes: gpd.GeoDataFrame,
    counts: pd.DataFrame,
    code_field: str = config.DMA_CODE_FIELD,
) -> gpd.GeoDataFrame:
    """Attach station counts to DMA polygons, dropping polygons without any."""
    if code_field not in dma_shapes.columns:
        raise ValueError(f"DMA boundaries have no '{code_field}' column")
    shapes = dma_shapes.copy()
    # Shapefile codes are text; the feed codes are integers
    shapes["DMA_Code"] = pd.to_numeric(shapes[code_field], errors="coerce").astype("Int64")
    right = counts[["DMA_Code", "stations"]].copy()
    right["DMA_Code"] = right["DMA_Code"].astype("Int64")

    merged = shapes.merge(right, on="DMA_Code", how="left")
    merged = merged[merged["stations"].notna()].copy()
    if merged.empty:
        raise ValueError("No DMA boundaries matched the station counts")
    merged["stations"] = merged["stations"].astype("int64")
    logger.info(f"Joined counts onto {len(merged)} of {len(shapes)} DMA boundaries")
    return merged
