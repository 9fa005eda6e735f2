"""Boundary loading and projection utilities."""

import logging
from typing import Iterable, Optional, Union
from pathlib import Path

import geopandas as gpd
import pandas as pd

from . import config

logger = logging.getLogger(__name__)


def reproject(gdf: gpd.GeoDataFrame, crs: str = config.MAP_CRS) -> gpd.GeoDataFrame:
    """Assign WGS84 when no CRS is set, then transform to ``crs``."""
    if gdf.crs is None:
        gdf = gdf.set_crs(config.SOURCE_CRS)
    return gdf.to_crs(crs)


def load_states(
    source: Union[str, Path] = config.STATES_SOURCE,
    exclude: Optional[Iterable[str]] = None,
    crs: str = config.MAP_CRS,
) -> gpd.GeoDataFrame:
    """Load state polygons, keeping the contiguous states by default."""
    states = gpd.read_file(str(source))
    exclude = config.CONTIGUOUS_EXCLUDE if exclude is None else list(exclude)
    if exclude and config.STATE_ABBR_FIELD in states.columns:
        states = states[~states[config.STATE_ABBR_FIELD].isin(exclude)]
    logger.info(f"Loaded {len(states)} state boundaries")
    return reproject(states, crs)


def load_dma_shapes(
    path: Union[str, Path] = config.DMA_SHAPEFILE,
    code_field: str = config.DMA_CODE_FIELD,
    crs: str = config.MAP_CRS,
) -> gpd.GeoDataFrame:
    """Load DMA boundary polygons from a shapefile."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"DMA shapefile not found: {path}")
    dmas = gpd.read_file(path)
    if code_field not in dmas.columns:
        raise ValueError(f"DMA shapefile has no '{code_field}' column")
    logger.info(f"Loaded {len(dmas)} DMA boundaries")
    return reproject(dmas, crs)


def build_station_points(stations: pd.DataFrame, crs: str = config.MAP_CRS) -> gpd.GeoDataFrame:
    """Turn cleaned station rows into projected point geometries."""
    points = gpd.GeoDataFrame(
        stations,
        geometry=gpd.points_from_xy(stations["longitude"], stations["latitude"]),
        crs=config.SOURCE_CRS,
    )
    return points.to_crs(crs)
