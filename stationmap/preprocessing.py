"""Station feed cleaning: coordinates, filtering and deduplication."""

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from . import config

logger = logging.getLogger(__name__)


def extract_coordinates(df: pd.DataFrame, column: str = "Location") -> pd.DataFrame:
    """Split a ``Point (<lon> <lat>)`` string into numeric longitude/latitude.

    Strings that do not yield two numbers after stripping become NaN.
    """
    stripped = (
        df[column]
        .astype(str)
        .str.replace("Point", "", regex=False)
        .str.replace("(", " ", regex=False)
        .str.replace(")", " ", regex=False)
        .str.strip()
    )
    parts = stripped.str.split(r"\s+", n=1, expand=True).reindex(columns=[0, 1])
    df = df.copy()
    df["longitude"] = pd.to_numeric(parts[0], errors="coerce")
    df["latitude"] = pd.to_numeric(parts[1], errors="coerce")
    return df


def filter_valid_coordinates(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows whose coordinates are missing, infinite or out of range."""
    lon, lat = df["longitude"], df["latitude"]
    valid = (
        np.isfinite(lon)
        & np.isfinite(lat)
        & lon.between(-180, 180)
        & lat.between(-90, 90)
    )
    return df[valid]


def apply_dma_overrides(
    df: pd.DataFrame, overrides: Optional[Dict[str, int]] = None
) -> pd.DataFrame:
    """Replace ``DMA_Code`` for markets listed in the override table."""
    overrides = config.DMA_CODE_OVERRIDES if overrides is None else overrides
    df = df.copy()
    # Feed codes arrive as text; blanks become NaN until overridden or dropped
    df["DMA_Code"] = pd.to_numeric(df["DMA_Code"], errors="coerce")
    for market, code in overrides.items():
        mask = df["DMA_Short"] == market
        if mask.any():
            df.loc[mask, "DMA_Code"] = code
            logger.info(f"Set DMA_Code={code} on {int(mask.sum())} rows for {market}")
    return df


def deduplicate_stations(df: pd.DataFrame) -> pd.DataFrame:
    """Keep one row per station location within a market."""
    return df.drop_duplicates(subset=["DMA_Short", "Location"], keep="first")


def clean_stations(df: pd.DataFrame) -> pd.DataFrame:
    """Reduce the raw feed to one primary-channel row per located station."""
    df = df[df["Channel"] == config.PRIMARY_CHANNEL]
    logger.info(f"Primary channels: {len(df)} rows")

    df = apply_dma_overrides(df)
    df = extract_coordinates(df)
    df = filter_valid_coordinates(df)
    logger.info(f"After coordinate filter: {len(df)} rows")

    df = deduplicate_stations(df)
    logger.info(f"After dedup: {len(df)} stations")

    df = df.copy()
    df["DMA_Code"] = pd.to_numeric(df["DMA_Code"], errors="coerce")
    dropped = int(df["DMA_Code"].isna().sum())
    if dropped:
        logger.warning(f"Dropping {dropped} stations without a numeric DMA_Code")
        df = df.dropna(subset=["DMA_Code"])
    df["DMA_Code"] = df["DMA_Code"].astype("int64")
    return df.reset_index(drop=True)
