"""Fetch and flatten the station-location JSON feed."""

import json
import logging
from pathlib import Path
from typing import Any, Union

import pandas as pd
import requests

from . import config

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Channel", "DMA", "DMA_Code", "DMA_Short", "Location"]


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _download(url: str, timeout: int = config.REQUEST_TIMEOUT) -> Any:
    """Download a URL and decode the JSON body."""
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def fetch_feed(source: Union[str, Path]) -> Any:
    """Return the raw decoded feed from an HTTP(S) URL or a local JSON file."""
    source = str(source)
    if _is_url(source):
        logger.info(f"Fetching station feed from {source}")
        return _download(source)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Station feed not found: {source}")
    logger.info(f"Reading station feed from {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _unwrap(payload: Any) -> list:
    """Accept a bare array or an object wrapping a single array."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        lists = [v for v in payload.values() if isinstance(v, list)]
        if len(lists) == 1:
            return lists[0]
    raise ValueError("Station feed must be a JSON array of station objects")


def parse_feed(payload: Any) -> pd.DataFrame:
    """Flatten the feed into one row per station-channel entry.

    Stations that carry a nested ``Channels`` array are expanded so each
    channel becomes its own row with the parent station fields repeated.
    """
    records = _unwrap(payload)
    flat = []
    for rec in records:
        channels = rec.get("Channels") if isinstance(rec, dict) else None
        if isinstance(channels, list) and channels:
            parent = {k: v for k, v in rec.items() if k != "Channels"}
            for ch in channels:
                flat.append({**parent, **ch})
        else:
            flat.append(rec)

    df = pd.json_normalize(flat)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Station feed is missing columns: {missing}")
    logger.info(f"Parsed {len(df)} station-channel rows")
    return df


def load_feed(source: Union[str, Path]) -> pd.DataFrame:
    """Fetch a feed from a URL or local file and return it as a DataFrame."""
    return parse_feed(fetch_feed(source))


def save_feed_snapshot(payload: Any, path: Union[str, Path]) -> Path:
    """Write the raw feed to disk so later runs can use it as ``source``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f)
    logger.info(f"Saved feed snapshot to {path}")
    return path
