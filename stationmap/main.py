"""Entry point: feed to finished station map."""

import argparse
import logging
from pathlib import Path
from typing import Optional, Union

from . import config
from .data_ingestion import fetch_feed, parse_feed, save_feed_snapshot
from .preprocessing import clean_stations
from .geography import build_station_points, load_dma_shapes, load_states
from .merging import count_stations_by_dma, join_counts
from .labels import select_labels
from .visualization import render_station_map, write_interactive_map

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def run_pipeline(
    feed: PathLike = config.FEED_URL,
    dma_shapefile: PathLike = config.DMA_SHAPEFILE,
    states: PathLike = config.STATES_SOURCE,
    output: PathLike = config.OUTPUT_PNG,
    html_output: Optional[PathLike] = None,
    snapshot: Optional[PathLike] = None,
) -> Path:
    """Run every step from feed retrieval to the rendered PNG."""
    payload = fetch_feed(feed)
    if snapshot:
        save_feed_snapshot(payload, snapshot)
    raw = parse_feed(payload)
    stations = clean_stations(raw)

    state_shapes = load_states(states)
    points = build_station_points(stations)

    counts = count_stations_by_dma(stations)
    dma_shapes = load_dma_shapes(dma_shapefile)
    dmas = join_counts(dma_shapes, counts)

    labels = select_labels(points)
    logger.info(f"Labelling {len(labels)} cities")

    out = render_station_map(state_shapes, dmas, points, labels, output)
    if html_output:
        write_interactive_map(dmas, points, html_output)
    return out


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Map broadcast stations by media market")
    parser.add_argument("--feed", default=config.FEED_URL, help="Station feed URL or local JSON file")
    parser.add_argument("--dma-shapefile", default=config.DMA_SHAPEFILE, help="DMA boundary shapefile")
    parser.add_argument("--states", default=config.STATES_SOURCE, help="State boundary file or URL")
    parser.add_argument("--output", default=config.OUTPUT_PNG, help="Output PNG path")
    parser.add_argument("--html", help="Optional interactive HTML map path")
    parser.add_argument("--snapshot", help="Save the raw feed JSON to this path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    run_pipeline(
        feed=args.feed,
        dma_shapefile=args.dma_shapefile,
        states=args.states,
        output=args.output,
        html_output=args.html,
        snapshot=args.snapshot,
    )


if __name__ == "__main__":
    main()
