import sys
from pathlib import Path

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import Polygon

sys.path.append(str(Path(__file__).resolve().parents[1]))

from stationmap.preprocessing import (
    extract_coordinates,
    filter_valid_coordinates,
    apply_dma_overrides,
    deduplicate_stations,
    clean_stations,
)
from stationmap.merging import count_stations_by_dma, join_counts
from stationmap.binning import bin_count, bin_counts, BIN_LABELS
from stationmap.labels import normalize_city, select_labels
from stationmap.geography import reproject, build_station_points


def _square(lon, lat, size=1.0):
    return Polygon([
        (lon - size, lat - size),
        (lon + size, lat - size),
        (lon + size, lat + size),
        (lon - size, lat + size),
    ])


def _feed():
    return pd.DataFrame(
        [
            ["WBFF", "Primary", "Baltimore, MD", "512", "Baltimore", "Point (-76.61 39.29)"],
            ["WBFF-D2", "Secondary", "Baltimore, MD", "512", "Baltimore", "Point (-76.61 39.29)"],
            ["WNUV", "Primary", "Baltimore, MD", "512", "Baltimore", "Point (-76.61 39.29)"],
            ["WUTB", "Primary", "Baltimore, MD", "512", "Baltimore", "Point (-76.58 39.30)"],
            ["WPGH", "Primary", "Pittsburgh, PA", "508", "Pittsburgh", "Point (-80.00 40.44)"],
            ["KTVM", "Primary", "Butte-Bozeman, MT", "", "Butte-Bozeman", "Point (-112.53 46.00)"],
            ["KBAD", "Primary", "Nowhere", "999", "Nowhere", "Point (abc def)"],
            ["KOOB", "Primary", "Nowhere", "999", "Nowhere", "Point (-200.0 10.0)"],
        ],
        columns=["Station", "Channel", "DMA", "DMA_Code", "DMA_Short", "Location"],
    )


def test_extract_coordinates_parses_point_strings():
    df = pd.DataFrame({"Location": ["Point (-76.61 39.29)", "Point(1.5 -2)"]})
    result = extract_coordinates(df)

    assert result["longitude"].tolist() == [-76.61, 1.5]
    assert result["latitude"].tolist() == [39.29, -2.0]


def test_extract_coordinates_malformed_become_missing():
    df = pd.DataFrame({"Location": ["Point (abc def)", "Point ()", None, "Point (10)"]})
    result = extract_coordinates(df)

    assert result["longitude"].isna().tolist() == [True, True, True, False]
    assert result["latitude"].isna().all()


def test_filter_valid_coordinates_drops_missing_and_out_of_range():
    df = pd.DataFrame(
        {
            "longitude": [-76.6, np.nan, -200.0, 10.0, np.inf],
            "latitude": [39.3, 10.0, 10.0, 95.0, 10.0],
        }
    )
    result = filter_valid_coordinates(df)

    assert result.index.tolist() == [0]


def test_apply_dma_overrides_sets_literal_code_only():
    df = _feed()
    result = apply_dma_overrides(df, {"Butte-Bozeman": 754})

    assert result.loc[result["DMA_Short"] == "Butte-Bozeman", "DMA_Code"].tolist() == [754]
    assert result.loc[result["DMA_Short"] == "Pittsburgh", "DMA_Code"].tolist() == [508]
    # input untouched
    assert df.loc[df["DMA_Short"] == "Butte-Bozeman", "DMA_Code"].tolist() == [""]


def test_deduplicate_stations_one_row_per_market_location():
    result = deduplicate_stations(_feed())

    assert not result.duplicated(subset=["DMA_Short", "Location"]).any()
    assert result["Station"].tolist()[0] == "WBFF"


def test_clean_stations_properties():
    result = clean_stations(_feed())

    assert (result["Channel"] == "Primary").all()
    assert np.isfinite(result["longitude"]).all()
    assert np.isfinite(result["latitude"]).all()
    assert result["longitude"].between(-180, 180).all()
    assert result["latitude"].between(-90, 90).all()
    assert not result.duplicated(subset=["DMA_Short", "Location"]).any()
    assert result["DMA_Code"].dtype == "int64"
    assert sorted(result["Station"]) == ["KTVM", "WBFF", "WPGH", "WUTB"]


def test_count_stations_by_dma_sums_to_cleaned_rows():
    stations = clean_stations(_feed())
    counts = count_stations_by_dma(stations)

    assert counts["stations"].sum() == len(stations)
    assert counts["DMA_Code"].dtype == "int64"
    assert dict(zip(counts["DMA_Code"], counts["stations"])) == {508: 1, 512: 2, 754: 1}


def test_join_counts_matches_text_codes_and_drops_unmatched():
    shapes = gpd.GeoDataFrame(
        {
            "DMA": ["512", "508", "500"],
            "NAME": ["Baltimore", "Pittsburgh", "Portland-Auburn"],
            "geometry": [_square(-76.6, 39.3), _square(-80.0, 40.4), _square(-70.3, 43.7)],
        },
        crs="EPSG:4326",
    )
    counts = pd.DataFrame({"DMA_Code": [512, 508], "DMA": ["Baltimore", "Pittsburgh"], "stations": [2, 1]})

    result = join_counts(shapes, counts)

    assert isinstance(result, gpd.GeoDataFrame)
    assert result.crs == shapes.crs
    assert sorted(result["NAME"]) == ["Baltimore", "Pittsburgh"]
    assert result.set_index("NAME")["stations"].to_dict() == {"Baltimore": 2, "Pittsburgh": 1}


def test_join_counts_without_matches_raises():
    shapes = gpd.GeoDataFrame({"DMA": ["500"], "geometry": [_square(-70.3, 43.7)]}, crs="EPSG:4326")
    counts = pd.DataFrame({"DMA_Code": [512], "DMA": ["Baltimore"], "stations": [2]})

    with pytest.raises(ValueError, match="No DMA boundaries matched"):
        join_counts(shapes, counts)


def test_join_counts_missing_code_field_raises():
    shapes = gpd.GeoDataFrame({"CODE": ["512"], "geometry": [_square(-76.6, 39.3)]}, crs="EPSG:4326")
    counts = pd.DataFrame({"DMA_Code": [512], "DMA": ["Baltimore"], "stations": [2]})

    with pytest.raises(ValueError, match="no 'DMA' column"):
        join_counts(shapes, counts)


@pytest.mark.parametrize("count,label", [(1, "1"), (2, "2"), (3, "3"), (4, "4"), (5, "5+"), (100, "5+")])
def test_bin_count(count, label):
    assert bin_count(count) == label


@pytest.mark.parametrize("count", [0, -1, 2.5])
def test_bin_count_rejects_non_positive(count):
    with pytest.raises(ValueError):
        bin_count(count)


def test_bin_counts_is_ordered_categorical():
    result = bin_counts(pd.Series([1, 7, 4]))

    assert list(result.categories) == BIN_LABELS
    assert result.ordered
    assert list(result) == ["1", "5+", "4"]


@pytest.mark.parametrize(
    "name,city",
    [
        ("Bozeman", "Butte"),
        ("Butte-Bozeman", "Butte"),
        ("Wilkes Barre-Scranton", "Wilkes-Barre"),
        ("Washington, DC-Hagerstown", "Washington"),
        ("Champaign & Springfield-Decatur", "Champaign"),
        ("Seattle-Tacoma", "Seattle"),
        ("Salt Lake City", "Salt Lake City"),
    ],
)
def test_normalize_city(name, city):
    assert normalize_city(name) == city


def test_normalize_city_prefix_needs_separator():
    assert normalize_city("Bozemanville") == "Bozemanville"
    assert normalize_city("Greenvll-Spart-Ashevll") == "Greenville"


def test_normalize_city_missing():
    assert normalize_city(None) is None
    assert normalize_city(np.nan) is None


def test_select_labels_one_per_curated_city():
    stations = pd.DataFrame(
        {
            "Station": ["WBFF", "WNUV", "KTVM", "KXXX"],
            "DMA_Short": ["Baltimore", "Baltimore", "Bozeman", "Nowhere"],
        }
    )
    result = select_labels(stations)

    assert result["label"].tolist() == ["Baltimore", "Butte"]
    assert result["Station"].tolist() == ["WBFF", "KTVM"]


def test_reproject_assigns_missing_crs():
    gdf = gpd.GeoDataFrame({"geometry": [_square(-76.6, 39.3)]})
    result = reproject(gdf, "EPSG:5070")

    assert result.crs.to_epsg() == 5070


def test_build_station_points_projects_to_map_crs():
    stations = pd.DataFrame({"longitude": [-96.0], "latitude": [23.0]})
    points = build_station_points(stations, "EPSG:5070")

    assert points.crs.to_epsg() == 5070
    # origin of Conus Albers is (-96, 23)
    assert points.geometry.x.iloc[0] == pytest.approx(0.0, abs=1e-3)
    assert points.geometry.y.iloc[0] == pytest.approx(0.0, abs=1e-3)


def test_clean_stations_all_text_codes():
    feed = _feed()
    feed["DMA_Code"] = feed["DMA_Code"].astype("string")

    result = clean_stations(feed)

    assert result["DMA_Code"].dtype == "int64"
    assert result.loc[result["Station"] == "KTVM", "DMA_Code"].tolist() == [754]
    assert sorted(result["DMA_Code"].unique().tolist()) == [508, 512, 754]


def test_select_labels_keeps_markets_sharing_a_city():
    stations = pd.DataFrame(
        {
            "Station": ["WSYX", "WXTX", "KATU", "WPFO", "WTTE"],
            "DMA_Short": ["Columbus, OH", "Columbus, GA", "Portland, OR", "Portland-Auburn", "Columbus, OH"],
            "DMA_Code": [535, 522, 820, 500, 535],
        }
    )
    result = select_labels(stations)

    assert sorted(zip(result["label"], result["DMA_Code"])) == [
        ("Columbus", 522),
        ("Columbus", 535),
        ("Portland", 500),
        ("Portland", 820),
    ]
    assert "WTTE" not in result["Station"].tolist()
