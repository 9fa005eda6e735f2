"""Write a small offline feed, DMA shapefile and states file under data/sample/.

    python generate_sample_inputs.py
    python -m stationmap.main --feed data/sample/stations.json \
        --dma-shapefile data/sample/dma_boundary.shp --states data/sample/states.geojson
"""

import json
from pathlib import Path

import geopandas as gpd
from shapely.geometry import Polygon

OUT = Path("data/sample")

markets = [
    # DMA code, DMA, DMA_Short, (lat, lon), stations
    (512, "Baltimore, MD", "Baltimore", (39.29, -76.61), 2),
    (508, "Pittsburgh, PA", "Pittsburgh", (40.44, -80.0), 1),
    (819, "Seattle-Tacoma, WA", "Seattle-Tacoma", (47.61, -122.33), 3),
    (641, "San Antonio, TX", "San Antonio", (29.42, -98.49), 5),
    (754, "Butte-Bozeman, MT", "Butte-Bozeman", (46.0, -112.53), 1),
]


def box(lat, lon, size=1.0):
    return Polygon([
        (lon - size, lat - size),
        (lon + size, lat - size),
        (lon + size, lat + size),
        (lon - size, lat + size),
    ])


def main():
    OUT.mkdir(parents=True, exist_ok=True)

    records = []
    for code, dma, short, (lat, lon), n in markets:
        for i in range(n):
            # Butte-Bozeman ships without a code in the live feed
            feed_code = "" if short == "Butte-Bozeman" else code
            records.append({
                "Station": f"K{short[:3].upper()}{i}",
                "Channel": "Primary",
                "DMA": dma,
                "DMA_Code": feed_code,
                "DMA_Short": short,
                "Location": f"Point ({lon + i * 0.05:.4f} {lat:.4f})",
            })
            records.append({
                "Station": f"K{short[:3].upper()}{i}-D2",
                "Channel": "Secondary",
                "DMA": dma,
                "DMA_Code": feed_code,
                "DMA_Short": short,
                "Location": f"Point ({lon + i * 0.05:.4f} {lat:.4f})",
            })
    with open(OUT / "stations.json", "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)

    # One extra market with no stations, to exercise the join filter
    polys = [{"DMA": str(code), "NAME": dma, "geometry": box(lat, lon)}
             for code, dma, _, (lat, lon), _ in markets]
    polys.append({"DMA": "500", "NAME": "Portland-Auburn, ME", "geometry": box(43.66, -70.26)})
    gpd.GeoDataFrame(polys, crs="EPSG:4326").to_file(OUT / "dma_boundary.shp")

    states = gpd.GeoDataFrame(
        [{"STUSPS": "US", "geometry": box(38.0, -96.0, size=30.0)}],
        crs="EPSG:4326",
    )
    states.to_file(OUT / "states.geojson", driver="GeoJSON")

    print(f"Generated sample inputs in {OUT}")


if __name__ == "__main__":
    main()
