"""
Input, output and projection settings for the station map.

Every location can be overridden from the environment, and the CLI in
``stationmap.main`` overrides both.

Join keys:
- DMA_Code: Nielsen numeric market code in the station feed
- DMA_CODE_FIELD: the same code in the DMA shapefile attribute table,
  stored as text and coerced to a number before joining
"""

import os

FEED_URL = os.getenv(
    "STATION_FEED_URL",
    "http://sbgi.net/resources/assets/sbgi/MetaverseStationData.json",
)

DMA_SHAPEFILE = os.getenv("DMA_SHAPEFILE", "data/dma_boundary/dma_boundary.shp")
DMA_CODE_FIELD = "DMA"

# Census cartographic boundaries, read straight from the zip by geopandas
STATES_SOURCE = os.getenv(
    "STATES_SOURCE",
    "https://www2.census.gov/geo/tiger/GENZ2018/shp/cb_2018_us_state_20m.zip",
)
STATE_ABBR_FIELD = "STUSPS"
CONTIGUOUS_EXCLUDE = ["AK", "HI", "PR", "VI", "GU", "MP", "AS"]

SOURCE_CRS = "EPSG:4326"
# NAD83 / Conus Albers, metres
MAP_CRS = "EPSG:5070"

OUTPUT_PNG = os.getenv("STATION_MAP_OUTPUT", "output/station_map.png")

REQUEST_TIMEOUT = 30

PRIMARY_CHANNEL = "Primary"

# Source records with a wrong or missing DMA_Code, keyed by DMA_Short
DMA_CODE_OVERRIDES = {
    "Butte-Bozeman": 754,
}
