"""Curated city labels for the station map."""

import re
from typing import Iterable, Optional

import pandas as pd

# Market names as they appear in DMA_Short, mapped to the label shown on the map
CITY_NORMALIZATIONS = {
    "Bozeman": "Butte",
    "Wilkes Barre": "Wilkes-Barre",
    "Washington DC": "Washington",
    "Washington, DC": "Washington",
    "Ft. Myers": "Fort Myers",
    "Ft. Smith": "Fort Smith",
    "Greenvll": "Greenville",
    "Champaign & Springfield": "Champaign",
    "Tri-Cities": "Bristol",
}

LABEL_CITIES = [
    "Albany",
    "Austin",
    "Baltimore",
    "Birmingham",
    "Boise",
    "Buffalo",
    "Butte",
    "Cedar Rapids",
    "Champaign",
    "Charleston",
    "Cincinnati",
    "Columbus",
    "Des Moines",
    "El Paso",
    "Eugene",
    "Flint",
    "Fresno",
    "Grand Rapids",
    "Greenville",
    "Harrisburg",
    "Las Vegas",
    "Little Rock",
    "Madison",
    "Medford",
    "Milwaukee",
    "Minneapolis",
    "Mobile",
    "Nashville",
    "Norfolk",
    "Oklahoma City",
    "Pittsburgh",
    "Portland",
    "Raleigh",
    "Reno",
    "Richmond",
    "Sacramento",
    "Salt Lake City",
    "San Antonio",
    "Savannah",
    "Seattle",
    "Spokane",
    "Syracuse",
    "Tulsa",
    "Washington",
    "Wilkes-Barre",
]

# Separators between cities in a multi-city market name
_CITY_SPLIT = re.compile(r"\s*(?:/|,|\s&\s|-)\s*")


def normalize_city(name: Optional[str]) -> Optional[str]:
    """Map a DMA_Short value to the single city used as its label."""
    if name is None or pd.isna(name):
        return None
    name = str(name).strip()
    for raw in sorted(CITY_NORMALIZATIONS, key=len, reverse=True):
        if name == raw or (name.startswith(raw) and _CITY_SPLIT.match(name, len(raw))):
            return CITY_NORMALIZATIONS[raw]
    first = _CITY_SPLIT.split(name, maxsplit=1)[0].strip()
    return CITY_NORMALIZATIONS.get(first, first)


def select_labels(
    stations: pd.DataFrame,
    cities: Iterable[str] = LABEL_CITIES,
    column: str = "DMA_Short",
) -> pd.DataFrame:
    """Keep the first station per curated city and market, and attach its label.

    Markets sharing a city name, such as Columbus, OH and Columbus, GA, each
    keep their own label.
    """
    wanted = set(cities)
    labelled = stations.copy()
    labelled["label"] = labelled[column].map(normalize_city)
    labelled = labelled[labelled["label"].isin(wanted)]
    keys = ["label", "DMA_Code"] if "DMA_Code" in labelled.columns else ["label"]
    return labelled.drop_duplicates(subset=keys, keep="first")
