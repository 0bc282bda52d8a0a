"""
Configuration constants for the COVID-19 case-count vignette.
"""

from pathlib import Path
from typing import Dict, List, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
# Sample of the daily case-count table bundled with the package
BUNDLED_DATASET: Path = Path(__file__).resolve().parent / "data" / "coronavirus_sample.csv"

# Environment variable that points the loader at another copy of the table
DATA_SOURCE_ENV: str = "COVID_DATA_SOURCE"

# Order matters: type totals are always reported in this order
CASE_TYPES: Tuple[str, str, str] = ("confirmed", "death", "recovered")
CONFIRMED, DEATH, RECOVERED = CASE_TYPES

REQUIRED_COLUMNS: List[str] = [
    "date",
    "province",
    "country",
    "latitude",
    "longitude",
    "case_type",
    "cases",
]

# Upstream column names -> canonical names
COLUMN_ALIASES: Dict[str, str] = {
    "type": "case_type",
    "caseType": "case_type",
    "lat": "latitude",
    "long": "longitude",
    "lon": "longitude",
}

# Pseudo-country holding counts not assigned to any location
EXCLUDED_COUNTRY: str = "Others"

# ======================================================
#  PIPELINE DEFAULTS
# ======================================================
DEFAULT_TOP_N: int = 10
DEFAULT_MIN_CONFIRMED: int = 25
DEFAULT_PROVINCE_COUNTRY: str = "China"

# ======================================================
#  DISPLAY
# ======================================================
CASE_TYPE_COLORS: Dict[str, str] = {
    "active": "#1f77b4",
    "confirmed": "#1f77b4",
    "recovered": "forestgreen",
    "death": "red",
}

TOP_COUNTRIES_LABELS: Dict[str, str] = {
    "country": "Country",
    "total_confirmed": "Total Cases",
    "percent_of_global_confirmed": "Perc of Total",
}

COUNTRY_RATES_LABELS: Dict[str, str] = {
    "country": "Country",
    "total_confirmed": "Confirmed",
    "total_death": "Death",
    "total_recovered": "Recovered",
    "death_rate": "Death Rate",
    "recovery_rate": "Recovery Rate",
}

PROVINCE_LABELS: Dict[str, str] = {
    "province": "Province",
    "total_confirmed": "Total Cases",
}

TOP_N_RANGE: Tuple[int, int] = (5, 25)
