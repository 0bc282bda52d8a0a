"""Shared fixtures for the case-table tests."""

from __future__ import annotations

from typing import Any, Callable

import pandas as pd
import pytest

from covid_vignette.config import REQUIRED_COLUMNS

# (date, province, country, case_type, cases)
SAMPLE_ROWS = [
    ("2020-01-22", "Hubei", "China", "confirmed", 444),
    ("2020-01-22", "Hubei", "China", "death", 17),
    ("2020-01-22", "Guangdong", "China", "confirmed", 26),
    ("2020-01-23", "Guangdong", "China", "confirmed", 6),
    ("2020-01-23", "", "Italy", "confirmed", 5),
    ("2020-01-23", "", "Italy", "confirmed", 3),
    ("2020-01-24", "Diamond Princess", "Others", "confirmed", 61),
    ("2020-01-24", "Washington", "US", "confirmed", 1),
    ("2020-01-24", "Hubei", "China", "recovered", 28),
    ("2020-01-24", "Hubei", "China", "death", 7),
    ("2020-01-24", "", "Japan", "confirmed", 30),
    ("2020-01-24", "", "Japan", "death", 3),
]


def _build(rows: list[tuple]) -> pd.DataFrame:
    records: list[dict[str, Any]] = [
        {
            "date": date,
            "province": province,
            "country": country,
            "latitude": 0.0,
            "longitude": 0.0,
            "case_type": case_type,
            "cases": cases,
        }
        for date, province, country, case_type, cases in rows
    ]
    return pd.DataFrame(records, columns=REQUIRED_COLUMNS)


@pytest.fixture
def make_cases() -> Callable[[list[tuple]], pd.DataFrame]:
    """Factory building a case table from (date, province, country, type, cases) tuples."""
    return _build


@pytest.fixture
def sample_cases() -> pd.DataFrame:
    return _build(SAMPLE_ROWS)
