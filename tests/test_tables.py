"""Unit tests for display-table formatting."""

from __future__ import annotations

import pandas as pd
import pytest

from covid_vignette import pipeline, tables


def test_top_countries_table_formats_percentages(sample_cases: pd.DataFrame) -> None:
    table = tables.top_countries_table(pipeline.compute_top_countries(sample_cases, 2))

    assert list(table.columns) == ["Country", "Total Cases", "Perc of Total"]
    assert table.iloc[0].tolist() == ["China", "476", "82.64%"]


def test_counts_get_thousands_separators() -> None:
    df = pd.DataFrame({"province": ["Hubei"], "total_confirmed": [67803]})
    assert tables.province_table(df).iloc[0].tolist() == ["Hubei", "67,803"]


def test_missing_rate_renders_blank() -> None:
    df = pd.DataFrame(
        {
            "country": ["Spain"],
            "total_confirmed": [0],
            "total_death": [1],
            "total_recovered": [0],
            "death_rate": [float("nan")],
            "recovery_rate": [float("nan")],
        }
    )
    row = tables.country_rates_table(df).iloc[0]
    assert row["Death Rate"] == ""
    assert row["Recovery Rate"] == ""


def test_format_table_selects_and_orders_columns() -> None:
    df = pd.DataFrame({"b": [0.5], "a": ["x"], "c": [1]})
    out = tables.format_table(df, {"a": "A", "b": "B"}, percent_cols=["b"], digits=0)

    assert list(out.columns) == ["A", "B"]
    assert out.iloc[0].tolist() == ["x", "50%"]


def test_format_table_missing_column_raises() -> None:
    with pytest.raises(KeyError):
        tables.format_table(pd.DataFrame({"a": [1]}), {"b": "B"})
