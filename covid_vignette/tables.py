"""Display tables for the derived views.

The table renderers (the dashboard's data grids and the vignette's
printed tables) take a rectangular frame of strings.  The helpers here
select and rename columns to their display names and format numbers:
percentages for rate columns, thousands separators for counts.
"""

from __future__ import annotations

from typing import Dict, Iterable

import pandas as pd
from pandas.api import types as ptypes

from .config import COUNTRY_RATES_LABELS, PROVINCE_LABELS, TOP_COUNTRIES_LABELS


def _format_percent(value: float, digits: int) -> str:
    if pd.isna(value):
        return ""
    return f"{value:.{digits}%}"


def _format_count(value: object) -> str:
    if pd.isna(value):
        return ""
    return f"{int(value):,}"


def format_table(
    df: pd.DataFrame,
    labels: Dict[str, str],
    percent_cols: Iterable[str] = (),
    digits: int = 2,
) -> pd.DataFrame:
    """Return a display copy of ``df``.

    Parameters
    ----------
    df : pd.DataFrame
        A derived view.
    labels : Dict[str, str]
        Column name -> display name.  Only these columns are kept, in
        this order.
    percent_cols : Iterable[str]
        Columns holding fractions to render as percentages.
    digits : int
        Decimal places for percentages.

    Returns
    -------
    pd.DataFrame
        String-valued table with display column names.  Missing values
        are rendered as empty strings.
    """
    missing = [col for col in labels if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")

    percent = set(percent_cols)
    out = df[list(labels)].copy()
    for col in out.columns:
        if col in percent:
            out[col] = out[col].map(lambda v: _format_percent(v, digits))
        elif ptypes.is_integer_dtype(out[col]):
            out[col] = out[col].map(_format_count)
        else:
            out[col] = out[col].fillna("").astype(str)
    return out.rename(columns=labels).reset_index(drop=True)


def top_countries_table(top_countries: pd.DataFrame) -> pd.DataFrame:
    return format_table(
        top_countries,
        TOP_COUNTRIES_LABELS,
        percent_cols=["percent_of_global_confirmed"],
    )


def country_rates_table(country_rates: pd.DataFrame) -> pd.DataFrame:
    return format_table(
        country_rates,
        COUNTRY_RATES_LABELS,
        percent_cols=["death_rate", "recovery_rate"],
    )


def province_table(breakdown: pd.DataFrame) -> pd.DataFrame:
    return format_table(breakdown, PROVINCE_LABELS)
