"""Aggregation pipeline: derived views over the daily case-count table.

This module turns the raw case observations (one row per date, location
and case type) into the summarised views consumed by the vignette and
the dashboard:

* global totals by case type and the derived global rates;
* the cumulative active / recovered / death time series;
* the top countries by confirmed cases with their share of the total;
* per-country death and recovery rates above a confirmed-case floor;
* the per-province breakdown of one country.

Every function validates its input with
:func:`covid_vignette.schema.validate_cases`, sums ``cases`` over its
grouping keys (rows are never assumed unique) and returns a new
DataFrame.  Sorting by case count always breaks ties alphabetically on
the location name so results do not depend on input order.  The primary
entry point is :func:`run_pipeline`, which produces every view at once.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import pandas as pd

from .config import (
    CASE_TYPES,
    CONFIRMED,
    DEATH,
    DEFAULT_MIN_CONFIRMED,
    DEFAULT_PROVINCE_COUNTRY,
    DEFAULT_TOP_N,
    EXCLUDED_COUNTRY,
    RECOVERED,
)
from .schema import validate_cases, warn_division_by_zero

# Module‑level logger
logger = logging.getLogger(__name__)

TIME_SERIES_COLUMNS = [
    "date",
    CONFIRMED,
    DEATH,
    RECOVERED,
    "active",
    "active_cumulative",
    "recovered_cumulative",
    "death_cumulative",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _rate(numer: pd.Series, denom: pd.Series, what: str) -> pd.Series:
    """Divide two Series, returning NaN (with a warning) where ``denom`` is zero."""
    zero = denom == 0
    if zero.any():
        # Point at the caller of the public compute_* function
        warn_division_by_zero(what, int(zero.sum()), stacklevel=3)
    return numer / denom.where(~zero).astype(float)


def _sort_by_count(df: pd.DataFrame, count_col: str, label_col: str) -> pd.DataFrame:
    """Sort descending on ``count_col``; equal counts are ordered by ``label_col``."""
    return df.sort_values(
        [count_col, label_col], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)


def _pivot_case_types(df: pd.DataFrame, key: str) -> pd.DataFrame:
    """Sum cases per ``key`` and case type, one column per case type (missing -> 0)."""
    wide = (
        df.groupby([key, "case_type"])["cases"]
        .sum()
        .unstack("case_type", fill_value=0)
        .reindex(columns=list(CASE_TYPES), fill_value=0)
        .astype("int64")
    )
    wide.columns.name = None
    return wide


def filter_dates(
    df: pd.DataFrame,
    start: Optional[object] = None,
    end: Optional[object] = None,
) -> pd.DataFrame:
    """Return the rows whose ``date`` lies in the inclusive ``[start, end]`` window.

    Parameters
    ----------
    df : pd.DataFrame
        Case observations.
    start, end : date-like, optional
        Window bounds; ``None`` leaves that side unbounded.

    Returns
    -------
    pd.DataFrame
        A validated copy restricted to the window.
    """
    cases = validate_cases(df)
    if start is None and end is None:
        return cases
    mask = pd.Series(True, index=cases.index, dtype=bool)
    if start is not None:
        mask &= cases["date"] >= pd.Timestamp(start)
    if end is not None:
        mask &= cases["date"] <= pd.Timestamp(end)
    return cases.loc[mask].reset_index(drop=True)


# ---------------------------------------------------------------------------
# Global totals
# ---------------------------------------------------------------------------


def compute_type_totals(df: pd.DataFrame) -> pd.DataFrame:
    """Sum cases per case type.

    Returns
    -------
    pd.DataFrame
        Columns ``case_type`` and ``total_cases``, one row per case type
        in the fixed order confirmed, death, recovered.  Case types with
        no rows are reported as 0.
    """
    cases = validate_cases(df)
    totals = (
        cases.groupby("case_type")["cases"]
        .sum()
        .reindex(list(CASE_TYPES), fill_value=0)
        .astype("int64")
    )
    return totals.rename_axis("case_type").reset_index(name="total_cases")


def summarize_totals(type_totals: pd.DataFrame) -> Dict[str, float]:
    """Derive the global headline figures from :func:`compute_type_totals` output.

    ``active`` is confirmed minus death minus recovered.  The rates are
    percentages of confirmed cases rounded to 2 decimals; they are NaN
    when there are no confirmed cases.
    """
    totals = dict(zip(type_totals["case_type"], type_totals["total_cases"]))
    confirmed = int(totals.get(CONFIRMED, 0))
    death = int(totals.get(DEATH, 0))
    recovered = int(totals.get(RECOVERED, 0))

    if confirmed == 0:
        warn_division_by_zero("global rates", stacklevel=2)
        death_rate = recovery_rate = float("nan")
    else:
        death_rate = round(100 * death / confirmed, 2)
        recovery_rate = round(100 * recovered / confirmed, 2)

    return {
        "confirmed": confirmed,
        "death": death,
        "recovered": recovered,
        "active": confirmed - death - recovered,
        "death_rate_percent": death_rate,
        "recovery_rate_percent": recovery_rate,
    }


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------


def compute_time_series(df: pd.DataFrame) -> pd.DataFrame:
    """Build the per-date and cumulative series of active, recovered and deaths.

    Cases are summed per (case type, date) and reshaped to one row per
    date with a column per case type.  ``active`` is the per-date
    confirmed minus death minus recovered; the ``*_cumulative`` columns
    are running totals in ascending date order.

    Returns
    -------
    pd.DataFrame
        Columns ``date``, ``confirmed``, ``death``, ``recovered``,
        ``active``, ``active_cumulative``, ``recovered_cumulative`` and
        ``death_cumulative``; dates are strictly increasing.
    """
    cases = validate_cases(df)
    if cases.empty:
        logger.warning("Empty case table; time series has no points")
        return pd.DataFrame(
            {col: pd.Series(dtype="int64") for col in TIME_SERIES_COLUMNS}
        ).astype({"date": "datetime64[ns]"})

    daily = _pivot_case_types(cases, "date").sort_index()
    daily["active"] = daily[CONFIRMED] - daily[DEATH] - daily[RECOVERED]
    daily["active_cumulative"] = daily["active"].cumsum()
    daily["recovered_cumulative"] = daily[RECOVERED].cumsum()
    daily["death_cumulative"] = daily[DEATH].cumsum()

    return daily.reset_index()[TIME_SERIES_COLUMNS]


# ---------------------------------------------------------------------------
# Country views
# ---------------------------------------------------------------------------


def compute_top_countries(df: pd.DataFrame, n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """Rank countries by total confirmed cases.

    Parameters
    ----------
    df : pd.DataFrame
        Case observations.
    n : int, optional
        Number of countries to keep; defaults to ``config.DEFAULT_TOP_N``.

    Returns
    -------
    pd.DataFrame
        Columns ``country``, ``total_confirmed`` and
        ``percent_of_global_confirmed`` (a fraction of the confirmed
        total over *all* countries, not only the ones returned), at most
        ``n`` rows sorted by ``total_confirmed`` descending.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    cases = validate_cases(df)
    confirmed = cases[cases["case_type"] == CONFIRMED]
    totals = (
        confirmed.groupby("country", as_index=False)["cases"]
        .sum()
        .rename(columns={"cases": "total_confirmed"})
    )
    if totals.empty:
        return pd.DataFrame(
            {
                "country": pd.Series(dtype=str),
                "total_confirmed": pd.Series(dtype="int64"),
                "percent_of_global_confirmed": pd.Series(dtype=float),
            }
        )

    grand_total = pd.Series(totals["total_confirmed"].sum(), index=totals.index)
    totals["percent_of_global_confirmed"] = _rate(
        totals["total_confirmed"], grand_total, "percent of global confirmed"
    )
    return _sort_by_count(totals, "total_confirmed", "country").head(n)


def compute_country_rates(
    df: pd.DataFrame, min_confirmed: int = DEFAULT_MIN_CONFIRMED
) -> pd.DataFrame:
    """Per-country death and recovery rates for countries with enough cases.

    The ``"Others"`` pseudo-country is excluded.  Countries with fewer
    than ``min_confirmed`` confirmed cases are dropped because rates on
    tiny samples are unreliable.

    Returns
    -------
    pd.DataFrame
        Columns ``country``, ``total_confirmed``, ``total_death``,
        ``total_recovered``, ``death_rate`` and ``recovery_rate`` (rates
        are fractions), sorted by ``total_confirmed`` descending.
    """
    cases = validate_cases(df)
    cases = cases[cases["country"] != EXCLUDED_COUNTRY]
    if cases.empty:
        return pd.DataFrame(
            {
                "country": pd.Series(dtype=str),
                "total_confirmed": pd.Series(dtype="int64"),
                "total_death": pd.Series(dtype="int64"),
                "total_recovered": pd.Series(dtype="int64"),
                "death_rate": pd.Series(dtype=float),
                "recovery_rate": pd.Series(dtype=float),
            }
        )

    wide = (
        _pivot_case_types(cases, "country")
        .rename(
            columns={
                CONFIRMED: "total_confirmed",
                DEATH: "total_death",
                RECOVERED: "total_recovered",
            }
        )
        .reset_index()
    )
    wide = wide[wide["total_confirmed"] >= min_confirmed]
    wide = _sort_by_count(wide, "total_confirmed", "country")

    wide["death_rate"] = _rate(wide["total_death"], wide["total_confirmed"], "death rate")
    wide["recovery_rate"] = _rate(
        wide["total_recovered"], wide["total_confirmed"], "recovery rate"
    )
    logger.debug(
        "%d countries with at least %d confirmed cases", len(wide), min_confirmed
    )
    return wide


def compute_province_breakdown(df: pd.DataFrame, country: str) -> pd.DataFrame:
    """Confirmed cases per province of one country, largest first.

    A country with no rows yields an empty frame.  Rows without a
    province are grouped under the empty string.
    """
    cases = validate_cases(df)
    subset = cases[(cases["country"] == country) & (cases["case_type"] == CONFIRMED)]
    if subset.empty:
        return pd.DataFrame(
            {
                "province": pd.Series(dtype=str),
                "total_confirmed": pd.Series(dtype="int64"),
            }
        )

    provinces = (
        subset.groupby("province", as_index=False)["cases"]
        .sum()
        .rename(columns={"cases": "total_confirmed"})
    )
    return _sort_by_count(provinces, "total_confirmed", "province")


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def run_pipeline(
    df: pd.DataFrame,
    *,
    top_n: int = DEFAULT_TOP_N,
    min_confirmed: int = DEFAULT_MIN_CONFIRMED,
    province_country: str = DEFAULT_PROVINCE_COUNTRY,
) -> Dict[str, object]:
    """Compute every derived view of the case table.

    Returns
    -------
    Dict[str, object]
        Keys ``type_totals``, ``summary`` (a dict of headline figures),
        ``time_series``, ``top_countries``, ``country_rates`` and
        ``province_breakdown``.
    """
    cases = validate_cases(df)
    logger.info(
        "Aggregating %d case rows (%s to %s)",
        len(cases),
        cases["date"].min() if not cases.empty else None,
        cases["date"].max() if not cases.empty else None,
    )

    type_totals = compute_type_totals(cases)
    return {
        "type_totals": type_totals,
        "summary": summarize_totals(type_totals),
        "time_series": compute_time_series(cases),
        "top_countries": compute_top_countries(cases, top_n),
        "country_rates": compute_country_rates(cases, min_confirmed),
        "province_breakdown": compute_province_breakdown(cases, province_country),
    }
