"""Schema checks for the daily case-count table.

Every aggregation in :mod:`covid_vignette.pipeline` starts by passing its
input through :func:`validate_cases`, so malformed tables are rejected
before any grouping happens.  Validation returns a normalised copy and
never modifies the caller's frame.
"""

from __future__ import annotations

import warnings
from typing import List

import pandas as pd
from pandas.api import types as ptypes

from .config import CASE_TYPES, COLUMN_ALIASES, REQUIRED_COLUMNS


class SchemaError(ValueError):
    """The case table is missing a column or a column has the wrong type."""


class UnknownCaseTypeError(SchemaError):
    """The ``case_type`` column holds a value outside the known case types."""


class DivisionByZeroWarning(RuntimeWarning):
    """A rate was requested with a zero denominator; the rate is NaN."""


def warn_division_by_zero(what: str, count: int = 1, *, stacklevel: int = 2) -> None:
    """Warn about zero denominators; ``stacklevel`` counts from the caller of this function."""
    warnings.warn(
        f"{what}: {count} zero denominator(s), rate reported as NaN",
        DivisionByZeroWarning,
        stacklevel=stacklevel + 1,
    )


def apply_aliases(df: pd.DataFrame) -> pd.DataFrame:
    """Rename upstream column names (``type``, ``lat``, ``long``) to canonical ones."""
    renames = {
        src: dst
        for src, dst in COLUMN_ALIASES.items()
        if src in df.columns and dst not in df.columns
    }
    return df.rename(columns=renames)


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise SchemaError(f"Missing expected columns: {missing}")


def _coerce_dates(series: pd.Series) -> pd.Series:
    if ptypes.is_datetime64_any_dtype(series):
        dates = series
    elif ptypes.is_numeric_dtype(series) or ptypes.is_bool_dtype(series):
        # pandas would read these as epoch offsets
        raise SchemaError(f"Column 'date' must hold dates, got dtype {series.dtype}")
    else:
        try:
            dates = pd.to_datetime(series)
        except (ValueError, TypeError) as exc:
            raise SchemaError(f"Column 'date' could not be parsed as dates: {exc}") from exc
    if dates.isna().any():
        raise SchemaError(f"Column 'date' has {int(dates.isna().sum())} missing value(s)")
    if dates.dt.tz is not None:
        # Reporting days are kept naive, in UTC
        dates = dates.dt.tz_convert(None)
    return dates.dt.normalize()


def _coerce_cases(series: pd.Series) -> pd.Series:
    if series.empty:
        return series.astype("int64")
    if ptypes.is_bool_dtype(series) or not ptypes.is_numeric_dtype(series):
        raise SchemaError(f"Column 'cases' must be numeric, got dtype {series.dtype}")
    if series.isna().any():
        raise SchemaError(f"Column 'cases' has {int(series.isna().sum())} missing value(s)")
    if not ptypes.is_integer_dtype(series):
        if (series.abs() == float("inf")).any():
            raise SchemaError("Column 'cases' holds infinite values")
        # Float columns are accepted only when every value is whole
        if not (series == series.round()).all():
            raise SchemaError("Column 'cases' holds non-integral values")
    return series.astype("int64")


def _check_case_types(series: pd.Series) -> None:
    unknown = sorted(set(series.dropna().astype(str)) - set(CASE_TYPES))
    if series.isna().any():
        unknown.append("<missing>")
    if unknown:
        raise UnknownCaseTypeError(
            f"Unknown case_type value(s) {unknown}; expected one of {list(CASE_TYPES)}"
        )


def validate_cases(df: pd.DataFrame) -> pd.DataFrame:
    """Check the case table and return a normalised copy.

    Parameters
    ----------
    df : pd.DataFrame
        Raw case observations with the columns listed in
        ``config.REQUIRED_COLUMNS`` (upstream aliases are accepted).

    Returns
    -------
    pd.DataFrame
        A copy with ``date`` as day-precision datetimes, ``cases`` as
        ``int64``, ``province`` as strings (``""`` when absent) and the
        coordinates as floats.

    Raises
    ------
    SchemaError
        If a required column is absent, has the wrong type, or ``country``
        has missing values.
    UnknownCaseTypeError
        If any row carries a case type other than confirmed, death or
        recovered.  The whole table is rejected rather than the row.
    """
    if not isinstance(df, pd.DataFrame):
        raise SchemaError(f"Expected a pandas DataFrame, got {type(df).__name__}")

    out = apply_aliases(df)
    ensure_columns(out, REQUIRED_COLUMNS)
    out = out[REQUIRED_COLUMNS].copy()

    out["date"] = _coerce_dates(out["date"])
    out["cases"] = _coerce_cases(out["cases"])

    for col in ("latitude", "longitude"):
        if not ptypes.is_numeric_dtype(out[col]) and not out[col].isna().all():
            raise SchemaError(f"Column '{col}' must be numeric, got dtype {out[col].dtype}")
        out[col] = out[col].astype(float)

    if out["country"].isna().any():
        raise SchemaError(
            f"Column 'country' has {int(out['country'].isna().sum())} missing value(s)"
        )
    out["country"] = out["country"].astype(str)
    out["province"] = out["province"].fillna("").astype(str)

    _check_case_types(out["case_type"])
    out["case_type"] = out["case_type"].astype(str)

    return out.reset_index(drop=True)
