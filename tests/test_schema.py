"""Unit tests for case-table validation."""

from __future__ import annotations

import pandas as pd
import pytest

from covid_vignette.schema import SchemaError, UnknownCaseTypeError, validate_cases


def test_validate_normalises_types(sample_cases: pd.DataFrame) -> None:
    """Dates become datetimes, cases int64 and coordinates floats."""
    out = validate_cases(sample_cases)

    assert pd.api.types.is_datetime64_any_dtype(out["date"])
    assert out["cases"].dtype == "int64"
    assert out["latitude"].dtype == float
    assert len(out) == len(sample_cases)


def test_validate_does_not_mutate_input(sample_cases: pd.DataFrame) -> None:
    before = sample_cases.copy()
    validate_cases(sample_cases)
    pd.testing.assert_frame_equal(sample_cases, before)


def test_missing_column_raises_schema_error(sample_cases: pd.DataFrame) -> None:
    with pytest.raises(SchemaError, match="cases"):
        validate_cases(sample_cases.drop(columns=["cases"]))


def test_upstream_aliases_are_accepted(sample_cases: pd.DataFrame) -> None:
    """The packaged dataset names its columns type/lat/long."""
    upstream = sample_cases.rename(
        columns={"case_type": "type", "latitude": "lat", "longitude": "long"}
    )
    out = validate_cases(upstream)

    assert list(out.columns) == list(sample_cases.columns)


def test_unknown_case_type_rejects_whole_table(make_cases) -> None:
    df = make_cases(
        [
            ("2020-01-22", "", "Italy", "confirmed", 5),
            ("2020-01-22", "", "Italy", "suspected", 2),
        ]
    )
    with pytest.raises(UnknownCaseTypeError, match="suspected"):
        validate_cases(df)


def test_unknown_case_type_is_a_schema_error(make_cases) -> None:
    df = make_cases([("2020-01-22", "", "Italy", "Confirmed", 5)])
    with pytest.raises(SchemaError):
        validate_cases(df)


def test_non_numeric_cases_raise(sample_cases: pd.DataFrame) -> None:
    df = sample_cases.assign(cases=sample_cases["cases"].astype(str))
    with pytest.raises(SchemaError, match="numeric"):
        validate_cases(df)


def test_integral_floats_are_accepted(sample_cases: pd.DataFrame) -> None:
    df = sample_cases.assign(cases=sample_cases["cases"].astype(float))
    out = validate_cases(df)
    assert out["cases"].dtype == "int64"
    assert out["cases"].sum() == sample_cases["cases"].sum()


def test_fractional_cases_raise(make_cases) -> None:
    df = make_cases([("2020-01-22", "", "Italy", "confirmed", 1.5)])
    with pytest.raises(SchemaError, match="non-integral"):
        validate_cases(df)


def test_negative_cases_are_kept(make_cases) -> None:
    """Corrections show up as negative counts and are not rejected."""
    df = make_cases([("2020-01-22", "", "Italy", "confirmed", -4)])
    assert validate_cases(df)["cases"].tolist() == [-4]


def test_unparseable_dates_raise(make_cases) -> None:
    df = make_cases([("not a date", "", "Italy", "confirmed", 1)])
    with pytest.raises(SchemaError, match="date"):
        validate_cases(df)


def test_missing_country_raises(make_cases) -> None:
    df = make_cases([("2020-01-22", "", None, "confirmed", 1)])
    with pytest.raises(SchemaError, match="country"):
        validate_cases(df)


def test_missing_province_becomes_empty_string(make_cases) -> None:
    df = make_cases([("2020-01-22", None, "Italy", "confirmed", 1)])
    assert validate_cases(df)["province"].tolist() == [""]


def test_empty_table_is_valid(make_cases) -> None:
    out = validate_cases(make_cases([]))
    assert out.empty
    assert out["cases"].dtype == "int64"


def test_non_frame_input_raises() -> None:
    with pytest.raises(SchemaError):
        validate_cases([{"date": "2020-01-22"}])  # type: ignore[arg-type]


def test_integer_dates_raise(make_cases) -> None:
    """Integers such as 20200122 are not reinterpreted as epoch offsets."""
    df = make_cases([("2020-01-22", "", "Italy", "confirmed", 1)])
    df["date"] = [20200122]
    with pytest.raises(SchemaError, match="date"):
        validate_cases(df)


def test_timezone_aware_dates_become_naive_days(make_cases) -> None:
    df = make_cases([("2020-01-22T00:00:00Z", "", "Italy", "confirmed", 1)])
    out = validate_cases(df)

    assert out["date"].dt.tz is None
    assert out["date"].tolist() == [pd.Timestamp("2020-01-22")]


@pytest.mark.parametrize("value", [float("inf"), float("-inf")])
def test_infinite_cases_raise(make_cases, value: float) -> None:
    df = make_cases([("2020-01-22", "", "Italy", "confirmed", 1)])
    df["cases"] = [value]
    with pytest.raises(SchemaError, match="infinite"):
        validate_cases(df)
