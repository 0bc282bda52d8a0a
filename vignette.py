"""
Introduction to the coronavirus case-count dataset.

Walks through the daily case table: global totals and rates, the
cumulative distribution of cases over time, the countries with the most
confirmed cases, death rates by country and the provincial breakdown of
one country.  Figures open in the browser unless ``--no-show`` is given.
"""

import argparse
import logging

from covid_vignette.config import (
    DEFAULT_MIN_CONFIRMED,
    DEFAULT_PROVINCE_COUNTRY,
    DEFAULT_TOP_N,
)
from covid_vignette.data_manager import load_payload
from covid_vignette import plotting, tables

logger = logging.getLogger("vignette")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Summarise the daily COVID-19 case table and plot each view."
    )
    parser.add_argument(
        "--source",
        default=None,
        help="Path to the case table CSV (default: $COVID_DATA_SOURCE or bundled sample).",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"Number of countries in the top-countries view (default: {DEFAULT_TOP_N}).",
    )
    parser.add_argument(
        "--min-confirmed",
        type=int,
        default=DEFAULT_MIN_CONFIRMED,
        help=(
            "Minimum confirmed cases for a country to get a death rate "
            f"(default: {DEFAULT_MIN_CONFIRMED})."
        ),
    )
    parser.add_argument(
        "--country",
        default=DEFAULT_PROVINCE_COUNTRY,
        help=f"Country for the province breakdown (default: {DEFAULT_PROVINCE_COUNTRY}).",
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Print the summaries without opening the figures.",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()

    payload = load_payload(
        args.source,
        top_n=args.top_n,
        min_confirmed=args.min_confirmed,
        province_country=args.country,
    )
    figures = []

    # ======================================================
    # 1. Global totals
    # ======================================================
    type_totals = payload["type_totals"]
    summary = payload["summary"]

    print("\n--- TOTAL CASES BY TYPE ---")
    print(type_totals.to_string(index=False))
    print(
        f"\nOut of {summary['confirmed']:,} confirmed cases, "
        f"{summary['active']:,} are still active, "
        f"{summary['death_rate_percent']}% have died and "
        f"{summary['recovery_rate_percent']}% have recovered."
    )
    figures.append(plotting.create_type_totals_figure(type_totals))

    # ======================================================
    # 2. Cumulative distribution over time
    # ======================================================
    series = payload["time_series"]
    print("\n--- CUMULATIVE CASES (last 5 dates) ---")
    print(series.tail(5).to_string(index=False))
    figures.append(plotting.create_time_series_figure(series))

    # ======================================================
    # 3. Top countries by confirmed cases
    # ======================================================
    top = payload["top_countries"]
    print(f"\n--- TOP {args.top_n} COUNTRIES BY CONFIRMED CASES ---")
    print(tables.top_countries_table(top).to_string(index=False))
    figures.append(plotting.create_top_countries_treemap(top))

    # ======================================================
    # 4. Death rates by country
    # ======================================================
    rates = payload["country_rates"]
    print(
        f"\n--- DEATH RATES (countries with at least {args.min_confirmed} "
        "confirmed cases) ---"
    )
    print(tables.country_rates_table(rates).to_string(index=False))
    figures.append(plotting.create_country_rates_figure(rates))

    # ======================================================
    # 5. Province breakdown
    # ======================================================
    provinces = payload["province_breakdown"]
    print(f"\n--- CONFIRMED CASES BY PROVINCE: {args.country} ---")
    if provinces.empty:
        logger.warning("No confirmed cases recorded for %s", args.country)
    else:
        print(tables.province_table(provinces).to_string(index=False))
        figures.append(plotting.create_province_figure(provinces, args.country))

    if not args.no_show:
        for fig in figures:
            fig.show()


if __name__ == "__main__":
    main()
