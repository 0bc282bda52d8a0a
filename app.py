import pandas as pd
from shiny import reactive, render
from shiny.express import input, ui
from shinywidgets import render_plotly

# Import organized modules
from covid_vignette.config import (
    DEFAULT_MIN_CONFIRMED,
    DEFAULT_PROVINCE_COUNTRY,
    DEFAULT_TOP_N,
    TOP_N_RANGE,
)
from covid_vignette import pipeline, plotting, tables
from covid_vignette.data_manager import load_cases

# ======================================================
#  REACTIVE STATE
# ======================================================
# Load once on startup; values stay in-memory until app restart.
cases_store = reactive.Value(load_cases())

_initial = cases_store.get()
DATE_MIN = _initial["date"].min().date()
DATE_MAX = _initial["date"].max().date()
COUNTRY_CHOICES = sorted(_initial["country"].unique())
DEFAULT_COUNTRY = (
    DEFAULT_PROVINCE_COUNTRY
    if DEFAULT_PROVINCE_COUNTRY in COUNTRY_CHOICES
    else COUNTRY_CHOICES[0]
)


@reactive.calc
def filtered_cases():
    df = cases_store.get()
    start, end = input.date_range()
    return pipeline.filter_dates(df, start, end)


@reactive.calc
def type_totals():
    return pipeline.compute_type_totals(filtered_cases())


@reactive.calc
def top_countries():
    return pipeline.compute_top_countries(filtered_cases(), int(input.top_n()))


@reactive.calc
def country_rates():
    min_confirmed = input.min_confirmed()
    if min_confirmed is None:
        min_confirmed = DEFAULT_MIN_CONFIRMED
    return pipeline.compute_country_rates(filtered_cases(), int(min_confirmed))


@reactive.calc
def province_breakdown():
    return pipeline.compute_province_breakdown(filtered_cases(), input.country())


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title="Coronavirus Case Counts",
    fillable=False,
    fillable_mobile=True,
    full_width=True,
    id="page",
    lang="en",
)

with ui.sidebar(open="always", position="right"):
    ui.input_date_range(
        "date_range",
        "Date range",
        start=DATE_MIN,
        end=DATE_MAX,
        min=DATE_MIN,
        max=DATE_MAX,
    )
    ui.input_slider(
        "top_n",
        "Number of top countries",
        min=TOP_N_RANGE[0],
        max=TOP_N_RANGE[1],
        value=DEFAULT_TOP_N,
        step=1,
    )
    ui.input_numeric(
        "min_confirmed",
        "Minimum confirmed cases for death rates",
        value=DEFAULT_MIN_CONFIRMED,
        min=0,
        step=5,
    )
    ui.input_select(
        "country",
        "Province breakdown country",
        COUNTRY_CHOICES,
        selected=DEFAULT_COUNTRY,
    )
    ui.input_action_button(
        "reset_filters",
        "Reset filters",
        class_="btn-primary mt-3",
    )


@reactive.effect
@reactive.event(input.reset_filters)
def _reset_filters():
    ui.update_date_range("date_range", start=DATE_MIN, end=DATE_MAX)
    ui.update_slider("top_n", value=DEFAULT_TOP_N)
    ui.update_numeric("min_confirmed", value=DEFAULT_MIN_CONFIRMED)
    ui.update_select("country", selected=DEFAULT_COUNTRY)


with ui.navset_tab(id="main_tabs"):
    with ui.nav_panel("Overview"):

        @render.text
        def summary_text():
            summary = pipeline.summarize_totals(type_totals())
            if pd.isna(summary["death_rate_percent"]):
                return "No confirmed cases in the selected date range."
            return (
                f"{summary['confirmed']:,} confirmed cases, "
                f"{summary['active']:,} active. "
                f"Death rate {summary['death_rate_percent']}%, "
                f"recovery rate {summary['recovery_rate_percent']}%."
            )

        @render_plotly
        def type_totals_plot():
            return plotting.create_type_totals_figure(type_totals())

        @render_plotly
        def time_series_plot():
            series = pipeline.compute_time_series(filtered_cases())
            return plotting.create_time_series_figure(series)

    with ui.nav_panel("Top Countries"):

        @render_plotly
        def top_countries_plot():
            return plotting.create_top_countries_treemap(top_countries())

        @render.data_frame
        def top_countries_grid():
            return render.DataGrid(tables.top_countries_table(top_countries()))

    with ui.nav_panel("Death Rates"):

        @render_plotly
        def country_rates_plot():
            return plotting.create_country_rates_figure(country_rates())

        @render.data_frame
        def country_rates_grid():
            return render.DataGrid(
                tables.country_rates_table(country_rates()), filters=True
            )

    with ui.nav_panel("Provinces"):

        @render_plotly
        def province_plot():
            return plotting.create_province_figure(province_breakdown(), input.country())

        @render.data_frame
        def province_grid():
            return render.DataGrid(tables.province_table(province_breakdown()))
