import pandas as pd
import plotly.graph_objects as go

from .config import CASE_TYPE_COLORS


# ============================================================
# Configuration / constants
# ============================================================

ROOT_LABEL = "Global"

HOVER_TEMPLATE_SERIES = "Date: %{x|%b %d, %Y}<br>Cases: %{y:,}<extra>%{fullData.name}</extra>"

HOVER_TEMPLATE_RATE = (
    "Country: %{text}<br>"
    "Confirmed: %{x:,}<br>"
    "Death Rate: %{y:.2%}<extra></extra>"
)

LAYOUT_DEFAULTS = dict(
    margin=dict(t=80, l=50, r=50, b=40),
    plot_bgcolor="#f5f7fb",
    legend=dict(
        orientation="h",
        x=0.5,
        y=1.02,
        xanchor="center",
        yanchor="bottom",
        bordercolor="#c7c7c7",
        borderwidth=1,
        bgcolor="#f9f9f9",
    ),
)


# ============================================================
# Helper functions
# ============================================================


def build_hierarchy(top_countries: pd.DataFrame, root: str = ROOT_LABEL) -> pd.DataFrame:
    """
    Turn a top-countries table into (label, value, parent) triples.

    Every country hangs off a single root node whose value is the sum
    of its children, so the treemap can use ``branchvalues="total"``.
    """
    countries = pd.DataFrame(
        {
            "label": top_countries["country"].astype(str),
            "value": top_countries["total_confirmed"],
            "parent": root,
        }
    )
    root_row = pd.DataFrame(
        {"label": [root], "value": [int(countries["value"].sum())], "parent": [""]}
    )
    return pd.concat([root_row, countries], ignore_index=True)


# ============================================================
# Figures
# ============================================================


def create_type_totals_figure(type_totals: pd.DataFrame) -> go.Figure:
    """Bar chart of total cases per case type."""
    if type_totals.empty:
        return go.Figure()

    colors = [CASE_TYPE_COLORS.get(t) for t in type_totals["case_type"]]
    fig = go.Figure(
        go.Bar(
            x=type_totals["case_type"].str.title(),
            y=type_totals["total_cases"],
            marker_color=colors,
            text=type_totals["total_cases"].map("{:,}".format),
            textposition="outside",
            hovertemplate="%{x}: %{y:,}<extra></extra>",
        )
    )
    fig.update_layout(
        title="<b>Total Cases by Type</b>",
        yaxis=dict(title="Cases", tickformat=","),
        **LAYOUT_DEFAULTS,
    )
    return fig


def create_time_series_figure(time_series: pd.DataFrame) -> go.Figure:
    """
    Stacked area chart of cumulative active, recovered and death cases.

    Parameters
    ----------
    time_series : pd.DataFrame
        Output of :func:`covid_vignette.pipeline.compute_time_series`.

    Returns
    -------
    go.Figure
        One stacked trace per series, in the order active, recovered,
        death.
    """
    if time_series.empty:
        return go.Figure()

    fig = go.Figure()
    for name, col in (
        ("Active", "active_cumulative"),
        ("Recovered", "recovered_cumulative"),
        ("Death", "death_cumulative"),
    ):
        color = CASE_TYPE_COLORS[name.lower()]
        fig.add_trace(
            go.Scatter(
                x=time_series["date"],
                y=time_series[col],
                name=name,
                mode="none",
                stackgroup="one",
                fillcolor=color,
                hovertemplate=HOVER_TEMPLATE_SERIES,
            )
        )

    fig.update_layout(
        title="<b>Distribution of Covid19 Cases Worldwide</b>",
        xaxis=dict(title="Source: Johns Hopkins University Center for Systems Science and Engineering"),
        yaxis=dict(title="Cumulative Number of Cases", tickformat=","),
        hovermode="x unified",
        **LAYOUT_DEFAULTS,
    )
    return fig


def create_top_countries_treemap(top_countries: pd.DataFrame) -> go.Figure:
    """Treemap of confirmed cases for the top countries."""
    if top_countries.empty:
        return go.Figure()

    tree = build_hierarchy(top_countries)
    fig = go.Figure(
        go.Treemap(
            labels=tree["label"],
            values=tree["value"],
            parents=tree["parent"],
            branchvalues="total",
            textinfo="label+value+percent root",
        )
    )
    fig.update_layout(
        title=f"<b>Top {len(top_countries)} Countries by Confirmed Cases</b>",
        margin=dict(t=60, l=10, r=10, b=10),
    )
    return fig


def create_country_rates_figure(country_rates: pd.DataFrame) -> go.Figure:
    """Scatter of confirmed cases against death rate, one marker per country."""
    rates = country_rates.dropna(subset=["death_rate"])
    if rates.empty:
        return go.Figure()

    fig = go.Figure(
        go.Scatter(
            x=rates["total_confirmed"],
            y=rates["death_rate"],
            text=rates["country"],
            mode="markers",
            marker=dict(size=10, color=CASE_TYPE_COLORS["death"], opacity=0.7),
            hovertemplate=HOVER_TEMPLATE_RATE,
        )
    )
    fig.update_layout(
        title="<b>Death Rate by Country</b>",
        xaxis=dict(title="Confirmed Cases", type="log"),
        yaxis=dict(title="Death Rate", tickformat=".1%", rangemode="tozero"),
        **LAYOUT_DEFAULTS,
    )
    return fig


def create_province_figure(breakdown: pd.DataFrame, country: str) -> go.Figure:
    """Horizontal bar chart of confirmed cases per province, largest on top."""
    if breakdown.empty:
        return go.Figure()

    # Plotly draws the first category at the bottom
    ordered = breakdown.iloc[::-1]
    labels = ordered["province"].replace("", country)
    fig = go.Figure(
        go.Bar(
            x=ordered["total_confirmed"],
            y=labels,
            orientation="h",
            marker_color=CASE_TYPE_COLORS["confirmed"],
            hovertemplate="%{y}: %{x:,}<extra></extra>",
        )
    )
    fig.update_layout(
        title=f"<b>Confirmed Cases by Province: {country}</b>",
        xaxis=dict(title="Confirmed Cases", tickformat=","),
        height=max(400, 25 * len(breakdown)),
        **LAYOUT_DEFAULTS,
    )
    return fig
