"""covid_vignette package initializer.

This package contains the modules behind the COVID-19 case-count vignette
and its Shiny dashboard.  Modules include dataset loading, schema
validation, the aggregation pipeline, plotting helpers and display
tables.  See individual module docstrings for details.
"""
