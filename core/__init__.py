"""Core (UI-agnostic) dashboard logic.

This package contains:
- data loading (CSV -> pandas, one typed record per country-year)
- selection normalization and the year/region filter pipeline
- scale building (position, radius, colour) and render order
- the view controller state machine (selection, pan/zoom, render requests)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
