"""Core (UI-agnostic) COVID-19 dashboard logic.

This package contains:
- data loading (ECDC JSON -> validated records)
- per-1000 rate calculation
- aggregation (country totals, daily average/max, global time series)
- filter normalization and the filter/sort/paginate view model
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
