from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import pandas as pd

from core.filters import ALL_REGIONS, Selection


def _metric_value(value: Optional[float]) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _mean(series: pd.Series) -> Optional[float]:
    present = series.dropna()
    if present.empty:
        return None
    return float(present.mean())


def compute_summary(filtered: pd.DataFrame, selection: Selection) -> Dict[str, Any]:
    """Side-panel statistics for the filtered set.

    Means skip missing values and are ``None`` when nothing is left to
    average, so an empty selection never divides by zero.
    """
    region_label = "Global" if selection.region == ALL_REGIONS else selection.region
    if filtered.empty:
        return {
            "region_label": region_label,
            "year": selection.year,
            "available": False,
            "countries": 0,
            "total_population": None,
            "avg_life_expectancy": None,
            "avg_log_gdp_per_capita": None,
            "avg_aggregate_score": None,
        }

    population = filtered["total_population"].dropna()
    return {
        "region_label": region_label,
        "year": selection.year,
        "available": True,
        "countries": int(len(filtered)),
        "total_population": float(population.sum()) if not population.empty else None,
        "avg_life_expectancy": _mean(filtered["life_expectancy"]),
        "avg_log_gdp_per_capita": _mean(filtered["log_gdp_per_capita"]),
        "avg_aggregate_score": _mean(filtered["aggregate_score"]),
    }


def format_summary(summary: Mapping[str, Any]) -> Dict[str, str]:
    """Display strings for the stats panel, ``"N/A"`` where a value is missing."""
    heading = f"{summary['region_label']} Statistics ({summary['year']})"
    if not summary.get("available"):
        return {"heading": heading, "message": "No data available"}

    total_pop = summary.get("total_population")
    life = summary.get("avg_life_expectancy")
    gdp = summary.get("avg_log_gdp_per_capita")
    score = summary.get("avg_aggregate_score")
    return {
        "heading": heading,
        "Countries": f"{summary['countries']}",
        "Total Population": f"{total_pop / 1e9:.2f} billion" if total_pop is not None else "N/A",
        "Avg Life Expectancy": f"{life:.1f} years" if life is not None else "N/A",
        "Avg GDP (log)": f"{gdp:.2f}" if gdp is not None else "N/A",
        "Avg Aggregate Score": f"{score:.2f}" if score is not None else "N/A",
    }


def tooltip_content(record: Mapping[str, Any]) -> Dict[str, str]:
    gdp = _metric_value(record.get("log_gdp_per_capita"))
    life = _metric_value(record.get("life_expectancy"))
    population = _metric_value(record.get("total_population"))
    score = _metric_value(record.get("aggregate_score"))
    return {
        "country": str(record.get("country") or ""),
        "gdp": f"{gdp:.2f}" if gdp is not None else "N/A",
        "life_expectancy": f"{life:.1f} years" if life is not None else "N/A",
        "population": f"{population:,.0f}" if population is not None else "N/A",
        "aggregate_score": f"{score:.2f}" if score is not None else "N/A",
    }
