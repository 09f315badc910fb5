import pytest

from core.filters import ALL_REGIONS, Selection, filter_records
from core.metrics_summary import compute_summary, format_summary, tooltip_content


def test_summary_over_filtered_set(dataset):
    filtered = filter_records(dataset, 2021)
    summary = compute_summary(filtered, Selection(2021, ALL_REGIONS))

    assert summary["available"] is True
    assert summary["region_label"] == "Global"
    assert summary["countries"] == 4
    assert summary["total_population"] == pytest.approx(5_400_000 + 1_400_000_000 + 214_000_000 + 125_000_000)
    assert summary["avg_life_expectancy"] == pytest.approx((83.2 + 67.2 + 72.8 + 84.5) / 4)
    assert summary["avg_log_gdp_per_capita"] == pytest.approx((11.2 + 7.8 + 8.9 + 10.6) / 4)
    # Brazil has no score and is skipped
    assert summary["avg_aggregate_score"] == pytest.approx((0.91 + 0.42 + 0.88) / 3)


def test_summary_empty_selection_reports_not_available(dataset):
    summary = compute_summary(filter_records(dataset, 1900), Selection(1900, ALL_REGIONS))
    assert summary["available"] is False
    assert summary["countries"] == 0
    for key in ("total_population", "avg_life_expectancy", "avg_log_gdp_per_capita", "avg_aggregate_score"):
        assert summary[key] is None
    assert format_summary(summary) == {"heading": "Global Statistics (1900)", "message": "No data available"}


def test_summary_without_any_scores(dataset):
    brazil = filter_records(dataset, 2021, "Americas")
    summary = compute_summary(brazil, Selection(2021, "Americas"))
    assert summary["region_label"] == "Americas"
    assert summary["avg_aggregate_score"] is None
    assert format_summary(summary)["Avg Aggregate Score"] == "N/A"


def test_format_summary(dataset):
    asia = filter_records(dataset, 2021, "Asia")
    formatted = format_summary(compute_summary(asia, Selection(2021, "Asia")))
    assert formatted == {
        "heading": "Asia Statistics (2021)",
        "Countries": "2",
        "Total Population": f"{(1_400_000_000 + 125_000_000) / 1e9:.2f} billion",
        "Avg Life Expectancy": f"{(67.2 + 84.5) / 2:.1f} years",
        "Avg GDP (log)": "9.20",
        "Avg Aggregate Score": "0.65",
    }


def test_tooltip_content():
    record = {
        "country": "Japan",
        "log_gdp_per_capita": 10.634,
        "life_expectancy": 84.46,
        "total_population": 125_681_593.0,
        "aggregate_score": 0.8812,
    }
    assert tooltip_content(record) == {
        "country": "Japan",
        "gdp": "10.63",
        "life_expectancy": "84.5 years",
        "population": "125,681,593",
        "aggregate_score": "0.88",
    }


def test_tooltip_content_missing_values():
    tip = tooltip_content({"country": "Chad", "log_gdp_per_capita": float("nan")})
    assert tip["gdp"] == "N/A"
    assert tip["population"] == "N/A"
    assert tip["aggregate_score"] == "N/A"
