from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
import pytest

from core.data import NUMERIC_FIELDS, parse_row, records_to_frame


def make_row(
    country: str,
    year: object,
    gdp: object = "",
    life: object = "",
    population: object = "",
    score: object = "",
    region: Optional[str] = "Europe",
) -> Dict[str, str]:
    row = {field: "" for field in NUMERIC_FIELDS}
    row.update(
        {
            "Country": country,
            "Year": str(year),
            "log_GDP_Per_Capita": str(gdp),
            "Life_Expectancy": str(life),
            "Total_Population": str(population),
            "Aggregate_Score": str(score),
        }
    )
    if region is not None:
        row["Region"] = region
    return row


def build_dataset(rows: List[Dict[str, str]]) -> pd.DataFrame:
    return records_to_frame([parse_row(r) for r in rows])


@pytest.fixture
def rows_2021() -> List[Dict[str, str]]:
    # five countries in 2021, Chad has no GDP value
    return [
        make_row("Norway", 2021, 11.2, 83.2, 5_400_000, 0.91, "Europe"),
        make_row("India", 2021, 7.8, 67.2, 1_400_000_000, 0.42, "Asia"),
        make_row("Chad", 2021, "", 52.5, 17_000_000, 0.12, "Africa"),
        make_row("Brazil", 2021, 8.9, 72.8, 214_000_000, "", "Americas"),
        make_row("Japan", 2021, 10.6, 84.5, 125_000_000, 0.88, "Asia"),
    ]


@pytest.fixture
def dataset(rows_2021) -> pd.DataFrame:
    older = [
        make_row("Norway", 2020, 11.1, 83.0, 5_380_000, 0.90, "Europe"),
        make_row("India", 2020, 7.7, 69.9, 1_390_000_000, 0.40, "Asia"),
        make_row("Japan", 2020, 10.5, 84.6, 125_800_000, 0.87, "Asia"),
    ]
    return build_dataset(older + rows_2021)
