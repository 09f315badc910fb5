from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd


ALL_REGIONS = "all"
DEFAULT_YEAR = 2021
DEFAULT_YEAR_ENV = "HEALTH_DEFAULT_YEAR"

logger = logging.getLogger(__name__)

REQUIRED_POSITIVE = ["log_gdp_per_capita", "life_expectancy"]


@dataclass(frozen=True)
class Selection:
    year: int = DEFAULT_YEAR
    region: str = ALL_REGIONS

    @property
    def is_region_filtered(self) -> bool:
        return self.region != ALL_REGIONS


def default_year(available_years: Optional[List[int]] = None) -> int:
    """Starting year: ``HEALTH_DEFAULT_YEAR`` if it names a year in the data,
    else 2021, else the latest available year."""
    years = sorted(available_years or [])
    env_year = _as_int(os.getenv(DEFAULT_YEAR_ENV))
    if env_year is not None:
        if not years or env_year in years:
            return env_year
        logger.warning("Ignoring %s=%s: not in the dataset years", DEFAULT_YEAR_ENV, env_year)
    if not years or DEFAULT_YEAR in years:
        return DEFAULT_YEAR
    return years[-1]


def _as_int(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(str(value).strip())
    except ValueError:
        return None
    if not f.is_integer():
        return None
    return int(f)


def normalize_selection(raw: dict, *, available_years: Optional[List[int]] = None) -> Selection:
    """Coerce raw widget values into a :class:`Selection`.

    A year that is not an integer falls back to :func:`default_year`; a year
    outside the data is kept as-is and simply filters to nothing. A blank or
    missing region means all regions.
    """
    year = _as_int(raw.get("year"))
    if year is None:
        year = default_year(available_years)

    region = str(raw.get("region") or "").strip()
    if not region or region.lower() == ALL_REGIONS:
        region = ALL_REGIONS
    return Selection(year=year, region=region)


def filter_records(dataset: pd.DataFrame, year: int, region: str = ALL_REGIONS) -> pd.DataFrame:
    """Narrow the dataset to one year and, optionally, one region.

    Records missing (NaN) or non-positive log GDP or life expectancy are
    dropped. The result keeps dataset order and may be empty.
    """
    if dataset.empty:
        return dataset.copy()

    filtered = dataset[dataset["year"] == year]
    # NaN compares False, so this also drops missing values
    mask = pd.Series(True, index=filtered.index)
    for col in REQUIRED_POSITIVE:
        mask &= filtered[col] > 0
    filtered = filtered[mask]

    if region != ALL_REGIONS:
        filtered = filtered[filtered["region"] == region]
    return filtered.copy()


def filter_selection(dataset: pd.DataFrame, selection: Selection) -> pd.DataFrame:
    return filter_records(dataset, selection.year, selection.region)
