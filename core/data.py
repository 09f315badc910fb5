from __future__ import annotations

import asyncio
import logging
import math
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DATA_FILE = "global_health_with_index.csv"
DATA_PATH_ENV = "HEALTH_DATA_PATH"

NUMERIC_FIELDS = [
    "Fertility_Rate", "Urban_Population_Percent", "Total_Population",
    "Water_Access_Percent", "Unemployment_Rate", "Sanitary_Expense_Per_GDP",
    "Life_Expectancy", "Life_Expectancy_Female", "Life_Expectancy_Male",
    "Infant_Deaths", "GDP_Per_Capita", "Hospital_Beds_Per_1000",
    "Female_Population", "Male_Population", "Alcohol_Consumption_Per_Capita",
    "Immunization_Rate", "Sanitary_Expense_Per_Capita", "CO2_Exposure_Percent",
    "Air_Pollution", "Labour_Force_Total", "Tuberculosis_Per_100000",
    "Suicide_Rate_Percent", "Obesity_Rate_Percent", "Underweight_Rate_Percent",
    "Overweight_Rate_Percent", "Safe_Water_Access_Percent", "log_GDP_Per_Capita",
    "Life_Expectancy_Score", "log_GDP_Per_Capita_Score",
    "Safe_Water_Access_Percent_Score", "Unemployment_Rate_Score",
    "Immunization_Rate_Score", "Aggregate_Score",
]

NUMERIC_COLUMNS = {name: name.lower() for name in NUMERIC_FIELDS}

REGION_COLUMNS = ["Region", "Continent"]
REQUIRED_COLUMNS = ["Country", "Year"]

_YEAR_RE = re.compile(r"^\s*(\d{4})\s*$")


class RowParseError(ValueError):
    """A raw row cannot become a record (currently: unparsable year)."""


class DataLoadError(RuntimeError):
    """The data file cannot be read or does not look like the health dataset."""


def get_data_path() -> Path:
    env = os.getenv(DATA_PATH_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return DATA_DIR / DATA_FILE


def numericize(series: pd.Series) -> pd.Series:
    """Coerce a column of raw cells to float64; unparsable or infinite cells become NaN."""
    cleaned = series.astype(object).map(lambda v: v.strip() if isinstance(v, str) else v)
    out = pd.to_numeric(cleaned, errors="coerce").astype("float64")
    return out.replace([np.inf, -np.inf], np.nan)


def parse_number(value: object) -> float:
    """Coerce a raw cell to float; anything missing or unparsable becomes NaN."""
    return float(numericize(pd.Series([value], dtype=object)).iloc[0])


def parse_year(value: object) -> int:
    match = _YEAR_RE.match("" if value is None else str(value))
    if not match:
        raise RowParseError(f"invalid year {value!r}")
    return int(match.group(1))


def _clean_str(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def parse_row(row: Mapping[str, object]) -> Dict[str, object]:
    """Turn one raw CSV row (column name -> string) into a typed record.

    Numeric fields are coerced with :func:`parse_number`, ``Country`` and the
    region column are trimmed, and ``Year`` must be a 4-digit year. Columns not
    covered by those rules are kept as trimmed strings under lower-cased names.
    """
    record: Dict[str, object] = {}
    for col, raw in row.items():
        if col in NUMERIC_COLUMNS or col in REQUIRED_COLUMNS or col in REGION_COLUMNS:
            continue
        record[str(col).lower()] = _clean_str(raw)

    record["country"] = _clean_str(row.get("Country"))
    region = ""
    for col in REGION_COLUMNS:
        if col in row:
            region = _clean_str(row.get(col))
            break
    record["region"] = region
    record["year"] = parse_year(row.get("Year"))

    for src, key in NUMERIC_COLUMNS.items():
        record[key] = parse_number(row.get(src))
    return record


def records_to_frame(records: List[Dict[str, object]]) -> pd.DataFrame:
    base = ["country", "region", "year"] + list(NUMERIC_COLUMNS.values())
    df = pd.DataFrame.from_records(records)
    if df.empty:
        df = pd.DataFrame(columns=base)
    extra = [c for c in df.columns if c not in base]
    df = df[base + extra].copy()
    df["year"] = df["year"].astype("int64")
    for col in NUMERIC_COLUMNS.values():
        df[col] = df[col].astype("float64")
    return df.reset_index(drop=True)


def frame_from_raw(raw: pd.DataFrame, years: pd.Series) -> pd.DataFrame:
    """Column-wise counterpart of :func:`parse_row` for rows whose year already parsed."""
    df = pd.DataFrame(index=raw.index)
    df["country"] = raw["Country"].astype(str).str.strip()
    region_col = next((c for c in REGION_COLUMNS if c in raw.columns), None)
    df["region"] = raw[region_col].astype(str).str.strip() if region_col else ""
    df["year"] = years.astype("int64")
    for src, key in NUMERIC_COLUMNS.items():
        df[key] = numericize(raw[src]) if src in raw.columns else np.nan
    for col in raw.columns:
        if col in NUMERIC_COLUMNS or col in REQUIRED_COLUMNS or col in REGION_COLUMNS:
            continue
        df[str(col).lower()] = raw[col].astype(str).str.strip()
    return df.reset_index(drop=True)


def load_dataset(path: Path | str) -> pd.DataFrame:
    """Read the health CSV at ``path`` into the immutable dataset frame.

    Rows whose year does not parse are dropped and counted in a warning.
    Raises :class:`DataLoadError` when the file is missing, unreadable, or
    lacks the ``Country``/``Year`` columns.
    """
    path = Path(path)
    if not path.is_file():
        raise DataLoadError(f"data file not found: {path}")
    try:
        raw = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataLoadError(f"could not parse {path}: {exc}") from exc

    raw.columns = [str(c).strip() for c in raw.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise DataLoadError(f"{path.name} is missing required columns: {', '.join(missing)}")

    raw = raw.fillna("")
    years = raw["Year"].astype(str).str.extract(_YEAR_RE.pattern, expand=False)
    dropped = int(years.isna().sum())
    if dropped:
        logger.warning("Dropped %d row(s) with an unparsable Year from %s", dropped, path.name)

    df = frame_from_raw(raw[years.notna()], years[years.notna()])
    logger.info("Loaded %d records (%d years) from %s", len(df), df["year"].nunique(), path)
    return df


async def load_dataset_async(path: Path | str) -> pd.DataFrame:
    return await asyncio.to_thread(load_dataset, path)


def available_years(df: pd.DataFrame) -> List[int]:
    if df.empty or "year" not in df.columns:
        return []
    return sorted(int(y) for y in df["year"].dropna().unique())


def available_regions(df: pd.DataFrame) -> List[str]:
    if df.empty or "region" not in df.columns:
        return []
    return sorted(str(r) for r in df["region"].unique() if str(r))


def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path), path.stat().st_mtime)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(signature: Tuple[str, float]) -> Dict[str, object]:
    path = Path(signature[0])
    dataset = load_dataset(path)
    return {
        "path": str(path),
        "dataset": dataset,
        "years": available_years(dataset),
        "regions": available_regions(dataset),
    }


def load_dashboard_data(path: Optional[Path | str] = None) -> Dict[str, object]:
    path = Path(path) if path is not None else get_data_path()
    if not path.is_file():
        raise DataLoadError(f"data file not found: {path}")
    return _load_dashboard_data_cached(file_signature(path))
