from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

import numpy as np
import pandas as pd
import requests

from covid_chart.config import DATA_URL
from covid_chart.logging_setup import get_logger, log_timing

log = get_logger("DataLoader")

COLUMNS = ["date", "new_cases", "new_deaths"]

# Upper/lower bounds of a numeric YYYYMMDD value.
_MIN_RAW_DATE = 10000101
_MAX_RAW_DATE = 99991231


class DataUnavailableError(Exception):
    """The remote series could not be fetched or parsed."""


@dataclass(frozen=True)
class Record:
    date: date
    new_cases: int
    new_deaths: int


def fetch_raw_records(url: str = DATA_URL, timeout: float | None = None) -> list[Any]:
    """GET the daily series and return the decoded JSON array."""
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        payload = r.json()
    except (requests.RequestException, ValueError) as exc:
        raise DataUnavailableError(f"Failed to fetch {url}: {exc}") from exc

    if not isinstance(payload, list):
        raise DataUnavailableError(f"Expected a JSON array from {url}, got {type(payload).__name__}")
    return payload


def _parse_dates(values: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    whole = numeric.where((numeric % 1 == 0) & numeric.between(_MIN_RAW_DATE, _MAX_RAW_DATE))
    return pd.to_datetime(whole.astype("Int64").astype("string"), format="%Y%m%d", errors="coerce")


def _parse_counts(values: pd.Series) -> pd.Series:
    # missing counts are zero; anything else that is not a finite number becomes NaN
    values = values.mask(values.isna() | values.eq(""), 0)
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    return numeric.where(np.isfinite(numeric))


def normalize_records(raw: Iterable[Any], days_to_show: int) -> pd.DataFrame:
    """Turns raw API rows into the displayed dataset.

    Rows whose ``date`` is not a valid YYYYMMDD number, or whose
    ``positiveIncrease`` is not numeric, are dropped. The result is sorted by
    date and holds at most ``days_to_show`` of the most recent rows.
    """
    if days_to_show < 1:
        raise ValueError(f"days_to_show must be positive, got {days_to_show}")

    rows = [row for row in raw if isinstance(row, dict)]
    frame = pd.DataFrame(rows).reindex(columns=["date", "positiveIncrease", "deathIncrease"])

    dates = _parse_dates(frame["date"])
    cases = _parse_counts(frame["positiveIncrease"])
    deaths = _parse_counts(frame["deathIncrease"]).fillna(0)

    valid = dates.notna() & cases.notna()
    dropped = int((~valid).sum())
    if dropped:
        log.debug(f"[normalize_records] - dropped_rows - count={dropped} total={len(frame)}")

    dataset = pd.DataFrame(
        {
            "date": dates[valid],
            "new_cases": cases[valid].round().astype("int64"),
            "new_deaths": deaths[valid].round().astype("int64"),
        },
        columns=COLUMNS,
    )
    return dataset.sort_values("date", kind="mergesort").tail(days_to_show).reset_index(drop=True)


def load_dataset(days_to_show: int, url: str = DATA_URL, timeout: float | None = None) -> pd.DataFrame:
    with log_timing("load_dataset", url=url, days_to_show=days_to_show):
        raw = fetch_raw_records(url, timeout=timeout)
        dataset = normalize_records(raw, days_to_show)
    log.info(f"[load_dataset] - loaded - raw_rows={len(raw)} rows={len(dataset)} days_to_show={days_to_show}")
    return dataset


def to_records(dataset: pd.DataFrame) -> list[Record]:
    return [
        Record(date=row.date.date(), new_cases=int(row.new_cases), new_deaths=int(row.new_deaths))
        for row in dataset.itertuples(index=False)
    ]
