"""
Per-condition observation frame.

Flattens check-in records into one DataFrame row per day that references a
condition. Unrated severities and unset lifestyle values become NaN, so
pandas aggregations skip them instead of averaging in a zero.
"""

from typing import Iterable

import numpy as np
import pandas as pd

from flarewatch.records import LIFESTYLE_KEYS, CheckIn


FRAME_COLUMNS = (
    "date", "severity", *LIFESTYLE_KEYS, "weather", "medication_taken",
)


def _as_float(value) -> float:
    return np.nan if value is None else float(value)


def build_condition_frame(check_ins: Iterable[CheckIn], condition_id: str) -> pd.DataFrame:
    """
    One row per check-in holding any entry (rated or not) for `condition_id`.

    Columns:
        date              calendar day
        severity          float, NaN when unrated
        stress/sleep/...  float, NaN when not recorded
        weather           str or None
        medication_taken  True if any medication was marked taken that day
    """
    rows = []
    for check_in in check_ins:
        entry = check_in.entry_for(condition_id)
        if entry is None:
            continue
        factors = check_in.factors
        row = {
            "date": pd.Timestamp(check_in.date),
            "severity": _as_float(entry.severity),
            "weather": factors.weather,
            "medication_taken": check_in.any_medication_taken,
        }
        for key in LIFESTYLE_KEYS:
            row[key] = _as_float(factors.value(key))
        rows.append(row)

    df = pd.DataFrame(rows, columns=list(FRAME_COLUMNS))
    df["medication_taken"] = df["medication_taken"].astype(bool)
    df.sort_values("date", inplace=True, kind="stable")
    df.reset_index(drop=True, inplace=True)
    return df


def rated(df: pd.DataFrame) -> pd.DataFrame:
    """Rows whose severity was actually rated."""
    return df[df["severity"].notna()]
