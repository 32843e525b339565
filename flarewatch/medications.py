"""
Medication usage tracking: per-medication usage stats, usage-limit alerts,
and a recent adherence score.

These read the same check-in history as the trigger analysis but answer
a different question (how a medication is being used, not whether it
helps). All functions are pure.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from flarewatch.config import FlarewatchConfig
from flarewatch.records import CheckIn, Medication


@dataclass(frozen=True)
class MedicationUsageStats:
    medication_id: str
    days_used: int
    consecutive_days: int
    total_doses: int
    last_used: Optional[date]
    usage_pattern: str


@dataclass(frozen=True)
class MedicationAlert:
    medication_id: str
    medication_name: str
    type: str          # "warning" | "exceeded"
    days_used: int
    max_days: int
    message: str
    severity: str      # "medium" | "high"


def _taken_entry(check_in: CheckIn, medication_id: str):
    for entry in check_in.medication_entries:
        if entry.medication_id == medication_id and entry.taken:
            return entry
    return None


def _sorted_by_date(check_ins: Iterable[CheckIn]) -> List[CheckIn]:
    return sorted(check_ins, key=lambda c: c.date)


# ---------------------------------------------------------------------------
# Usage stats
# ---------------------------------------------------------------------------

def count_consecutive_days(days: Sequence[date]) -> int:
    """Length of the run of consecutive calendar days ending at the latest day."""
    if not days:
        return 0
    unique = sorted(set(days), reverse=True)
    streak = 1
    for previous, current in zip(unique, unique[1:]):
        if previous - current != timedelta(days=1):
            break
        streak += 1
    return streak


def compute_medication_usage(
    medication: Medication,
    check_ins: Iterable[CheckIn],
    cfg: FlarewatchConfig,
) -> MedicationUsageStats:
    """
    Days used, dose count, current streak and usage pattern for one medication.

    Pattern:
        as-needed  frequency is "As required", or never taken
        regular    taken on >= 70% of the last 7 check-ins
        sporadic   otherwise
    """
    p = cfg.medication_usage
    history = _sorted_by_date(check_ins)

    used = []
    total_doses = 0
    for check_in in history:
        entry = _taken_entry(check_in, medication.id)
        if entry is None:
            continue
        used.append(check_in.date)
        total_doses += entry.times_taken or 1

    if not used:
        return MedicationUsageStats(medication.id, 0, 0, 0, None, "as-needed")

    pattern = "as-needed"
    if medication.frequency != p.as_needed_frequency:
        recent = history[-p.recent_days:]
        recent_usage = sum(1 for c in recent if _taken_entry(c, medication.id) is not None)
        pattern = "regular" if recent_usage >= p.recent_days * p.regular_fraction else "sporadic"

    return MedicationUsageStats(
        medication_id=medication.id,
        days_used=len(used),
        consecutive_days=count_consecutive_days(used),
        total_doses=total_doses,
        last_used=used[-1],
        usage_pattern=pattern,
    )


# ---------------------------------------------------------------------------
# Usage-limit alerts
# ---------------------------------------------------------------------------

def compute_medication_alerts(
    medications: Iterable[Medication],
    check_ins: Sequence[CheckIn],
    cfg: FlarewatchConfig,
) -> List[MedicationAlert]:
    """
    Alerts for active medications with a maximum number of usage days.

        exceeded (high)   days used >= max
        warning  (medium) days used >= floor(max * 0.8)

    High-severity alerts come first.
    """
    p = cfg.medication_usage
    alerts: List[MedicationAlert] = []

    for medication in medications:
        if not medication.active or not medication.max_usage_days:
            continue

        days_used = compute_medication_usage(medication, check_ins, cfg).days_used
        max_days = medication.max_usage_days

        if days_used >= max_days:
            alerts.append(MedicationAlert(
                medication_id=medication.id,
                medication_name=medication.name,
                type="exceeded",
                days_used=days_used,
                max_days=max_days,
                message=(
                    f"You have used {medication.name} for {days_used} days, which exceeds "
                    f"the recommended maximum of {max_days} days. "
                    "Please consult your healthcare provider."
                ),
                severity="high",
            ))
        elif days_used >= math.floor(max_days * p.warning_fraction):
            remaining = max_days - days_used
            alerts.append(MedicationAlert(
                medication_id=medication.id,
                medication_name=medication.name,
                type="warning",
                days_used=days_used,
                max_days=max_days,
                message=(
                    f"You have {remaining} days remaining for {medication.name}. "
                    "Consider consulting your healthcare provider about continuing treatment."
                ),
                severity="medium",
            ))

    alerts.sort(key=lambda a: 0 if a.severity == "high" else 1)
    return alerts


# ---------------------------------------------------------------------------
# Adherence score
# ---------------------------------------------------------------------------

def is_scheduled(medication: Medication, cfg: FlarewatchConfig) -> bool:
    """Active medications taken on a schedule count toward adherence."""
    return medication.active and medication.frequency != cfg.medication_usage.as_needed_frequency


def compute_adherence_score(
    medications: Iterable[Medication],
    check_ins: Sequence[CheckIn],
    cfg: FlarewatchConfig,
    days: Optional[int] = None,
    reference_date: Optional[date] = None,
) -> int:
    """
    Percentage of (scheduled medication, check-in) pairs marked taken within
    the last `days` days, rounded to an integer.

    `reference_date` defaults to the most recent check-in so the score
    depends only on the data. Returns 100 when nothing is scheduled or no
    check-in falls inside the window.
    """
    scheduled = [m for m in medications if is_scheduled(m, cfg)]
    if not scheduled or not check_ins:
        return 100

    if days is None:
        days = cfg.medication_usage.adherence_window_days
    if reference_date is None:
        reference_date = max(c.date for c in check_ins)
    # `days` calendar days ending on reference_date, inclusive
    cutoff = reference_date - timedelta(days=days - 1)

    recent = [c for c in check_ins if cutoff <= c.date <= reference_date]
    if not recent:
        return 100

    expected = len(scheduled) * len(recent)
    taken = sum(
        1
        for medication in scheduled
        for check_in in recent
        if _taken_entry(check_in, medication.id) is not None
    )
    # Half-up, so 62.5% reports as 63
    return int(math.floor(taken / expected * 100 + 0.5))
