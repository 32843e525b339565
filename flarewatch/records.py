"""
Check-in records and analysis results.

Input records mirror one day of self-reported tracking. A severity or
lifestyle value of 0 in raw data means "not recorded"; it is normalised to
None at parse time so that no downstream average can count it as a
minimum reading.

Result records (FactorAnalysis, ConditionInsight) are immutable and carry
`to_dict()` for JSON / API output.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple, Union

LIFESTYLE_KEYS = ("stress", "sleep", "diet", "water")


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def _pick(data: dict, snake: str, camel: str, default=None):
    """Read a key in snake_case, falling back to the camelCase wire name."""
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _unset_if_zero(value) -> Optional[float]:
    """0 / missing → None. Any other value is kept as given, never truncated."""
    if value is None or value == 0:
        return None
    return value


def parse_date(value: Union[str, date, datetime]) -> date:
    """Accept ISO date/datetime strings or date objects; return a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid check-in date: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError(f"Invalid check-in date: {value!r}") from None


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConditionEntry:
    """One condition's rating on one day. `severity` is None when unrated."""

    condition_id: str
    severity: Optional[float] = None
    symptoms: frozenset = frozenset()

    @property
    def is_rated(self) -> bool:
        return self.severity is not None

    @classmethod
    def from_dict(cls, data: dict) -> "ConditionEntry":
        condition_id = _pick(data, "condition_id", "conditionId")
        if not condition_id:
            raise ValueError(f"Condition entry without a condition id: {data!r}")
        return cls(
            condition_id=str(condition_id),
            severity=_unset_if_zero(data.get("severity")),
            symptoms=frozenset(data.get("symptoms") or ()),
        )


@dataclass(frozen=True)
class MedicationEntry:
    medication_id: str
    taken: bool = False
    times_taken: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "MedicationEntry":
        return cls(
            medication_id=str(_pick(data, "medication_id", "medicationId", "")),
            taken=bool(data.get("taken", False)),
            times_taken=_pick(data, "times_taken", "timesTaken"),
        )


@dataclass(frozen=True)
class DailyFactors:
    """Lifestyle ratings on a 1-5 scale (None = not recorded) plus a weather label."""

    stress: Optional[float] = None
    sleep: Optional[float] = None
    diet: Optional[float] = None
    water: Optional[float] = None
    weather: Optional[str] = None

    def value(self, key: str) -> Optional[float]:
        return getattr(self, key)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DailyFactors":
        data = data or {}
        return cls(
            **{key: _unset_if_zero(data.get(key)) for key in LIFESTYLE_KEYS},
            weather=data.get("weather") or None,
        )


@dataclass(frozen=True)
class CheckIn:
    """One calendar day of tracking for one user."""

    date: date
    condition_entries: Tuple[ConditionEntry, ...] = ()
    medication_entries: Tuple[MedicationEntry, ...] = ()
    factors: DailyFactors = field(default_factory=DailyFactors)

    def entry_for(self, condition_id: str) -> Optional[ConditionEntry]:
        for entry in self.condition_entries:
            if entry.condition_id == condition_id:
                return entry
        return None

    @property
    def any_medication_taken(self) -> bool:
        return any(m.taken for m in self.medication_entries)

    @classmethod
    def from_dict(cls, data: dict) -> "CheckIn":
        return cls(
            date=parse_date(data.get("date")),
            condition_entries=tuple(
                ConditionEntry.from_dict(e)
                for e in _pick(data, "condition_entries", "conditionEntries", None) or ()
            ),
            medication_entries=tuple(
                MedicationEntry.from_dict(m)
                for m in _pick(data, "medication_entries", "medicationEntries", None) or ()
            ),
            factors=DailyFactors.from_dict(data.get("factors")),
        )


@dataclass(frozen=True)
class Condition:
    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "Condition":
        return cls(id=str(data["id"]), name=str(data.get("name", data["id"])))


@dataclass(frozen=True)
class Medication:
    id: str
    name: str
    frequency: str = ""
    active: bool = True
    max_usage_days: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Medication":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            frequency=str(data.get("frequency") or ""),
            active=bool(data.get("active", True)),
            max_usage_days=_pick(data, "max_usage_days", "maxUsageDays"),
        )


# ---------------------------------------------------------------------------
# Analysis results
# ---------------------------------------------------------------------------

class FactorType(str, Enum):
    LIFESTYLE = "lifestyle"
    ENVIRONMENTAL = "environmental"
    MEDICATION = "medication"


@dataclass(frozen=True)
class FactorAnalysis:
    """
    Association between one factor and one condition's severity.

    `inverted` marks factors whose correlation is reported with the sign
    flipped (medication adherence: positive means "taking it lowers
    severity"). `effect` undoes the flip so positive always means worse.
    """

    factor: str
    type: FactorType
    correlation: float
    confidence: float
    occurrences: int
    average_severity_with_factor: float
    average_severity_without_factor: float
    description: str
    recommendation: Optional[str] = None
    inverted: bool = False

    @property
    def effect(self) -> float:
        return -self.correlation if self.inverted else self.correlation

    def to_dict(self) -> Dict:
        return {
            "factor": self.factor,
            "type": self.type.value,
            "correlation": round(self.correlation, 4),
            "confidence": round(self.confidence, 4),
            "occurrences": self.occurrences,
            "average_severity_with_factor": round(self.average_severity_with_factor, 3),
            "average_severity_without_factor": round(self.average_severity_without_factor, 3),
            "description": self.description,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ConditionInsight:
    condition_id: str
    condition_name: str
    triggers: Tuple[FactorAnalysis, ...] = ()
    protective_factors: Tuple[FactorAnalysis, ...] = ()
    sample_size: int = 0
    analysis_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_findings(self) -> bool:
        return bool(self.triggers or self.protective_factors)

    def to_dict(self) -> Dict:
        return {
            "condition_id": self.condition_id,
            "condition_name": self.condition_name,
            "triggers": [t.to_dict() for t in self.triggers],
            "protective_factors": [p.to_dict() for p in self.protective_factors],
            "sample_size": self.sample_size,
            "analysis_date": self.analysis_date.isoformat(),
        }
