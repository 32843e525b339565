"""
Centralized configuration for all thresholds, divisors, guards and text tables.

Every tunable constant lives here. The analysis modules never hard-code a
number; they read it from the FlarewatchConfig passed in as `cfg`.
"""

import operator
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CorrelationParams:
    """Normalisation of an average-severity difference into [-1, 1]."""

    # Half the span of the 0-5 severity scale: a 0 vs 5 swing saturates at ±1
    scale_half_span: float = 2.5
    floor: float = -1.0
    ceiling: float = 1.0

    def __post_init__(self):
        if self.scale_half_span <= 0:
            raise ValueError(f"scale_half_span must be positive, got {self.scale_half_span}")
        if self.floor >= self.ceiling:
            raise ValueError(f"floor must be below ceiling, got [{self.floor}, {self.ceiling}]")


# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfidenceParams:
    """
    Parameters for the confidence heuristic [0, 1].

    Binary factors:
        confidence = min(1, (min_group / saturation) * balance * coverage)

    Weather categories (no complementary group, so capped):
        confidence = min(count / weather_saturation, 1) * weather_cap
    """

    group_size_saturation: int = 5
    weather_saturation: int = 5
    weather_cap: float = 0.8

    def __post_init__(self):
        if self.group_size_saturation <= 0 or self.weather_saturation <= 0:
            raise ValueError("Confidence saturation sizes must be positive")
        if not 0.0 < self.weather_cap <= 1.0:
            raise ValueError(f"weather_cap must be in (0, 1], got {self.weather_cap}")


@dataclass(frozen=True)
class ConfidenceTiers:
    """Cut-offs for the human-readable confidence label."""

    high: float = 0.7
    medium: float = 0.5


# ---------------------------------------------------------------------------
# Small-sample guards
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SampleGuards:
    """Minimum counts before any statistic is reported."""

    min_sample_size: int = 5         # check-ins referencing the condition
    min_group_size: int = 2          # each side of a binary partition
    weather_min_population: int = 5  # rated severities before any weather comparison
    weather_min_category: int = 2    # occurrences of a single weather label


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassificationThresholds:
    """Both bounds are strict: an effect of exactly 0.2 is discarded."""

    min_correlation: float = 0.2
    min_confidence: float = 0.3

    def __post_init__(self):
        for name in ("min_correlation", "min_confidence"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


# ---------------------------------------------------------------------------
# Medication usage tracking
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MedicationUsageParams:
    """Thresholds for usage alerts, usage patterns and the adherence score."""

    warning_fraction: float = 0.8       # warn at floor(max_usage_days * fraction)
    recent_days: int = 7                # check-ins inspected for the usage pattern
    regular_fraction: float = 0.7       # share of recent days needed for "regular"
    adherence_window_days: int = 7
    as_needed_frequency: str = "As required"


# ---------------------------------------------------------------------------
# Lifestyle factor rules (declarative)
# ---------------------------------------------------------------------------

COMPARISONS: Dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
}


@dataclass(frozen=True)
class LifestyleRule:
    """A named framing of one lifestyle dimension: `key comparison threshold`."""

    key: str
    label: str
    comparison: str
    threshold: int
    description: str
    recommendation: Optional[str] = None

    def __post_init__(self):
        if self.comparison not in COMPARISONS:
            raise ValueError(
                f"Unknown comparison {self.comparison!r} for {self.label}; "
                f"expected one of {sorted(COMPARISONS)}"
            )

    def matches(self, value):
        """
        Apply `comparison threshold` to a scalar or element-wise to a
        pandas Series (returns a boolean Series in that case).
        """
        return COMPARISONS[self.comparison](value, self.threshold)


DEFAULT_LIFESTYLE_RULES: tuple = (
    LifestyleRule(
        key="stress",
        label="High Stress",
        comparison=">=",
        threshold=4,
        description="Stress levels of 4-5 may worsen symptoms",
        recommendation="Consider stress management techniques like meditation, exercise, or therapy",
    ),
    LifestyleRule(
        key="stress",
        label="Low Stress",
        comparison="<=",
        threshold=2,
        description="Low stress levels (1-2) may help keep symptoms calm",
        recommendation="Keep up the routines that help you stay relaxed",
    ),
    LifestyleRule(
        key="sleep",
        label="Poor Sleep",
        comparison="<=",
        threshold=2,
        description="Poor sleep quality (1-2) may trigger flare-ups",
        recommendation="Aim for 7-9 hours of quality sleep and maintain a consistent sleep schedule",
    ),
    LifestyleRule(
        key="sleep",
        label="Good Sleep",
        comparison=">=",
        threshold=4,
        description="Good sleep quality (4-5) may help reduce symptoms",
        recommendation="Continue maintaining good sleep hygiene practices",
    ),
    LifestyleRule(
        key="water",
        label="Low Water Intake",
        comparison="<=",
        threshold=2,
        description="Insufficient water intake may worsen skin condition",
        recommendation="Aim for 8-10 glasses of water daily to maintain skin hydration",
    ),
    LifestyleRule(
        key="water",
        label="Good Hydration",
        comparison=">=",
        threshold=4,
        description="Good hydration (4-5) may help improve skin condition",
        recommendation="Continue maintaining good hydration levels",
    ),
    LifestyleRule(
        key="diet",
        label="Poor Diet",
        comparison="<=",
        threshold=2,
        description="Poor diet quality may contribute to inflammation",
        recommendation="Consider an anti-inflammatory diet rich in omega-3s, antioxidants, and whole foods",
    ),
    LifestyleRule(
        key="diet",
        label="Healthy Diet",
        comparison=">=",
        threshold=4,
        description="Healthy diet (4-5) may help reduce inflammation",
        recommendation="Continue following an anti-inflammatory diet pattern",
    ),
)


# ---------------------------------------------------------------------------
# Factor text tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FactorText:
    """Description and recommendation shown alongside a factor."""

    description: str
    recommendation: str


DEFAULT_WEATHER_DESCRIPTIONS: Dict[str, FactorText] = {
    "Humid": FactorText(
        "High humidity may worsen symptoms by increasing moisture and bacterial growth",
        "Use a dehumidifier, wear breathable fabrics, and shower after sweating",
    ),
    "Dry": FactorText(
        "Dry conditions may worsen symptoms by reducing skin moisture",
        "Use a humidifier, apply moisturizer frequently, and avoid hot showers",
    ),
    "Hot": FactorText(
        "Hot weather may trigger flare-ups through increased sweating and heat",
        "Stay cool, wear loose clothing, and use cooling products",
    ),
    "Cold": FactorText(
        "Cold weather may worsen symptoms by reducing skin moisture",
        "Protect skin from cold, use rich moisturizers, and avoid sudden temperature changes",
    ),
    "Windy": FactorText(
        "Windy conditions may irritate sensitive skin",
        "Protect exposed skin and use barrier creams when outdoors",
    ),
    "Rainy": FactorText(
        "Rainy weather may affect symptoms through humidity changes",
        "Monitor skin response and adjust skincare routine accordingly",
    ),
}

# Fallback for labels missing from the table; `{weather}` is substituted
WEATHER_FALLBACK = FactorText(
    "{weather} weather conditions may affect your skin",
    "Monitor how this weather affects your skin and adjust care accordingly",
)


# ---------------------------------------------------------------------------
# Medication adherence text
# ---------------------------------------------------------------------------

MEDICATION_ADHERENCE_LABEL = "Medication Adherence"
MEDICATION_ADHERENCE_TEXT = FactorText(
    "Taking prescribed medications as directed",
    "Continue following your medication schedule as prescribed by your healthcare provider",
)


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlarewatchConfig:
    """Complete engine configuration. Pass to the pipeline to override defaults."""

    correlation: CorrelationParams = field(default_factory=CorrelationParams)
    confidence: ConfidenceParams = field(default_factory=ConfidenceParams)
    tiers: ConfidenceTiers = field(default_factory=ConfidenceTiers)
    guards: SampleGuards = field(default_factory=SampleGuards)
    classification: ClassificationThresholds = field(default_factory=ClassificationThresholds)
    medication_usage: MedicationUsageParams = field(default_factory=MedicationUsageParams)
    lifestyle_rules: tuple = DEFAULT_LIFESTYLE_RULES
    # (label, text) pairs
    weather_descriptions: Tuple[Tuple[str, FactorText], ...] = tuple(
        DEFAULT_WEATHER_DESCRIPTIONS.items()
    )
    weather_fallback: FactorText = WEATHER_FALLBACK

    def weather_text(self, weather: str) -> FactorText:
        """Description/recommendation for a weather label, with the generic fallback."""
        for label, text in self.weather_descriptions:
            if label == weather:
                return text
        return FactorText(
            self.weather_fallback.description.format(weather=weather),
            self.weather_fallback.recommendation.format(weather=weather),
        )
