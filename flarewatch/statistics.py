"""
Correlation and confidence primitives.

Small-sample descriptive statistics only: a normalised difference of group
means, and a heuristic confidence built from group size, group balance and
data coverage. Neither is a formal test; both are bounded.
"""

import numpy as np

from flarewatch.config import FlarewatchConfig


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------

def compute_correlation(avg_with: float, avg_without: float, cfg: FlarewatchConfig) -> float:
    """
    Directional correlation ∈ [-1, 1].

        correlation = clamp((avg_with - avg_without) / 2.5, -1, 1)

    Positive → factor present on worse days (candidate trigger).
    Negative → factor present on better days (candidate protective factor).
    """
    c = cfg.correlation
    raw = (avg_with - avg_without) / c.scale_half_span
    return float(np.clip(raw, c.floor, c.ceiling))


# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------

def compute_confidence(
    n_with: int,
    n_without: int,
    total: int,
    cfg: FlarewatchConfig,
) -> float:
    """
    Confidence ∈ [0, 1] for a binary partition.

    Components:
        1. min group size / saturation (is each side big enough?)
        2. balance = min / max (1.0 for equal groups)
        3. coverage = (n_with + n_without) / total (how much history had data)
    """
    smallest = min(n_with, n_without)
    largest = max(n_with, n_without)
    if smallest <= 0 or total <= 0:
        return 0.0

    balance = smallest / largest
    coverage = (n_with + n_without) / total
    raw = (smallest / cfg.confidence.group_size_saturation) * balance * coverage
    return float(np.clip(raw, 0.0, 1.0))


def compute_weather_confidence(count: int, cfg: FlarewatchConfig) -> float:
    """Weather categories: min(count / 5, 1) * 0.8."""
    p = cfg.confidence
    return min(count / p.weather_saturation, 1.0) * p.weather_cap


def confidence_label(confidence: float, cfg: FlarewatchConfig) -> str:
    """Map a confidence score to "High", "Medium" or "Low"."""
    t = cfg.tiers
    if confidence >= t.high:
        return "High"
    if confidence >= t.medium:
        return "Medium"
    return "Low"
