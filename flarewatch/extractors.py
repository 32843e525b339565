"""
Factor extractors: partition a condition's severities by factor and score them.

Each extractor is a pure function over the observation frame of one
condition and returns FactorAnalysis objects (or nothing when the
small-sample guard trips). Omission is not an error; sparse data is the
normal case.

    lifestyle   declarative rule table, binary present/absent partition
    weather     categorical, each label compared with the overall baseline
    medication  any-medication-taken vs none-taken, sign inverted
"""

import logging
from typing import List, Optional

import pandas as pd

from flarewatch.config import (
    FlarewatchConfig,
    LifestyleRule,
    MEDICATION_ADHERENCE_LABEL,
    MEDICATION_ADHERENCE_TEXT,
)
from flarewatch.observations import rated
from flarewatch.records import FactorAnalysis, FactorType
from flarewatch.statistics import (
    compute_confidence,
    compute_correlation,
    compute_weather_confidence,
)

log = logging.getLogger(__name__)


def _has_both_groups(with_factor: pd.Series, without_factor: pd.Series, cfg: FlarewatchConfig) -> bool:
    need = cfg.guards.min_group_size
    return len(with_factor) >= need and len(without_factor) >= need


# ---------------------------------------------------------------------------
# Lifestyle factors
# ---------------------------------------------------------------------------

def split_lifestyle(df: pd.DataFrame, rule: LifestyleRule):
    """
    Severities on days where the rule holds vs. days where it doesn't.

    Days without a rated severity or without a recorded value for
    `rule.key` belong to neither group.
    """
    r = rated(df)
    present = r[r[rule.key].notna()]
    mask = rule.matches(present[rule.key].astype(float)).astype(bool)
    return present.loc[mask, "severity"], present.loc[~mask, "severity"]


def analyze_lifestyle_factor(
    df: pd.DataFrame,
    rule: LifestyleRule,
    cfg: FlarewatchConfig,
) -> Optional[FactorAnalysis]:
    with_factor, without_factor = split_lifestyle(df, rule)

    if not _has_both_groups(with_factor, without_factor, cfg):
        log.debug(
            "Skipping %s: %d with / %d without",
            rule.label, len(with_factor), len(without_factor),
        )
        return None

    avg_with = float(with_factor.mean())
    avg_without = float(without_factor.mean())

    return FactorAnalysis(
        factor=rule.label,
        type=FactorType.LIFESTYLE,
        correlation=compute_correlation(avg_with, avg_without, cfg),
        confidence=compute_confidence(len(with_factor), len(without_factor), len(df), cfg),
        occurrences=len(with_factor),
        average_severity_with_factor=avg_with,
        average_severity_without_factor=avg_without,
        description=rule.description,
        recommendation=rule.recommendation,
    )


def analyze_lifestyle_factors(df: pd.DataFrame, cfg: FlarewatchConfig) -> List[FactorAnalysis]:
    """Run every configured lifestyle rule, in table order."""
    analyses = []
    for rule in cfg.lifestyle_rules:
        analysis = analyze_lifestyle_factor(df, rule, cfg)
        if analysis is not None:
            analyses.append(analysis)
    return analyses


# ---------------------------------------------------------------------------
# Weather
# ---------------------------------------------------------------------------

def analyze_weather_factors(df: pd.DataFrame, cfg: FlarewatchConfig) -> List[FactorAnalysis]:
    """
    Compare each weather label's mean severity with the overall rated mean.

    Weather is categorical, so there is no complementary "without" group:
    the baseline is every rated day. Needs `weather_min_population` rated
    days overall and `weather_min_category` days per label. Labels are
    reported in order of first appearance.
    """
    g = cfg.guards
    r = rated(df)

    if len(r) < g.weather_min_population:
        log.debug("Skipping weather: only %d rated days", len(r))
        return []

    baseline = float(r["severity"].mean())
    labelled = r[r["weather"].notna()]
    stats = labelled.groupby("weather", sort=False)["severity"].agg(["count", "mean"])

    analyses = []
    for weather, row in stats.iterrows():
        count = int(row["count"])
        if count < g.weather_min_category:
            continue

        avg = float(row["mean"])
        text = cfg.weather_text(weather)
        analyses.append(FactorAnalysis(
            factor=f"{weather} Weather",
            type=FactorType.ENVIRONMENTAL,
            correlation=compute_correlation(avg, baseline, cfg),
            confidence=compute_weather_confidence(count, cfg),
            occurrences=count,
            average_severity_with_factor=avg,
            average_severity_without_factor=baseline,
            description=text.description,
            recommendation=text.recommendation,
        ))

    return analyses


# ---------------------------------------------------------------------------
# Medication adherence
# ---------------------------------------------------------------------------

def analyze_medication_adherence(
    df: pd.DataFrame,
    cfg: FlarewatchConfig,
) -> Optional[FactorAnalysis]:
    """
    Days with any medication taken vs. days with none.

    Which medication was taken is ignored. The correlation is computed as
    (without - with) so that a positive value means adherence goes with
    lower severity; the analysis is flagged `inverted` accordingly.
    """
    r = rated(df)
    taken = r["medication_taken"].astype(bool)
    with_med = r.loc[taken, "severity"]
    without_med = r.loc[~taken, "severity"]

    if not _has_both_groups(with_med, without_med, cfg):
        log.debug(
            "Skipping medication adherence: %d with / %d without",
            len(with_med), len(without_med),
        )
        return None

    avg_with = float(with_med.mean())
    avg_without = float(without_med.mean())

    return FactorAnalysis(
        factor=MEDICATION_ADHERENCE_LABEL,
        type=FactorType.MEDICATION,
        correlation=compute_correlation(avg_without, avg_with, cfg),
        confidence=compute_confidence(len(with_med), len(without_med), len(df), cfg),
        occurrences=len(with_med),
        average_severity_with_factor=avg_with,
        average_severity_without_factor=avg_without,
        description=MEDICATION_ADHERENCE_TEXT.description,
        recommendation=MEDICATION_ADHERENCE_TEXT.recommendation,
        inverted=True,
    )


# ---------------------------------------------------------------------------
# All extractors
# ---------------------------------------------------------------------------

def run_extractors(df: pd.DataFrame, cfg: FlarewatchConfig) -> List[FactorAnalysis]:
    """Lifestyle rules, then weather labels, then medication adherence."""
    analyses = analyze_lifestyle_factors(df, cfg)
    analyses.extend(analyze_weather_factors(df, cfg))

    medication = analyze_medication_adherence(df, cfg)
    if medication is not None:
        analyses.append(medication)

    return analyses
