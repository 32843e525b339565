"""
Insight classification: split factor analyses into triggers and protective factors.

Precision over recall: anything with a weak effect or low confidence is
dropped rather than reported as a tentative finding.
"""

from typing import Iterable, List, Tuple

from flarewatch.config import FlarewatchConfig
from flarewatch.records import FactorAnalysis


def is_trigger(analysis: FactorAnalysis, cfg: FlarewatchConfig) -> bool:
    t = cfg.classification
    return analysis.effect > t.min_correlation and analysis.confidence > t.min_confidence


def is_protective(analysis: FactorAnalysis, cfg: FlarewatchConfig) -> bool:
    t = cfg.classification
    return analysis.effect < -t.min_correlation and analysis.confidence > t.min_confidence


def classify_analyses(
    analyses: Iterable[FactorAnalysis],
    cfg: FlarewatchConfig,
) -> Tuple[List[FactorAnalysis], List[FactorAnalysis]]:
    """
    Return (triggers, protective_factors).

    Ranking uses `effect`, which equals the correlation for every factor
    except inverted ones (medication adherence), so:
        triggers            strongest worsening first (descending)
        protective factors  strongest improvement first (ascending)

    Both sorts are stable; equal effects keep extractor order.
    """
    analyses = list(analyses)

    triggers = [a for a in analyses if is_trigger(a, cfg)]
    protective = [a for a in analyses if is_protective(a, cfg)]

    triggers.sort(key=lambda a: a.effect, reverse=True)
    protective.sort(key=lambda a: a.effect)

    return triggers, protective
