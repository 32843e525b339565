"""
Pipeline orchestration: load → frame → extract → classify → report.

This is the only module with I/O (file loading, report formatting).
All analytical logic is delegated to observations, extractors, classifier
and medications.

Entry points:
    analyze_triggers()                 one condition, in-memory records
    get_triggers_for_all_conditions()  fan-out, one insight per condition
    analyze(filepath)                  CLI mode
    analyze_data(payload)              UI / backend mode
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from flarewatch.classifier import classify_analyses
from flarewatch.config import FlarewatchConfig
from flarewatch.extractors import run_extractors
from flarewatch.medications import compute_adherence_score, compute_medication_alerts
from flarewatch.observations import build_condition_frame
from flarewatch.records import CheckIn, Condition, ConditionInsight, Medication
from flarewatch.statistics import confidence_label

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------

def parse_payload(data: Dict) -> Tuple[List[CheckIn], List[Condition], List[Medication]]:
    """Turn a {"conditions", "medications", "checkIns"} document into records."""
    if not isinstance(data, dict):
        raise ValueError("Payload must be a JSON object")

    raw_check_ins = data.get("checkIns", data.get("check_ins"))
    if raw_check_ins is None:
        raise ValueError("Payload is missing 'checkIns'")

    check_ins = [CheckIn.from_dict(c) for c in raw_check_ins]
    conditions = [Condition.from_dict(c) for c in data.get("conditions") or ()]
    medications = [Medication.from_dict(m) for m in data.get("medications") or ()]
    return check_ins, conditions, medications


def load_data(filepath: Union[str, Path]) -> Tuple[List[CheckIn], List[Condition], List[Medication]]:
    """Load and validate a check-in history from a JSON file."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    if not data:
        raise ValueError("Data file is empty")

    return parse_payload(data)


# ---------------------------------------------------------------------------
# Core analysis (PURE FUNCTIONS — NO FILE I/O)
# ---------------------------------------------------------------------------

def analyze_triggers(
    check_ins: Sequence[CheckIn],
    condition_id: str,
    condition_name: str,
    min_sample_size: Optional[int] = None,
    cfg: FlarewatchConfig | None = None,
) -> ConditionInsight:
    """
    Triggers and protective factors for one condition.

    `sample_size` counts every check-in with an entry for the condition,
    rated or not. Below `min_sample_size` (default 5) the insight comes
    back empty; the extractors themselves only use rated days.
    """
    if cfg is None:
        cfg = FlarewatchConfig()
    if min_sample_size is None:
        min_sample_size = cfg.guards.min_sample_size

    df = build_condition_frame(check_ins, condition_id)
    sample_size = len(df)

    if sample_size < min_sample_size:
        log.debug(
            "%s: insufficient data (%d of %d check-ins)",
            condition_name, sample_size, min_sample_size,
        )
        return ConditionInsight(
            condition_id=condition_id,
            condition_name=condition_name,
            sample_size=sample_size,
        )

    analyses = run_extractors(df, cfg)
    triggers, protective = classify_analyses(analyses, cfg)

    log.debug(
        "%s: %d factors analysed, %d triggers, %d protective",
        condition_name, len(analyses), len(triggers), len(protective),
    )

    return ConditionInsight(
        condition_id=condition_id,
        condition_name=condition_name,
        triggers=tuple(triggers),
        protective_factors=tuple(protective),
        sample_size=sample_size,
    )


def _as_condition(condition: Union[Condition, Dict]) -> Condition:
    if isinstance(condition, Condition):
        return condition
    return Condition.from_dict(condition)


def get_triggers_for_all_conditions(
    check_ins: Sequence[CheckIn],
    conditions: Sequence[Union[Condition, Dict]],
    cfg: FlarewatchConfig | None = None,
    max_workers: Optional[int] = None,
) -> List[ConditionInsight]:
    """
    One insight per condition, in the order given.

    Conditions share no state, so with `max_workers` > 1 they are analysed
    on a thread pool; `Executor.map` keeps the input order.
    """
    if cfg is None:
        cfg = FlarewatchConfig()

    check_ins = list(check_ins)
    targets = [_as_condition(c) for c in conditions]

    def run(condition: Condition) -> ConditionInsight:
        return analyze_triggers(check_ins, condition.id, condition.name, cfg=cfg)

    if max_workers is None or max_workers <= 1 or len(targets) <= 1:
        return [run(c) for c in targets]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(run, targets))


def _analyze_records(
    check_ins: List[CheckIn],
    conditions: List[Condition],
    medications: List[Medication],
    cfg: FlarewatchConfig,
) -> Dict:
    return {
        "insights": get_triggers_for_all_conditions(check_ins, conditions, cfg),
        "medication_alerts": compute_medication_alerts(medications, check_ins, cfg),
        "adherence_score": compute_adherence_score(medications, check_ins, cfg),
    }


# ---------------------------------------------------------------------------
# Public Entry Points
# ---------------------------------------------------------------------------

def analyze(
    filepath: Union[str, Path],
    cfg: FlarewatchConfig | None = None,
) -> Dict:
    """
    CLI-compatible entry point.
    Reads JSON file and runs analysis for every condition.
    """
    if cfg is None:
        cfg = FlarewatchConfig()

    check_ins, conditions, medications = load_data(filepath)
    log.info(
        "Loaded %d check-ins, %d conditions, %d medications from %s",
        len(check_ins), len(conditions), len(medications), filepath,
    )
    return _analyze_records(check_ins, conditions, medications, cfg)


def analyze_data(
    data: Dict,
    cfg: FlarewatchConfig | None = None,
) -> Dict:
    """
    Backend / UI integration entry point.

    Accepts the same document shape as the JSON file.
    No file system usage.
    """
    if cfg is None:
        cfg = FlarewatchConfig()

    check_ins, conditions, medications = parse_payload(data)
    return _analyze_records(check_ins, conditions, medications, cfg)


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def _factor_lines(title: str, analyses, cfg: FlarewatchConfig) -> List[str]:
    lines = [f"    {title}:"]
    for a in analyses:
        tier = confidence_label(a.confidence, cfg)
        lines.append(
            f"      - {a.factor:20s} {abs(a.correlation) * 100:3.0f}% correlation, "
            f"{tier} confidence ({a.occurrences} occurrences)"
        )
        lines.append(
            f"        with: {a.average_severity_with_factor:.1f}/5  "
            f"without: {a.average_severity_without_factor:.1f}/5"
        )
        if a.recommendation:
            lines.append(f"        → {a.recommendation}")
    return lines


def generate_report(result: Dict, cfg: FlarewatchConfig | None = None) -> str:
    """Format the analysis result as a human-readable text report."""
    if cfg is None:
        cfg = FlarewatchConfig()
    min_sample = cfg.guards.min_sample_size

    lines = [
        "FLAREWATCH TRIGGER REPORT",
        "=" * 58,
        "",
        f"  Medication Adherence (7d) : {result['adherence_score']}%",
    ]

    for insight in result["insights"]:
        lines.append("")
        lines.append(f"  {insight.condition_name} (sample: {insight.sample_size} check-ins)")

        if insight.sample_size < min_sample:
            lines.append("    Need more data to analyze triggers.")
            continue
        if not insight.has_findings:
            lines.append("    No significant triggers or protective factors identified yet.")
            continue

        if insight.triggers:
            lines.extend(_factor_lines("Potential Triggers", insight.triggers, cfg))
        if insight.protective_factors:
            lines.extend(_factor_lines("Protective Factors", insight.protective_factors, cfg))

    if result["medication_alerts"]:
        lines.append("")
        lines.append("  Medication Alerts:")
        for alert in result["medication_alerts"]:
            lines.append(f"    [{alert.severity.upper()}] {alert.message}")

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
