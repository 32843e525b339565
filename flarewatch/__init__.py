"""
FLAREWATCH v1.0 — Symptom Trigger Analysis Engine

Finds which lifestyle, weather and medication factors go with worse or
better days for each tracked condition, from a history of daily
self-reported check-ins.

Architecture:
    config        — All thresholds, divisors, rule and text tables (single source of truth)
    records       — Check-in input records and analysis result types
    observations  — Per-condition pandas frame, "not recorded" as NaN
    statistics    — Correlation, confidence, confidence tiers
    extractors    — Lifestyle / weather / medication-adherence factor analyses
    classifier    — Trigger vs. protective split and ranking
    medications   — Usage stats, usage-limit alerts, adherence score
    pipeline      — Orchestration: load → frame → extract → classify → report

Public API:
    analyze_triggers(check_ins, condition_id, condition_name)
    get_triggers_for_all_conditions(check_ins, conditions)
    analyze(filepath)       → CLI mode
    analyze_data(payload)   → UI / backend mode
    generate_report(result) → formatted report
"""

from flarewatch.pipeline import (
    analyze,
    analyze_data,
    analyze_triggers,
    generate_report,
    get_triggers_for_all_conditions,
    load_data,
)

__version__ = "1.0.0"

__all__ = [
    "analyze",
    "analyze_data",
    "analyze_triggers",
    "generate_report",
    "get_triggers_for_all_conditions",
    "load_data",
]
