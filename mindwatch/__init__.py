"""
MINDWATCH v1.0 — Deterministic Wellbeing Analytics Engine

Turns an append-only history of check-ins (mood, stress, sleep, note) into
a wellbeing score, a consistency streak, a rule-based insight, and windowed
trend aggregates. The engine is fully stateless.

Architecture:
    config    — All weights, thresholds, windows and messages
    history   — CheckIn record, ingress, parsing, DataFrame view
    scoring   — 0–100 wellbeing score
    streaks   — Day buckets, consecutive-day streak, mood calendar
    windows   — Trailing windows, moving averages, period deviation
    insights  — Declarative insight rules
    store     — JSON key-value record store
    export    — CSV export / import
    pipeline  — Orchestration and report

Public API:
    analyze(filepath)        → store-file mode
    analyze_data(records)    → UI / backend mode
    generate_report(result)  → formatted report
"""

from mindwatch.config import MindwatchConfig
from mindwatch.export import export_csv, parse_csv
from mindwatch.history import CheckIn, MalformedDataError, MissingMoodError, build_checkin
from mindwatch.pipeline import analyze, analyze_data, generate_report
from mindwatch.store import JsonStore

__version__ = "1.0.0"

__all__ = [
    "analyze",
    "analyze_data",
    "generate_report",
    "build_checkin",
    "export_csv",
    "parse_csv",
    "CheckIn",
    "JsonStore",
    "MindwatchConfig",
    "MalformedDataError",
    "MissingMoodError",
]
