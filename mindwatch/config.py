"""
Centralized configuration for all weights, thresholds, windows, and messages.

Every tunable constant lives here. Pass a customised MindwatchConfig to the
pipeline (or to any single component) to override defaults.
"""

from dataclasses import dataclass, field
from typing import Optional


# ---------------------------------------------------------------------------
# Scoring weights
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreWeights:
    """Weights for combining the three sub-scores into the wellbeing score."""

    mood: float = 0.50
    stress: float = 0.35
    sleep: float = 0.15

    def __post_init__(self):
        total = self.mood + self.stress + self.sleep
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Score weights must sum to 1.0, got {total}")


# ---------------------------------------------------------------------------
# Scoring parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringParams:
    """Input domains and raw-to-score transformations."""

    mood_max: int = 4
    stress_max: int = 100

    # Sleep: triangular score peaking at optimal, zero at 0h and 2 * optimal.
    # Hours above the cap score like the cap.
    sleep_optimal_hours: float = 7.5
    sleep_cap_hours: float = 12.0

    # All scores are clamped to [0, scale_max]
    scale_max: int = 100


@dataclass(frozen=True)
class ScoreBands:
    """Lower bounds (exclusive) for the score labels."""

    good: int = 70
    fair: int = 40


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowParams:
    """Window sizes, counted in entries unless noted."""

    insight: int = 3
    deviation: int = 7
    moving_average: int = 7
    calendar_days: int = 30     # calendar days, not entries


# ---------------------------------------------------------------------------
# Insight rules (declarative)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InsightRule:
    """A single insight: fires when `metric <comparison> threshold`."""

    metric: str          # avg_mood | avg_stress | latest_sleep
    comparison: str      # "lt" | "gt"
    threshold: float
    message: str


DEFAULT_INSIGHT_RULES: tuple = (
    InsightRule(
        metric="avg_mood",
        comparison="lt",
        threshold=2.0,
        message="Your mood has been low lately. Consider rest or talking to someone.",
    ),
    InsightRule(
        metric="avg_stress",
        comparison="gt",
        threshold=70.0,
        message="Stress has been high recently. Try breathing exercises or short breaks.",
    ),
    InsightRule(
        metric="latest_sleep",
        comparison="lt",
        threshold=6.0,
        message="Recent sleep is low, consider adjusting bedtime.",
    ),
)


@dataclass(frozen=True)
class InsightParams:
    """Minimum history and the fixed fallback messages."""

    min_entries: int = 3
    need_more_data: str = "Need more entries to generate insights."
    balanced: str = "You're maintaining a balanced trend. Keep it up!"


# ---------------------------------------------------------------------------
# Streak / calendar presentation hints
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StreakMessages:
    empty: str = "Start tracking daily."
    active: str = "Great consistency!"


@dataclass(frozen=True)
class CalendarThresholds:
    """Mood cut-offs for calendar day categories."""

    good_mood: int = 3
    neutral_mood: int = 2


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StoreParams:
    key: str = "mindwatch_data_v1"


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MindwatchConfig:
    """Complete engine configuration. Pass to pipeline to override defaults."""

    weights: ScoreWeights = field(default_factory=ScoreWeights)
    scoring: ScoringParams = field(default_factory=ScoringParams)
    bands: ScoreBands = field(default_factory=ScoreBands)
    windows: WindowParams = field(default_factory=WindowParams)
    insight: InsightParams = field(default_factory=InsightParams)
    streak_messages: StreakMessages = field(default_factory=StreakMessages)
    calendar: CalendarThresholds = field(default_factory=CalendarThresholds)
    store: StoreParams = field(default_factory=StoreParams)
    insight_rules: tuple = DEFAULT_INSIGHT_RULES

    # IANA zone name used to bucket timestamps into calendar days.
    # None means the machine's local zone.
    timezone: Optional[str] = None
