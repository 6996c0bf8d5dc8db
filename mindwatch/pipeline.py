"""
Pipeline orchestration: load → score → aggregate → streak → insight → report.

This is the only analytics module that touches the filesystem (through the
record store). All analytical logic is delegated to scoring, windows,
streaks and insights.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Union

from mindwatch.config import MindwatchConfig
from mindwatch.history import Record, to_frame
from mindwatch.insights import generate_insight, insight_metrics
from mindwatch.scoring import compute_scores, score_label
from mindwatch.store import JsonStore
from mindwatch.streaks import compute_mood_calendar, compute_streak, streak_message
from mindwatch.windows import compute_moving_averages, period_deviation, trend_series

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Core analysis (PURE FUNCTION — NO FILE I/O)
# ---------------------------------------------------------------------------

def analyze_data(
    records: Iterable[Record],
    cfg: MindwatchConfig | None = None,
    as_of=None,
) -> Dict:
    """
    Backend / UI integration entry point.

    Accepts CheckIn objects or record dicts in timestamp order. An empty
    history is valid and yields the low-information defaults.
    `as_of` anchors the streak and calendar at a fixed day instead of the
    latest entry's day.
    """
    if cfg is None:
        cfg = MindwatchConfig()

    df = to_frame(records)

    # Stage 1: Score
    df = compute_scores(df, cfg)

    # Stage 2: Windows
    df = compute_moving_averages(df, cfg)
    deviation = period_deviation(df, cfg.windows.deviation, cfg=cfg)

    # Stage 3: Consistency
    streak = compute_streak(df, cfg, as_of=as_of)

    # Stage 4: Insight
    insight = generate_insight(df, cfg)

    if df.empty:
        latest = None
        score = 0
    else:
        row = df.iloc[-1]
        latest = {
            "timestamp": int(row["timestamp"]),
            "mood": int(row["mood"]),
            "stress": int(row["stress"]),
            "sleep": float(row["sleep"]),
        }
        score = int(row["wellbeing_score"])

    logger.debug("Analyzed %d check-ins: score=%d streak=%d", len(df), score, streak)

    return {
        "entries": len(df),
        "latest": latest,
        "score": score,
        "score_label": score_label(score, cfg),
        "streak": streak,
        "streak_message": streak_message(streak, cfg),
        "insight": insight,
        "averages": insight_metrics(df, cfg),
        "deviation": deviation,
        "series": trend_series(df, cfg),
        "calendar": compute_mood_calendar(df, cfg, as_of=as_of),
    }


# ---------------------------------------------------------------------------
# Public Entry Points
# ---------------------------------------------------------------------------

def analyze(
    filepath: Union[str, Path],
    cfg: MindwatchConfig | None = None,
    as_of=None,
) -> Dict:
    """Load the history from a store file and run analysis."""
    if cfg is None:
        cfg = MindwatchConfig()

    entries = JsonStore(filepath, cfg).load_all()
    return analyze_data(entries, cfg, as_of=as_of)


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def generate_report(result: Dict) -> str:
    """Format the analysis result as a human-readable text report."""
    latest = result["latest"]
    averages = result["averages"]
    deviation = result["deviation"]

    if deviation["has_baseline"]:
        deviation_text = f"{deviation['percent']:+.2f}%"
    else:
        deviation_text = "n/a (not enough history)"

    lines = [
        "MINDWATCH STATUS REPORT",
        "=" * 58,
        "",
        f"  Check-ins           : {result['entries']}",
        f"  Wellbeing Score     : {result['score']} ({result['score_label']})",
        f"  Streak              : {result['streak']}d ({result['streak_message']})",
    ]

    if latest is not None:
        lines.append(
            f"  Latest              : mood {latest['mood']}, "
            f"stress {latest['stress']}, sleep {latest['sleep']}h"
        )

    lines += [
        f"  Avg Mood (recent)   : {averages['avg_mood']}",
        f"  Avg Stress (recent) : {averages['avg_stress']}",
        f"  Mood Deviation      : {deviation_text}",
        "",
        "  Insight:",
        f"    {result['insight']}",
        "",
        "=" * 58,
    ]
    return "\n".join(lines)
