"""
Consistency tracking: day buckets, the consecutive-day streak, and the
per-day mood calendar.

All functions reduce the history to local calendar days first, so results
do not depend on how many check-ins fall on the same day.
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Set

import pandas as pd

from mindwatch.config import MindwatchConfig
from mindwatch.history import local_dates, resolve_timezone, today


def _as_date(value, cfg: MindwatchConfig) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(resolve_timezone(cfg)).date()
        return value.date()
    if isinstance(value, date):
        return value
    return _as_date(pd.Timestamp(value).to_pydatetime(), cfg)


# ---------------------------------------------------------------------------
# Day buckets
# ---------------------------------------------------------------------------

def active_days(df: pd.DataFrame, cfg: MindwatchConfig) -> Set[date]:
    """Distinct local calendar days holding at least one check-in."""
    return set(local_dates(df, cfg))


# ---------------------------------------------------------------------------
# Streak
# ---------------------------------------------------------------------------

def compute_streak(
    df: pd.DataFrame,
    cfg: MindwatchConfig,
    as_of=None,
) -> int:
    """
    Count consecutive active days ending at the anchor day.

    The anchor is the most recent entry's local day, or `as_of` when given
    (wall-clock mode: a history whose last entry is older than `as_of`
    yields 0). Walks backwards one day at a time and stops at the first gap.

    Returns:
        Number of consecutive days (>= 0).
    """
    if df.empty:
        return 0

    days = active_days(df, cfg)
    anchor = _as_date(as_of, cfg) if as_of is not None else local_dates(df, cfg).iloc[-1]

    streak = 0
    day = anchor
    while day in days:
        streak += 1
        day -= timedelta(days=1)

    return streak


def streak_message(streak: int, cfg: MindwatchConfig) -> str:
    m = cfg.streak_messages
    return m.empty if streak == 0 else m.active


# ---------------------------------------------------------------------------
# Mood calendar
# ---------------------------------------------------------------------------

def _categorize(mood: Optional[int], cfg: MindwatchConfig) -> str:
    c = cfg.calendar
    if mood is None:
        return "none"
    if mood >= c.good_mood:
        return "good"
    if mood == c.neutral_mood:
        return "neutral"
    return "low"


def compute_mood_calendar(
    df: pd.DataFrame,
    cfg: MindwatchConfig,
    as_of=None,
) -> List[Dict]:
    """
    One cell per day for the trailing `calendar_days` days, oldest first.

    Each day shows the first check-in recorded on it. The window ends at
    `as_of`, else at the latest entry's day, else today.
    """
    if as_of is not None:
        end = _as_date(as_of, cfg)
    elif not df.empty:
        end = local_dates(df, cfg).iloc[-1]
    else:
        end = today(cfg)

    first_mood: Dict[date, int] = {}
    if not df.empty:
        days = local_dates(df, cfg)
        for day, mood in zip(days, df["mood"]):
            first_mood.setdefault(day, int(mood))

    cells = []
    for offset in range(cfg.windows.calendar_days - 1, -1, -1):
        day = end - timedelta(days=offset)
        mood = first_mood.get(day)
        cells.append({
            "date": day.isoformat(),
            "mood": mood,
            "category": _categorize(mood, cfg),
        })
    return cells
