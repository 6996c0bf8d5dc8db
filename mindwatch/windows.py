"""
Window aggregation: trailing windows, averages, moving averages,
period-over-period deviation, and chart-ready trend series.

Windows are counted in entries by sequence position, not by calendar time.
All functions are pure transforms, no I/O, no side effects.
"""

from typing import Dict, List, Sequence

import numpy as np
import pandas as pd

from mindwatch.config import MindwatchConfig
from mindwatch.history import clamp_fields, local_dates


MA_COLUMNS = ("mood", "stress", "sleep", "wellbeing_score")


# ---------------------------------------------------------------------------
# Trailing window
# ---------------------------------------------------------------------------

def trailing_window(df: pd.DataFrame, n: int) -> pd.DataFrame:
    """Last `n` entries; the whole history if shorter, empty if n <= 0."""
    if n <= 0:
        return df.iloc[0:0]
    return df.tail(n)


# ---------------------------------------------------------------------------
# Average
# ---------------------------------------------------------------------------

def average(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence by convention."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


# ---------------------------------------------------------------------------
# Moving averages
# ---------------------------------------------------------------------------

def compute_moving_averages(df: pd.DataFrame, cfg: MindwatchConfig) -> pd.DataFrame:
    """Add trailing moving-average columns `<col>_ma` for each tracked value."""
    w = cfg.windows.moving_average
    clamped = clamp_fields(df, cfg)

    for col in MA_COLUMNS:
        if col not in df.columns:
            continue
        df[f"{col}_ma"] = clamped[col].rolling(w, min_periods=1).mean()

    return df


# ---------------------------------------------------------------------------
# Period-over-period deviation
# ---------------------------------------------------------------------------

def period_deviation(
    df: pd.DataFrame,
    window_size: int,
    column: str = "mood",
    cfg: MindwatchConfig | None = None,
) -> Dict[str, object]:
    """
    Percent change of the latest window's mean versus the window before it.

    The baseline is the `window_size` entries immediately preceding the
    latest `window_size` entries (it may hold fewer when history is short).
    A zero baseline mean is divided by 1 instead.
    Values are clamped into their domains first (default config when none
    is given).

    Returns:
        {"percent": float | None, "has_baseline": bool}
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")
    if cfg is None:
        cfg = MindwatchConfig()

    values = clamp_fields(df, cfg)[column]

    recent = values.iloc[-window_size:]
    baseline = values.iloc[-2 * window_size:-window_size]

    if baseline.empty:
        return {"percent": None, "has_baseline": False}

    recent_mean = average(recent.to_numpy())
    baseline_mean = average(baseline.to_numpy())
    denom = baseline_mean if baseline_mean != 0 else 1.0

    percent = (recent_mean - baseline_mean) / denom * 100
    return {"percent": round(float(percent), 2), "has_baseline": True}


# ---------------------------------------------------------------------------
# Trend series (chart feed)
# ---------------------------------------------------------------------------

def trend_series(df: pd.DataFrame, cfg: MindwatchConfig) -> List[Dict]:
    """
    Per-entry points for trend charts, in history order.

    Expects wellbeing_score and moving-average columns to be present.
    """
    if df.empty:
        return []

    labels = local_dates(df, cfg)
    points = []
    for label, (_, row) in zip(labels, df.iterrows()):
        point = {
            "date": label.isoformat(),
            "timestamp": int(row["timestamp"]),
            "mood": int(row["mood"]),
            "stress": int(row["stress"]),
            "sleep": float(row["sleep"]),
        }
        if "wellbeing_score" in df.columns:
            point["score"] = int(row["wellbeing_score"])
        for col in MA_COLUMNS:
            ma = f"{col}_ma"
            if ma in df.columns:
                point[ma] = round(float(row[ma]), 3)
        points.append(point)
    return points
