"""
Wellbeing scoring: transforms raw check-in fields into a [0, 100] score.

One formula, applied either to a single CheckIn or column-wise to a history
DataFrame. No rolling stats or cross-entry logic here.
"""

import numpy as np
import pandas as pd

from mindwatch.config import MindwatchConfig
from mindwatch.history import CheckIn


def _round_half_up(x):
    # Weight products carry float noise (90 * 0.35 == 31.499999999999996),
    # so settle to 9 decimals before rounding halves up.
    return np.floor(np.round(x, 9) + 0.5)


def _score_arrays(mood, stress, sleep, cfg: MindwatchConfig):
    """Return (sleep_score, wellbeing_score) as float arrays."""
    s = cfg.scoring
    w = cfg.weights
    cap = s.scale_max

    # -- Sub-scores -----------------------------------------------------------

    mood_norm = np.clip(mood, 0, s.mood_max) / s.mood_max * cap

    stress_inv = (s.stress_max - np.clip(stress, 0, s.stress_max)) * (cap / s.stress_max)

    # Sleep: triangular around optimal, saturating at the cap
    clamped_sleep = np.clip(sleep, 0, s.sleep_cap_hours)
    diff = np.abs(clamped_sleep - s.sleep_optimal_hours)
    sleep_score = np.clip(
        _round_half_up((1 - diff / s.sleep_optimal_hours) * cap), 0, cap
    )

    # -- Weighted total -------------------------------------------------------

    total = mood_norm * w.mood + stress_inv * w.stress + sleep_score * w.sleep
    return sleep_score, np.clip(_round_half_up(total), 0, cap)


def score_entry(entry: CheckIn, cfg: MindwatchConfig) -> int:
    """Wellbeing score of one check-in. Out-of-range fields are clamped."""
    _, score = _score_arrays(
        np.array([entry.mood], dtype=np.float64),
        np.array([entry.stress], dtype=np.float64),
        np.array([entry.sleep], dtype=np.float64),
        cfg,
    )
    return int(score[0])


def compute_scores(df: pd.DataFrame, cfg: MindwatchConfig) -> pd.DataFrame:
    """Append sleep_score and wellbeing_score columns for every entry."""
    sleep_score, score = _score_arrays(
        df["mood"].to_numpy(dtype=np.float64),
        df["stress"].to_numpy(dtype=np.float64),
        df["sleep"].to_numpy(dtype=np.float64),
        cfg,
    )
    df["sleep_score"] = sleep_score.astype(np.int64)
    df["wellbeing_score"] = score.astype(np.int64)
    return df


def score_label(score: int, cfg: MindwatchConfig) -> str:
    """Map a score to its display band."""
    if score > cfg.bands.good:
        return "Good"
    if score > cfg.bands.fair:
        return "Fair"
    return "Low"
