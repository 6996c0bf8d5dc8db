"""
Insight generation: a declarative rule table evaluated over recent history.

Each rule is a pure threshold check on one metric. Every rule that fires
contributes its message; rules are defined in config.insight_rules.
"""

from typing import Dict, List

import pandas as pd

from mindwatch.config import MindwatchConfig
from mindwatch.history import clamp_fields
from mindwatch.windows import average, trailing_window


_COMPARISONS = {
    "lt": lambda value, threshold: value < threshold,
    "gt": lambda value, threshold: value > threshold,
}


def insight_metrics(df: pd.DataFrame, cfg: MindwatchConfig) -> Dict[str, float]:
    """Trailing-window averages plus the latest entry's sleep."""
    recent = trailing_window(clamp_fields(df, cfg), cfg.windows.insight)
    return {
        "avg_mood": round(average(recent["mood"].to_numpy()), 3),
        "avg_stress": round(average(recent["stress"].to_numpy()), 3),
        "latest_sleep": float(recent["sleep"].iloc[-1]) if not recent.empty else 0.0,
    }


def evaluate_rules(metrics: Dict[str, float], cfg: MindwatchConfig) -> List[str]:
    """Messages of every configured rule that fires, in rule order."""
    fired: List[str] = []

    for rule in cfg.insight_rules:
        if rule.metric not in metrics:
            raise ValueError(f"Unknown insight metric: {rule.metric}")
        compare = _COMPARISONS.get(rule.comparison)
        if compare is None:
            raise ValueError(f"Unknown comparison: {rule.comparison}")

        if compare(metrics[rule.metric], rule.threshold):
            fired.append(rule.message)

    return fired


def generate_insight(df: pd.DataFrame, cfg: MindwatchConfig) -> str:
    """Short text summary of the recent trend."""
    ip = cfg.insight
    if len(df) < ip.min_entries:
        return ip.need_more_data

    fired = evaluate_rules(insight_metrics(df, cfg), cfg)
    return " ".join(fired) if fired else ip.balanced
