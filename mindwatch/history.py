"""
Check-in records: construction from user input, parsing of stored payloads,
and conversion of a history into the DataFrame the analytics operate on.

History precondition: entries are in non-decreasing timestamp order. Every
"latest" / "last N" computation uses row position, never a re-sort.
"""

import math
import time
from dataclasses import asdict, dataclass
from datetime import date
from typing import Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd
from dateutil import tz

from mindwatch.config import MindwatchConfig


COLUMNS = ("timestamp", "mood", "stress", "sleep", "note")

_INT64_MIN, _INT64_MAX = np.iinfo(np.int64).min, np.iinfo(np.int64).max


class MalformedDataError(ValueError):
    """Stored payload cannot be parsed into well-formed check-in records."""


class MissingMoodError(ValueError):
    """A check-in was submitted without a mood selection."""


@dataclass(frozen=True)
class CheckIn:
    """One user-submitted wellbeing record. Values are stored as given."""

    timestamp: int       # milliseconds since the Unix epoch
    mood: int
    stress: int
    sleep: float
    note: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


Record = Union[CheckIn, Mapping]


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def _in_range(ms: int) -> int:
    # Must fit a pandas Timestamp, or day bucketing fails downstream
    try:
        pd.Timestamp(ms, unit="ms")
    except (OverflowError, pd.errors.OutOfBoundsDatetime) as exc:
        raise ValueError(f"Timestamp out of range: {ms!r}") from exc
    return ms


def to_epoch_ms(value) -> int:
    """Normalise epoch milliseconds or an ISO-8601 string to epoch ms."""
    if isinstance(value, bool):
        raise TypeError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, np.integer)):
        return _in_range(int(value))
    if isinstance(value, (float, np.floating)):
        if not math.isfinite(value):
            raise ValueError(f"Invalid timestamp: {value!r}")
        return _in_range(int(value))
    if isinstance(value, str):
        ts = pd.Timestamp(value)
        if ts.tzinfo is None:
            ts = ts.tz_localize(tz.tzlocal())
        return int(ts.value // 1_000_000)
    raise TypeError(f"Invalid timestamp: {value!r}")


def now_ms() -> int:
    return int(time.time() * 1000)


def resolve_timezone(cfg: MindwatchConfig):
    """Zone used for calendar-day bucketing."""
    if cfg.timezone is None:
        return tz.tzlocal()
    zone = tz.gettz(cfg.timezone)
    if zone is None:
        raise ValueError(f"Unknown time zone: {cfg.timezone}")
    return zone


# ---------------------------------------------------------------------------
# Ingress
# ---------------------------------------------------------------------------

def build_checkin(
    mood: Optional[int],
    stress,
    sleep=None,
    note: Optional[str] = None,
    timestamp=None,
) -> CheckIn:
    """
    Build a CheckIn from raw form values.

    Mood comes from five fixed buttons; no selection is rejected with
    MissingMoodError. Unparsable sleep defaults to 0 hours, a missing note
    to the empty string.
    """
    if mood is None:
        raise MissingMoodError("Choose a mood first.")

    try:
        sleep_hours = float(sleep)
    except (TypeError, ValueError):
        sleep_hours = 0.0
    if not math.isfinite(sleep_hours):
        sleep_hours = 0.0

    return CheckIn(
        timestamp=now_ms() if timestamp is None else to_epoch_ms(timestamp),
        mood=int(mood),
        stress=int(stress),
        sleep=sleep_hours,
        note=(note or "").strip(),
    )


# ---------------------------------------------------------------------------
# Stored payloads
# ---------------------------------------------------------------------------

def _parse_record(raw) -> CheckIn:
    if isinstance(raw, CheckIn):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedDataError(f"Record is not an object: {raw!r}")

    # "ts" is the key written by the browser version of the tracker
    stamp = raw.get("timestamp", raw.get("ts"))
    if stamp is None or "mood" not in raw or "stress" not in raw:
        raise MalformedDataError(f"Record missing required fields: {raw!r}")

    try:
        sleep = float(raw.get("sleep", 0.0))
        note = raw.get("note", "")
        if note is None:
            note = ""
        if not math.isfinite(sleep) or not isinstance(note, str):
            raise ValueError("bad sleep or note")
        mood = int(raw["mood"])
        stress = int(raw["stress"])
        if not (_INT64_MIN <= mood <= _INT64_MAX and _INT64_MIN <= stress <= _INT64_MAX):
            raise ValueError("mood or stress out of range")
        return CheckIn(
            timestamp=to_epoch_ms(stamp),
            mood=mood,
            stress=stress,
            sleep=sleep,
            note=note,
        )
    except (TypeError, ValueError, OverflowError) as exc:
        raise MalformedDataError(f"Malformed record {raw!r}: {exc}") from exc


def parse_records(payload) -> List[CheckIn]:
    """Parse a stored list of record objects. Order is preserved."""
    if not isinstance(payload, list):
        raise MalformedDataError(
            f"Expected a list of records, got {type(payload).__name__}"
        )
    return [_parse_record(raw) for raw in payload]


def sort_history(entries: Iterable[CheckIn]) -> List[CheckIn]:
    """Stable sort by timestamp; entries sharing a timestamp keep their order."""
    return sorted(entries, key=lambda e: e.timestamp)


# ---------------------------------------------------------------------------
# DataFrame views
# ---------------------------------------------------------------------------

def to_frame(history: Iterable[Record]) -> pd.DataFrame:
    """Build the analytics DataFrame from CheckIn objects or record dicts."""
    entries = [_parse_record(r) for r in history]
    df = pd.DataFrame(
        [e.to_dict() for e in entries],
        columns=list(COLUMNS),
    )
    return df.astype({
        "timestamp": "int64",
        "mood": "int64",
        "stress": "int64",
        "sleep": "float64",
        "note": "object",
    })


def from_frame(df: pd.DataFrame) -> List[CheckIn]:
    return [
        CheckIn(
            timestamp=int(row.timestamp),
            mood=int(row.mood),
            stress=int(row.stress),
            sleep=float(row.sleep),
            note=str(row.note),
        )
        for row in df.itertuples(index=False)
    ]


def clamp_fields(df: pd.DataFrame, cfg: MindwatchConfig) -> pd.DataFrame:
    """Copy with mood/stress/sleep clipped into their declared domains."""
    s = cfg.scoring
    out = df.copy()
    out["mood"] = out["mood"].clip(0, s.mood_max)
    out["stress"] = out["stress"].clip(0, s.stress_max)
    out["sleep"] = out["sleep"].clip(lower=0)
    return out


def local_dates(df: pd.DataFrame, cfg: MindwatchConfig) -> pd.Series:
    """Local calendar day of every entry (time of day discarded)."""
    if df.empty:
        return pd.Series([], dtype="object")
    stamps = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    return stamps.dt.tz_convert(resolve_timezone(cfg)).dt.date


def today(cfg: MindwatchConfig) -> date:
    return pd.Timestamp.now(tz=resolve_timezone(cfg)).date()
