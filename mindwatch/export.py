"""CSV export and re-import of a check-in history."""

import csv
import io
from typing import Iterable, List

import pandas as pd

from mindwatch.history import COLUMNS, CheckIn, Record, from_frame, to_frame


HEADER = ",".join(COLUMNS)


def export_csv(history: Iterable[Record]) -> str:
    """
    Serialize entries in store order.

    Numeric fields are written bare; the note is always quoted with internal
    quotes doubled, so commas, quotes and newlines survive.
    """
    df = to_frame(history)
    if df.empty:
        return HEADER + "\n"

    body = df.to_csv(
        index=False,
        header=False,
        quoting=csv.QUOTE_NONNUMERIC,
        lineterminator="\n",
    )
    return HEADER + "\n" + body


def parse_csv(text: str) -> List[CheckIn]:
    """Read back text produced by export_csv."""
    df = pd.read_csv(
        io.StringIO(text),
        dtype={"timestamp": "int64", "mood": "int64", "stress": "int64",
               "sleep": "float64", "note": str},
        keep_default_na=False,
    )
    missing = set(COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    return from_frame(df[list(COLUMNS)])
