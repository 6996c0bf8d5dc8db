"""
Record store: the check-in list persisted in a JSON key-value file.

The file holds a single JSON object, the on-disk analogue of browser local
storage. Records live under one fixed key; other keys are left untouched.
This is the only stateful boundary of the package. Callers are expected to
serialize access (one active session).
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from mindwatch.config import MindwatchConfig
from mindwatch.history import CheckIn, MalformedDataError, parse_records, sort_history

logger = logging.getLogger(__name__)

# Errors that make a store file count as holding no data
UNREADABLE = (OSError, UnicodeDecodeError, json.JSONDecodeError, MalformedDataError)


class JsonStore:
    """Load, append and replace check-ins kept in a JSON file."""

    def __init__(self, path: Union[str, Path], cfg: Optional[MindwatchConfig] = None):
        self.path = Path(path)
        self.cfg = cfg or MindwatchConfig()

    @property
    def key(self) -> str:
        return self.cfg.store.key

    # -- raw file access -----------------------------------------------------

    def _read(self) -> Dict:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise MalformedDataError(f"Store root is not an object: {self.path}")
        return data

    def _backup(self, reason: Exception) -> None:
        backup = self.path.with_name(self.path.name + ".bak")
        logger.warning(
            "Store file %s holds unreadable data (%s); copied to %s", self.path, reason, backup
        )
        shutil.copyfile(self.path, backup)

    def _write(self, records: List[CheckIn]) -> None:
        try:
            data = self._read()
        except UNREADABLE as exc:
            self._backup(exc)
            data = {}
        else:
            try:
                if self.key in data:
                    parse_records(data[self.key])
            except MalformedDataError as exc:
                self._backup(exc)

        data[self.key] = [entry.to_dict() for entry in records]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Wrote %d check-ins to %s", len(records), self.path)

    # -- public API ----------------------------------------------------------

    def load_all(self) -> List[CheckIn]:
        """
        Every stored check-in, sorted by timestamp.

        A missing file or key is an empty history. A payload that cannot be
        parsed is logged and also reported as an empty history.
        """
        try:
            payload = self._read().get(self.key)
            if payload is None:
                return []
            entries = parse_records(payload)
        except UNREADABLE as exc:
            logger.warning("Ignoring malformed check-in data in %s: %s", self.path, exc)
            return []

        logger.debug("Loaded %d check-ins from %s", len(entries), self.path)
        return sort_history(entries)

    def append(self, entry: CheckIn) -> None:
        entries = self.load_all()
        entries.append(entry)
        self._write(entries)

    def replace_all(self, entries: Iterable[CheckIn]) -> None:
        self._write(list(entries))

    def clear(self) -> None:
        self.replace_all([])
