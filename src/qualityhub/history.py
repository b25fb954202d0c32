"""Local run history used as the comparison baseline.

The log is a JSON array of reduced history entries, oldest first. It is
rewritten in full on every append and capped at ``MAX_HISTORY_ENTRIES``;
the oldest entries are evicted first. There is no locking: two processes
appending at once can lose an update.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import HistoryWriteError
from .logging_config import get_logger
from .models import CanonicalRecord, HistoryEntry

logger = get_logger(__name__)

MAX_HISTORY_ENTRIES = 100
DEFAULT_HISTORY_DIR = ".qualityhub"
DEFAULT_HISTORY_FILE = "history.json"


@dataclass
class HistoryLoadResult:
    """Outcome of reading the log.

    A damaged log never blocks analysis: ``entries`` is empty and ``error``
    says why.
    """

    entries: List[HistoryEntry] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class HistoryStore:
    """Append-only, size-bounded JSON log of past runs."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __len__(self) -> int:
        return len(self.load_entries())

    def read(self) -> HistoryLoadResult:
        """Read the full log. Missing file is empty; corruption is reported, not raised."""
        if not self.path.exists():
            return HistoryLoadResult()

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError("history root is not a JSON array")
            entries = [HistoryEntry.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable history at {self.path}: {e}")
            return HistoryLoadResult(error=str(e))

        logger.debug(f"Loaded {len(entries)} history entries from {self.path}")
        return HistoryLoadResult(entries=entries)

    def load_entries(self) -> List[HistoryEntry]:
        return self.read().entries

    def append_entry(self, record: CanonicalRecord, risk_score: int) -> HistoryEntry:
        """Project ``record``, append it and persist the last 100 entries.

        Raises:
            HistoryWriteError: If the log directory or file cannot be written.
        """
        entry = HistoryEntry.from_record(record, risk_score)
        entries = self.load_entries()
        entries.append(entry)
        trimmed = entries[-MAX_HISTORY_ENTRIES:]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in trimmed], f, indent=2)
        except OSError as e:
            raise HistoryWriteError(self.path, str(e))

        logger.info(
            f"Saved history entry for {entry.project}@{entry.branch} "
            f"({len(trimmed)} stored) to {self.path}"
        )
        return entry

    def most_relevant_entry(self, branch: Optional[str]) -> Optional[HistoryEntry]:
        """Last entry on ``branch``, else the last entry overall, else None."""
        entries = self.load_entries()
        if not entries:
            return None
        if branch:
            for entry in reversed(entries):
                if entry.branch == branch:
                    return entry
        return entries[-1]
