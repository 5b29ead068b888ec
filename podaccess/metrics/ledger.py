# metrics/ledger.py
from __future__ import annotations
import logging
import os

logger = logging.getLogger(__name__)


class MetricsLedger:
    """
    Append-only exposition file plus an ordered in-memory set of its lines.

    Exact string equality is the dedup key; a repeated line is reported and
    skipped, never written twice.
    """

    def __init__(self, path: str):
        self.path = path
        self._lines: dict[str, None] = {}
        self.duplicates = 0

    def load(self) -> "MetricsLedger":
        """Use the current file contents as the dedup baseline."""
        self._lines = {}
        if os.path.exists(self.path):
            with open(self.path, "r", encoding="utf-8") as f:
                for raw in f:
                    line = raw.rstrip("\n")
                    if line:
                        self._lines[line] = None
        return self

    def truncate(self) -> "MetricsLedger":
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8"):
            pass
        self.duplicates = 0
        return self.load()

    def add(self, line: str) -> bool:
        if line in self._lines:
            self.duplicates += 1
            logger.warning("[ledger] duplicate metric found, not adding: %s", line)
            return False
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        self._lines[line] = None
        logger.debug("[ledger] %s", line)
        return True

    def lines(self) -> list[str]:
        return list(self._lines)

    def __contains__(self, line: str) -> bool:
        return line in self._lines

    def __len__(self) -> int:
        return len(self._lines)
