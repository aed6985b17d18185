# pest_empire/logbook.py
import logging
from typing import List

from .config import MAX_LOG_ENTRIES
from .models import LogEntry

logger = logging.getLogger(__name__)


class ActionLog:
    """Week-tagged, human-readable action log. Oldest entries drop off past ``max_entries``."""

    def __init__(self, max_entries: int = MAX_LOG_ENTRIES):
        self.max_entries = max_entries
        self.entries: List[LogEntry] = []

    def add(self, week: int, message: str) -> LogEntry:
        entry = LogEntry(week=week, message=message)
        self.entries.append(entry)
        if len(self.entries) > self.max_entries:
            del self.entries[:len(self.entries) - self.max_entries]
        logger.info("[Week %d] %s", week, message)
        return entry

    def recent(self, count: int = 10) -> List[LogEntry]:
        return self.entries[-count:]

    def for_week(self, week: int) -> List[LogEntry]:
        return [e for e in self.entries if e.week == week]

    def clear(self):
        self.entries = []

    def __len__(self):
        return len(self.entries)
