# HistoryLedger.py
from collections import namedtuple
from datetime import datetime

from PySide6.QtCore import QObject, Signal

HistoryEntry = namedtuple("HistoryEntry", ["expression", "result", "created_at"])


class HistoryLedger(QObject):
    """""

    Most-recent-first record of successful evaluations.

    Entries are immutable and only ever added by record() or dropped all at once
    by clear(). The ledger knows nothing about the UI; it emits `changed` after
    every mutation and the UI re-renders from entries().

    """""

    changed = Signal()

    def __init__(self, clock=None):
        super().__init__()
        self._entries = []
        self._clock = clock or datetime.now

    def record(self, expression, result):
        entry = HistoryEntry(expression, result, self._clock())
        self._entries.insert(0, entry)
        self.changed.emit()
        return entry

    def clear(self):
        self._entries.clear()
        self.changed.emit()

    def entries(self):
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries())
