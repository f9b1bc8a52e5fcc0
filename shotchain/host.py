"""Boundary towards the host application."""
from __future__ import annotations

import abc
from typing import List

from shotchain.engine.intents import Intent


class IntentSink(abc.ABC):
    """Receives accepted intents; the host owns the write path."""

    @abc.abstractmethod
    def dispatch(self, intent: Intent) -> None:
        """Hand one intent to the host."""


class RecordingSink(IntentSink):
    """Keeps dispatched intents in arrival order."""

    def __init__(self) -> None:
        self.intents: List[Intent] = []

    def dispatch(self, intent: Intent) -> None:
        self.intents.append(intent)

    def drain(self) -> List[Intent]:
        drained, self.intents = self.intents, []
        return drained
