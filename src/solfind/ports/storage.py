# solfind/ports/storage.py
from __future__ import annotations

from typing import Iterable, Protocol
from ..domain.models import TradeEvent


class EventSink(Protocol):
    """Port for persisting the final list of decoded trades (once per run)."""

    path: str

    async def write(self, events: Iterable[TradeEvent]) -> str:
        """Persist all events and return the written path."""
