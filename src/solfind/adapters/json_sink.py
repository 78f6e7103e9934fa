from __future__ import annotations
import os, json, asyncio
from typing import Iterable
from ..ports.storage import EventSink
from ..domain.models import TradeEvent

class JSONEventSink(EventSink):
    def __init__(self, path: str, indent: int = 2) -> None:
        self.path = path
        self.indent = indent
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    def _write(self, rows: list[dict]) -> None:
        tmp = self.path + ".tmp"
        with open(tmp, "w") as f:
            json.dump(rows, f, indent=self.indent)
            f.write("\n")
        os.replace(tmp, self.path)

    async def write(self, events: Iterable[TradeEvent]) -> str:
        rows = [e.to_dict() for e in events]
        await asyncio.to_thread(self._write, rows)
        return self.path
