from __future__ import annotations
import os, asyncio, pyarrow as pa, pyarrow.parquet as pq
from typing import Iterable

from ..ports.storage import EventSink
from ..domain.models import TradeEvent
from .json_sink import JSONEventSink

TRADES_SCHEMA = pa.schema([
    pa.field("signature",      pa.large_string()),
    pa.field("timestamp",      pa.int64()),
    pa.field("slot",           pa.int64()),
    pa.field("success",        pa.bool_()),
    pa.field("solAmount",      pa.large_string()),
    pa.field("tokenAmount",    pa.large_string()),
    pa.field("isBuy",          pa.bool_()),
    pa.field("eventTimestamp", pa.int64()),
    pa.field("mintAddress",    pa.large_string()),
    pa.field("name",           pa.large_string()),
])

COLS = [f.name for f in TRADES_SCHEMA]

def events_to_table(events: Iterable[TradeEvent]) -> pa.Table:
    cols: dict[str, list] = {name: [] for name in COLS}
    for e in events:
        for k, v in e.to_dict().items():
            cols[k].append(v)
    arrays = {k: pa.array(v, type=TRADES_SCHEMA.field(k).type) for k, v in cols.items()}
    return pa.Table.from_pydict(arrays, schema=TRADES_SCHEMA)

class ParquetEventSink(EventSink):
    def __init__(self, path: str, codec: str = "zstd") -> None:
        self.path = path
        self.codec = codec
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    def _write(self, table: pa.Table) -> None:
        tmp = self.path + ".tmp"
        pq.write_table(table, tmp, compression=self.codec)
        os.replace(tmp, self.path)

    async def write(self, events: Iterable[TradeEvent]) -> str:
        table = events_to_table(events)
        await asyncio.to_thread(self._write, table)
        return self.path

def sink_for_path(path: str) -> EventSink:
    """Parquet for *.parquet, JSON for anything else."""
    if path.lower().endswith(".parquet"):
        return ParquetEventSink(path)
    return JSONEventSink(path)
