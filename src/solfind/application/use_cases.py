from __future__ import annotations
import asyncio, logging
from typing import Callable

from ..domain.models import PipelineResult
from ..domain.value_types import DecodeMode, PubkeyStr
from ..ports.names import NameResolver
from ..ports.rpc import SolanaRPC
from ..ports.storage import EventSink
from .pipeline import ProgressFn, run_pipeline
from .signatures import fetch_signature_window

log = logging.getLogger(__name__)

async def fetch_trade_history(
    *,
    rpc: SolanaRPC,
    sink: EventSink | None,
    address: PubkeyStr,
    since: int,
    concurrency: int,
    program_id: str,
    mode: DecodeMode = "full",
    resolver: NameResolver | None = None,
    page_limit: int = 1000,
    cancel: asyncio.Event | None = None,
    on_signatures: Callable[[int], None] | None = None,
    on_progress: ProgressFn | None = None,
) -> PipelineResult:
    """signature window → bounded fetch/decode → one sink write."""
    refs = await fetch_signature_window(rpc, address, since, page_limit=page_limit)
    log.info("Total signatures found: %d", len(refs))
    if on_signatures is not None:
        on_signatures(len(refs))

    result = await run_pipeline(
        refs,
        lambda ref: rpc.get_transaction(ref.signature),
        concurrency=concurrency,
        program_id=program_id,
        mode=mode,
        resolver=resolver,
        cancel=cancel,
        on_progress=on_progress,
    )
    if sink is not None:
        path = await sink.write(result.events)
        log.info("Wrote %d trades to %s", result.matched, path)
    return result
