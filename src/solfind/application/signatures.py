from __future__ import annotations
import logging, time
from dataclasses import replace
from ..domain.models import SignatureRef
from ..domain.value_types import PubkeyStr
from ..ports.rpc import SolanaRPC

log = logging.getLogger(__name__)

def since_days_ago(days: float, now: float | None = None) -> int:
    now = time.time() if now is None else now
    return int(now - days * 24 * 60 * 60)

async def fetch_signature_window(
    rpc: SolanaRPC,
    address: PubkeyStr,
    since: int,
    *,
    page_limit: int = 1000,
) -> list[SignatureRef]:
    """
    Page backwards from now and keep signatures with block_time >= since.

    Stops on an empty page, a short page, or a page reaching past `since`.
    Signatures without a block time are skipped.
    """
    out: list[SignatureRef] = []
    before = None
    while True:
        page = await rpc.get_signatures(address, before=before, limit=page_limit)
        if not page:
            break
        kept = [s for s in page if s.block_time is not None and s.block_time >= since]
        newest = page[0].block_time
        if not kept and newest is not None and newest < since:
            break
        base = len(out)
        out.extend(replace(s, position=base + i) for i, s in enumerate(kept))
        log.info("Fetched %d signatures so far...", len(out))
        oldest = page[-1].block_time
        if len(page) < page_limit or (oldest is not None and oldest < since):
            break
        before = page[-1].signature
    return out
