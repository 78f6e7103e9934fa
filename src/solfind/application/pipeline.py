from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import logging
from typing import Awaitable, Callable, Sequence

from ..domain.classify import classify_tx, find_trade_payload
from ..domain.decoding import decode_trade_b58
from ..domain.errors import FetchFailure, MalformedPayload, PipelineError
from ..domain.models import PipelineResult, SignatureRef, TradeEvent, TxRecord
from ..domain.value_types import DecodeMode
from ..ports.names import NameResolver

log = logging.getLogger(__name__)

FetchFn = Callable[[SignatureRef], Awaitable["TxRecord | None"]]
ProgressFn = Callable[[int, int], None]


def decode_matched(tx: TxRecord, program_id: str, mode: DecodeMode) -> TradeEvent | None:
    """Classify + decode one fetched transaction; None when it is not a usable trade."""
    if classify_tx(tx, program_id) == "none":
        return None
    data = find_trade_payload(tx, program_id)
    if data is None:
        log.debug("%s: program called but no inner trade event", tx.signature)
        return None
    try:
        fields = decode_trade_b58(data, mode)
    except MalformedPayload as e:
        log.debug("%s: dropped, %s", tx.signature, e)
        return None
    return TradeEvent.from_parts(tx, fields)


async def run_pipeline(
    identifiers: Sequence[SignatureRef],
    fetch: FetchFn,
    *,
    concurrency: int,
    program_id: str,
    mode: DecodeMode = "full",
    resolver: NameResolver | None = None,
    cancel: asyncio.Event | None = None,
    on_progress: ProgressFn | None = None,
) -> PipelineResult:
    """
    Fetch every signature with at most `concurrency` requests in flight and
    collect the decoded trades.

    Admission is a sliding window: `concurrency` workers pull from one shared
    iterator, so a finished fetch immediately lets the next signature start.
    Fetch errors are soft failures (logged + counted); decode errors drop the
    item. The result is returned once every signature is accounted for, or
    early with `cancelled=True` when `cancel` is set.

    Events come back in completion order, not input order.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    total = len(identifiers)
    if total == 0:
        return PipelineResult(events=(), total=0, completed=0)

    events: list[TradeEvent] = []
    completed = failed = 0
    pending = iter(identifiers)

    async def process(ref: SignatureRef) -> tuple[bool, TradeEvent | None]:
        try:
            tx = await fetch(ref)
            if tx is None:
                raise FetchFailure(ref.signature, "transaction not found")
        except Exception as e:
            log.warning("Error fetching transaction %s: %s", ref.signature, e)
            return False, None

        event = decode_matched(tx, program_id, mode)
        if event is not None and resolver is not None and event.mint is not None:
            try:
                name = await resolver.resolve(event.mint)
            except Exception as e:
                log.warning("Name lookup failed for %s: %s", event.mint, e)
            else:
                event = dataclasses.replace(event, name=name)
        return True, event

    async def worker() -> None:
        nonlocal completed, failed
        for ref in pending:
            ok, event = await process(ref)
            # no await between here and the end of the iteration
            if not ok:
                failed += 1
            elif event is not None:
                events.append(event)
            completed += 1
            if completed > total:
                raise PipelineError(f"completed {completed} of only {total} signatures")
            if completed % concurrency == 0:
                log.info("Processed %d/%d transactions", completed, total)
            if on_progress is not None:
                on_progress(completed, total)

    tasks = [asyncio.create_task(worker()) for _ in range(min(concurrency, total))]
    run = asyncio.gather(*tasks)
    cancelled = False
    try:
        cancelled = await _join(run, cancel)
    except BaseException:
        for t in tasks:
            t.cancel()
        # let the cancelled fetches unwind before the error leaves
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if not cancelled and completed != total:
        raise PipelineError(f"pipeline finished with {completed}/{total} signatures accounted for")
    if cancelled:
        log.info("Cancelled after %d/%d transactions", completed, total)

    return PipelineResult(
        events=tuple(events),
        total=total,
        completed=completed,
        failed=failed,
        cancelled=cancelled,
    )


async def _join(run: asyncio.Future, cancel: asyncio.Event | None) -> bool:
    """Wait for all workers; True if `cancel` fired first and the run was stopped."""
    if cancel is None:
        await run
        return False
    stopper = asyncio.create_task(cancel.wait())
    try:
        done, _ = await asyncio.wait({run, stopper}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stopper.cancel()
    if run in done:
        run.result()
        return False
    run.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await run
    return True

