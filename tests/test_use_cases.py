from __future__ import annotations

import asyncio
import json

from solfind.adapters.json_sink import JSONEventSink
from solfind.application.use_cases import fetch_trade_history
from solfind.config import PUMPFUN_PROGRAM_ID
from solfind.domain.models import SignatureRef

from fakes import FakeRPC, make_tx

SIGS = [SignatureRef(signature=f"sig{i}", block_time=1000 - i) for i in range(6)]
TXS = {
    "sig0": make_tx("sig0", "buy"),
    "sig1": make_tx("sig1", "other"),
    "sig2": make_tx("sig2", "sell"),
    # sig3 missing -> fetch failure
    "sig4": make_tx("sig4", None),
    "sig5": make_tx("sig5", "buy"),
}


def test_history_end_to_end(tmp_path) -> None:
    path = str(tmp_path / "transactions.json")
    totals: list[int] = []

    res = asyncio.run(fetch_trade_history(
        rpc=FakeRPC(SIGS, TXS),
        sink=JSONEventSink(path),
        address="Owner111",
        since=997,
        concurrency=3,
        program_id=PUMPFUN_PROGRAM_ID,
        page_limit=4,
        on_signatures=totals.append,
    ))

    # window keeps sig0..sig3 (block_time >= 997)
    assert totals == [4]
    assert (res.total, res.completed, res.failed, res.matched) == (4, 4, 1, 2)
    with open(path) as f:
        rows = json.load(f)
    assert sorted(r["signature"] for r in rows) == ["sig0", "sig2"]
    assert {r["signature"]: r["isBuy"] for r in rows} == {"sig0": True, "sig2": True}


def test_empty_window_still_writes(tmp_path) -> None:
    path = str(tmp_path / "transactions.json")
    res = asyncio.run(fetch_trade_history(
        rpc=FakeRPC([], {}), sink=JSONEventSink(path), address="Owner111", since=0,
        concurrency=20, program_id=PUMPFUN_PROGRAM_ID,
    ))
    assert (res.total, res.matched) == (0, 0)
    with open(path) as f:
        assert json.load(f) == []
