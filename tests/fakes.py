"""Builders and in-memory fakes shared by the test modules."""
from __future__ import annotations

import base58

from solfind.config import PUMPFUN_PROGRAM_ID
from solfind.domain.errors import FetchFailure
from solfind.domain.models import (
    InnerInstructionGroup, InstructionRef, SignatureRef, TxRecord,
)
from solfind.domain.value_types import PubkeyStr, Signature

SYSTEM_PROGRAM = "11111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

# Real pump.fun buy event: sol=491103214 token=12256633644127 ts=1738840559
TRADE_EVENT_HEX = (
    "e445a52e51cb9a1dbddb7fd34ee661ee"
    "592a92ab10621a8f8051a9dd15d2229790cf0f98dd61cb91e5ae2f204d20d00f"
    "eea3451d00000000"
    "5f644bb8250b0000"
    "01"
    "ec7758355e951381fbc7402db2c543e5f7c7d419d72a3fe7cdf2000cfbde657c"
    "ef99a46700000000"
    "939e506b08000000"
    "df017b27a3290300"
    "93f22c6f01000000"
    "df6968db112b0200"
)
TRADE_EVENT = bytes.fromhex(TRADE_EVENT_HEX)


def b58(raw: bytes) -> str:
    return base58.b58encode(raw).decode()


def make_tx(
    signature: str,
    kind: str | None = "buy",
    *,
    payload: bytes | None = TRADE_EVENT,
    err: object = None,
    slot: int = 100,
    block_time: int | None = 1738840559,
    program_id: str = PUMPFUN_PROGRAM_ID,
) -> TxRecord:
    """kind: "buy" / "sell" / "both" / None (program called, no marker) / "other" (program not called, Buy marker still logged)."""
    outer = [InstructionRef(PubkeyStr(SYSTEM_PROGRAM))]
    if kind != "other":
        outer.append(InstructionRef(PubkeyStr(program_id), data="3Bxs4h24hBtQy9rw"))

    logs = ["Program ComputeBudget111111111111111111111111111111 invoke [1]"]
    if kind in ("buy", "both", "other"):
        logs.append("Program log: Instruction: Buy")
    if kind in ("sell", "both"):
        logs.append("Program log: Instruction: Sell")

    inner: list[InnerInstructionGroup] = []
    if payload is not None:
        inner.append(InnerInstructionGroup(index=1, instructions=(
            InstructionRef(PubkeyStr(TOKEN_PROGRAM)),
            InstructionRef(PubkeyStr(program_id), data=b58(payload)),
        )))

    return TxRecord(
        signature=Signature(signature),
        slot=slot,
        block_time=block_time,
        err=err,
        instructions=tuple(outer),
        inner_instructions=tuple(inner),
        log_messages=tuple(logs),
    )


def refs(n: int, start_time: int = 2_000_000) -> list[SignatureRef]:
    return [
        SignatureRef(signature=Signature(f"sig{i}"), block_time=start_time - i, position=i)
        for i in range(n)
    ]


class FakeRPC:
    """In-memory SolanaRPC: newest-first signature pages + a tx table."""

    def __init__(self, signatures: list[SignatureRef], txs: dict[str, TxRecord]) -> None:
        self.signatures = signatures
        self.txs = txs
        self.signature_calls: list[tuple[str | None, int]] = []
        self.closed = False

    async def get_signatures(self, address, before=None, limit=1000):
        self.signature_calls.append((before, limit))
        start = 0
        if before is not None:
            start = next(i for i, s in enumerate(self.signatures) if s.signature == before) + 1
        return self.signatures[start:start + limit]

    async def get_transaction(self, signature):
        try:
            return self.txs[signature]
        except KeyError:
            raise FetchFailure(signature, "transaction not found") from None

    async def aclose(self) -> None:
        self.closed = True
