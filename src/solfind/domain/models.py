from __future__ import annotations
from dataclasses import dataclass
from typing import Any
from .value_types import PubkeyStr, Signature

@dataclass(slots=True, frozen=True)
class SignatureRef:
    signature: Signature
    block_time: int | None
    slot: int | None = None
    position: int = 0           # index in source order (newest first)
    err: Any = None

@dataclass(slots=True, frozen=True)
class InstructionRef:
    program_id: PubkeyStr
    data: str | None = None     # base58; None for instructions the node parsed

@dataclass(slots=True, frozen=True)
class InnerInstructionGroup:
    index: int
    instructions: tuple[InstructionRef, ...] = ()

@dataclass(slots=True, frozen=True)
class TxRecord:
    signature: Signature
    slot: int
    block_time: int | None
    err: Any
    instructions: tuple[InstructionRef, ...] = ()
    inner_instructions: tuple[InnerInstructionGroup, ...] = ()
    log_messages: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.err is None

@dataclass(slots=True, frozen=True)
class TradeFields:
    is_buy: bool
    sol_amount: int
    token_amount: int
    timestamp: int | None = None   # full mode only
    mint: PubkeyStr | None = None  # full mode only

@dataclass(slots=True, frozen=True)
class TradeEvent:
    signature: Signature
    slot: int
    success: bool
    block_time: int | None
    is_buy: bool
    sol_amount: int
    token_amount: int
    timestamp: int | None = None
    mint: PubkeyStr | None = None
    name: str | None = None

    @classmethod
    def from_parts(cls, tx: TxRecord, fields: TradeFields, name: str | None = None) -> "TradeEvent":
        return cls(
            signature=tx.signature,
            slot=tx.slot,
            success=tx.success,
            block_time=tx.block_time,
            is_buy=fields.is_buy,
            sol_amount=fields.sol_amount,
            token_amount=fields.token_amount,
            timestamp=fields.timestamp,
            mint=fields.mint,
            name=name,
        )

    def to_dict(self) -> dict[str, Any]:
        # transactions.json field names; big ints as strings, timestamp is the block time
        return {
            "signature": self.signature,
            "timestamp": self.block_time,
            "slot": self.slot,
            "success": self.success,
            "solAmount": str(self.sol_amount),
            "tokenAmount": str(self.token_amount),
            "isBuy": self.is_buy,
            "eventTimestamp": self.timestamp,
            "mintAddress": self.mint,
            "name": self.name,
        }

@dataclass(slots=True, frozen=True)
class PipelineResult:
    """
    Aggregate of one pipeline run.

    `events` is in completion order, which is NOT the input order: with a
    sliding window a later signature can finish before an earlier one.
    """
    events: tuple[TradeEvent, ...]
    total: int
    completed: int
    failed: int = 0
    cancelled: bool = False

    @property
    def matched(self) -> int:
        return len(self.events)
