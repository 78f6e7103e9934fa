from __future__ import annotations

from solfind.domain.models import TxRecord
from solfind.domain.value_types import TradeKind


BUY_LOG_MARKER  = "Program log: Instruction: Buy"
SELL_LOG_MARKER = "Program log: Instruction: Sell"


def references_program(tx: TxRecord, program_id: str) -> bool:
    return any(ix.program_id == program_id for ix in tx.instructions)

def classify_tx(tx: TxRecord, program_id: str) -> TradeKind:
    """
    "buy" / "sell" when an outer instruction calls `program_id` and the logs
    carry the matching marker; Buy is checked first. A program call without a
    recognised marker is still "none".
    """
    if not references_program(tx, program_id):
        return "none"
    if any(BUY_LOG_MARKER in line for line in tx.log_messages):
        return "buy"
    if any(SELL_LOG_MARKER in line for line in tx.log_messages):
        return "sell"
    return "none"

def find_trade_payload(tx: TxRecord, program_id: str) -> str | None:
    """base58 data of the first inner instruction executed by `program_id`."""
    for group in tx.inner_instructions:
        for ix in group.instructions:
            if ix.program_id == program_id and ix.data is not None:
                return ix.data
    return None
