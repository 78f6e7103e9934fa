# solfind/ports/rpc.py
from __future__ import annotations

from typing import Protocol
from ..domain.models import SignatureRef, TxRecord
from ..domain.value_types import PubkeyStr, Signature


class SolanaRPC(Protocol):
    """Port defining the contract for a Solana JSON-RPC history client."""

    async def get_signatures(
        self,
        address: PubkeyStr,
        before: Signature | None = None,
        limit: int = 1000,
    ) -> list[SignatureRef]:
        """Return one newest-first page of signatures older than `before`."""

    async def get_transaction(self, signature: Signature) -> TxRecord:
        """Return the typed transaction; raise FetchFailure if it cannot be had."""
