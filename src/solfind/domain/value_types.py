from __future__ import annotations
from typing import NewType, Literal

Signature = NewType("Signature", str)   # base58 transaction signature
PubkeyStr = NewType("PubkeyStr", str)   # base58 32-byte account key
TradeKind = Literal["none", "buy", "sell"]
DecodeMode = Literal["full", "minimal"]
