# solfind/ports/names.py
from __future__ import annotations

from typing import Protocol
from ..domain.value_types import PubkeyStr


class NameResolver(Protocol):
    """Port for turning a token mint into a display name."""

    async def resolve(self, mint: PubkeyStr) -> str | None:
        """Return the token name, or None when the mint has no metadata."""
