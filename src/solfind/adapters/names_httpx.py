from __future__ import annotations
import asyncio, httpx, logging
from ..domain.value_types import PubkeyStr
from ..ports.names import NameResolver

log = logging.getLogger(__name__)

class HttpxNameResolver(NameResolver):
    """
    Token names through the DAS `getAsset` method (Helius-style RPC).
    Every answer is cached per mint, misses included.
    """
    def __init__(self, rpc_url: str, timeout_s: int = 20, *,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.rpc_url = rpc_url
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_s), transport=transport)
        self._cache: dict[str, str | None] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def _lookup(self, mint: PubkeyStr) -> str | None:
        payload = {"jsonrpc":"2.0","id":1,"method":"getAsset","params":{"id": str(mint)}}
        r = await self.client.post(self.rpc_url, json=payload)
        r.raise_for_status()
        data = r.json()
        if "error" in data:
            err = data["error"]
            msg = err.get("message") if isinstance(err, dict) else str(err)
            raise RuntimeError(f"getAsset RPC error: {msg}")
        res = data.get("result") or {}
        name = ((res.get("content") or {}).get("metadata") or {}).get("name")
        return (name.strip() or None) if isinstance(name, str) else None

    async def resolve(self, mint: PubkeyStr) -> str | None:
        if mint in self._cache:
            return self._cache[mint]
        lock = self._locks.setdefault(mint, asyncio.Lock())
        async with lock:
            if mint not in self._cache:
                self._cache[mint] = await self._lookup(mint)
                log.debug("resolved %s -> %r", mint, self._cache[mint])
        return self._cache[mint]

    async def aclose(self) -> None:
        await self.client.aclose()
