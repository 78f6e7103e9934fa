from __future__ import annotations
import asyncio, httpx, logging
from typing import Any
from ..domain.errors import FetchFailure
from ..domain.models import InnerInstructionGroup, InstructionRef, SignatureRef, TxRecord
from ..domain.value_types import PubkeyStr, Signature
from ..ports.rpc import SolanaRPC

log = logging.getLogger(__name__)

def _instruction(raw: dict[str, Any]) -> InstructionRef:
    data = raw.get("data")
    return InstructionRef(
        program_id=PubkeyStr(str(raw.get("programId") or "")),
        data=data if isinstance(data, str) else None,
    )

def parse_transaction(signature: Signature, res: dict[str, Any]) -> TxRecord:
    """Normalize a `getTransaction` (jsonParsed) result into a TxRecord."""
    meta = res.get("meta") or {}
    message = (res.get("transaction") or {}).get("message") or {}
    inner = tuple(
        InnerInstructionGroup(
            index=int(g.get("index", i)),
            instructions=tuple(_instruction(ix) for ix in g.get("instructions") or []),
        )
        for i, g in enumerate(meta.get("innerInstructions") or [])
    )
    return TxRecord(
        signature=signature,
        slot=int(res["slot"]),
        block_time=res.get("blockTime"),
        err=meta.get("err"),
        instructions=tuple(_instruction(ix) for ix in message.get("instructions") or []),
        inner_instructions=inner,
        log_messages=tuple(meta.get("logMessages") or []),
    )

class HttpxSolanaRPC(SolanaRPC):
    def __init__(
        self,
        rpc_url: str,
        timeout_s: int = 20,
        max_conn: int = 64,
        *,
        max_attempts: int = 3,
        backoff_s: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.max_attempts = max_attempts
        self.backoff_s = backoff_s
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_conn, max_keepalive_connections=max(1, max_conn//2)),
            transport=transport,
        )

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc":"2.0","id":1,"method":method,"params":params}
        # retry on 429 with simple backoff
        for attempt in range(self.max_attempts):
            r = await self.client.post(self.rpc_url, json=payload)
            if r.status_code == 429:
                if attempt == self.max_attempts - 1:
                    break
                ra = r.headers.get("Retry-After")
                delay = max(self.backoff_s, float(ra)) if ra and ra.isdigit() else (self.backoff_s * (2**attempt))
                log.debug("%s rate limited, retrying in %.1fs", method, delay)
                await asyncio.sleep(delay); continue
            r.raise_for_status()
            data = r.json()
            if "error" in data:
                err = data["error"]
                if isinstance(err, dict):
                    raise RuntimeError(f"{method} RPC error code={err.get('code')} message={err.get('message')}")
                raise RuntimeError(f"{method} RPC error: {err}")
            return data.get("result")
        raise RuntimeError(f"Retries exhausted for {method}")

    async def get_signatures(
        self,
        address: PubkeyStr,
        before: Signature | None = None,
        limit: int = 1000,
    ) -> list[SignatureRef]:
        opts: dict[str, Any] = {"limit": limit}
        if before:
            opts["before"] = str(before)
        res = await self._call("getSignaturesForAddress", [str(address), opts]) or []
        return [
            SignatureRef(
                signature=Signature(s["signature"]),
                block_time=s.get("blockTime"),
                slot=s.get("slot"),
                err=s.get("err"),
            )
            for s in res
        ]

    async def get_transaction(self, signature: Signature) -> TxRecord:
        opts = {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}
        try:
            res = await self._call("getTransaction", [str(signature), opts])
        except (httpx.HTTPError, RuntimeError) as e:
            raise FetchFailure(signature, f"{type(e).__name__}: {e}") from e
        if res is None:
            raise FetchFailure(signature, "transaction not found")
        return parse_transaction(signature, res)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "HttpxSolanaRPC":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
