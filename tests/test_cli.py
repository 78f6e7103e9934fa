from __future__ import annotations

import json

from click.testing import CliRunner

import solfind.cli as cli_mod
from solfind.domain.models import SignatureRef

from fakes import FakeRPC, make_tx


def test_history_command(tmp_path, monkeypatch) -> None:
    rpc = FakeRPC(
        [SignatureRef(signature="sig0", block_time=2_000_000_000),
         SignatureRef(signature="sig1", block_time=2_000_000_000)],
        {"sig0": make_tx("sig0"), "sig1": make_tx("sig1", "other")},
    )
    monkeypatch.setattr(cli_mod, "HttpxSolanaRPC", lambda *a, **kw: rpc)
    out = tmp_path / "trades.json"

    result = CliRunner().invoke(cli_mod.cli, ["history", "Owner111", "--days", "1",
                                              "--concurrency", "2", "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert "Transactions: 1 pumpfun, 2 total." in result.output
    assert rpc.closed
    assert [r["signature"] for r in json.loads(out.read_text())] == ["sig0"]


def test_rpc_errors_become_click_errors(monkeypatch) -> None:
    class Broken(FakeRPC):
        async def get_signatures(self, *a, **kw):
            raise RuntimeError("getSignaturesForAddress RPC error: Invalid param")

    monkeypatch.setattr(cli_mod, "HttpxSolanaRPC", lambda *a, **kw: Broken([], {}))
    result = CliRunner().invoke(cli_mod.cli, ["history", "Owner111"])
    assert result.exit_code == 1
    assert "Invalid param" in result.output


def test_rejects_zero_concurrency() -> None:
    result = CliRunner().invoke(cli_mod.cli, ["history", "Owner111", "--concurrency", "0"])
    assert result.exit_code == 2
