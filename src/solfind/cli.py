import asyncio, logging, time
import click
import httpx
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress, BarColumn, TextColumn, TimeElapsedColumn,
    TimeRemainingColumn, MofNCompleteColumn, SpinnerColumn
)

from .adapters.names_httpx import HttpxNameResolver
from .adapters.parquet_sink import sink_for_path
from .adapters.rpc_httpx import HttpxSolanaRPC
from .application.signatures import since_days_ago
from .application.use_cases import fetch_trade_history
from .config import (
    DEFAULT_CONCURRENCY, DEFAULT_DAYS, DEFAULT_OUT, DEFAULT_RPC_URL,
    DEFAULT_TIMEOUT_S, PUMPFUN_PROGRAM_ID, SIGNATURE_PAGE_LIMIT,
)
from .domain.value_types import PubkeyStr

console = Console()

def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

@click.group()
@click.option("--log-level", default="INFO", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def cli(log_level):
    """SolFind — fast, Python-native pump.fun trade history fetcher."""
    load_dotenv()
    _setup_logging(log_level)

@cli.command("history")
@click.argument("address")
@click.option("--rpc", envvar="SOLANA_RPC", default=DEFAULT_RPC_URL, show_default=True, help="Solana RPC endpoint URL")
@click.option("--days", type=float, default=DEFAULT_DAYS, show_default=True, help="Look back this many days")
@click.option("--since", type=int, default=None, help="Epoch seconds lower bound (overrides --days)")
@click.option("--concurrency", envvar="SOLFIND_CONCURRENCY", type=click.IntRange(min=1),
              default=DEFAULT_CONCURRENCY, show_default=True, help="Max parallel getTransaction requests")
@click.option("--program", "program_id", envvar="SOLFIND_PROGRAM_ID", default=PUMPFUN_PROGRAM_ID,
              show_default=True, help="Program id the trades must go through")
@click.option("--mode", type=click.Choice(["full", "minimal"]), default="full", show_default=True,
              help="Trade event decoder: strict 137-byte layout or amounts-only")
@click.option("--out", "out_path", default=DEFAULT_OUT, show_default=True,
              help="Output file (.json, or .parquet)")
@click.option("--resolve-names/--no-resolve-names", default=False, show_default=True,
              help="Look up token names via DAS getAsset on the same RPC")
@click.option("--deadline", type=float, default=None,
              help="Stop after this many seconds and write what was collected")
@click.option("--timeout", "timeout_s", envvar="SOLFIND_TIMEOUT_S", type=int,
              default=DEFAULT_TIMEOUT_S, show_default=True, help="Per-request timeout (s)")
def history_cmd(address, rpc, days, since, concurrency, program_id, mode, out_path,
                resolve_names, deadline, timeout_s):
    """Fetch and decode pump.fun trades made by ADDRESS with a live progress bar."""
    since_ts = since if since is not None else since_days_ago(days)

    async def run():
        t0 = time.time()
        progress = Progress(SpinnerColumn(),
                            TextColumn("[bold]fetching transactions[/]"),
                            BarColumn(),
                            MofNCompleteColumn(),
                            TextColumn("•"),
                            TimeElapsedColumn(),
                            TextColumn("→"),
                            TimeRemainingColumn(),
                            console=console,
                            transient=False,
                            expand=True,
                            )
        task = progress.add_task(description=address, total=None)

        cancel = asyncio.Event()
        if deadline is not None:
            asyncio.get_running_loop().call_later(deadline, cancel.set)

        rpc_client = HttpxSolanaRPC(rpc, timeout_s=timeout_s, max_conn=max(32, 2*concurrency))
        resolver = HttpxNameResolver(rpc, timeout_s=timeout_s) if resolve_names else None
        try:
            console.print(f"Fetching signatures since {since_ts} for {address}...")
            with progress:
                res = await fetch_trade_history(
                    rpc=rpc_client,
                    sink=sink_for_path(out_path),
                    address=PubkeyStr(address),
                    since=since_ts,
                    concurrency=concurrency,
                    program_id=program_id,
                    mode=mode,
                    resolver=resolver,
                    page_limit=SIGNATURE_PAGE_LIMIT,
                    cancel=cancel,
                    on_signatures=lambda n: progress.update(task, total=n),
                    on_progress=lambda done, total: progress.update(task, completed=done),
                )
        finally:
            await rpc_client.aclose()
            if resolver is not None:
                await resolver.aclose()

        elapsed = time.time() - t0
        console.print(f"Transactions: {res.matched} pumpfun, {res.total} total.")
        console.print(
            f"[bold]summary[/]: "
            f"[green]matched[/]={res.matched}  "
            f"[red]failed[/]={res.failed}  "
            f"[yellow]completed[/]={res.completed}/{res.total}"
            + ("  [magenta]cancelled[/]" if res.cancelled else "")
            + f" • {elapsed:.2f}s → {out_path}"
        )

    try:
        asyncio.run(run())
    except (RuntimeError, httpx.HTTPError) as e:
        raise click.ClickException(str(e))

if __name__ == "__main__":
    cli()
