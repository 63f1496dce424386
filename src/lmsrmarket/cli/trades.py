"""Trades subcommand: list, stats."""

from __future__ import annotations

import typer

from lmsrmarket.storage.db import get_connection, init_schema
from lmsrmarket.storage.trades import list_trades, trade_stats

app = typer.Typer(help="Trade ledger")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Max trades to show"),
) -> None:
    """List trades for a market in execution order."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        rows = list_trades(conn, name, limit=limit)
        for t in rows:
            typer.echo(f"  {t.side:<4} {t.amount:>8} {t.outcome:<16} {t.value:.6f}")
        typer.echo(f"Total: {len(rows)} trades")
    finally:
        conn.close()


@app.command("stats")
def stats(ctx: typer.Context, name: str = typer.Argument(..., help="Market name")) -> None:
    """Show trade counts and totals per side."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        s = trade_stats(conn, name)
        for side in ("BUY", "SELL"):
            row = s[side]
            typer.echo(f"{side}: {row['count']} trades  {row['shares']} shares  {row['value']:.6f}")
        typer.echo(f"Net: {s['BUY']['value'] - s['SELL']['value']:.6f}")
    finally:
        conn.close()
