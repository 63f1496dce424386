"""Market subcommand: create, list, show, buy, sell, resolve, payout, export, import, delete."""

from __future__ import annotations

import structlog
import typer

from lmsrmarket.market import LmsrError, LmsrMarket
from lmsrmarket.models import TradeRecord
from lmsrmarket.storage.db import get_connection, init_schema
from lmsrmarket.storage.export import export_market_json, import_market_json
from lmsrmarket.storage.markets import delete_market, list_markets, load_market, market_exists, save_market
from lmsrmarket.storage.trades import append_trade, clear_trades

app = typer.Typer(help="Create, trade and resolve LMSR markets")

log = structlog.get_logger(__name__)


def _connect(ctx: typer.Context):
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    return conn


def _load_or_exit(conn, name: str) -> LmsrMarket[str]:
    market = load_market(conn, name)
    if market is None:
        typer.echo(f"Market not found: {name}")
        raise typer.Exit(1)
    return market


def _check_outcome(market: LmsrMarket[str], outcome: str) -> None:
    # Outcome membership is checked here; the engine treats unknown outcomes as a bug.
    if outcome not in market.outcomes:
        typer.echo(f"Unknown outcome: {outcome}. Choose from: {market.outcomes.labels}")
        raise typer.Exit(1)


def _trade(ctx: typer.Context, side: str, name: str, outcome: str, amount: int, dry_run: bool) -> None:
    conn = _connect(ctx)
    try:
        market = _load_or_exit(conn, name)
        _check_outcome(market, outcome)
        try:
            if dry_run:
                value = market.quote_buy(outcome, amount) if side == "BUY" else market.quote_sell(outcome, amount)
            else:
                value = market.buy(outcome, amount) if side == "BUY" else market.sell(outcome, amount)
        except LmsrError as e:
            typer.echo(f"{type(e).__name__}: {e}")
            raise typer.Exit(1)
        verb = "cost" if side == "BUY" else "proceeds"
        if dry_run:
            typer.echo(f"Quote {side} {amount} {outcome}: {verb} {value:.6f}")
            return
        conn.begin()
        try:
            save_market(conn, name, market)
            append_trade(
                conn, TradeRecord(market_name=name, side=side, outcome=outcome, amount=amount, value=value)
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        log.info("trade_executed", market=name, side=side, outcome=outcome, amount=amount, value=value)
        typer.echo(f"{side} {amount} {outcome}: {verb} {value:.6f}")
        typer.echo(f"New price {outcome}: {market.price(outcome):.6f}  Market volume: {market.market_volume:.6f}")
    finally:
        conn.close()


@app.command("create")
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    liquidity: float | None = typer.Option(
        None, "--liquidity", "-l", help="Liquidity parameter b (default: market.default_liquidity)"
    ),
    outcomes: list[str] | None = typer.Option(
        None, "--outcome", "-o", help="Outcome label, repeat for each (default: market.default_outcomes)"
    ),
) -> None:
    """Create a new market with zero shares."""
    settings = ctx.obj["settings"]
    conn = _connect(ctx)
    try:
        if market_exists(conn, name):
            typer.echo(f"Market already exists: {name}")
            raise typer.Exit(1)
        try:
            market = LmsrMarket(
                outcomes or settings.default_outcomes,
                liquidity if liquidity is not None else settings.default_liquidity,
            )
        except ValueError as e:
            typer.echo(f"Invalid market: {e}")
            raise typer.Exit(1)
        save_market(conn, name, market)
        log.info("market_created", market=name, outcomes=market.outcomes.labels, liquidity=market.liquidity)
        typer.echo(f"Created market {name} with outcomes {market.outcomes.labels} (b={market.liquidity})")
    finally:
        conn.close()


@app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List stored markets."""
    conn = _connect(ctx)
    try:
        rows = list_markets(conn)
        for r in rows:
            status = f"resolved={r['resolved']}" if r["resolved"] else "open"
            typer.echo(f"  {r['name']}  b={r['liquidity']}  volume={r['market_volume']:.4f}  {status}")
        typer.echo(f"Total: {len(rows)} markets")
    finally:
        conn.close()


@app.command("show")
def show(ctx: typer.Context, name: str = typer.Argument(..., help="Market name")) -> None:
    """Show shares and prices per outcome."""
    conn = _connect(ctx)
    try:
        market = _load_or_exit(conn, name)
        typer.echo(f"Market: {name}  b={market.liquidity}")
        for outcome, shares, price in zip(market.outcomes, market.shares, market.prices()):
            typer.echo(f"  {outcome:<16} shares={shares:<8} price={price:.6f}")
        typer.echo(f"Market volume: {market.market_volume:.6f}")
        typer.echo(f"Resolved: {market.resolved if market.is_resolved else '-'}")
    finally:
        conn.close()


@app.command("buy")
def buy(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    outcome: str = typer.Argument(..., help="Outcome label"),
    amount: int = typer.Argument(..., min=0, help="Shares to buy"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Quote the cost without trading"),
) -> None:
    """Buy shares of an outcome."""
    _trade(ctx, "BUY", name, outcome, amount, dry_run)


@app.command("sell")
def sell(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    outcome: str = typer.Argument(..., help="Outcome label"),
    amount: int = typer.Argument(..., min=0, help="Shares to sell"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Quote the proceeds without trading"),
) -> None:
    """Sell shares of an outcome back to the market."""
    _trade(ctx, "SELL", name, outcome, amount, dry_run)


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    outcome: str = typer.Argument(..., help="Winning outcome label"),
) -> None:
    """Permanently resolve a market."""
    conn = _connect(ctx)
    try:
        market = _load_or_exit(conn, name)
        _check_outcome(market, outcome)
        try:
            market.resolve(outcome)
        except LmsrError as e:
            typer.echo(f"{type(e).__name__}: {e}")
            raise typer.Exit(1)
        save_market(conn, name, market)
        log.info("market_resolved", market=name, outcome=outcome)
        typer.echo(f"Resolved {name} to {outcome}")
    finally:
        conn.close()


@app.command("payout")
def payout(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    outcome: str | None = typer.Option(None, "--outcome", "-o", help="Outcome (default: resolved outcome)"),
) -> None:
    """Show payout per share."""
    conn = _connect(ctx)
    try:
        market = _load_or_exit(conn, name)
        if outcome is None:
            if not market.is_resolved:
                typer.echo(f"Market {name} is not resolved; pass --outcome")
                raise typer.Exit(1)
            outcome = market.resolved
        _check_outcome(market, outcome)
        try:
            value = market.payout_per_share(outcome)
        except LmsrError as e:
            typer.echo(f"{type(e).__name__}: {e}")
            raise typer.Exit(1)
        typer.echo(f"Payout per share {outcome}: {value:.6f}  ({market.shares_of(outcome)} shares)")
    finally:
        conn.close()


@app.command("export")
def export(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Market name"),
    output: str = typer.Option("market.json", "--output", "-o", help="Output path"),
) -> None:
    """Export a market snapshot to JSON."""
    conn = _connect(ctx)
    try:
        market = _load_or_exit(conn, name)
        path = export_market_json(market, output)
        typer.echo(f"Exported {name} to {path}")
    finally:
        conn.close()


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="JSON file written by 'market export'"),
    name: str = typer.Option(..., "--name", "-n", help="Name to store the market under"),
    force: bool = typer.Option(False, "--force", help="Replace an existing market of that name"),
) -> None:
    """Import a market snapshot from JSON."""
    try:
        market = import_market_json(path)
    except (OSError, ValueError) as e:
        typer.echo(f"Invalid snapshot {path}: {e}")
        raise typer.Exit(1)
    conn = _connect(ctx)
    try:
        if market_exists(conn, name) and not force:
            typer.echo(f"Market already exists: {name} (use --force to replace)")
            raise typer.Exit(1)
        # The replaced market's ledger does not describe the imported state
        conn.begin()
        try:
            clear_trades(conn, name)
            save_market(conn, name, market)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        typer.echo(f"Imported {name} with outcomes {market.outcomes.labels}")
    finally:
        conn.close()


@app.command("delete")
def delete(ctx: typer.Context, name: str = typer.Argument(..., help="Market name")) -> None:
    """Delete a market and its trade history."""
    conn = _connect(ctx)
    try:
        if not delete_market(conn, name):
            typer.echo(f"Market not found: {name}")
            raise typer.Exit(1)
        typer.echo(f"Deleted {name}")
    finally:
        conn.close()
