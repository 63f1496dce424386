"""Append-only trade ledger."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from lmsrmarket.models import TradeRecord

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def append_trade(conn: DuckDBPyConnection, trade: TradeRecord) -> None:
    """Append one trades row."""
    conn.execute(
        """
        INSERT INTO trades (market_name, side, outcome, amount, value, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [
            trade.market_name,
            trade.side,
            trade.outcome,
            trade.amount,
            trade.value,
            trade.created_at or int(time.time() * 1000),
        ],
    )


def list_trades(conn: DuckDBPyConnection, market_name: str, limit: int | None = None) -> list[TradeRecord]:
    """Trades for a market in execution order."""
    sql = "SELECT market_name, side, outcome, amount, value, created_at FROM trades WHERE market_name = ? ORDER BY id"
    params: list = [market_name]
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)
    rows = conn.execute(sql, params).fetchall()
    return [
        TradeRecord(market_name=r[0], side=r[1], outcome=r[2], amount=r[3], value=r[4], created_at=r[5])
        for r in rows
    ]


def trade_stats(conn: DuckDBPyConnection, market_name: str) -> dict:
    """Counts and totals per side for a market."""
    rows = conn.execute(
        "SELECT side, COUNT(*), COALESCE(SUM(amount), 0), COALESCE(SUM(value), 0) FROM trades WHERE market_name = ? GROUP BY side",
        [market_name],
    ).fetchall()
    stats = {"BUY": {"count": 0, "shares": 0, "value": 0.0}, "SELL": {"count": 0, "shares": 0, "value": 0.0}}
    for side, count, shares, value in rows:
        stats[side] = {"count": count, "shares": int(shares), "value": float(value)}
    return stats


def clear_trades(conn: DuckDBPyConnection, market_name: str) -> None:
    """Drop a market's ledger rows."""
    conn.execute("DELETE FROM trades WHERE market_name = ?", [market_name])
