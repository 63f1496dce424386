"""Canonical schema (Pydantic) - MarketSnapshot, TradeRecord."""

from lmsrmarket.models.snapshot import MarketDocument, MarketSnapshot
from lmsrmarket.models.trade import TradeRecord

__all__ = [
    "MarketSnapshot",
    "MarketDocument",
    "TradeRecord",
]
