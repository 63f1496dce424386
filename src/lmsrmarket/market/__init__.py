"""Market makers: outcome registry, market interface, LMSR engine."""

from lmsrmarket.market.base import Market
from lmsrmarket.market.errors import (
    InsufficientShares,
    LmsrError,
    NegativeMarketCapitalization,
    Resolved,
    UnknownOutcome,
)
from lmsrmarket.market.lmsr import LmsrMarket
from lmsrmarket.market.outcomes import BinaryOutcome, OutcomeSet
from lmsrmarket.market.snapshot import restore_market, snapshot_market

__all__ = [
    "Market",
    "LmsrMarket",
    "OutcomeSet",
    "BinaryOutcome",
    "LmsrError",
    "InsufficientShares",
    "Resolved",
    "NegativeMarketCapitalization",
    "UnknownOutcome",
    "snapshot_market",
    "restore_market",
]
