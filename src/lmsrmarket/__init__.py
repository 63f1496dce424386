"""LMSR automated market maker for outcome-based prediction markets."""

from lmsrmarket.market import (
    BinaryOutcome,
    InsufficientShares,
    LmsrError,
    LmsrMarket,
    Market,
    NegativeMarketCapitalization,
    OutcomeSet,
    Resolved,
    UnknownOutcome,
)

__all__ = [
    "BinaryOutcome",
    "InsufficientShares",
    "LmsrError",
    "LmsrMarket",
    "Market",
    "NegativeMarketCapitalization",
    "OutcomeSet",
    "Resolved",
    "UnknownOutcome",
]
