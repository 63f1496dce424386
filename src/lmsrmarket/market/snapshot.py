"""Convert between live LmsrMarket state and MarketSnapshot records."""

from __future__ import annotations

from typing import Iterable, TypeVar

from lmsrmarket.market.errors import UnknownOutcome
from lmsrmarket.market.lmsr import LmsrMarket
from lmsrmarket.market.outcomes import OutcomeSet
from lmsrmarket.models.snapshot import MarketSnapshot

T = TypeVar("T")


def snapshot_market(market: LmsrMarket[T]) -> MarketSnapshot:
    """Export the four state fields unchanged. The resolved outcome is stored by label."""
    resolved = market.resolved
    return MarketSnapshot(
        shares=list(market.shares),
        liquidity=market.liquidity,
        resolved=market.outcomes.label_of(resolved) if resolved is not None else None,
        market_volume=market.market_volume,
    )


def restore_market(snapshot: MarketSnapshot, outcomes: OutcomeSet[T] | Iterable[T]) -> LmsrMarket[T]:
    """Rebuild a market from a snapshot taken against the same outcome set.

    Raises ValueError if the record does not fit the outcome set (share count
    differs from the number of outcomes, or resolved names no member).
    """
    if not isinstance(outcomes, OutcomeSet):
        outcomes = OutcomeSet(outcomes)
    if len(snapshot.shares) != len(outcomes):
        raise ValueError(
            f"Snapshot has {len(snapshot.shares)} share counts, outcome set has {len(outcomes)}"
        )
    if snapshot.liquidity <= 0:
        raise ValueError(f"Snapshot liquidity must be positive, got {snapshot.liquidity}")
    resolved = None
    if snapshot.resolved is not None:
        try:
            resolved = outcomes.from_label(snapshot.resolved)
        except UnknownOutcome:
            raise ValueError(f"Snapshot resolved to unknown outcome {snapshot.resolved!r}") from None
    return LmsrMarket(
        outcomes,
        snapshot.liquidity,
        shares=snapshot.shares,
        resolved=resolved,
        market_volume=snapshot.market_volume,
    )
