"""MarketSnapshot - flat, storable record of LMSR market state."""

from __future__ import annotations

from pydantic import BaseModel, Field, NonNegativeInt


class MarketSnapshot(BaseModel):
    """Market state at the persistence boundary. Shares are indexed like the live outcome set."""

    shares: list[NonNegativeInt] = Field(..., min_length=2)
    liquidity: float = Field(..., gt=0, allow_inf_nan=False)
    resolved: str | None = None  # outcome label
    market_volume: float = Field(0.0, ge=0, allow_inf_nan=False)


class MarketDocument(BaseModel):
    """Snapshot bundled with its outcome labels, for JSON export/import."""

    outcomes: list[str] = Field(..., min_length=2)
    snapshot: MarketSnapshot
