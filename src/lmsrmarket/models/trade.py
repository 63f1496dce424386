"""TradeRecord - executed buy/sell against a market."""

from pydantic import BaseModel, Field


class TradeRecord(BaseModel):
    """One executed trade. value is the cost paid (BUY) or proceeds received (SELL)."""

    market_name: str
    side: str = Field(..., pattern="^(BUY|SELL)$")
    outcome: str
    amount: int = Field(..., ge=0)
    value: float = Field(..., ge=0)
    created_at: int | None = None  # ms epoch
