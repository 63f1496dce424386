"""Market protocol - shared call surface for automated market makers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

O = TypeVar("O")


class Market(ABC, Generic[O]):
    """Base for market makers. Errors are raised as exceptions (see market.errors)."""

    @abstractmethod
    def price(self, outcome: O) -> float:
        """Instantaneous price of one share of outcome."""
        ...

    @abstractmethod
    def buy(self, outcome: O, amount: int) -> float:
        """Issue amount shares of outcome. Returns what the trader owes."""
        ...

    @abstractmethod
    def sell(self, outcome: O, amount: int) -> float:
        """Redeem amount shares of outcome. Returns the proceeds owed to the trader."""
        ...

    @abstractmethod
    def resolve(self, winning_outcome: O) -> None:
        """Permanently resolve the market with the correct outcome."""
        ...

    @abstractmethod
    def payout_per_share(self, outcome: O) -> float:
        """Payout per share for outcome after resolution."""
        ...
