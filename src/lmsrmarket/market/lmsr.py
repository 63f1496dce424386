"""LMSR market maker - cost-function pricing, trade execution, resolution and payout.

Cost function: C(q) = b * ln(sum_i exp(q_i / b)). Its gradient is the softmax of
q / b, which is the vector of instantaneous outcome prices.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence, TypeVar

import structlog

from lmsrmarket.market.base import Market
from lmsrmarket.market.errors import InsufficientShares, NegativeMarketCapitalization, Resolved
from lmsrmarket.market.outcomes import OutcomeSet

log = structlog.get_logger(__name__)

T = TypeVar("T")


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"Share amount must be an int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"Share amount must be non-negative, got {amount}")


class LmsrMarket(Market[T]):
    """Logarithmic Market Scoring Rule market over a fixed outcome set.

    State is the per-outcome share count, the liquidity parameter b, the
    winning outcome once resolved, and the net funds collected from traders.
    Every mutating call either commits shares and volume together or raises
    and leaves both untouched. No internal locking: callers sharing an instance
    across threads must serialize access themselves.
    """

    __slots__ = ("_outcomes", "_shares", "_liquidity", "_resolved", "_market_volume")

    def __init__(
        self,
        outcomes: OutcomeSet[T] | Iterable[T],
        liquidity: float,
        *,
        shares: Sequence[int] | None = None,
        resolved: T | None = None,
        market_volume: float = 0.0,
    ) -> None:
        if not isinstance(outcomes, OutcomeSet):
            outcomes = OutcomeSet(outcomes)
        liquidity = float(liquidity)
        if not (liquidity > 0 and math.isfinite(liquidity)):
            raise ValueError(f"Liquidity must be a positive finite number, got {liquidity}")
        if shares is None:
            shares = [0] * len(outcomes)
        shares = list(shares)
        if len(shares) != len(outcomes):
            raise ValueError(f"Expected {len(outcomes)} share counts, got {len(shares)}")
        for q in shares:
            _check_amount(q)
        if resolved is not None:
            outcomes.index_of(resolved)
        market_volume = float(market_volume)
        if not market_volume >= 0:
            raise ValueError(f"Market volume must be non-negative, got {market_volume}")
        self._outcomes = outcomes
        self._shares = shares
        self._liquidity = liquidity
        self._resolved = resolved
        self._market_volume = market_volume

    # --- State ---

    @property
    def outcomes(self) -> OutcomeSet[T]:
        return self._outcomes

    @property
    def shares(self) -> tuple[int, ...]:
        return tuple(self._shares)

    @property
    def liquidity(self) -> float:
        return self._liquidity

    @property
    def resolved(self) -> T | None:
        return self._resolved

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    @property
    def market_volume(self) -> float:
        return self._market_volume

    def shares_of(self, outcome: T) -> int:
        return self._shares[self._outcomes.index_of(outcome)]

    # --- Pricing ---

    def _scaled(self, shares: Sequence[int]) -> tuple[list[float], float]:
        # Shift by the max exponent so exp() stays in range for large positions
        scaled = [q / self._liquidity for q in shares]
        return scaled, max(scaled)

    def _cost(self, shares: Sequence[int]) -> float:
        scaled, top = self._scaled(shares)
        return self._liquidity * (top + math.log(sum(math.exp(x - top) for x in scaled)))

    def cost(self) -> float:
        """Current value of the cost function."""
        return self._cost(self._shares)

    def price(self, outcome: T) -> float:
        i = self._outcomes.index_of(outcome)
        scaled, top = self._scaled(self._shares)
        weights = [math.exp(x - top) for x in scaled]
        return weights[i] / sum(weights)

    def prices(self) -> list[float]:
        """Prices of all outcomes in index order."""
        scaled, top = self._scaled(self._shares)
        weights = [math.exp(x - top) for x in scaled]
        total = sum(weights)
        return [w / total for w in weights]

    # --- Trading ---

    def _quote_buy(self, outcome: T, amount: int) -> tuple[list[int], float]:
        if self._resolved is not None:
            raise Resolved(f"Market resolved to {self._resolved!r}; buy rejected")
        _check_amount(amount)
        i = self._outcomes.index_of(outcome)
        candidate = list(self._shares)
        candidate[i] += amount
        return candidate, self._cost(candidate) - self._cost(self._shares)

    def _quote_sell(self, outcome: T, amount: int) -> tuple[list[int], float]:
        if self._resolved is not None:
            raise Resolved(f"Market resolved to {self._resolved!r}; sell rejected")
        _check_amount(amount)
        i = self._outcomes.index_of(outcome)
        if amount > self._shares[i]:
            raise InsufficientShares(
                f"Cannot sell {amount} of {outcome!r}: only {self._shares[i]} issued"
            )
        candidate = list(self._shares)
        candidate[i] -= amount
        proceeds = self._cost(self._shares) - self._cost(candidate)
        if self._market_volume - proceeds < 0.0:
            log.warning(
                "sell_rejected_negative_capitalization",
                outcome=outcome,
                amount=amount,
                proceeds=proceeds,
                market_volume=self._market_volume,
            )
            raise NegativeMarketCapitalization(
                f"Proceeds {proceeds} exceed market volume {self._market_volume}"
            )
        return candidate, proceeds

    def quote_buy(self, outcome: T, amount: int) -> float:
        """What buy(outcome, amount) would cost, without trading."""
        return self._quote_buy(outcome, amount)[1]

    def quote_sell(self, outcome: T, amount: int) -> float:
        """What sell(outcome, amount) would pay, without trading."""
        return self._quote_sell(outcome, amount)[1]

    def buy(self, outcome: T, amount: int) -> float:
        candidate, owed = self._quote_buy(outcome, amount)
        self._shares = candidate
        self._market_volume += owed
        log.debug("market_buy", outcome=outcome, amount=amount, cost=owed, market_volume=self._market_volume)
        return owed

    def sell(self, outcome: T, amount: int) -> float:
        candidate, proceeds = self._quote_sell(outcome, amount)
        self._shares = candidate
        self._market_volume -= proceeds
        log.debug(
            "market_sell", outcome=outcome, amount=amount, proceeds=proceeds, market_volume=self._market_volume
        )
        return proceeds

    # --- Resolution ---

    def resolve(self, winning_outcome: T) -> None:
        """Resolve to winning_outcome. A market resolves once; later calls raise Resolved."""
        self._outcomes.index_of(winning_outcome)
        if self._resolved is not None:
            raise Resolved(f"Market already resolved to {self._resolved!r}")
        self._resolved = winning_outcome
        log.debug("market_resolved", outcome=winning_outcome, market_volume=self._market_volume)

    def payout_per_share(self, outcome: T) -> float:
        """market_volume / shares[outcome]. Only meaningful for the resolved outcome."""
        issued = self._shares[self._outcomes.index_of(outcome)]
        if issued == 0:
            raise InsufficientShares(f"No shares issued for {outcome!r}")
        return self._market_volume / issued

    def __repr__(self) -> str:
        return (
            f"LmsrMarket(outcomes={self._outcomes.labels!r}, shares={self._shares!r}, "
            f"liquidity={self._liquidity!r}, resolved={self._resolved!r}, "
            f"market_volume={self._market_volume!r})"
        )
