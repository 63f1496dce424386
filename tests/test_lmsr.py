"""LMSR engine unit tests."""

import math

import pytest

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

YES = BinaryOutcome.YES
NO = BinaryOutcome.NO
EPS = 1e-9


@pytest.fixture
def market():
    return LmsrMarket(OutcomeSet.binary(), 10.0)


def _state(m):
    return (m.shares, m.market_volume, m.resolved)


def test_new_market_prices_equal(market):
    assert market.price(YES) == market.price(NO) == 0.5
    assert market.shares == (0, 0)
    assert market.market_volume == 0.0
    assert market.resolved is None
    assert not market.is_resolved


def test_prices_normalized_multi_outcome():
    m = LmsrMarket(["A", "B", "C", "D"], 25.0)
    for outcome, amount in [("A", 7), ("B", 30), ("D", 2), ("A", 11)]:
        m.buy(outcome, amount)
        prices = m.prices()
        assert abs(sum(prices) - 1.0) < EPS
        assert all(0 < p < 1 for p in prices)
        assert prices == [m.price(o) for o in m.outcomes]


def test_buy_raises_price(market):
    cost = market.buy(YES, 1)
    assert cost > 0
    assert market.price(YES) > market.price(NO)
    assert market.shares_of(YES) == 1
    assert abs(market.market_volume - cost) < EPS


def test_buy_raises_price_relative_to_all_others():
    m = LmsrMarket(["A", "B", "C"], 5.0)
    m.buy("B", 3)
    before = m.prices()
    m.buy("A", 4)
    after = m.prices()
    assert after[0] > before[0]
    assert after[1] < before[1]
    assert after[2] < before[2]
    assert after[0] > after[1] and after[0] > after[2]


def test_buy_cost_matches_cost_function_difference(market):
    before = market.cost()
    assert abs(before - 10.0 * math.log(2)) < EPS
    cost = market.buy(YES, 8)
    expected = 10.0 * math.log(math.exp(0.8) + 1.0) - 10.0 * math.log(2.0)
    assert abs(cost - expected) < EPS
    assert abs(market.cost() - before - cost) < EPS


def test_buy_sell_no_impact_on_market(market):
    market.buy(YES, 1)
    market.sell(YES, 1)
    assert abs(market.price(YES) - market.price(NO)) < EPS
    assert market.shares == (0, 0)


def test_buy_sell_no_impact_on_trader(market):
    cost = market.buy(YES, 1)
    proceeds = market.sell(YES, 1)
    assert abs(cost - proceeds) < EPS
    assert abs(market.market_volume) < EPS


def test_round_trip_restores_prices_after_other_trades():
    m = LmsrMarket(["A", "B", "C"], 10.0)
    m.buy("B", 6)
    m.buy("C", 2)
    before = m.prices()
    cost = m.buy("A", 9)
    proceeds = m.sell("A", 9)
    assert abs(cost - proceeds) < EPS
    assert all(abs(a - b) < EPS for a, b in zip(before, m.prices()))


def test_quotes_do_not_mutate(market):
    quoted = market.quote_buy(YES, 3)
    assert market.shares == (0, 0)
    assert market.market_volume == 0.0
    assert abs(market.buy(YES, 3) - quoted) < EPS
    quoted_sell = market.quote_sell(YES, 2)
    assert market.shares == (3, 0)
    assert abs(market.sell(YES, 2) - quoted_sell) < EPS


def test_market_payout_same_one(market):
    cost = market.buy(YES, 1)
    market.resolve(YES)
    assert abs(cost - market.payout_per_share(YES)) < EPS


def test_market_payout_same_multiple(market):
    cost = market.buy(YES, 8)
    market.resolve(YES)
    assert market.resolved is YES
    assert abs(cost - market.payout_per_share(YES) * 8) < EPS


def test_market_payout_different_multiple(market):
    cost = market.buy(YES, 4)
    cost += market.buy(NO, 5)
    market.resolve(YES)
    assert abs(cost - market.payout_per_share(YES) * 4) < EPS


def test_market_payout_different_multiple_with_sell(market):
    cost = market.buy(YES, 4)
    cost += market.buy(NO, 5)
    cost -= market.sell(NO, 1)
    market.resolve(YES)
    assert market.shares == (4, 4)
    assert abs(cost - market.payout_per_share(YES) * 4) < EPS


def test_payout_without_shares_fails(market):
    market.buy(NO, 2)
    market.resolve(YES)
    with pytest.raises(InsufficientShares):
        market.payout_per_share(YES)


def test_sell_without_shares_fails(market):
    with pytest.raises(InsufficientShares):
        market.sell(YES, 1)
    assert _state(market) == ((0, 0), 0.0, None)


def test_sell_more_than_held_leaves_state(market):
    market.buy(YES, 3)
    before = _state(market)
    with pytest.raises(InsufficientShares):
        market.sell(YES, 4)
    assert _state(market) == before


def test_trades_rejected_after_resolution(market):
    market.buy(YES, 2)
    market.resolve(NO)
    before = _state(market)
    with pytest.raises(Resolved):
        market.buy(YES, 1)
    with pytest.raises(Resolved):
        market.sell(YES, 1)
    with pytest.raises(Resolved):
        market.quote_buy(NO, 1)
    assert _state(market) == before
    # Prices stay defined over the frozen shares
    assert market.price(YES) > market.price(NO)


def test_resolve_only_once(market):
    market.resolve(YES)
    with pytest.raises(Resolved):
        market.resolve(NO)
    with pytest.raises(Resolved):
        market.resolve(YES)
    assert market.resolved is YES


def test_negative_capitalization_guard():
    # Restored state whose volume cannot cover a sale
    m = LmsrMarket(["Yes", "No"], 10.0, shares=[5, 0], market_volume=0.1)
    with pytest.raises(NegativeMarketCapitalization):
        m.sell("Yes", 5)
    assert m.shares == (5, 0)
    assert m.market_volume == 0.1
    # A sale the volume can cover still goes through
    proceeds = m.sell("Yes", 0)
    assert proceeds == 0.0


def test_market_errors_share_base():
    for exc in (InsufficientShares, Resolved, NegativeMarketCapitalization):
        assert issubclass(exc, LmsrError)
    assert not issubclass(UnknownOutcome, LmsrError)


def test_unknown_outcome_is_not_a_market_error(market):
    with pytest.raises(UnknownOutcome):
        market.price("Yes")
    with pytest.raises(UnknownOutcome):
        market.buy("Maybe", 1)
    assert market.shares == (0, 0)


@pytest.mark.parametrize("amount,exc", [(-1, ValueError), (1.5, TypeError), (True, TypeError)])
def test_invalid_amounts(market, amount, exc):
    with pytest.raises(exc):
        market.buy(YES, amount)
    assert _state(market) == ((0, 0), 0.0, None)


@pytest.mark.parametrize("liquidity", [0.0, -5.0, float("nan"), float("inf")])
def test_invalid_liquidity(liquidity):
    with pytest.raises(ValueError):
        LmsrMarket(OutcomeSet.binary(), liquidity)


def test_restore_arguments_validated():
    with pytest.raises(ValueError):
        LmsrMarket(["A", "B"], 1.0, shares=[1, 2, 3])
    with pytest.raises(ValueError):
        LmsrMarket(["A", "B"], 1.0, shares=[-1, 0])
    with pytest.raises(ValueError):
        LmsrMarket(["A", "B"], 1.0, market_volume=-0.5)
    with pytest.raises(UnknownOutcome):
        LmsrMarket(["A", "B"], 1.0, resolved="C")


def test_large_positions_do_not_overflow():
    m = LmsrMarket(["Yes", "No"], 10.0)
    cost = m.buy("Yes", 100_000)
    assert math.isfinite(cost)
    assert abs(sum(m.prices()) - 1.0) < EPS
    proceeds = m.sell("Yes", 100_000)
    assert math.isfinite(proceeds)
    assert abs(m.price("Yes") - 0.5) < EPS


def test_implements_market_interface(market):
    assert isinstance(market, Market)
    with pytest.raises(TypeError):
        Market()


def test_bool_does_not_alias_int_outcome():
    m = LmsrMarket([0, 1], 10.0)
    with pytest.raises(UnknownOutcome):
        m.buy(True, 3)
    assert m.shares == (0, 0)
    m.buy(1, 3)
    assert m.shares == (0, 3)
