# tests/unit/test_pari_mutuel.py
"""Unit tests for pari-mutuel share, odds, payout and quote arithmetic."""
import pytest

from src.pm_clearing.domain.pari_mutuel import (
    INITIAL_SHARE_MULTIPLIER,
    calculate_odds,
    calculate_payout,
    calculate_quote,
    calculate_shares,
)
from src.pm_common.amounts import U64_MAX
from src.pm_common.errors import ArithmeticOverflowError, InternalError


class TestCalculateShares:
    def test_first_bet_gets_initial_multiplier(self) -> None:
        assert calculate_shares(0, 0, 100) == 100 * INITIAL_SHARE_MULTIPLIER
        assert calculate_shares(0, 0, 1) == 1000

    def test_later_bet_priced_against_pool(self) -> None:
        # floor(50 * 100000 / 100)
        assert calculate_shares(100, 100_000, 50) == 50_000

    def test_floors_toward_pool(self) -> None:
        # 10 * 1000 / 3 = 3333.33 -> 3333
        assert calculate_shares(3, 1000, 10) == 3333

    def test_shares_without_pool_is_a_defect(self) -> None:
        with pytest.raises(InternalError):
            calculate_shares(0, 500, 10)

    def test_first_bet_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflowError):
            calculate_shares(0, 0, U64_MAX // 1000 + 1)

    def test_wide_intermediate_does_not_overflow(self) -> None:
        # bet * shares exceeds u64 but the quotient fits
        big = U64_MAX // 2
        assert calculate_shares(big, big, 10) == 10


class TestCalculateOdds:
    def test_empty_market_is_even(self) -> None:
        assert calculate_odds(0, 0) == (0.5, 0.5)

    def test_proportional_to_pools(self) -> None:
        assert calculate_odds(100, 300) == (0.25, 0.75)

    def test_one_sided(self) -> None:
        assert calculate_odds(0, 50) == (0.0, 1.0)

    def test_sums_to_one(self) -> None:
        yes, no = calculate_odds(7, 13)
        assert yes + no == pytest.approx(1.0)


class TestCalculatePayout:
    def test_single_winner_takes_pool(self) -> None:
        assert calculate_payout(400, 100_000, 100_000) == 400

    def test_proportional_split(self) -> None:
        assert calculate_payout(1000, 1, 3) == 333

    def test_no_winning_shares_pays_nothing(self) -> None:
        assert calculate_payout(400, 0, 0) == 0

    def test_loser_gets_nothing(self) -> None:
        assert calculate_payout(400, 0, 100_000) == 0


class TestCalculateQuote:
    def test_quote_on_empty_market(self) -> None:
        shares, payout = calculate_quote(0, 0, 0, 0, 100)
        assert shares == 100_000
        assert payout == 100

    def test_quote_against_existing_pools(self) -> None:
        # Yes: pool 100 / 100_000 shares; No: 300. Betting 100 more on Yes.
        shares, payout = calculate_quote(100, 300, 100, 100_000, 100)
        assert shares == 100_000
        # (400 + 100) * 100_000 / 200_000
        assert payout == 250
