"""Pari-mutuel share accounting — pure integer arithmetic, no state.

Share issuance:
  first bet on a side:  shares = amount * INITIAL_SHARE_MULTIPLIER
  later bets:           shares = floor(amount * total_shares / current_pool)
  (pool and shares taken BEFORE the bet is applied)

Payout on resolution:
  payout = floor(total_pool * user_winning_shares / total_winning_shares)

Flooring always rounds toward the pool, never in a bettor's favor. If nobody
staked the winning side every payout is 0 and the pool stays where it is.
"""

from src.pm_common.amounts import checked_add, checked_mul, mul_div_floor
from src.pm_common.errors import InternalError

INITIAL_SHARE_MULTIPLIER = 1000
MIN_BET_AMOUNT = 1


def calculate_shares(current_pool: int, total_shares: int, bet_amount: int) -> int:
    """Shares issued for bet_amount against one side's pre-bet pool and share total."""
    if total_shares == 0:
        return checked_mul(bet_amount, INITIAL_SHARE_MULTIPLIER, "issued shares")
    if current_pool == 0:
        raise InternalError(
            f"Share total {total_shares} recorded against an empty pool"
        )
    return mul_div_floor(bet_amount, total_shares, current_pool, "issued shares")


def calculate_odds(yes_pool: int, no_pool: int) -> tuple[float, float]:
    """(yes_odds, no_odds) as fractions of the combined pool; (0.5, 0.5) when empty."""
    total = yes_pool + no_pool
    if total == 0:
        return 0.5, 0.5
    return yes_pool / total, no_pool / total


def calculate_payout(
    total_pool: int, user_winning_shares: int, total_winning_shares: int
) -> int:
    if total_winning_shares == 0:
        return 0
    return mul_div_floor(total_pool, user_winning_shares, total_winning_shares, "payout")


def calculate_quote(
    yes_pool: int,
    no_pool: int,
    side_pool: int,
    side_shares: int,
    bet_amount: int,
) -> tuple[int, int]:
    """(shares, payout) for a hypothetical bet if its side won with no further bets."""
    shares = calculate_shares(side_pool, side_shares, bet_amount)
    total_pool = checked_add(checked_add(yes_pool, no_pool, "total pool"), bet_amount, "total pool")
    side_total = checked_add(side_shares, shares, "side shares")
    return shares, calculate_payout(total_pool, shares, side_total)
