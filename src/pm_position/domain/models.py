"""Domain models for pm_position — pure dataclasses, no persistence dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import Outcome


@dataclass
class UserPosition:
    market_id: int
    user: str
    yes_shares: int = 0
    no_shares: int = 0
    yes_amount: int = 0         # cumulative stake on Yes
    no_amount: int = 0          # cumulative stake on No
    claimed: bool = False
    last_bet_time: datetime | None = None

    @property
    def total_amount(self) -> int:
        return self.yes_amount + self.no_amount

    def shares_for(self, outcome: Outcome) -> int:
        return self.yes_shares if outcome == Outcome.YES else self.no_shares


@dataclass
class StakeTotals:
    """Per-market sums across every position; used for conservation checks."""

    yes_amount: int = 0
    no_amount: int = 0
    yes_shares: int = 0
    no_shares: int = 0
