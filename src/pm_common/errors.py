"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Caller
  2xxx: Balance (reserved for custody checks)
  3xxx: Market
  4xxx: Bet
  5xxx: Position
  9xxx: Input/System
"""

from collections.abc import Iterable


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Caller ---

class UnauthorizedError(AppError):
    def __init__(self, detail: str = "Caller is not authorized for this operation") -> None:
        super().__init__(1001, detail, 403)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid or expired token", 401)


# --- 2xxx: Balance ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        self.market_id = market_id
        super().__init__(3001, f"Market not found: {market_id}", 404)


class InvalidMarketStatusError(AppError):
    def __init__(self, expected: str | Iterable[str], actual: str) -> None:
        if isinstance(expected, str):
            expected = (expected,)
        self.expected = tuple(expected)
        self.actual = actual
        super().__init__(
            3002,
            f"Invalid market status: expected {'|'.join(self.expected)}, got {actual}",
            422,
        )


class BettingClosedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3003, f"Betting is closed for market {market_id}", 422)


class EndTimeInPastError(AppError):
    def __init__(self) -> None:
        super().__init__(3004, "Market end time must be in the future", 422)


# --- 4xxx: Bet ---

class BetTooSmallError(AppError):
    def __init__(self, minimum: int, provided: int) -> None:
        self.minimum = minimum
        self.provided = provided
        super().__init__(
            4001,
            f"Bet too small: minimum {minimum}, provided {provided}",
            422,
        )


# --- 5xxx: Position ---

class PositionNotFoundError(AppError):
    def __init__(self, market_id: int, user: str) -> None:
        super().__init__(5001, f"Position not found: market {market_id}, user {user}", 404)


class AlreadyClaimedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(5002, f"Winnings already claimed for market {market_id}", 409)


# --- 9xxx: Input/System ---

class InvalidInputError(AppError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(9001, f"Invalid input: {reason}", 400)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ArithmeticOverflowError(AppError):
    def __init__(self, detail: str = "Arithmetic overflow") -> None:
        super().__init__(9003, detail, 422)


class ResourceBusyError(AppError):
    def __init__(self, resource: str) -> None:
        super().__init__(9004, f"Resource busy, retry later: {resource}", 503)
