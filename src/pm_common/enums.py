"""Global enums — values must match DB CHECK constraints and the wire format exactly."""

from enum import Enum


class MarketStatus(str, Enum):
    ACTIVE = "Active"
    LOCKED = "Locked"  # transient inside resolve, never persisted
    RESOLVED = "Resolved"
    CANCELLED = "Cancelled"


class Outcome(str, Enum):
    YES = "Yes"
    NO = "No"


class CategoryKind(str, Enum):
    SPORTS = "Sports"
    CRYPTO = "Crypto"
    BINARY = "Binary"


class MarketSort(str, Enum):
    ENDING_SOON = "ending-soon"
    NEWEST = "newest"
    POPULAR = "popular"
    ALPHABETICAL = "alphabetical"


TERMINAL_STATUSES = (MarketStatus.RESOLVED, MarketStatus.CANCELLED)
