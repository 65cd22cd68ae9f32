"""Global enums — values are persisted verbatim, must match DB CHECK constraints."""

from enum import Enum


class ComboStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PARTIALLY_RESOLVED = "PARTIALLY_RESOLVED"
    WON = "WON"
    LOST = "LOST"
    CANCELLED = "CANCELLED"


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderDuration(str, Enum):
    GTC = "GTC"  # good till cancelled
    IOC = "IOC"  # immediate or cancel


class OrderStatus(str, Enum):
    OPEN = "OPEN"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class AgentStrategy(str, Enum):
    MOMENTUM = "MOMENTUM"
    MEAN_REVERSION = "MEAN_REVERSION"
    ARBITRAGE = "ARBITRAGE"
    MARKET_MAKER = "MARKET_MAKER"
    SENTIMENT = "SENTIMENT"
    CUSTOM = "CUSTOM"


class FeedItemType(str, Enum):
    TRADE = "TRADE"
    MARKET_CREATED = "MARKET_CREATED"
    COMMENT = "COMMENT"
    FOLLOW = "FOLLOW"
    ACHIEVEMENT = "ACHIEVEMENT"


class Counter(str, Enum):
    """Dedicated id counters, one per entity kind."""

    MARKET = "market"
    ORDER = "order"
    COMBO = "combo"
    AGENT = "agent"
    FEED = "feed"
