"""Feed item builders for the events that post to the public feed.

Amounts inside `data` are decimal strings, like every large integer the
API hands out.
"""

from datetime import datetime

from src.pm_common.enums import FeedItemType
from src.pm_common.errors import SelfFollowError
from src.pm_common.fixed_point import to_display
from src.pm_social.domain.models import FeedItem


def market_created(
    item_id: int, author: str, market_id: int, question: str, liquidity: int, now: datetime
) -> FeedItem:
    return FeedItem(
        id=item_id,
        author=author,
        item_type=FeedItemType.MARKET_CREATED,
        content=question,
        created_at=now,
        market_id=market_id,
        data={"initial_liquidity": str(liquidity)},
    )


def trade(
    item_id: int,
    author: str,
    market_id: int,
    is_yes: bool,
    shares: int,
    cost: int,
    now: datetime,
) -> FeedItem:
    side = "YES" if is_yes else "NO"
    return FeedItem(
        id=item_id,
        author=author,
        item_type=FeedItemType.TRADE,
        content=f"Bought {to_display(shares)} {side} shares",
        created_at=now,
        market_id=market_id,
        data={"is_yes": is_yes, "shares": str(shares), "cost": str(cost)},
    )


def comment(item_id: int, author: str, market_id: int, content: str, now: datetime) -> FeedItem:
    return FeedItem(
        id=item_id,
        author=author,
        item_type=FeedItemType.COMMENT,
        content=content,
        created_at=now,
        market_id=market_id,
    )


def check_follow_target(follower: str, followee: str) -> None:
    if follower == followee:
        raise SelfFollowError()
