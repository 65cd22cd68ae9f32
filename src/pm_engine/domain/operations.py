"""Closed operation set and its responses as pydantic tagged unions.

Each variant carries a `kind` literal; Operation / OperationResponse are
discriminated on it so a JSON body parses straight to the right class.
Amounts are attos ints bounded to the unsigned 128-bit domain.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from src.pm_common.enums import AgentStrategy, OrderDuration, OrderSide
from src.pm_common.fixed_point import U128_MAX
from src.pm_common.response import AmountStr

Amount = Annotated[int, Field(ge=0, le=U128_MAX)]

# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class CreateMarket(BaseModel):
    kind: Literal["create_market"] = "create_market"
    question: str = Field(min_length=1, max_length=500)
    categories: list[str] = Field(default_factory=list)
    end_time: datetime
    initial_liquidity: Amount


class BuyShares(BaseModel):
    kind: Literal["buy_shares"] = "buy_shares"
    market_id: int = Field(ge=0)
    is_yes: bool
    shares: Amount
    max_cost: Amount


class SellShares(BaseModel):
    kind: Literal["sell_shares"] = "sell_shares"
    market_id: int = Field(ge=0)
    is_yes: bool
    shares: Amount
    min_proceeds: Amount = 0


class ResolveMarket(BaseModel):
    kind: Literal["resolve_market"] = "resolve_market"
    market_id: int = Field(ge=0)
    outcome: bool


class ClaimWinnings(BaseModel):
    kind: Literal["claim_winnings"] = "claim_winnings"
    market_id: int = Field(ge=0)


class PlaceLimitOrder(BaseModel):
    kind: Literal["place_limit_order"] = "place_limit_order"
    market_id: int = Field(ge=0)
    is_yes: bool
    side: OrderSide
    price: Amount
    amount: Amount
    duration: OrderDuration = OrderDuration.GTC


class CancelLimitOrder(BaseModel):
    kind: Literal["cancel_limit_order"] = "cancel_limit_order"
    order_id: int = Field(ge=0)


class ComboLegInput(BaseModel):
    market_id: int = Field(ge=0)
    prediction: bool  # True = YES


class CreateCombo(BaseModel):
    kind: Literal["create_combo"] = "create_combo"
    name: str = Field(min_length=1, max_length=200)
    legs: list[ComboLegInput]
    stake: Amount


class CancelCombo(BaseModel):
    kind: Literal["cancel_combo"] = "cancel_combo"
    combo_id: int = Field(ge=0)


class CreateAgent(BaseModel):
    kind: Literal["create_agent"] = "create_agent"
    name: str = Field(min_length=1, max_length=100)
    strategy: AgentStrategy
    config: dict[str, Any] = Field(default_factory=dict)
    initial_capital: Amount


class UpdateAgentConfig(BaseModel):
    kind: Literal["update_agent_config"] = "update_agent_config"
    agent_id: int = Field(ge=0)
    config: dict[str, Any]


class ToggleAgent(BaseModel):
    kind: Literal["toggle_agent"] = "toggle_agent"
    agent_id: int = Field(ge=0)
    active: bool


class FollowAgent(BaseModel):
    kind: Literal["follow_agent"] = "follow_agent"
    agent_id: int = Field(ge=0)
    allocation: Amount


class UnfollowAgent(BaseModel):
    kind: Literal["unfollow_agent"] = "unfollow_agent"
    agent_id: int = Field(ge=0)


class PostComment(BaseModel):
    kind: Literal["post_comment"] = "post_comment"
    market_id: int = Field(ge=0)
    content: str = Field(min_length=1, max_length=1000)


class FollowUser(BaseModel):
    kind: Literal["follow_user"] = "follow_user"
    user: str = Field(min_length=1, max_length=128)


class UnfollowUser(BaseModel):
    kind: Literal["unfollow_user"] = "unfollow_user"
    user: str = Field(min_length=1, max_length=128)


class LikeFeedItem(BaseModel):
    kind: Literal["like_feed_item"] = "like_feed_item"
    item_id: int = Field(ge=0)


Operation = Annotated[
    Union[
        CreateMarket,
        BuyShares,
        SellShares,
        ResolveMarket,
        ClaimWinnings,
        PlaceLimitOrder,
        CancelLimitOrder,
        CreateCombo,
        CancelCombo,
        CreateAgent,
        UpdateAgentConfig,
        ToggleAgent,
        FollowAgent,
        UnfollowAgent,
        PostComment,
        FollowUser,
        UnfollowUser,
        LikeFeedItem,
    ],
    Field(discriminator="kind"),
]

operation_adapter: TypeAdapter[Operation] = TypeAdapter(Operation)

# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketCreated(BaseModel):
    kind: Literal["market_created"] = "market_created"
    market_id: int


class SharesPurchased(BaseModel):
    kind: Literal["shares_purchased"] = "shares_purchased"
    cost: AmountStr


class SharesSold(BaseModel):
    kind: Literal["shares_sold"] = "shares_sold"
    proceeds: AmountStr


class MarketResolved(BaseModel):
    kind: Literal["market_resolved"] = "market_resolved"
    combos_updated: int


class WinningsClaimed(BaseModel):
    kind: Literal["winnings_claimed"] = "winnings_claimed"
    payout: AmountStr


class LimitOrderPlaced(BaseModel):
    kind: Literal["limit_order_placed"] = "limit_order_placed"
    order_id: int


class LimitOrderCancelled(BaseModel):
    kind: Literal["limit_order_cancelled"] = "limit_order_cancelled"


class ComboCreated(BaseModel):
    kind: Literal["combo_created"] = "combo_created"
    combo_id: int
    potential_payout: AmountStr


class ComboCancelled(BaseModel):
    kind: Literal["combo_cancelled"] = "combo_cancelled"


class AgentCreated(BaseModel):
    kind: Literal["agent_created"] = "agent_created"
    agent_id: int


class AgentConfigUpdated(BaseModel):
    kind: Literal["agent_config_updated"] = "agent_config_updated"


class AgentToggled(BaseModel):
    kind: Literal["agent_toggled"] = "agent_toggled"
    is_active: bool


class AgentFollowed(BaseModel):
    kind: Literal["agent_followed"] = "agent_followed"
    followers_count: int


class AgentUnfollowed(BaseModel):
    kind: Literal["agent_unfollowed"] = "agent_unfollowed"
    followers_count: int


class CommentPosted(BaseModel):
    kind: Literal["comment_posted"] = "comment_posted"
    item_id: int


class UserFollowed(BaseModel):
    kind: Literal["user_followed"] = "user_followed"


class UserUnfollowed(BaseModel):
    kind: Literal["user_unfollowed"] = "user_unfollowed"


class FeedItemLiked(BaseModel):
    kind: Literal["feed_item_liked"] = "feed_item_liked"
    likes_count: int


OperationResponse = Annotated[
    Union[
        MarketCreated,
        SharesPurchased,
        SharesSold,
        MarketResolved,
        WinningsClaimed,
        LimitOrderPlaced,
        LimitOrderCancelled,
        ComboCreated,
        ComboCancelled,
        AgentCreated,
        AgentConfigUpdated,
        AgentToggled,
        AgentFollowed,
        AgentUnfollowed,
        CommentPosted,
        UserFollowed,
        UserUnfollowed,
        FeedItemLiked,
    ],
    Field(discriminator="kind"),
]
