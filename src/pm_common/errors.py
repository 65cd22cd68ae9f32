"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Identity / authorization
  3xxx: Market & pricing
  4xxx: Limit order
  5xxx: Position & settlement
  6xxx: Combo
  7xxx: Agents (70xx) / social feed (71xx)
  8xxx: Arithmetic
  9xxx: System
"""


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


# --- 1xxx: Identity ---

class UnauthenticatedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Operation must be authenticated", 401)


class NotAuthorizedError(AppError):
    def __init__(self, detail: str = "Not authorized") -> None:
        super().__init__(1002, detail, 403)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class AlreadyResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3002, f"Market already resolved: {market_id}", 409)


class MarketEndedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3003, f"Market has ended: {market_id}", 422)


class MarketResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3004, f"Market is resolved: {market_id}", 422)


class MarketNotResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3005, f"Market not resolved: {market_id}", 422)


class OutcomeUnsetError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3006, f"Market outcome not set: {market_id}", 500)


class InsufficientLiquidityError(AppError):
    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            3101,
            f"Not enough liquidity: requested {requested}, pool holds {available}",
            422,
        )


class CostExceedsLimitError(AppError):
    def __init__(self, cost: int, max_cost: int) -> None:
        super().__init__(3102, f"Cost {cost} exceeds maximum {max_cost}", 422)


class ProceedsBelowMinimumError(AppError):
    def __init__(self, proceeds: int, min_proceeds: int) -> None:
        super().__init__(3103, f"Proceeds {proceeds} below minimum {min_proceeds}", 422)


class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3104, f"Invalid amount: {detail}", 422)


# --- 4xxx: Limit order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: int) -> None:
        super().__init__(4001, f"Order not found: {order_id}", 404)


class OrderNotCancellableError(AppError):
    def __init__(self, order_id: int, status: str) -> None:
        super().__init__(4002, f"Order {order_id} in status {status} cannot be cancelled", 422)


# --- 5xxx: Position & settlement ---

class PositionNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(5001, f"No position found in market {market_id}", 404)


class InsufficientSharesError(AppError):
    def __init__(self, requested: int, held: int) -> None:
        super().__init__(
            5002, f"Insufficient shares: requested {requested}, held {held}", 422
        )


class AlreadyClaimedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(5003, f"Winnings already claimed for market {market_id}", 409)


class NoWinningSharesError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(5004, f"No winning shares in market {market_id}", 422)


# --- 6xxx: Combo ---

class ComboNotFoundError(AppError):
    def __init__(self, combo_id: int) -> None:
        super().__init__(6001, f"Combo not found: {combo_id}", 404)


class InvalidLegCountError(AppError):
    def __init__(self, count: int, minimum: int, maximum: int) -> None:
        super().__init__(
            6002, f"Combo must have {minimum}-{maximum} legs, got {count}", 422
        )


class ComboMarketResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(6003, f"Combo leg market already resolved: {market_id}", 422)


class ZeroLiquidityError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(6004, f"Market has no liquidity to price: {market_id}", 422)


class PartialResolutionPreventsCancelError(AppError):
    def __init__(self, combo_id: int) -> None:
        super().__init__(
            6005, f"Cannot cancel combo {combo_id}: some markets resolved", 422
        )


class ComboNotCancellableError(AppError):
    def __init__(self, combo_id: int, status: str) -> None:
        super().__init__(6006, f"Combo {combo_id} in status {status} cannot be cancelled", 422)


# --- 7xxx: Agents & social ---

class AgentNotFoundError(AppError):
    def __init__(self, agent_id: int) -> None:
        super().__init__(7001, f"Agent not found: {agent_id}", 404)


class AgentInactiveError(AppError):
    def __init__(self, agent_id: int) -> None:
        super().__init__(7002, f"Agent is not active: {agent_id}", 422)


class AlreadyFollowingAgentError(AppError):
    def __init__(self, agent_id: int) -> None:
        super().__init__(7003, f"Already following agent {agent_id}", 409)


class NotFollowingAgentError(AppError):
    def __init__(self, agent_id: int) -> None:
        super().__init__(7004, f"Not following agent {agent_id}", 422)


class FeedItemNotFoundError(AppError):
    def __init__(self, item_id: int) -> None:
        super().__init__(7101, f"Feed item not found: {item_id}", 404)


class SelfFollowError(AppError):
    def __init__(self) -> None:
        super().__init__(7102, "Users cannot follow themselves", 422)


# --- 8xxx: Arithmetic ---

class DivisionByZeroError(AppError):
    def __init__(self) -> None:
        super().__init__(8001, "Division by zero", 500)


class ArithmeticOverflowError(AppError):
    def __init__(self, detail: str = "Arithmetic overflow") -> None:
        super().__init__(8002, detail, 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
