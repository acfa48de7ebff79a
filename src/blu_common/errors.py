"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Input validation
  2xxx: Order / fulfillment
  3xxx: Financing (BluFacilita)
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


# --- 1xxx: Input ---

class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid input: {detail}", 422)


# --- 2xxx: Order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(2001, f"Order not found: {order_id}", 404)


class ConcurrentOrderUpdateError(AppError):
    def __init__(self, order_id: str, version: int) -> None:
        super().__init__(
            2002,
            f"Order {order_id} was modified concurrently (expected version {version})",
            409,
        )


class StatusTransitionNotAllowedError(AppError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(2003, f"Transition {current} -> {requested} is not allowed", 422)


class ImeiLockNotAllowedError(AppError):
    def __init__(self, order_id: str, reason: str) -> None:
        super().__init__(2004, f"IMEI lock not allowed for order {order_id}: {reason}", 422)


# --- 3xxx: Financing ---

class InconsistentStateError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, f"Inconsistent installment state: {detail}", 409)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
