"""
Points Accrual and Redemption Ledger

This module provides:
- One account per user with earned, available and redeemed totals
- Earnings that complete immediately
- Redemptions that reserve points up front and wait for approval or decline
- A single authorized backend service, bootstrapped once by a controller
- Typed results instead of exceptions at the operation boundary
"""

from .errors import ErrorKind, LedgerError
from .models import (
    TransactionType,
    TransactionStatus,
    Transaction,
    User,
    Service,
    AnalyticsData,
)
from .result import Result, Return
from .service import PointsLedgerService
from .storage import InMemoryStorage

__all__ = [
    "ErrorKind",
    "LedgerError",
    "TransactionType",
    "TransactionStatus",
    "Transaction",
    "User",
    "Service",
    "AnalyticsData",
    "Result",
    "Return",
    "PointsLedgerService",
    "InMemoryStorage",
]
