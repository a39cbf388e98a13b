"""
Read-only aggregation over the user store.

Callers hold the storage lock for the whole scan so the results reflect a
single snapshot.
"""

from .models import AnalyticsData, Transaction
from .storage import InMemoryStorage


def pending_redeem_transactions(storage: InMemoryStorage) -> list[Transaction]:
    return [
        transaction.model_copy()
        for user in storage.iter_users()
        for transaction in user.transactions
        if transaction.is_pending_redeem()
    ]


def platform_analytics(storage: InMemoryStorage) -> AnalyticsData:
    analytics = AnalyticsData()
    for user in storage.iter_users():
        analytics.total_points += user.total_points
        analytics.available_points += user.available_points
        analytics.redeemed_points += user.total_redeemed
        analytics.total_transactions += len(user.transactions)
    return analytics
