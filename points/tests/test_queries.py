"""
Unit Tests for pending redemption scans and platform analytics
"""

from points.errors import ErrorKind
from points.models import AnalyticsData, TransactionStatus

from conftest import CONTROLLER_ID, SERVICE_ID, USER_ID, OTHER_USER_ID


class TestPendingRedeemTransactions:

    def test_empty_ledger(self, ledger):
        result = ledger.get_pending_redeem_transactions(SERVICE_ID)

        assert result.is_ok()
        assert result.value == []

    def test_collects_pending_redeems_in_user_then_insertion_order(self, ledger):
        ledger.initialize_user(SERVICE_ID, OTHER_USER_ID)
        ledger.add_points(SERVICE_ID, USER_ID, 100, "bonus")
        ledger.add_points(SERVICE_ID, OTHER_USER_ID, 100, "bonus")

        other_first = ledger.request_redeem(SERVICE_ID, OTHER_USER_ID, 10, "addr-o", "o1").value
        first = ledger.request_redeem(SERVICE_ID, USER_ID, 20, "addr-u", "u1").value
        resolved = ledger.request_redeem(SERVICE_ID, USER_ID, 5, "addr-u", "u2").value
        second = ledger.request_redeem(SERVICE_ID, USER_ID, 30, "addr-u", "u3").value
        ledger.update_redeem_status(SERVICE_ID, USER_ID, resolved.id, "APPROVED")

        pending = ledger.get_pending_redeem_transactions(SERVICE_ID).value

        assert [t.id for t in pending] == [first.id, second.id, other_first.id]
        assert all(t.status == TransactionStatus.PENDING for t in pending)

    def test_declined_redeems_drop_out(self, ledger):
        ledger.add_points(SERVICE_ID, USER_ID, 100, "bonus")
        transaction = ledger.request_redeem(SERVICE_ID, USER_ID, 10, "addr", "r").value
        ledger.update_redeem_status(SERVICE_ID, USER_ID, transaction.id, "DECLINED")

        assert ledger.get_pending_redeem_transactions(SERVICE_ID).value == []


class TestPlatformAnalytics:

    def test_empty_ledger(self, service):
        service.initialize_canister(CONTROLLER_ID, SERVICE_ID)

        result = service.get_platform_analytics(SERVICE_ID)

        assert result.value == AnalyticsData()

    def test_total_points_is_sum_of_earnings(self, ledger):
        amounts = {USER_ID: 120, OTHER_USER_ID: 80, "user-third": 7}
        for user_id, amount in amounts.items():
            if user_id != USER_ID:
                ledger.initialize_user(SERVICE_ID, user_id)
            ledger.add_points(SERVICE_ID, user_id, amount, "bonus")

        analytics = ledger.get_platform_analytics(SERVICE_ID).value

        assert analytics.total_points == sum(amounts.values())
        assert analytics.available_points == sum(amounts.values())
        assert analytics.redeemed_points == 0
        assert analytics.total_transactions == 3

    def test_redemptions_are_reflected(self, ledger):
        ledger.initialize_user(SERVICE_ID, OTHER_USER_ID)
        ledger.add_points(SERVICE_ID, USER_ID, 100, "bonus")
        ledger.add_points(SERVICE_ID, OTHER_USER_ID, 50, "bonus")
        ledger.request_redeem(SERVICE_ID, USER_ID, 40, "addr", "r1")
        declined = ledger.request_redeem(SERVICE_ID, OTHER_USER_ID, 20, "addr", "r2").value
        ledger.update_redeem_status(SERVICE_ID, OTHER_USER_ID, declined.id, "DECLINED")

        analytics = ledger.get_platform_analytics(SERVICE_ID).value

        assert analytics == AnalyticsData(
            total_points=150,
            available_points=110,
            redeemed_points=40,
            total_transactions=4,
        )


class TestGetTransaction:

    def test_lookup_by_id_across_users(self, ledger):
        ledger.initialize_user(SERVICE_ID, OTHER_USER_ID)
        ledger.add_points(SERVICE_ID, OTHER_USER_ID, 50, "bonus")
        transaction = ledger.request_redeem(SERVICE_ID, OTHER_USER_ID, 20, "addr", "r").value
        ledger.update_redeem_status(SERVICE_ID, OTHER_USER_ID, transaction.id, "APPROVED")

        result = ledger.get_transaction(SERVICE_ID, transaction.id)

        assert result.value.user_principal == OTHER_USER_ID
        assert result.value.status == TransactionStatus.APPROVED

    def test_unknown_transaction(self, ledger):
        result = ledger.get_transaction(SERVICE_ID, "RED-unknown")

        assert result.error.kind == ErrorKind.NOT_FOUND
