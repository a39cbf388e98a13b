import functools
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional
from uuid import uuid4

from .auth import AuthorizationGuard
from .errors import (
    ConflictError,
    InvalidPayloadError,
    NotFoundError,
    handle_error,
)
from .models import (
    REDEEM_RESOLUTIONS,
    AnalyticsData,
    Service,
    Transaction,
    TransactionStatus,
    TransactionType,
    User,
)
from .queries import pending_redeem_transactions, platform_analytics
from .result import Result, Return
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)

EARN_PREFIX = "EARN-"
REDEEM_PREFIX = "RED-"
DEFAULT_EARN_DESCRIPTION = "Points earned"
DEFAULT_REDEEM_DESCRIPTION = "Points redeem request"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid4())


def ledger_operation(method):
    """Run a service method atomically and wrap its outcome in a Result."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs) -> Result:
        with self.storage.lock:
            try:
                return Return.ok(method(self, *args, **kwargs))
            except Exception as e:
                return Return.err(handle_error(e))

    return wrapper


def _validate_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidPayloadError("Amount must be a positive number")
    return amount


def _parse_resolution(status) -> TransactionStatus:
    try:
        parsed = TransactionStatus(status)
    except ValueError:
        parsed = None
    if parsed not in REDEEM_RESOLUTIONS:
        raise InvalidPayloadError("Status must be either 'APPROVED' or 'DECLINED'")
    return parsed


class PointsLedgerService:
    """
    Points accrual and redemption ledger.

    Every public method takes the caller identity first, checks it against
    the authorization guard and returns a Result. Redemptions debit the
    available balance when requested; a declined redemption gives the
    points back, an approved one only finalizes the status.
    """

    def __init__(
        self,
        storage: Optional[InMemoryStorage] = None,
        controller_ids: Optional[Iterable[str]] = None,
        is_controller: Optional[Callable[[str], bool]] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _uuid,
    ):
        self.storage = storage or InMemoryStorage()
        self.guard = AuthorizationGuard(self.storage, controller_ids, is_controller)
        self.clock = clock
        self.id_factory = id_factory

    @ledger_operation
    def initialize_canister(self, caller: str, service_id: str) -> Service:
        return self.guard.register_service(caller, service_id, self.clock())

    @ledger_operation
    def initialize_user(self, caller: str, user_id: str) -> User:
        self.guard.authorize(caller)

        if self.storage.contains_user(user_id):
            raise ConflictError("User already exists!")

        now = self.clock()
        user = User(id=user_id, created_at=now, updated_at=now)
        self.storage.put_user(user)
        logger.info(f"Initialized user {user_id!r}")
        return user

    @ledger_operation
    def add_points(
        self,
        caller: str,
        user_id: str,
        amount: int,
        description: Optional[str] = None,
    ) -> User:
        self.guard.authorize(caller)
        amount = _validate_amount(amount)
        user = self._require_user(user_id)

        now = self.clock()
        transaction = Transaction(
            id=f"{EARN_PREFIX}{self.id_factory()}",
            user_principal=user_id,
            amount=amount,
            address="",
            transaction_type=TransactionType.EARNING,
            status=TransactionStatus.COMPLETED,
            description=description if description is not None else DEFAULT_EARN_DESCRIPTION,
            created_at=now,
            updated_at=now,
        )

        user.total_points += amount
        user.available_points += amount
        user.transactions.append(transaction)
        user.updated_at = now

        self.storage.put_user(user)
        logger.info(f"Added {amount} points to user {user_id!r} ({transaction.id})")
        return user

    @ledger_operation
    def request_redeem(
        self,
        caller: str,
        user_id: str,
        amount: int,
        address: str,
        description: Optional[str] = None,
    ) -> Transaction:
        self.guard.authorize(caller)
        amount = _validate_amount(amount)
        if not isinstance(address, str) or not address.strip():
            raise InvalidPayloadError("Redeem address is required")
        user = self._require_user(user_id)

        if user.available_points < amount:
            logger.warning(
                f"Redeem of {amount} rejected for user {user_id!r}: "
                f"only {user.available_points} available"
            )
            raise InvalidPayloadError("Insufficient points for redeeming")

        now = self.clock()
        transaction = Transaction(
            id=f"{REDEEM_PREFIX}{self.id_factory()}",
            user_principal=user_id,
            amount=amount,
            address=address,
            transaction_type=TransactionType.REDEEM,
            status=TransactionStatus.PENDING,
            description=description if description is not None else DEFAULT_REDEEM_DESCRIPTION,
            created_at=now,
            updated_at=now,
        )

        user.available_points -= amount
        user.total_redeemed += amount
        user.transactions.append(transaction)
        user.updated_at = now

        self.storage.put_user(user)
        logger.info(f"User {user_id!r} requested redeem of {amount} points ({transaction.id})")
        return transaction

    @ledger_operation
    def update_redeem_status(
        self,
        caller: str,
        user_id: str,
        transaction_id: str,
        status,
    ) -> Transaction:
        self.guard.authorize(caller)
        new_status = _parse_resolution(status)
        user = self._require_user(user_id)

        index = user.find_transaction(transaction_id)
        if index is None:
            raise NotFoundError("Transaction not found")

        transaction = user.transactions[index]
        if not transaction.is_pending_redeem():
            raise InvalidPayloadError("Transaction is not pending or is not a redeem request")

        if new_status == TransactionStatus.DECLINED:
            user.available_points += transaction.amount
            user.total_redeemed -= transaction.amount

        now = self.clock()
        transaction.status = new_status
        transaction.updated_at = now
        user.updated_at = now

        self.storage.put_user(user)
        logger.info(f"Redeem {transaction_id} for user {user_id!r} marked {new_status.value}")
        return transaction

    @ledger_operation
    def get_user(self, caller: str, user_id: str) -> User:
        self.guard.authorize(caller)
        return self._require_user(user_id)

    @ledger_operation
    def get_user_transactions(self, caller: str, user_id: str) -> list[Transaction]:
        self.guard.authorize(caller)
        user = self.storage.get_user(user_id)
        return user.transactions if user else []

    @ledger_operation
    def get_transaction(self, caller: str, transaction_id: str) -> Transaction:
        self.guard.authorize(caller)
        owner = self.storage.find_transaction_owner(transaction_id)
        user = self.storage.get_user(owner) if owner else None
        index = user.find_transaction(transaction_id) if user else None
        if index is None:
            raise NotFoundError("Transaction not found")
        return user.transactions[index]

    @ledger_operation
    def get_pending_redeem_transactions(self, caller: str) -> list[Transaction]:
        self.guard.authorize(caller)
        return pending_redeem_transactions(self.storage)

    @ledger_operation
    def get_platform_analytics(self, caller: str) -> AnalyticsData:
        self.guard.authorize(caller)
        return platform_analytics(self.storage)

    def _require_user(self, user_id: str) -> User:
        user = self.storage.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
