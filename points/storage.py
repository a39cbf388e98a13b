import threading
from typing import Iterator, Optional

from .models import Service, User


class InMemoryStorage:
    """Insertion-ordered users and services maps guarded by one lock.

    Reads hand out deep copies so callers can mutate a record freely and
    only persist it through put_user once every check has passed.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.users: dict[str, User] = {}
        self.services: dict[str, Service] = {}
        self.transaction_index: dict[str, str] = {}

    def get_user(self, user_id: str) -> Optional[User]:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def contains_user(self, user_id: str) -> bool:
        return user_id in self.users

    def put_user(self, user: User) -> None:
        with self.lock:
            self.users[user.id] = user.model_copy(deep=True)
            for transaction in user.transactions:
                self.transaction_index[transaction.id] = user.id

    def iter_users(self) -> Iterator[User]:
        # Callers hold the lock while iterating; records are not copied.
        return iter(self.users.values())

    def find_transaction_owner(self, transaction_id: str) -> Optional[str]:
        return self.transaction_index.get(transaction_id)

    def get_service(self, service_id: str) -> Optional[Service]:
        return self.services.get(service_id)

    def contains_service(self, service_id: str) -> bool:
        return service_id in self.services

    def has_any_service(self) -> bool:
        return bool(self.services)

    def put_service(self, service: Service) -> None:
        with self.lock:
            self.services[service.id] = service

    def clear(self) -> None:
        with self.lock:
            self.users.clear()
            self.services.clear()
            self.transaction_index.clear()
