import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from .errors import ConflictError, InvalidPayloadError, UnauthorizedError
from .models import Service
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)


class AuthorizationGuard:
    """
    Gatekeeper in front of every ledger operation.

    Regular operations require the caller to be the registered service.
    Bootstrapping the service itself requires controller privilege, which
    comes from the host: either an explicit set of controller identities or
    an is_controller callable.
    """

    def __init__(
        self,
        storage: InMemoryStorage,
        controller_ids: Optional[Iterable[str]] = None,
        is_controller: Optional[Callable[[str], bool]] = None,
    ):
        self.storage = storage
        self.controller_ids = frozenset(controller_ids or ())
        self._is_controller = is_controller

    def is_controller(self, caller: str) -> bool:
        if self._is_controller is not None:
            return bool(self._is_controller(caller))
        return caller in self.controller_ids

    def authorize(self, caller: str) -> None:
        if not self.storage.contains_service(caller):
            logger.warning(f"Rejected call from unregistered caller {caller!r}")
            raise UnauthorizedError("Unauthorized access!")

    def register_service(self, caller: str, service_id: str, now: datetime) -> Service:
        if not self.is_controller(caller):
            logger.warning(f"Rejected canister initialization from non-controller {caller!r}")
            raise UnauthorizedError("Unauthorized access!")

        if not service_id or not service_id.strip():
            raise InvalidPayloadError("Service ID must not be empty")

        if self.storage.has_any_service():
            raise UnauthorizedError("Canister already has an authorized service ID!")

        if self.storage.contains_service(service_id):
            raise ConflictError("Service already exists!")

        service = Service(id=service_id, created_at=now)
        self.storage.put_service(service)
        logger.info(f"Registered authorized service {service_id!r}")
        return service
