from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from points.service import PointsLedgerService


CONTROLLER_ID = "controller-aaaaa-aaaaa"
SERVICE_ID = "service-bbbbb-bbbbb"
USER_ID = "user-ccccc-ccccc"
OTHER_USER_ID = "user-ddddd-ddddd"
STRANGER_ID = "stranger-eeeee-eeeee"


class SteppingClock:
    """Returns a strictly increasing UTC timestamp on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def service(clock):
    """A ledger with no registered service yet."""
    ids = count(1)
    return PointsLedgerService(
        controller_ids=[CONTROLLER_ID],
        clock=clock,
        id_factory=lambda: f"{next(ids):04d}",
    )


@pytest.fixture
def ledger(service):
    """A ledger with the service registered and one empty user."""
    service.initialize_canister(CONTROLLER_ID, SERVICE_ID).unwrap()
    service.initialize_user(SERVICE_ID, USER_ID).unwrap()
    return service
