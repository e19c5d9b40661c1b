import pytest
from types import SimpleNamespace

from workspot.utils.errors import ForbiddenError
from workspot.utils.policy import (
    can_access_booking,
    can_modify_spot,
    ensure_can_access_booking,
    ensure_can_modify_spot,
)

GUEST = {"id": 1, "roles": ["guest"]}
HOST = {"id": 2, "roles": ["host"]}
STRANGER = {"id": 3, "roles": ["guest", "host"]}
ADMIN = {"id": 4, "roles": ["admin"]}

SPOT = SimpleNamespace(id=10, created_by=HOST["id"])
BOOKING = SimpleNamespace(id=20, user_id=GUEST["id"], spot=SPOT)


@pytest.mark.parametrize(
    "caller, allowed",
    [(GUEST, True), (HOST, True), (STRANGER, False), (ADMIN, True)],
)
def test_can_access_booking(caller, allowed):
    assert can_access_booking(BOOKING, caller) is allowed


@pytest.mark.parametrize(
    "caller, allowed",
    [(GUEST, False), (HOST, True), (STRANGER, False), (ADMIN, True)],
)
def test_can_modify_spot(caller, allowed):
    assert can_modify_spot(SPOT, caller) is allowed


def test_ensure_helpers_raise_forbidden():
    with pytest.raises(ForbiddenError) as excinfo:
        ensure_can_access_booking(BOOKING, STRANGER, "view")
    assert excinfo.value.status_code == 403
    assert "view" in excinfo.value.detail

    with pytest.raises(ForbiddenError):
        ensure_can_modify_spot(SPOT, GUEST, "delete")

    ensure_can_access_booking(BOOKING, HOST)
    ensure_can_modify_spot(SPOT, HOST)
