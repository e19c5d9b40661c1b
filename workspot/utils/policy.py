from workspot.models.booking import Booking
from workspot.models.spot import Spot
from workspot.utils.errors import ForbiddenError


def is_admin(caller: dict) -> bool:
    return "admin" in (caller.get("roles") or [])


def can_access_booking(booking: Booking, caller: dict) -> bool:
    """Booking owner or the host of the booked spot; one rule for view and cancel."""
    if is_admin(caller):
        return True
    return caller["id"] in (booking.user_id, booking.spot.created_by)


def can_modify_spot(spot: Spot, caller: dict) -> bool:
    if is_admin(caller):
        return True
    return spot.created_by == caller["id"]


def ensure_can_access_booking(booking: Booking, caller: dict, action: str = "access"):
    if not can_access_booking(booking, caller):
        raise ForbiddenError(f"You are not authorized to {action} this booking.")


def ensure_can_modify_spot(spot: Spot, caller: dict, action: str = "update"):
    if not can_modify_spot(spot, caller):
        raise ForbiddenError(f"You are not authorized to {action} this spot.")
