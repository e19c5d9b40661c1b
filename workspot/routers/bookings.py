from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from workspot.db import get_db
from workspot.schemas.booking import BookingCreate, BookingUpdate, BookingResponse
from workspot.utils import repository, scheduler
from workspot.utils.auth import get_current_user
from workspot.utils.policy import ensure_can_access_booking
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


def commit_attempts(request: Request) -> int:
    return request.app.state.settings.BOOKING_COMMIT_ATTEMPTS


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Book a spot for an inclusive date range. Requires authentication."
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    attempts: int = Depends(commit_attempts),
):
    """
    Book a spot for an inclusive date range.
    Requires authentication.

    - **spot_id**: ID of the spot to book.
    - **start_date**: First booked day.
    - **end_date**: Last booked day, not earlier than start_date.
    - **status**: `pending` (default) or `confirmed`.

    Sharing even one day with an existing booking or blocked range is rejected.
    When the caller owns the spot the booking is recorded as a host hold
    with status `blocked`.
    """
    logger.debug(f"Creating booking for user: {current_user['id']}, spot_id: {booking.spot_id}")
    return scheduler.propose_booking(
        db,
        booking.spot_id,
        current_user,
        booking.start_date,
        booking.end_date,
        status=booking.status,
        attempts=attempts,
    )


@router.get(
    "",
    response_model=List[BookingResponse],
    summary="List own bookings",
    description="Retrieve the caller's bookings, earliest start date first."
)
def get_bookings(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    bookings = repository.list_user_bookings(db, current_user["id"])
    logger.debug(f"Retrieved {len(bookings)} bookings for user {current_user['id']}")
    return bookings


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a booking. Only its owner and the spot's host may see it."
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    booking = repository.require_booking(db, booking_id)
    ensure_can_access_booking(booking, current_user, "view")
    logger.debug(f"Retrieved booking: {booking_id}")
    return booking


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Reschedule a booking",
    description="Move a booking to new dates. Requires ownership of the booking or the spot."
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    attempts: int = Depends(commit_attempts),
):
    """
    Move a booking to a new inclusive date range.

    The booking's current dates do not count against the new range, so a
    booking can be extended or shifted over its own days.
    """
    return scheduler.reschedule_booking(
        db,
        booking_id,
        current_user,
        booking_update.start_date,
        booking_update.end_date,
        attempts=attempts,
    )


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
    description="Mark a booking as canceled and free its dates. The record is kept."
)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    attempts: int = Depends(commit_attempts),
):
    return scheduler.cancel_booking(db, booking_id, current_user, attempts=attempts)


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Delete a booking and free its dates. Requires ownership of the booking or the spot."
)
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    attempts: int = Depends(commit_attempts),
):
    scheduler.delete_booking(db, booking_id, current_user, attempts=attempts)
    return None
