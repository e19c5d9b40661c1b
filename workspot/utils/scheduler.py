"""
Date-range reservation against a spot's committed intervals.

Intervals are closed and date-only: [start, end] overlaps [other_start,
other_end] when start <= other_end and end >= other_start, so two bookings
sharing a boundary day conflict while adjacent days do not.

Every mutation of a spot's intervals also bumps the spot's version column.
A commit made against a stale version fails with StaleDataError, and the
whole read-check-write sequence is run again against fresh data.
"""
import logging
from datetime import date
from typing import Callable, Iterable, Optional, Tuple, TypeVar
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from workspot.db import commit
from workspot.models.booking import Booking
from workspot.models.spot import Spot, SpotInterval
from workspot.utils import repository
from workspot.utils.errors import ConflictError, ValidationError
from workspot.utils.policy import ensure_can_access_booking
from workspot.utils.validation_helpers import normalize_date, validate_date_range

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
REQUESTABLE_STATUSES = ("pending", "confirmed")

T = TypeVar("T")


def intervals_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    return start <= other_end and end >= other_start


def find_conflict(
    intervals: Iterable[SpotInterval],
    start: date,
    end: date,
    exclude: Optional[SpotInterval] = None,
) -> Optional[SpotInterval]:
    """Return the first committed interval sharing a day with [start, end]."""
    for interval in intervals:
        if exclude is not None and interval is exclude:
            continue
        if intervals_overlap(
            start,
            end,
            normalize_date(interval.start_date),
            normalize_date(interval.end_date),
        ):
            return interval
    return None


def find_interval(spot: Spot, start: date, end: date) -> Optional[SpotInterval]:
    for interval in spot.blocked_dates:
        if interval.start_date == start and interval.end_date == end:
            return interval
    return None


def add_spot_intervals(spot: Spot, intervals: Iterable[Tuple[date, date]]):
    """Block dates on a spot outside of any booking, e.g. when it is listed."""
    for start, end in intervals:
        start, end = validate_date_range(start, end)
        conflict = find_conflict(spot.blocked_dates, start, end)
        if conflict is not None:
            raise ValidationError(
                f"Blocked dates {start.isoformat()} to {end.isoformat()} overlap "
                f"{conflict.start_date.isoformat()} to {conflict.end_date.isoformat()}"
            )
        spot.blocked_dates.append(SpotInterval(start_date=start, end_date=end))


def run_serialized(db: Session, operation: Callable[[], T], attempts: int = DEFAULT_ATTEMPTS) -> T:
    """Run a read-check-write operation, re-running it when its spot went stale."""
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except StaleDataError:
            db.rollback()
            logger.warning(f"Spot changed concurrently, retrying ({attempt}/{attempts})")
    raise ConflictError(
        detail="Spot was updated concurrently, please retry.",
        reason="concurrent_update",
    )


def commit_booking(
    db: Session, spot: Spot, user_id: int, start: date, end: date, status: str = "pending"
) -> Booking:
    """Record [start, end] on the spot and create its booking in one transaction."""
    created_by_host = spot.created_by == user_id
    booking = Booking(
        spot=spot,
        user_id=user_id,
        start_date=start,
        end_date=end,
        status="blocked" if created_by_host else status,
        created_by_host=created_by_host,
    )
    spot.blocked_dates.append(SpotInterval(start_date=start, end_date=end))
    db.add(booking)
    spot.touch()
    commit(db)
    db.refresh(booking)
    return booking


def release_interval(booking: Booking):
    spot = booking.spot
    interval = find_interval(spot, booking.start_date, booking.end_date)
    if interval is None:
        logger.warning(
            f"No blocked interval {booking.start_date} to {booking.end_date} "
            f"on spot {spot.id} for booking {booking.id}"
        )
    else:
        spot.blocked_dates.remove(interval)
    spot.touch()


def check_availability(db: Session, spot_id: int, start, end):
    """Return (available, conflicting interval) without reserving anything."""
    start, end = validate_date_range(start, end)
    spot = repository.require_spot(db, spot_id)
    conflict = find_conflict(spot.blocked_dates, start, end)
    return conflict is None, conflict


def propose_booking(
    db: Session,
    spot_id: int,
    caller: dict,
    start,
    end,
    status: str = "pending",
    attempts: int = DEFAULT_ATTEMPTS,
) -> Booking:
    start, end = validate_date_range(start, end)
    if status not in REQUESTABLE_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(REQUESTABLE_STATUSES)}")

    def operation():
        spot = repository.require_spot(db, spot_id, for_update=True)
        if spot.status != "active":
            raise ValidationError("Spot is not active.")
        conflict = find_conflict(spot.blocked_dates, start, end)
        if conflict is not None:
            logger.warning(
                f"Dates {start} to {end} unavailable on spot {spot_id}, "
                f"overlaps {conflict.start_date} to {conflict.end_date}"
            )
            raise ConflictError(conflicting=conflict)
        return commit_booking(db, spot, caller["id"], start, end, status)

    booking = run_serialized(db, operation, attempts)
    logger.info(
        f"Created booking {booking.id} on spot {spot_id} for user {caller['id']}: "
        f"{start} to {end} ({booking.status})"
    )
    return booking


def cancel_booking(db: Session, booking_id: int, caller: dict, attempts: int = DEFAULT_ATTEMPTS) -> Booking:
    """Move a booking to canceled and free its dates; the record is kept."""

    def operation():
        booking = repository.require_booking(db, booking_id)
        ensure_can_access_booking(booking, caller, "cancel")
        if booking.status == "canceled":
            raise ValidationError("Booking is already canceled.")
        release_interval(booking)
        booking.status = "canceled"
        commit(db)
        db.refresh(booking)
        return booking

    booking = run_serialized(db, operation, attempts)
    logger.info(f"Canceled booking {booking_id} by user {caller['id']}")
    return booking


def delete_booking(db: Session, booking_id: int, caller: dict, attempts: int = DEFAULT_ATTEMPTS):
    def operation():
        booking = repository.require_booking(db, booking_id)
        ensure_can_access_booking(booking, caller, "delete")
        if booking.is_active:
            release_interval(booking)
        db.delete(booking)
        commit(db)

    run_serialized(db, operation, attempts)
    logger.info(f"Deleted booking {booking_id} by user {caller['id']}")


def reschedule_booking(
    db: Session, booking_id: int, caller: dict, start, end, attempts: int = DEFAULT_ATTEMPTS
) -> Booking:
    start, end = validate_date_range(start, end)

    def operation():
        booking = repository.require_booking(db, booking_id)
        ensure_can_access_booking(booking, caller, "update")
        if not booking.is_active:
            raise ValidationError("Only active bookings can be rescheduled.")
        spot = booking.spot
        own = find_interval(spot, booking.start_date, booking.end_date)
        conflict = find_conflict(spot.blocked_dates, start, end, exclude=own)
        if conflict is not None:
            logger.warning(
                f"Cannot move booking {booking_id} to {start} to {end}, "
                f"overlaps {conflict.start_date} to {conflict.end_date}"
            )
            raise ConflictError(conflicting=conflict)
        if own is None:
            spot.blocked_dates.append(SpotInterval(start_date=start, end_date=end))
        else:
            own.start_date = start
            own.end_date = end
        booking.start_date = start
        booking.end_date = end
        spot.touch()
        commit(db)
        db.refresh(booking)
        return booking

    booking = run_serialized(db, operation, attempts)
    logger.info(f"Rescheduled booking {booking_id} to {start} to {end}")
    return booking
