"""
Lookups shared by the routers and the booking engine.

Joins are explicit: a spot's owner is a one-to-one load, its bookings and
blocked dates are one-to-many loads, and nothing is fetched lazily behind
the caller's back when the function says it joins it.
"""
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload
from workspot.models.booking import Booking
from workspot.models.spot import Spot
from workspot.models.user import User
from workspot.utils.errors import NotFoundError


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def require_user(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def get_spot(
    db: Session,
    spot_id: int,
    with_owner: bool = False,
    with_bookings: bool = False,
    for_update: bool = False,
) -> Optional[Spot]:
    query = db.query(Spot).options(selectinload(Spot.blocked_dates))
    if with_owner:
        query = query.options(joinedload(Spot.owner))
    if with_bookings:
        query = query.options(selectinload(Spot.bookings))
    if for_update:
        # no-op on SQLite, row lock elsewhere; the version column covers both
        query = query.with_for_update(of=Spot).populate_existing()
    return query.filter(Spot.id == spot_id).first()


def require_spot(db: Session, spot_id: int, **options) -> Spot:
    spot = get_spot(db, spot_id, **options)
    if spot is None:
        raise NotFoundError("Spot not found.")
    return spot


def list_spots(
    db: Session,
    type: Optional[str] = None,
    city: Optional[str] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Spot]:
    query = db.query(Spot).options(joinedload(Spot.owner))
    if type:
        query = query.filter(Spot.type == type)
    if city:
        query = query.filter(Spot.city == city)
    if status:
        query = query.filter(Spot.status == status)
    return query.order_by(Spot.id).offset(skip).limit(limit).all()


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.spot))
        .filter(Booking.id == booking_id)
        .first()
    )


def require_booking(db: Session, booking_id: int) -> Booking:
    booking = get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found.")
    return booking


def list_user_bookings(db: Session, user_id: int) -> List[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.spot))
        .filter(Booking.user_id == user_id)
        .order_by(Booking.start_date.asc(), Booking.id.asc())
        .all()
    )


def list_favorites(db: Session, user_id: int) -> List[Spot]:
    return list(require_user(db, user_id).favorites)
