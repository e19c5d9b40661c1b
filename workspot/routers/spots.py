import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from workspot.db import commit, get_db
from workspot.models.spot import Spot
from workspot.schemas.spot import (
    AvailabilityResponse,
    SpotCreate,
    SpotDetailResponse,
    SpotResponse,
    SpotStatus,
    SpotType,
    SpotUpdate,
)
from workspot.utils import repository
from workspot.utils.auth import get_current_user
from workspot.utils.errors import ValidationError
from workspot.utils.policy import ensure_can_modify_spot
from workspot.utils.scheduler import (
    add_spot_intervals,
    check_availability,
    run_serialized,
)
from workspot.utils.validation_helpers import parse_calendar_date


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/spots",
    tags=["spots"],
)


@router.post("", response_model=SpotResponse, status_code=status.HTTP_201_CREATED)
def create_spot(spot: SpotCreate, db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    """
    Create a new spot owned by the caller.
    Requires authentication.

    Optional **blocked_dates** are committed as unavailable from the start and
    must not overlap each other.
    """
    data = spot.model_dump(exclude={"location", "blocked_dates"})
    db_spot = Spot(
        **data,
        city=spot.location.city,
        address=spot.location.address,
        created_by=current_user["id"],
        status="active",
    )
    add_spot_intervals(
        db_spot, [(interval.start_date, interval.end_date) for interval in spot.blocked_dates]
    )
    db.add(db_spot)
    commit(db)
    db.refresh(db_spot)
    logger.info(f"User {current_user['id']} created spot {db_spot.id}")
    return db_spot


@router.get("", response_model=List[SpotResponse])
def get_spots(
    type: Optional[SpotType] = None,
    city: Optional[str] = None,
    status: Optional[SpotStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """
    Retrieve spots, optionally filtered by type, city and status.
    """
    spots = repository.list_spots(db, type=type, city=city, status=status, skip=skip, limit=limit)
    logger.debug(f"Retrieved {len(spots)} spots")
    return spots


@router.get("/{spot_id}", response_model=SpotDetailResponse)
def get_spot(spot_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a spot with its owner and bookings.
    """
    return repository.require_spot(db, spot_id, with_owner=True, with_bookings=True)


@router.get("/{spot_id}/availability", response_model=AvailabilityResponse)
def get_spot_availability(spot_id: int, start_date: str, end_date: str, db: Session = Depends(get_db)):
    """
    Check whether [start_date, end_date] could be booked right now.
    Nothing is reserved.

    Dates may be ISO dates or datetimes; datetimes count for their UTC day.
    """
    start_date, end_date = parse_calendar_date(start_date), parse_calendar_date(end_date)
    available, conflict = check_availability(db, spot_id, start_date, end_date)
    return {
        "spot_id": spot_id,
        "start_date": start_date,
        "end_date": end_date,
        "available": available,
        "conflicting": conflict,
    }


@router.put("/{spot_id}", response_model=SpotResponse)
def update_spot(
    spot_id: int,
    spot_update: SpotUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Update a spot's details.
    Only the spot owner may update it. Blocked dates change through bookings only.
    """
    update_data = spot_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        # desk_count may be cleared; the resulting type decides below
        if value is None and key != "desk_count":
            raise ValidationError(f"{key} cannot be empty.")

    def operation():
        db_spot = repository.require_spot(db, spot_id, for_update=True)
        ensure_can_modify_spot(db_spot, current_user, "update")

        location = update_data.get("location")
        fields = {key: value for key, value in update_data.items() if key != "location"}
        if location:
            fields["city"] = location["city"]
            fields["address"] = location["address"]
        new_type = fields.get("type", db_spot.type)
        new_desk_count = fields.get("desk_count", db_spot.desk_count)
        if new_type in ("room", "office") and new_desk_count is None:
            raise ValidationError("desk_count is required for rooms and offices")

        for key, value in fields.items():
            setattr(db_spot, key, value)
        commit(db)
        db.refresh(db_spot)
        return db_spot

    db_spot = run_serialized(db, operation)
    logger.debug(f"Updated spot {spot_id}: {sorted(update_data)}")
    return db_spot


@router.delete("/{spot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_spot(spot_id: int, db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    """
    Delete a spot together with its bookings and blocked dates.
    Only the spot owner may delete it.
    """

    def operation():
        db_spot = repository.require_spot(db, spot_id, for_update=True)
        ensure_can_modify_spot(db_spot, current_user, "delete")
        db.delete(db_spot)
        commit(db)

    run_serialized(db, operation)
    logger.info(f"User {current_user['id']} deleted spot {spot_id}")
    return None
