from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional
from workspot.utils import errors
from workspot.utils.validation_helpers import parse_calendar_date

SpotType = Literal["spot", "room", "office"]
SpotStatus = Literal["active", "inactive"]
Amenity = Literal["Wifi", "Parking", "Coffee", "Lift", "Phonebox", "Meeting Room", "Kitchen"]


def calendar_date(value):
    """Accept ISO dates and datetimes, keeping only the UTC calendar date."""
    try:
        return parse_calendar_date(value)
    except errors.ValidationError as e:
        raise ValueError(e.detail) from e


class Location(BaseModel):
    city: str = Field(min_length=1)
    address: str = Field(min_length=1)


class DateInterval(BaseModel):
    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    def parse_dates(cls, value):
        return calendar_date(value)

    @model_validator(mode="after")
    def check_order(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be earlier than start_date")
        return self

    class Config:
        from_attributes = True


class SpotBase(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: SpotType = "spot"
    desk_count: Optional[int] = Field(default=None, ge=1)
    location: Location
    amenities: List[Amenity] = []
    price: float = Field(gt=0)
    images: List[str]

    @field_validator("images")
    def check_images(cls, value):
        if not value:
            raise ValueError("At least one image is required")
        return value

    @model_validator(mode="after")
    def check_desk_count(self):
        if self.type in ("room", "office") and self.desk_count is None:
            raise ValueError("desk_count is required for rooms and offices")
        return self


class SpotCreate(SpotBase):
    blocked_dates: List[DateInterval] = []


class SpotUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    type: Optional[SpotType] = None
    desk_count: Optional[int] = Field(default=None, ge=1)
    location: Optional[Location] = None
    amenities: Optional[List[Amenity]] = None
    price: Optional[float] = Field(default=None, gt=0)
    images: Optional[List[str]] = None
    status: Optional[SpotStatus] = None

    @field_validator("images")
    def check_images(cls, value):
        if value is not None and not value:
            raise ValueError("At least one image is required")
        return value


class SpotOwner(BaseModel):
    id: int
    first_name: str
    last_name: str
    company: str

    class Config:
        from_attributes = True


class SpotBookingSummary(BaseModel):
    id: int
    user_id: int
    start_date: date
    end_date: date
    status: str

    class Config:
        from_attributes = True


class SpotResponse(BaseModel):
    id: int
    title: str
    description: str
    type: str
    desk_count: Optional[int] = None
    location: Location
    amenities: List[str]
    price: float
    images: List[str]
    status: str
    created_by: int
    owner: Optional[SpotOwner] = None
    blocked_dates: List[DateInterval] = []
    created_at: datetime

    class Config:
        from_attributes = True


class SpotDetailResponse(SpotResponse):
    bookings: List[SpotBookingSummary] = []


class AvailabilityResponse(BaseModel):
    spot_id: int
    start_date: date
    end_date: date
    available: bool
    conflicting: Optional[DateInterval] = None
