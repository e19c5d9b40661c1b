from pydantic import BaseModel, field_validator
from datetime import date, datetime
from typing import Literal, Optional
from workspot.schemas.spot import calendar_date


class BookingBase(BaseModel):
    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    def parse_dates(cls, value):
        return calendar_date(value)


class BookingCreate(BookingBase):
    spot_id: int
    status: Literal["pending", "confirmed"] = "pending"


class BookingUpdate(BookingBase):
    pass


class BookingSpot(BaseModel):
    id: int
    title: str
    created_by: int

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    id: int
    spot_id: int
    user_id: int
    start_date: date
    end_date: date
    status: str
    created_by_host: bool
    spot: Optional[BookingSpot] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
