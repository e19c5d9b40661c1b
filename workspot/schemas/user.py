from datetime import datetime
from pydantic import BaseModel
from typing import List, Optional


class Profile(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    linkedin_url: Optional[str] = None
    phone_number: Optional[str] = None


class UserCreate(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    profile: Profile
    roles: Optional[List[str]] = None


class UserLogin(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile: Optional[Profile] = None


class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    profile: Profile
    roles: List[str]
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegisterResponse(Token):
    message: str
    user: UserResponse


class FavoriteToggle(BaseModel):
    spot_id: int
