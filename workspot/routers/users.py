import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from workspot.config import Settings
from workspot.db import get_db
from workspot.schemas.spot import SpotResponse
from workspot.schemas.user import (
    FavoriteToggle,
    RegisterResponse,
    Token,
    UserLogin,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from workspot.utils import accounts, repository
from workspot.utils.auth import (
    create_access_token,
    get_current_user,
    get_settings,
    get_token_payload,
    token_claims,
)
from workspot.utils.favorites import toggle_favorite

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(
    user: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new user and log them in.

    - **profile.company** is required for everyone.
    - **profile.position** and **profile.linkedin_url** are required for guests.
    - **roles** defaults to `["guest"]`; only `guest` and `host` can be requested.
    """
    db_user = accounts.register_user(db, user)
    return {
        "message": "User registered successfully.",
        "user": db_user,
        "access_token": create_access_token(token_claims(db_user), settings),
        "token_type": "bearer",
    }


@router.post("/login", response_model=Token, summary="Log in a user")
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = accounts.authenticate_user(db, credentials.email, credentials.password)
    logger.debug(f"User {user.id} logged in")
    return {
        "access_token": create_access_token(token_claims(user), settings),
        "token_type": "bearer",
    }


@router.get("/verify", summary="Echo the decoded token")
def verify(payload: dict = Depends(get_token_payload)):
    return payload


@router.get("/me", response_model=UserResponse)
def get_me(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    return repository.require_user(db, current_user["id"])


@router.put("/profile", response_model=UserResponse, summary="Update own profile")
def update_profile(
    update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return accounts.update_profile(db, current_user["id"], update)


@router.get("/favorites", response_model=List[SpotResponse], summary="List favorite spots")
def get_favorites(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    return repository.list_favorites(db, current_user["id"])


@router.post("/favorites", response_model=List[SpotResponse], summary="Toggle a favorite spot")
def post_favorite(
    toggle: FavoriteToggle,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Add the spot to the caller's favorites, or remove it if it is already there.
    Returns the updated list of favorite spots.
    """
    return toggle_favorite(db, current_user["id"], toggle.spot_id)


@router.delete("/delete", status_code=status.HTTP_204_NO_CONTENT, summary="Delete own account")
def delete_user(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    """
    Delete the caller's account.

    Spots created by the caller are deleted together with their bookings;
    the caller's bookings on other spots are removed and their dates freed.
    """
    accounts.delete_account(db, current_user["id"])
    return None
