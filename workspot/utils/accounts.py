import logging
from sqlalchemy.orm import Session
from workspot.db import commit
from workspot.models.user import User
from workspot.utils import repository
from workspot.utils.auth import get_password_hash, verify_password
from workspot.utils.errors import AuthError, ValidationError
from workspot.utils.scheduler import release_interval, run_serialized
from workspot.utils.validation_helpers import (
    validate_email,
    validate_password,
    validate_profile,
)

logger = logging.getLogger(__name__)

SELF_ASSIGNABLE_ROLES = ("guest", "host")


def register_user(db: Session, data) -> User:
    email = validate_email(data.email)
    validate_password(data.password)
    roles = list(dict.fromkeys(data.roles or ["guest"]))
    if any(role not in SELF_ASSIGNABLE_ROLES for role in roles):
        raise ValidationError(f"Roles must be a subset of: {', '.join(SELF_ASSIGNABLE_ROLES)}")
    profile = data.profile
    validate_profile(roles, profile.position, profile.linkedin_url, profile.company)

    if repository.get_user_by_email(db, email):
        logger.warning(f"Registration with existing email {email}")
        raise ValidationError("User already exists.")

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=email,
        hashed_password=get_password_hash(data.password),
        company=profile.company,
        position=profile.position,
        linkedin_url=profile.linkedin_url,
        phone_number=profile.phone_number,
        roles=roles,
    )
    db.add(user)
    commit(db)
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = repository.get_user_by_email(db, email)
    if user is None:
        raise AuthError("User not found.")
    if not verify_password(password, user.hashed_password):
        raise AuthError("Invalid email or password.")
    return user


def update_profile(db: Session, user_id: int, update) -> User:
    user = repository.require_user(db, user_id)
    update_data = update.model_dump(exclude_unset=True)
    profile_data = update_data.pop("profile", None) or {}

    for key, value in update_data.items():
        if value is None:
            raise ValidationError(f"{key} cannot be empty.")
        setattr(user, key, value)
    for key, value in profile_data.items():
        setattr(user, key, value)

    validate_profile(user.roles or [], user.position, user.linkedin_url, user.company)
    commit(db)
    db.refresh(user)
    return user


def delete_account(db: Session, user_id: int):
    """
    Delete a user along with everything that points at them.

    Active bookings the user made on other hosts' spots release their dates
    first. The user's own spots go with their bookings and blocked dates,
    and favorites rows are dropped by the association table.
    """

    def operation():
        user = repository.require_user(db, user_id)
        for booking in list(user.bookings):
            if booking.is_active and booking.spot.created_by != user.id:
                release_interval(booking)
        db.delete(user)
        commit(db)

    run_serialized(db, operation)
    logger.info(f"Deleted user {user_id} with their spots and bookings")
