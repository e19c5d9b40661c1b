import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from workspot.config import Settings
from workspot.db import get_db
from workspot.models.user import User
from workspot.utils import repository
from workspot.utils.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Documents the scheme in OpenAPI; the header itself is checked in get_current_user
bearer_scheme = HTTPBearer(
    scheme_name="JWT",
    description="Enter 'Bearer <your_jwt_token>'. Obtain the token via /users/login.",
    auto_error=False,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def verify_password(plain_password, hashed_password):
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Hash a password for storage."""
    return pwd_context.hash(password)


def token_claims(user: User) -> dict:
    return {
        "sub": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
    }


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None):
    """Create a JWT access token with an expiration time."""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.TOKEN_SECRET, algorithm=settings.TOKEN_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.TOKEN_SECRET, algorithms=[settings.TOKEN_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Token has expired.")
    except JWTError as e:
        raise AuthError(f"Could not validate credentials: {str(e)}")
    if payload.get("sub") is None:
        raise AuthError("Could not validate credentials")
    return payload


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthError("Authorization header is missing.")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise ValidationError("Authorization header must be 'Bearer <token>'.")
    return parts[1]


def get_token_payload(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Decode the bearer token of the request without touching the database."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    return decode_access_token(token, settings)


def get_current_user(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
):
    """Verify JWT token from Bearer header and return the current user."""
    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise AuthError("Could not validate credentials")

    user = repository.get_user(db, user_id)
    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise AuthError("Could not validate credentials")
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "roles": list(user.roles or []),
    }
