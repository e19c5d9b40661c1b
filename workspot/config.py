import os
from dotenv import load_dotenv

load_dotenv()


def _setting(value, name, default, cast=str):
    if value is not None:
        return value
    return cast(os.getenv(name, default))


class Settings:
    """Application settings, read from the environment unless given explicitly."""

    def __init__(
        self,
        database_url=None,
        token_secret=None,
        token_algorithm=None,
        access_token_expire_minutes=None,
        booking_commit_attempts=None,
        log_level=None,
    ) -> None:
        self.DATABASE_URL = _setting(database_url, "DATABASE_URL", "sqlite:///./data/workspot.db")
        self.TOKEN_SECRET = _setting(token_secret, "TOKEN_SECRET", "dev-secret")
        self.TOKEN_ALGORITHM = _setting(token_algorithm, "TOKEN_ALGORITHM", "HS256")
        self.ACCESS_TOKEN_EXPIRE_MINUTES = _setting(
            access_token_expire_minutes, "ACCESS_TOKEN_EXPIRE_MINUTES", "720", int
        )
        self.BOOKING_COMMIT_ATTEMPTS = _setting(
            booking_commit_attempts, "BOOKING_COMMIT_ATTEMPTS", "3", int
        )
        self.LOG_LEVEL = _setting(log_level, "LOG_LEVEL", "INFO")
