import re
from datetime import date, datetime, timezone
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from workspot.utils.errors import ValidationError


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")
PASSWORD_RE = re.compile(r"(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{6,}")

_DATE = TypeAdapter(date)
_DATETIME = TypeAdapter(datetime)


def normalize_date(value) -> date:
    """Reduce a date or datetime to its UTC calendar date."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Invalid date: {value!r}")


def parse_calendar_date(value) -> date:
    """Parse an ISO date or datetime string into its UTC calendar date.

    "2024-06-01T23:30:00-03:00" is 2024-06-02 in UTC.
    """
    if isinstance(value, date):
        return normalize_date(value)
    try:
        if isinstance(value, str) and len(value) == 10:
            return _DATE.validate_python(value)
        return normalize_date(_DATETIME.validate_python(value))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


def validate_date_range(start, end):
    start, end = normalize_date(start), normalize_date(end)
    if end < start:
        raise ValidationError("End date must not be earlier than start date")
    return start, end


def validate_email(value: str) -> str:
    if not value or not EMAIL_RE.match(value):
        raise ValidationError("Please provide a valid email address.")
    return value.lower()


def validate_password(value: str) -> str:
    if not value or not PASSWORD_RE.match(value):
        raise ValidationError(
            "Your password must have at least 6 characters and contain at least "
            "one number, one lowercase, and one uppercase letter."
        )
    return value


def validate_profile(roles, position, linkedin_url, company):
    if not company:
        raise ValidationError("Please provide your company name.")
    if "guest" in roles and (not position or not linkedin_url):
        raise ValidationError(
            "Position and LinkedIn URL are required for guest accounts."
        )
