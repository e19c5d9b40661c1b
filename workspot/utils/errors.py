from fastapi import status


class WorkspotError(Exception):
    """Base class for errors reported back to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers = None

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self):
        return {"detail": self.detail}


class ValidationError(WorkspotError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(WorkspotError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(WorkspotError):
    status_code = status.HTTP_403_FORBIDDEN


class AuthError(WorkspotError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ConflictError(WorkspotError):
    """The requested dates overlap a committed interval of the spot."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "Spot is not available for the selected dates",
                 reason: str = "dates_unavailable", conflicting=None):
        super().__init__(detail)
        self.reason = reason
        self.conflicting = conflicting

    def to_dict(self):
        data = {"detail": self.detail, "reason": self.reason}
        if self.conflicting is not None:
            data["conflicting"] = {
                "start_date": self.conflicting.start_date.isoformat(),
                "end_date": self.conflicting.end_date.isoformat(),
            }
        return data


class StoreError(WorkspotError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
