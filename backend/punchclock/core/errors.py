"""
Punch ingestion errors.

Two tiers:
- RequestError: rejects the whole request before any punch is touched.
- PunchError: scoped to a single punch of a batch; recorded in that item's
  result and never propagated to sibling punches.
"""

from fastapi import status


class RequestError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConfigurationError(RequestError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server configuration error"


class Unauthorized(RequestError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class PunchError(Exception):
    message: str = "Punch rejected"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPunch(PunchError):
    message = "Invalid punch payload"


class MissingCardId(PunchError):
    message = "card_id is required"


class CardNotRegistered(PunchError):
    message = "Card not registered"


class CardInactive(PunchError):
    message = "Card is inactive"


class CardExpired(PunchError):
    message = "Card has expired"


class RecordFailure(PunchError):
    message = "Failed to record punch"
