import hmac

from punchclock.core.config import Settings
from punchclock.core.errors import ConfigurationError, Unauthorized


def verify_device_key(provided: str | None, settings: Settings) -> None:
    """Check the badge reader's shared secret for the whole request.

    Raises ConfigurationError when the server secret is not provisioned and
    Unauthorized when the header is missing or differs from it.
    """
    expected = settings.PUNCH_API_KEY
    if not expected:
        raise ConfigurationError()
    if provided is None:
        raise Unauthorized()
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise Unauthorized()
