import logging

from fastapi import Depends, Request

from punchclock.core.config import Settings, get_settings
from punchclock.core.errors import ConfigurationError, Unauthorized
from punchclock.core.security import verify_device_key

logger = logging.getLogger(__name__)


async def require_device_key(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    provided = request.headers.get(settings.PUNCH_API_KEY_HEADER)
    try:
        verify_device_key(provided, settings)
    except ConfigurationError:
        logger.error("PUNCH_API_KEY is not configured; rejecting %s %s", request.method, request.url.path)
        raise
    except Unauthorized:
        client = request.client.host if request.client else "unknown"
        logger.warning("Invalid API key attempt from %s", client)
        raise
