"""Lambda@Edge origin-response entrypoint."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from imgedge.config import get_settings
from imgedge.models import InvalidEventError, parse_event
from imgedge.services import get_gateway

logger = logging.getLogger(__name__)
# The Lambda runtime installs its own root handler before import.
logging.getLogger().setLevel(get_settings().log_level.upper())


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Return the response record for CloudFront.

    Pipeline errors propagate so the edge applies its default error
    behaviour for the request.
    """
    logger.debug("Full event: %s", event)
    try:
        request, response = parse_event(event)
    except InvalidEventError as exc:
        logger.warning("Invalid event structure or missing CloudFront data: %s", exc)
        return {"status": 400, "body": "Invalid event structure"}

    logger.info("Request: %s?%s", request.uri, request.querystring)
    result = asyncio.run(get_gateway().handle(request, response))
    return result.to_record()
