"""HTTP surface for the gateway, taking the same event shape as Lambda@Edge."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from imgedge.errors import GatewayError
from imgedge.models import InvalidEventError, parse_event
from imgedge.services import ImageGateway, get_gateway

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/edge/origin-response")
async def origin_response(
    event: dict[str, Any] = Body(...),
    gateway: ImageGateway = Depends(get_gateway),
):
    try:
        request, response = parse_event(event)
    except InvalidEventError as exc:
        logger.error("Malformed edge event: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid event structure")

    try:
        result = await gateway.handle(request, response)
    except GatewayError as exc:
        logger.error("Pipeline failed for %s: %s", request.uri, exc)
        raise HTTPException(status_code=502, detail={"kind": exc.kind, "message": exc.message})

    return result.to_record()
