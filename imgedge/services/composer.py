"""Build the edge response for a pipeline outcome."""
from __future__ import annotations

import base64
import logging

from imgedge.models import (
    EdgeResponse,
    NoDirectiveOriginal,
    PassthroughOriginal,
    PipelineOutcome,
    TransformedImage,
)

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 1024 * 1024


def _image_response(original: EdgeResponse, data: bytes, subtype: str) -> EdgeResponse:
    """Copy of ``original`` carrying ``data`` as a base64 image body."""
    record = original.to_record()
    headers = dict(record.get("headers", {}))
    headers["content-type"] = [{"key": "Content-Type", "value": f"image/{subtype}"}]
    record.update(
        status=200,
        headers=headers,
        body=base64.b64encode(data).decode("ascii"),
        bodyEncoding="base64",
    )
    if "statusDescription" in record:
        record["statusDescription"] = "OK"
    return EdgeResponse.model_validate(record)


def compose(
    outcome: PipelineOutcome,
    original: EdgeResponse,
    *,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> EdgeResponse:
    if isinstance(outcome, PassthroughOriginal):
        logger.info("Returning original response (%s)", outcome.reason)
        return original

    if isinstance(outcome, NoDirectiveOriginal):
        logger.info("No transform parameters, returning stored original")
        return _image_response(original, outcome.data, outcome.extension.lower())

    if isinstance(outcome, TransformedImage):
        size = len(outcome.data)
        logger.info("Transformed image byte length: %d", size)
        if size > max_output_bytes:
            logger.info("Image exceeds %d bytes. Returning original response.", max_output_bytes)
            return original
        return _image_response(original, outcome.data, outcome.format)

    raise TypeError(f"Unhandled pipeline outcome: {outcome!r}")
