"""The per-request transform-and-fallback pipeline."""
from __future__ import annotations

import asyncio
import logging

from imgedge.models import (
    EdgeRequest,
    EdgeResponse,
    NoDirectiveOriginal,
    PassthroughOriginal,
    PipelineOutcome,
    TransformedImage,
)

from .composer import MAX_OUTPUT_BYTES, compose
from .eligibility import Eligibility, classify
from .request_interpreter import interpret
from .storage import ObjectNotFound, StorageClient
from .transform import MAX_DIMENSION, TransformEngine, apply_transform

logger = logging.getLogger(__name__)


class ImageGateway:
    """Runs one request through interpret -> classify -> fetch -> transform -> compose.

    The gateway holds only its injected capabilities, so one instance can
    serve any number of concurrent requests.
    """

    def __init__(
        self,
        storage: StorageClient,
        engine: TransformEngine,
        *,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
        max_dimension: int = MAX_DIMENSION,
    ) -> None:
        self._storage = storage
        self._engine = engine
        self._max_output_bytes = max_output_bytes
        self._max_dimension = max_dimension

    async def run(self, request: EdgeRequest) -> PipelineOutcome:
        key, directive = interpret(request.uri, request.querystring)

        eligibility = classify(key, directive)
        if eligibility is Eligibility.SKIP:
            logger.info("File is not an image: %s.%s", key.name, key.extension)
            return PassthroughOriginal(reason="not_an_image")

        try:
            origin = await self._storage.fetch(key.storage_key)
        except ObjectNotFound:
            logger.info("Object %s not found in origin store", key.storage_key)
            return PassthroughOriginal(reason="not_found")

        if eligibility is Eligibility.FETCH_ONLY:
            return NoDirectiveOriginal(data=origin.data, extension=key.extension)

        logger.debug("Transforming %s with %s", key.storage_key, directive)
        data = await asyncio.to_thread(
            apply_transform,
            self._engine,
            origin.data,
            directive,
            max_dimension=self._max_dimension,
        )
        return TransformedImage(data=data, format=directive.output_format)

    async def handle(self, request: EdgeRequest, response: EdgeResponse) -> EdgeResponse:
        """Return the response to send back to the edge.

        Raises a :class:`~imgedge.errors.GatewayError` for terminal failures.
        """
        outcome = await self.run(request)
        return compose(outcome, response, max_output_bytes=self._max_output_bytes)
