"""Turn the edge request into a storage key and a transform directive."""
from __future__ import annotations

import logging
import re
from urllib.parse import parse_qs

from imgedge.errors import GatewayError
from imgedge.models import ObjectKey, TransformDirective

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class InvalidUriFormat(GatewayError):
    """The request URI has no extension, so no storage key can be built."""

    kind = "invalid_uri_format"


def _parse_int(raw: str | None) -> int | None:
    """Parse a leading integer (``"200px"`` -> 200); anything else is absent."""
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    return int(match.group(1))


def parse_directive(querystring: str) -> TransformDirective:
    params = parse_qs(querystring or "", keep_blank_values=True)

    def first(name: str) -> str | None:
        values = params.get(name)
        return values[0] if values else None

    width = _parse_int(first("w"))
    height = _parse_int(first("h"))
    quality = _parse_int(first("q"))
    fmt = (first("f") or "").strip().lower()

    return TransformDirective(
        width=width if width is not None and width > 0 else None,
        height=height if height is not None and height > 0 else None,
        quality=quality if quality is not None and 1 <= quality <= 100 else None,
        format=fmt or None,
    )


def parse_uri(uri: str) -> ObjectKey:
    path = uri[1:] if uri.startswith("/") else uri
    name, dot, extension = path.rpartition(".")
    if not dot or not extension:
        logger.info("Invalid URI: %s", uri)
        raise InvalidUriFormat(f"Invalid URI format: {uri!r}")
    return ObjectKey(name=name, extension=extension)


def interpret(uri: str, querystring: str) -> tuple[ObjectKey, TransformDirective]:
    return parse_uri(uri), parse_directive(querystring)
