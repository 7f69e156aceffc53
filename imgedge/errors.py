"""Base exception for terminal pipeline failures."""
from __future__ import annotations


class GatewayError(Exception):
    """A failure the edge layer must handle with its own error behaviour.

    ``kind`` names the failure class and is what the HTTP entrypoint
    reports back to the caller.
    """

    kind: str = "gateway_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
