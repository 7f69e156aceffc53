from functools import lru_cache

from imgedge.config import get_settings

from .pipeline import ImageGateway
from .storage import get_storage_client
from .transform import PillowEngine

__all__ = [
    "ImageGateway",
    "get_gateway",
]


@lru_cache()
def get_gateway() -> ImageGateway:
    """Gateway wired to the configured storage backend and the Pillow engine."""

    return ImageGateway(
        get_storage_client(),
        PillowEngine(),
        max_dimension=get_settings().max_dimension,
    )
