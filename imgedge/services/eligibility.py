from __future__ import annotations

from enum import Enum

from imgedge.models import ObjectKey, TransformDirective

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp", "gif"})


class Eligibility(Enum):
    SKIP = "skip"  # not an image: hand back the edge response, no fetch
    FETCH_ONLY = "fetch_only"  # image, empty directive: serve stored bytes
    TRANSFORM = "transform"


def is_image_extension(extension: str) -> bool:
    return extension.lower() in IMAGE_EXTENSIONS


def classify(key: ObjectKey, directive: TransformDirective) -> Eligibility:
    if not is_image_extension(key.extension):
        return Eligibility.SKIP
    if directive.is_empty:
        return Eligibility.FETCH_ONLY
    return Eligibility.TRANSFORM
