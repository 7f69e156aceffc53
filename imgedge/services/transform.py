"""Image transform engine adapter.

``TransformEngine`` is the capability the pipeline consumes; the Pillow
implementation below is the default. :func:`apply_transform` holds the
gateway's own policy (auto-orient, never-upscale guard, output format)
and only talks to the engine through the five capability methods.
"""
from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from imgedge.errors import GatewayError
from imgedge.models import ImageMetadata, TransformDirective

logger = logging.getLogger(__name__)

_EXIF_ORIENTATION = 0x0112

MAX_DIMENSION = 10000


class TransformError(GatewayError):
    """Decoding, resizing or encoding the image failed."""

    kind = "transform_error"


class TransformEngine(ABC):
    """Abstract interface for an image codec/transform engine."""

    @abstractmethod
    def decode(self, data: bytes) -> Any: ...

    @abstractmethod
    def auto_orient(self, handle: Any) -> Any: ...

    @abstractmethod
    def metadata(self, handle: Any) -> ImageMetadata: ...

    @abstractmethod
    def resize(self, handle: Any, width: int | None, height: int | None) -> Any: ...

    @abstractmethod
    def encode(self, handle: Any, fmt: str, quality: int | None = None) -> bytes: ...


class PillowEngine(TransformEngine):
    """Pillow-backed engine. Handles are ``PIL.Image.Image`` objects."""

    # Modes each encoder cannot write directly, and what to convert them to.
    _MODE_FIXUPS = {
        "JPEG": ("RGB", {"RGBA", "LA", "P", "PA", "I", "I;16", "F", "CMYK"}),
        "WEBP": ("RGBA", {"P", "PA", "LA", "I", "I;16", "F", "CMYK"}),
    }

    def decode(self, data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise TransformError(f"Could not decode image: {exc}") from exc
        return img

    def auto_orient(self, handle: Image.Image) -> Image.Image:
        try:
            orientation = handle.getexif().get(_EXIF_ORIENTATION)
            oriented = ImageOps.exif_transpose(handle)
        except (OSError, ValueError, KeyError, TypeError, SyntaxError) as exc:
            raise TransformError(f"Could not apply EXIF orientation: {exc}") from exc
        oriented.info["source_orientation"] = orientation
        return oriented

    def metadata(self, handle: Image.Image) -> ImageMetadata:
        width, height = handle.size
        return ImageMetadata(
            width=width,
            height=height,
            orientation=handle.info.get("source_orientation"),
        )

    def resize(self, handle: Image.Image, width: int | None, height: int | None) -> Image.Image:
        """Resize to the requested box.

        One dimension keeps the aspect ratio; both dimensions scale to
        cover the box and crop the overflow around the centre.
        """
        src_w, src_h = handle.size
        try:
            if width and height:
                return ImageOps.fit(handle, (width, height), Image.LANCZOS)
            if width:
                height = max(1, round(src_h * width / src_w))
            elif height:
                width = max(1, round(src_w * height / src_h))
            else:
                return handle
            return handle.resize((width, height), Image.LANCZOS)
        except (OSError, ValueError, OverflowError, MemoryError) as exc:
            raise TransformError(f"Resize to {width}x{height} failed: {exc}") from exc

    def encode(self, handle: Image.Image, fmt: str, quality: int | None = None) -> bytes:
        pil_format = Image.registered_extensions().get(f".{fmt.lower()}")
        if pil_format is None or pil_format not in Image.SAVE:
            raise TransformError(f"Unsupported output format: {fmt}")

        img = handle
        target_mode, bad_modes = self._MODE_FIXUPS.get(pil_format, (None, set()))
        if target_mode and img.mode in bad_modes:
            img = img.convert(target_mode)

        params: dict[str, Any] = {}
        if quality is not None:
            params["quality"] = quality

        buffer = io.BytesIO()
        try:
            img.save(buffer, format=pil_format, **params)
        except (OSError, ValueError, KeyError) as exc:
            raise TransformError(f"Encoding to {fmt} failed: {exc}") from exc
        return buffer.getvalue()


def should_resize(meta: ImageMetadata, width: int | None, height: int | None) -> bool:
    """Never-upscale guard.

    Only requested dimensions take part, and either one fitting inside the
    source is enough, so a request may still grow the other axis.
    """
    if width is None and height is None:
        return False
    return (width is not None and meta.width >= width) or (
        height is not None and meta.height >= height
    )


def apply_transform(
    engine: TransformEngine,
    data: bytes,
    directive: TransformDirective,
    *,
    max_dimension: int = MAX_DIMENSION,
) -> bytes:
    for name, value in (("width", directive.width), ("height", directive.height)):
        if value is not None and value > max_dimension:
            raise TransformError(f"Requested {name} {value} exceeds the {max_dimension}px limit")

    handle = engine.auto_orient(engine.decode(data))
    meta = engine.metadata(handle)
    logger.debug("Image metadata: %s", meta)

    if should_resize(meta, directive.width, directive.height):
        handle = engine.resize(handle, directive.width, directive.height)
    elif directive.width or directive.height:
        logger.info(
            "Skipping resize to %sx%s, source is %dx%d",
            directive.width,
            directive.height,
            meta.width,
            meta.height,
        )

    return engine.encode(handle, directive.output_format, directive.quality)
