from .directive import DEFAULT_FORMAT, ObjectKey, TransformDirective
from .edge import EdgeRequest, EdgeResponse, HeaderEntry, InvalidEventError, parse_event
from .image_data import ImageMetadata, OriginObject
from .outcome import NoDirectiveOriginal, PassthroughOriginal, PipelineOutcome, TransformedImage

__all__ = [
    "DEFAULT_FORMAT",
    "ObjectKey",
    "TransformDirective",
    "EdgeRequest",
    "EdgeResponse",
    "HeaderEntry",
    "InvalidEventError",
    "parse_event",
    "ImageMetadata",
    "OriginObject",
    "NoDirectiveOriginal",
    "PassthroughOriginal",
    "PipelineOutcome",
    "TransformedImage",
]
