"""Shared fixtures: in-memory origin store, spying engine, sample images."""
from __future__ import annotations

import asyncio
import io

import pytest
from PIL import Image

from imgedge.models import EdgeRequest, EdgeResponse
from imgedge.services import ImageGateway
from imgedge.services.storage import ObjectNotFound, StorageClient, StorageError
from imgedge.services.transform import PillowEngine


def make_image(size=(800, 600), fmt="JPEG", color=(200, 30, 30), mode="RGB", orientation=None) -> bytes:
    img = Image.new(mode, size, color)
    buf = io.BytesIO()
    params = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[0x0112] = orientation
        params["exif"] = exif
    img.save(buf, format=fmt, **params)
    return buf.getvalue()


class FakeStorage(StorageClient):
    name = "fake"

    def __init__(self, objects=None, error=None):
        self.objects = dict(objects or {})
        self.error = error
        self.calls = []

    def _read(self, key):
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        if key not in self.objects:
            raise ObjectNotFound(key)
        return self.objects[key]


class SpyEngine(PillowEngine):
    """Pillow engine that records which capability methods were used."""

    def __init__(self):
        self.calls = []

    def decode(self, data):
        self.calls.append(("decode",))
        return super().decode(data)

    def resize(self, handle, width, height):
        self.calls.append(("resize", width, height))
        return super().resize(handle, width, height)

    def encode(self, handle, fmt, quality=None):
        self.calls.append(("encode", fmt, quality))
        return super().encode(handle, fmt, quality)

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def jpeg_800x600():
    return make_image((800, 600))


@pytest.fixture
def storage(jpeg_800x600):
    return FakeStorage({"photo.jpg": jpeg_800x600})


@pytest.fixture
def engine():
    return SpyEngine()


@pytest.fixture
def gateway(storage, engine):
    return ImageGateway(storage, engine)


@pytest.fixture
def origin_record():
    """Response record as CloudFront hands it to an origin-response trigger."""
    return {
        "status": "200",
        "statusDescription": "OK",
        "headers": {
            "cache-control": [{"key": "Cache-Control", "value": "max-age=86400"}],
            "content-type": [{"key": "Content-Type", "value": "image/jpeg"}],
        },
    }


@pytest.fixture
def origin_response(origin_record):
    return EdgeResponse.model_validate(origin_record)


@pytest.fixture
def make_request():
    def _make(uri, querystring=""):
        return EdgeRequest(uri=uri, querystring=querystring)

    return _make


@pytest.fixture
def broken_storage():
    return FakeStorage(error=StorageError("S3 get_object failed for photo.jpg: AccessDenied"))
