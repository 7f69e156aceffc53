import base64
import io

import pytest
from PIL import Image

from conftest import FakeStorage, make_image, run
from imgedge.models import PassthroughOriginal, TransformedImage
from imgedge.services import ImageGateway
from imgedge.services.composer import MAX_OUTPUT_BYTES
from imgedge.services.request_interpreter import InvalidUriFormat
from imgedge.services.storage import StorageError
from imgedge.services.transform import PillowEngine, TransformError


class OversizeEngine(PillowEngine):
    def encode(self, handle, fmt, quality=None):
        return b"\0" * (MAX_OUTPUT_BYTES + 1)


def _decoded(response):
    return Image.open(io.BytesIO(base64.b64decode(response.body)))


def test_uri_without_dot_is_terminal(gateway, storage, origin_response, make_request):
    with pytest.raises(InvalidUriFormat):
        run(gateway.handle(make_request("/photo", "w=200"), origin_response))
    assert storage.calls == []


def test_non_image_is_returned_unchanged_without_fetch(gateway, storage, origin_response, make_request):
    result = run(gateway.handle(make_request("/doc.pdf", "w=200&f=png"), origin_response))
    assert result is origin_response
    assert storage.calls == []


def test_empty_directive_serves_original_bytes(gateway, storage, engine, jpeg_800x600, origin_response, make_request):
    result = run(gateway.handle(make_request("/photo.jpg"), origin_response))
    assert result.status == 200
    assert result.body_encoding == "base64"
    assert base64.b64decode(result.body) == jpeg_800x600
    assert result.headers["content-type"][0].value == "image/jpg"
    assert storage.calls == ["photo.jpg"]
    assert engine.calls == []


def test_photo_resized_to_webp(gateway, origin_response, make_request):
    result = run(gateway.handle(make_request("/photo.jpg", "w=200"), origin_response))
    assert result.status == 200
    assert result.headers["content-type"][0].value == "image/webp"
    img = _decoded(result)
    assert img.format == "WEBP"
    assert img.width <= 200


def test_requested_format_sets_content_type(gateway, origin_response, make_request):
    result = run(gateway.handle(make_request("/photo.jpg", "h=60&f=png&q=50"), origin_response))
    assert result.headers["content-type"][0].value == "image/png"
    assert _decoded(result).size == (80, 60)


def test_wider_request_encodes_without_resize(gateway, engine, origin_response, make_request):
    result = run(gateway.handle(make_request("/photo.jpg", "w=2000&q=60"), origin_response))
    assert engine.called("resize") == []
    assert engine.called("encode") == [("encode", "webp", 60)]
    assert _decoded(result).size == (800, 600)


def test_missing_object_falls_back(engine, origin_response, make_request):
    gateway = ImageGateway(FakeStorage(), engine)
    result = run(gateway.handle(make_request("/gone.png", "w=10"), origin_response))
    assert result is origin_response
    assert engine.calls == []


def test_storage_failure_is_terminal(broken_storage, engine, origin_response, make_request):
    gateway = ImageGateway(broken_storage, engine)
    with pytest.raises(StorageError):
        run(gateway.handle(make_request("/photo.jpg", "w=10"), origin_response))


def test_transform_failure_is_terminal(origin_response, make_request):
    gateway = ImageGateway(FakeStorage({"bad.jpg": b"garbage"}), PillowEngine())
    with pytest.raises(TransformError):
        run(gateway.handle(make_request("/bad.jpg", "w=10"), origin_response))


def test_oversized_result_returns_original(storage, origin_response, make_request):
    gateway = ImageGateway(storage, OversizeEngine())
    result = run(gateway.handle(make_request("/photo.jpg", "w=10"), origin_response))
    assert result is origin_response


def test_key_is_url_decoded_before_fetch(engine, origin_response, make_request):
    storage = FakeStorage({"summer trip/beach.png": make_image((20, 20), fmt="PNG")})
    gateway = ImageGateway(storage, engine)
    result = run(gateway.handle(make_request("/summer%20trip/beach.png", "q=80"), origin_response))
    assert storage.calls == ["summer trip/beach.png"]
    assert result.headers["content-type"][0].value == "image/webp"


def test_same_request_gives_same_output(gateway, origin_response, make_request):
    first = run(gateway.handle(make_request("/photo.jpg", "w=300&q=75"), origin_response))
    second = run(gateway.handle(make_request("/photo.jpg", "w=300&q=75"), origin_response))
    assert first.to_record() == second.to_record()


def test_run_returns_outcomes(gateway, make_request):
    assert run(gateway.run(make_request("/a.css"))) == PassthroughOriginal(reason="not_an_image")
    outcome = run(gateway.run(make_request("/photo.jpg", "f=gif")))
    assert isinstance(outcome, TransformedImage)
    assert outcome.format == "gif"


def test_oversized_dimension_is_terminal(storage, engine, origin_response, make_request):
    gateway = ImageGateway(storage, engine, max_dimension=500)
    with pytest.raises(TransformError):
        run(gateway.handle(make_request("/photo.jpg", "w=1&h=501"), origin_response))
    assert engine.calls == []
