"""Unit tests for PillowImageProcessor."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from blogapi.infra.images.pillow_processor import PillowImageProcessor
from blogapi.services._shared.errors import BusinessRuleError


def _image_bytes(size=(64, 48), fmt="PNG", mode="RGBA") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color=(200, 30, 30, 255) if mode == "RGBA" else "red").save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def processor() -> PillowImageProcessor:
    return PillowImageProcessor(max_size_bytes=1024 * 1024, max_width=100, max_height=80)


class TestValidate:
    def test_accepts_known_image(self, processor):
        processor.validate(filename="photo.PNG", content_type="image/png", size=10)

    def test_empty_upload(self, processor):
        with pytest.raises(BusinessRuleError, match="file is required"):
            processor.validate(filename="a.png", content_type="image/png", size=0)

    def test_too_large(self, processor):
        with pytest.raises(BusinessRuleError, match="image size too large"):
            processor.validate(filename="a.png", content_type="image/png", size=2 * 1024 * 1024)

    @pytest.mark.parametrize(
        ("filename", "content_type"),
        [("a.gif", "image/gif"), ("a.png", "text/html"), ("noext", "image/png")],
    )
    def test_rejects_other_types(self, processor, filename, content_type):
        with pytest.raises(BusinessRuleError, match="invalid image type"):
            processor.validate(filename=filename, content_type=content_type, size=10)


class TestProcess:
    def test_small_png_is_reencoded_as_jpeg(self, processor):
        out = processor.process(_image_bytes((64, 48)))

        assert out.mime_type == "image/jpeg"
        assert out.extension == "jpg"
        assert (out.width, out.height) == (64, 48)
        with Image.open(io.BytesIO(out.data)) as img:
            assert img.format == "JPEG"

    def test_large_image_is_downscaled_keeping_ratio(self, processor):
        out = processor.process(_image_bytes((400, 200), fmt="JPEG", mode="RGB"))

        assert out.width == 100
        assert out.height == 50

    def test_not_an_image(self, processor):
        with pytest.raises(BusinessRuleError, match="invalid image file"):
            processor.process(b"<html>definitely not an image</html>")

    def test_disallowed_format_after_decoding(self, processor):
        with pytest.raises(BusinessRuleError, match="invalid image type"):
            processor.process(_image_bytes(fmt="GIF", mode="RGB"))
