"""Image payload and user id validation."""

import base64
import io
import struct
import zlib

import pytest
from PIL import Image

from conftest import make_image_base64
from plantid.shared.core.exceptions import InvalidFileTypeError, ValidationError
from plantid.shared.utils.validators import decode_image_payload, strip_data_url_prefix, validate_user_id

MAX_SIZE = 5 * 1024 * 1024


def png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


def png_header_only(width: int, height: int) -> str:
    """A tiny PNG whose header claims the given dimensions."""
    header = struct.pack(">IIBBBBB", width, height, 1, 0, 0, 0, 0)
    raw = (
        b"\x89PNG\r\n\x1a\n"
        + png_chunk(b"IHDR", header)
        + png_chunk(b"IDAT", zlib.compress(b"\x00\x00"))
        + png_chunk(b"IEND", b"")
    )
    return base64.b64encode(raw).decode()


class TestDecodeImagePayload:
    def test_png(self):
        image = decode_image_payload(make_image_base64("PNG", (20, 30)), MAX_SIZE)

        assert image.mime_type == "image/png"
        assert (image.width, image.height) == (20, 30)
        assert image.data_url.startswith("data:image/png;base64,")

    def test_jpeg_with_data_url_prefix(self):
        payload = "data:image/jpeg;base64," + make_image_base64("JPEG")

        image = decode_image_payload(payload, MAX_SIZE)

        assert image.mime_type == "image/jpeg"
        assert not image.base64_data.startswith("data:")

    def test_line_wrapped_base64(self):
        raw = make_image_base64()
        wrapped = "\n".join(raw[i:i + 76] for i in range(0, len(raw), 76))

        assert decode_image_payload(wrapped, MAX_SIZE).mime_type == "image/png"

    @pytest.mark.parametrize("payload", ["", "   ", "data:image/png;base64,"])
    def test_empty(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            decode_image_payload(payload, MAX_SIZE)

        assert exc_info.value.status_code == 400

    def test_not_base64(self):
        with pytest.raises(ValidationError) as exc_info:
            decode_image_payload("not*base64!", MAX_SIZE)

        assert exc_info.value.details["constraint"] == "base64"

    def test_too_large(self):
        with pytest.raises(ValidationError) as exc_info:
            decode_image_payload(make_image_base64(), max_size=10)

        assert exc_info.value.status_code == 400

    def test_not_an_image(self):
        payload = base64.b64encode(b"just some text, not pixels").decode()

        with pytest.raises(InvalidFileTypeError):
            decode_image_payload(payload, MAX_SIZE)

    def test_too_small(self):
        with pytest.raises(InvalidFileTypeError, match="too small"):
            decode_image_payload(make_image_base64(size=(5, 5)), MAX_SIZE)

    def test_decompression_bomb_is_rejected(self):
        with pytest.raises(InvalidFileTypeError, match="too large") as exc_info:
            decode_image_payload(png_header_only(20000, 20000), MAX_SIZE)

        assert exc_info.value.status_code == 400

    def test_too_wide(self):
        buffer = io.BytesIO()
        Image.new("1", (10001, 16)).save(buffer, format="PNG")

        with pytest.raises(InvalidFileTypeError, match="too large"):
            decode_image_payload(base64.b64encode(buffer.getvalue()).decode(), MAX_SIZE)


def test_strip_data_url_prefix():
    assert strip_data_url_prefix("data:image/webp;base64,AAAA") == "AAAA"
    assert strip_data_url_prefix("  AAAA  ") == "AAAA"


class TestValidateUserId:
    @pytest.mark.parametrize("user_id", ["user-1", "abc_123", "a.b@example.com", "auth0|12345"])
    def test_valid(self, user_id):
        assert validate_user_id(user_id) == user_id

    def test_strips_whitespace(self):
        assert validate_user_id("  user-1 ") == "user-1"

    @pytest.mark.parametrize("user_id", [None, "", "   ", "has space", "x" * 129, "semi;colon"])
    def test_invalid(self, user_id):
        with pytest.raises(ValueError):
            validate_user_id(user_id)
