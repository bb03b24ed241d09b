# 📄 File: plantid/shared/utils/validators.py
# 🧭 Purpose (Layman Explanation):
# Checks that the photo a user sent is really a picture (not empty, not too big, not a random file)
# and that user ids look sensible before anything is sent to a plant identification service.
# 🧪 Purpose (Technical Summary):
# Base64 image payload decoding and validation: strips data-URL prefixes, decodes strictly,
# enforces size limits, verifies image integrity with Pillow and detects the MIME type.
# 🔗 Dependencies:
# base64, binascii, re, Pillow (image verification)
# 🔄 Connected Modules / Calls From:
# plantid.modules.plant_identification.application.handlers (identify command),
# plantid.modules.*.presentation.api.schemas (user id validation)

import base64
import binascii
import io
import re
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

from plantid.shared.core.exceptions import InvalidFileTypeError, ValidationError

# File validation constants
ALLOWED_IMAGE_FORMATS = {
    'JPEG': 'image/jpeg',
    'PNG': 'image/png',
    'WEBP': 'image/webp',
    'GIF': 'image/gif',
    'BMP': 'image/bmp',
    'HEIF': 'image/heif',
}
MIN_IMAGE_DIMENSION = 10
MAX_IMAGE_DIMENSION = 10000

DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>[\w/+.-]*);base64,', re.IGNORECASE)
USER_ID_PATTERN = re.compile(r'^[\w\-.@:|]{1,128}$')


@dataclass(frozen=True)
class ImagePayload:
    """A decoded and verified image ready to send to a classifier."""
    base64_data: str
    raw: bytes
    mime_type: str
    width: int
    height: int

    @property
    def size_bytes(self) -> int:
        return len(self.raw)

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


def strip_data_url_prefix(image_base64: str) -> str:
    """Remove an optional ``data:<mime>;base64,`` prefix and surrounding whitespace."""
    value = (image_base64 or '').strip()
    return DATA_URL_PATTERN.sub('', value, count=1)


def decode_image_payload(image_base64: str, max_size: int) -> ImagePayload:
    """
    Decode and validate a base64 encoded image.

    Args:
        image_base64: Base64 string, optionally prefixed with a data URL header
        max_size: Maximum decoded size in bytes

    Returns:
        ImagePayload: Normalised base64 data plus decoded bytes and image facts

    Raises:
        ValidationError: If the payload is empty, not base64 or too large (400)
        InvalidFileTypeError: If the bytes are not a supported image (400)
    """
    payload = strip_data_url_prefix(image_base64)
    # Clients sometimes send line-wrapped base64
    payload = re.sub(r'\s+', '', payload)

    if not payload:
        raise ValidationError(
            "Image data is required",
            field="imageBase64",
            constraint="non_empty",
            status_code=400
        )

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError(
            "Image data is not valid base64",
            field="imageBase64",
            constraint="base64",
            status_code=400
        )

    if not raw:
        raise ValidationError("Image data is empty", field="imageBase64", constraint="non_empty", status_code=400)

    if len(raw) > max_size:
        raise ValidationError(
            f"Image exceeds maximum allowed size ({max_size // (1024 * 1024)}MB)",
            field="imageBase64",
            constraint=f"max_size={max_size}",
            status_code=400
        )

    mime_type, width, height = _verify_image(raw)

    return ImagePayload(
        base64_data=payload,
        raw=raw,
        mime_type=mime_type,
        width=width,
        height=height,
    )


def _verify_image(raw: bytes):
    """Validate image integrity and return (mime_type, width, height)."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()

        # verify() leaves the image unusable, so re-open for the remaining checks
        with Image.open(io.BytesIO(raw)) as img:
            image_format = (img.format or '').upper()
            width, height = img.size
    except Image.DecompressionBombError as e:
        raise InvalidFileTypeError("Image too large", details={"reason": str(e)})
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise InvalidFileTypeError(
            "The uploaded data is not a valid image",
            allowed_types=sorted(ALLOWED_IMAGE_FORMATS.values()),
            details={"reason": str(e)}
        )

    if image_format not in ALLOWED_IMAGE_FORMATS:
        raise InvalidFileTypeError(
            f"Unsupported image format: {image_format or 'unknown'}",
            detected_type=image_format or None,
            allowed_types=sorted(ALLOWED_IMAGE_FORMATS.values())
        )

    if width < MIN_IMAGE_DIMENSION or height < MIN_IMAGE_DIMENSION:
        raise InvalidFileTypeError("Image too small", details={"width": width, "height": height})

    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise InvalidFileTypeError("Image too large", details={"width": width, "height": height})

    return ALLOWED_IMAGE_FORMATS[image_format], width, height


def validate_user_id(user_id: Optional[str]) -> str:
    """
    Validate an opaque client supplied user id.

    Raises:
        ValueError: For use inside pydantic validators
    """
    value = (user_id or '').strip()
    if not value:
        raise ValueError("userId is required")
    if not USER_ID_PATTERN.match(value):
        raise ValueError("userId contains invalid characters or is too long")
    return value
