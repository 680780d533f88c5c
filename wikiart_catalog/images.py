"""Image format detection and dimension decoding."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from filetype import guess
from PIL import Image, UnidentifiedImageError

DEFAULT_EXTENSION = "jpg"
DEFAULT_CONTENT_TYPE = "image/jpeg"


class ImageDecodeError(ValueError):
    """Downloaded bytes are not a decodable image."""


@dataclass(frozen=True)
class DecodedImage:
    """Dimensions and storage details for a validated image."""

    width: int
    height: int
    extension: str
    content_type: str

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def content_type_for(data: bytes) -> str:
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        return kind.mime
    return DEFAULT_CONTENT_TYPE


def decode_image(data: bytes) -> DecodedImage:
    """Read width and height from image bytes, raising ImageDecodeError if unusable."""
    try:
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageDecodeError(str(exc)) from exc
    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"invalid dimensions {width}x{height}")
    return DecodedImage(
        width=width,
        height=height,
        extension=detect_image_format(data) or DEFAULT_EXTENSION,
        content_type=content_type_for(data),
    )
