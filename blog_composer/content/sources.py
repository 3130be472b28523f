"""
Turning an image source (upload, raw bytes or URL) into the opaque reference
stored on an ImageRecord.

Image bytes are only inspected, never resized or re-encoded: Pillow
identifies the format and the original bytes are embedded as a data URI.
"""
import base64
import io
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator
from PIL import Image, UnidentifiedImageError

from ..conf import blog_settings
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

_url_validator = URLValidator(schemes=["http", "https"])


def read_image_source(source):
    """
    Return the reference string for ``source``.

    Args:
        source: raw bytes, a file-like object (e.g. Django UploadedFile),
            an http(s) URL or an image ``data:`` URI

    Returns:
        URL or ``data:<mime>;base64,...`` string

    Raises:
        ValidationError: unreadable, oversized or disallowed image
    """
    if isinstance(source, str):
        return _reference_from_string(source)
    if isinstance(source, (bytes, bytearray)):
        return _reference_from_bytes(bytes(source))
    if hasattr(source, "read"):
        return _reference_from_bytes(_read_file(source))
    raise ValidationError(f"Unsupported image source: {type(source).__name__}")


def _reference_from_string(value):
    value = value.strip()
    if not value:
        raise ValidationError("Image source can't be blank")

    if value.startswith("data:"):
        mime_type = value[5:].split(";", 1)[0].split(",", 1)[0].lower()
        if mime_type not in blog_settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError(f"Image type not allowed: {mime_type or 'unknown'}")
        return value

    try:
        _url_validator(value)
    except DjangoValidationError as exc:
        raise ValidationError(f"Not a valid image URL: {value}") from exc
    return value


def _read_file(file_obj):
    if hasattr(file_obj, "chunks"):
        if hasattr(file_obj, "seek"):
            file_obj.seek(0)
        data = b"".join(file_obj.chunks())
    else:
        data = file_obj.read()
    if isinstance(data, str):
        raise ValidationError("Image file must be opened in binary mode")
    return data


def _reference_from_bytes(data):
    if not data:
        raise ValidationError("Image file is empty")

    max_size = blog_settings.MEDIA_MAX_SIZE_BYTES
    if len(data) > max_size:
        raise ValidationError(
            f"Image is too large ({len(data)} bytes, limit {max_size} bytes)"
        )

    mime_type = identify_image(data)
    if mime_type not in blog_settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError(f"Image type not allowed: {mime_type}")

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def identify_image(data):
    """Return the MIME type of the image in ``data`` using Pillow."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        logger.warning("Rejected unreadable image upload: %s", exc)
        raise ValidationError("Image file could not be read") from exc

    mime_type = Image.MIME.get(image_format)
    if not mime_type:
        raise ValidationError(f"Unknown image format: {image_format}")
    return mime_type
