"""
The persisted form of a post's images: a JSON array of objects with the keys
``src``, ``alt``, ``caption`` and ``position``.

This module is the only parser of that format. The model field, the host
form and the editing session all go through it.
"""
import json
import logging

from ..exceptions import ParseError, ValidationError
from .images import FIELDS, ImageRecord
from .positions import Position

logger = logging.getLogger(__name__)


def dumps_images(images):
    """Serialize an iterable of ImageRecord to the JSON text form."""
    return json.dumps([image.to_dict() for image in images], ensure_ascii=False)


def loads_images(value, max_index=None):
    """
    Parse the JSON text form into a list of ImageRecord.

    An empty or absent value is an empty collection. Any problem with any
    element fails the whole parse with ParseError; nothing is partially
    recovered.

    Args:
        value: JSON text, or None
        max_index: highest indexed position accepted (defaults to setting)

    Returns:
        list of ImageRecord in stored order
    """
    if value is None:
        return []
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError("Images field is not valid UTF-8") from exc
    if not isinstance(value, str):
        raise ParseError(f"Images field must be text, not {type(value).__name__}")
    if not value.strip():
        return []

    try:
        data = json.loads(value)
    except ValueError as exc:
        raise ParseError(f"Images field is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ParseError("Images field must be a JSON array")

    images = []
    for number, item in enumerate(data, start=1):
        images.append(_record_from_item(item, number, max_index))
    return images


def _record_from_item(item, number, max_index):
    if not isinstance(item, dict):
        raise ParseError(f"Image {number} must be a JSON object")

    unknown = sorted(set(item) - set(FIELDS))
    if unknown:
        raise ParseError(f"Image {number} has unknown fields: {', '.join(unknown)}")

    for name in FIELDS:
        if name in item and not isinstance(item[name], str):
            raise ParseError(f"Image {number}: {name} must be a string")

    if "position" not in item:
        raise ParseError(f"Image {number} has no position")

    try:
        position = Position.parse(item["position"], max_index=max_index)
        return ImageRecord(
            src=item.get("src", ""),
            alt=item.get("alt", ""),
            caption=item.get("caption", ""),
            position=position,
        )
    except ValidationError as exc:
        logger.warning("Rejected image %d in serialized images: %s", number, exc)
        raise ParseError(f"Image {number}: {exc}") from exc
