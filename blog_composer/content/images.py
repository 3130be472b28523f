"""
ImageRecord: one image embedded in a post.
"""
import uuid
from dataclasses import dataclass, field, replace

from ..exceptions import ValidationError
from .positions import Position

FIELDS = ("src", "alt", "caption", "position")


def _new_key():
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ImageRecord:
    """
    An opaque image reference (URL or data URI) plus its metadata.

    ``key`` only identifies the record inside an editing session. It takes no
    part in equality and is never serialized, so a record survives a
    serialize/parse round trip as an equal value.
    """

    src: str
    alt: str = ""
    caption: str = ""
    position: Position = field(default_factory=Position.hero)
    key: str = field(default_factory=_new_key, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.src, str) or not self.src.strip():
            raise ValidationError("Image source must be a non-empty string")
        for name in ("alt", "caption"):
            if not isinstance(getattr(self, name), str):
                raise ValidationError(f"Image {name} must be a string")
        if not isinstance(self.position, Position):
            raise ValidationError(f"Invalid image position: {self.position!r}")

    @property
    def is_hero(self):
        return self.position.is_hero

    @property
    def is_data_uri(self):
        return self.src.startswith("data:")

    def with_changes(self, **changes):
        """Return a copy with ``changes`` applied, keeping the same key."""
        return replace(self, **changes)

    def to_dict(self):
        return {
            "src": self.src,
            "alt": self.alt,
            "caption": self.caption,
            "position": str(self.position),
        }
