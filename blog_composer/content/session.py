"""
ImageEditingSession: the pending image collection of a post being edited.

The session owns an ordered list of ImageRecord and mirrors it into
``field_value``, the serialized text the host form submits. Every transition
either completes and re-serializes, or raises and leaves the session exactly
as it was.

Images are addressed by 1-based index (the first image is 1), the numbering
of the per-image rows in the editing view. Each record also carries a stable
``key`` so a row can be found again after earlier rows were removed.
"""
import logging

from ..conf import blog_settings
from ..exceptions import NotFoundError, ValidationError
from .images import ImageRecord
from .positions import Position
from .serialization import dumps_images, loads_images
from .sources import read_image_source

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("alt", "caption", "position")


class ImageEditingSession:
    """
    Add, edit, reorder and remove images before the post is saved.

    Position collisions are not checked here; two images may both be hero
    or share an index until the post is composed or the form is validated.
    """

    def __init__(self, images=(), max_index=None):
        self.max_index = max_index
        self._images = list(images)
        for number, image in enumerate(self._images, start=1):
            if not isinstance(image, ImageRecord):
                raise ValidationError(f"Image {number} is not an ImageRecord")
            # Same bound the serialized form is parsed with.
            Position.parse(image.position, max_index=max_index)
        self._sync()

    @classmethod
    def load(cls, value, max_index=None):
        """Start a session from serialized text or a list of ImageRecord."""
        if isinstance(value, (list, tuple)):
            return cls(value, max_index=max_index)
        return cls(loads_images(value, max_index=max_index), max_index=max_index)

    def __len__(self):
        return len(self._images)

    def __iter__(self):
        return iter(self._images)

    @property
    def images(self):
        return list(self._images)

    def _sync(self):
        self.field_value = dumps_images(self._images)

    def _check_index(self, index, action):
        if not isinstance(index, int) or not 1 <= index <= len(self._images):
            logger.warning(
                "Rejected %s: no image %r in a session of %d",
                action,
                index,
                len(self._images),
            )
            raise NotFoundError(f"No image {index}; there are {len(self._images)}")

    def index_of(self, key):
        """Return the current index of the image with ``key``."""
        for index, image in enumerate(self._images, start=1):
            if image.key == key:
                return index
        raise NotFoundError(f"No image with key {key!r}")

    def get(self, index):
        self._check_index(index, "get")
        return self._images[index - 1]

    def add_from_source(self, source, position=None):
        """
        Append a new image read from ``source``.

        Args:
            source: bytes, uploaded file, URL or data URI
            position: initial position, DEFAULT_IMAGE_POSITION when omitted

        Returns:
            the new ImageRecord
        """
        if position is None:
            position = blog_settings.DEFAULT_IMAGE_POSITION
        position = Position.parse(position, max_index=self.max_index)
        src = read_image_source(source)

        image = ImageRecord(src=src, position=position)
        self._images.append(image)
        self._sync()
        logger.debug("Added image %d at %s", len(self._images), position)
        return image

    def update_metadata(self, index, field, value):
        """Set ``alt``, ``caption`` or ``position`` of the image at ``index``."""
        self._check_index(index, f"update of {field}")
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Unknown image field: {field!r}")

        if field == "position":
            value = Position.parse(value, max_index=self.max_index)
        elif value is None:
            value = ""
        elif not isinstance(value, str):
            raise ValidationError(f"Image {field} must be a string")

        current = self._images[index - 1]
        if getattr(current, field) == value:
            return current

        updated = current.with_changes(**{field: value})
        self._images[index - 1] = updated
        self._sync()
        logger.debug("Updated %s of image %d", field, index)
        return updated

    def remove(self, index):
        """Remove and return the image at ``index``; later images shift down."""
        self._check_index(index, "remove")
        removed = self._images.pop(index - 1)
        self._sync()
        logger.debug("Removed image %d, %d left", index, len(self._images))
        return removed

    def move(self, index, new_index):
        """Move the image at ``index`` to ``new_index``. Positions are kept."""
        self._check_index(index, "move")
        self._check_index(new_index, "move")
        image = self._images.pop(index - 1)
        self._images.insert(new_index - 1, image)
        self._sync()
        logger.debug("Moved image %d to %d", index, new_index)
        return image

    def submit(self):
        """Return the serialized value the post will be saved with."""
        return self.field_value
