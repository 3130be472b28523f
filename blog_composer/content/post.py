"""
PostContent: a post's title, slug, excerpt, body and embedded images.
"""
from dataclasses import dataclass, field
from typing import List

from django.utils.text import Truncator

from ..conf import blog_settings
from ..exceptions import NotFoundError, ValidationError
from .composer import compose
from .images import ImageRecord
from .segmenter import segment
from .serialization import loads_images


class PostContentMixin:
    """
    Image and excerpt behaviour shared by PostContent and the Post model.

    Expects ``title``, ``excerpt``, ``body`` and ``images`` attributes, where
    ``images`` is a list of ImageRecord or its serialized JSON text.
    """

    def _images(self):
        if isinstance(self.images, (str, bytes)) or self.images is None:
            return loads_images(self.images)
        return list(self.images)

    @property
    def has_images(self):
        return bool(self._images())

    @property
    def image_count(self):
        return len(self._images())

    @property
    def hero_image(self):
        """Return the hero image, or None unless exactly one image is hero."""
        heroes = [image for image in self._images() if image.position.is_hero]
        if len(heroes) == 1:
            return heroes[0]
        return None

    @property
    def has_hero_image(self):
        return self.hero_image is not None

    @property
    def indexed_images(self):
        """Return indexed images ordered by slot, whatever the stored order."""
        indexed = [image for image in self._images() if image.position.is_indexed]
        return sorted(indexed, key=lambda image: image.position.index)

    def image_by_index(self, number):
        """Return the image placed after paragraph ``number``, or None."""
        found = None
        for image in self._images():
            if image.position.index == number and image.position.is_indexed:
                found = image
        return found

    def add_image(self, image):
        self.images = self._images() + [image]

    def remove_image(self, number):
        """Remove and return the image at 1-based ``number``."""
        images = self._images()
        if not 1 <= number <= len(images):
            raise NotFoundError(f"No image {number}; post has {len(images)}")
        removed = images.pop(number - 1)
        self.images = images
        return removed

    def clear_images(self):
        self.images = []

    def excerpt_or_content(self, limit=None):
        """
        Return the manual excerpt, or a truncated plain version of the body.

        The derived excerpt joins paragraphs with single spaces so no
        paragraph break is cut in half, then truncates to ``limit``
        characters including the trailing "...".
        """
        if self.excerpt and self.excerpt.strip():
            return self.excerpt
        if limit is None:
            limit = blog_settings.EXCERPT_LENGTH
        text = " ".join(segment(self.body))
        return Truncator(text).chars(limit, truncate="...")

    def compose(self):
        """Return the rendering blocks for this post."""
        return compose(self.body, self._images())


@dataclass
class PostContent(PostContentMixin):
    """Unsaved post content, e.g. built from a form for previewing."""

    title: str
    body: str
    slug: str = ""
    excerpt: str = ""
    images: List[ImageRecord] = field(default_factory=list)

    def validate(self):
        """Raise ValidationError if a required field is missing or too long."""
        if not self.title or not self.title.strip():
            raise ValidationError("Title can't be blank")
        if len(self.title) > blog_settings.TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title is too long (maximum is {blog_settings.TITLE_MAX_LENGTH} characters)"
            )
        if not self.body or not self.body.strip():
            raise ValidationError("Body can't be blank")
        if self.excerpt and len(self.excerpt) > blog_settings.EXCERPT_MAX_LENGTH:
            raise ValidationError(
                f"Excerpt is too long (maximum is {blog_settings.EXCERPT_MAX_LENGTH} characters)"
            )
        self._images()
