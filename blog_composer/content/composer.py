"""
Composition of a post body and its images into an ordered list of blocks.

Renderers walk the blocks in order and switch on ``block.kind``:

    hero       HeroImage, always first when present
    paragraph  Paragraph, numbered from 1
    image      IndexedImage, directly after the paragraph it belongs to
"""
import logging
from collections import Counter
from dataclasses import dataclass
from typing import ClassVar

from .images import ImageRecord
from .segmenter import segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeroImage:
    image: ImageRecord
    kind: ClassVar[str] = "hero"


@dataclass(frozen=True)
class Paragraph:
    text: str
    number: int
    kind: ClassVar[str] = "paragraph"


@dataclass(frozen=True)
class IndexedImage:
    image: ImageRecord
    after: int
    kind: ClassVar[str] = "image"


def compose(body, images=()):
    """
    Interleave ``images`` with the paragraphs of ``body``.

    When several images claim the same position the last one in collection
    order is used. Indexed images whose paragraph does not exist are left out.

    Args:
        body: post body text
        images: iterable of ImageRecord with already-validated positions

    Returns:
        list of HeroImage, Paragraph and IndexedImage blocks
    """
    paragraphs = segment(body)

    hero = None
    by_paragraph = {}
    for image in images:
        if image.position.is_hero:
            hero = image
        else:
            by_paragraph[image.position.index] = image

    blocks = []
    if hero is not None:
        blocks.append(HeroImage(hero))

    for number, text in enumerate(paragraphs, start=1):
        blocks.append(Paragraph(text, number))
        image = by_paragraph.get(number)
        if image is not None:
            blocks.append(IndexedImage(image, number))

    dropped = [index for index in by_paragraph if index > len(paragraphs)]
    if dropped:
        logger.debug(
            "Omitted images for paragraphs %s; body has %d paragraphs",
            sorted(dropped),
            len(paragraphs),
        )
    return blocks


def find_position_conflicts(images):
    """Return the positions (as strings) claimed by more than one image."""
    counts = Counter(image.position for image in images)
    return [str(position) for position in sorted(counts) if counts[position] > 1]
