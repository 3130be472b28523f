"""
The content composition engine.

Nothing in this package touches the database:

    from blog_composer.content import compose, segment, ImageEditingSession
"""
from .composer import HeroImage, IndexedImage, Paragraph, compose, find_position_conflicts
from .images import ImageRecord
from .positions import HERO, NO_INDEX_LIMIT, Position, position_choices
from .post import PostContent, PostContentMixin
from .segmenter import segment
from .serialization import dumps_images, loads_images
from .session import ImageEditingSession
from .slugs import generate_slug

__all__ = [
    # Positions and records
    "HERO",
    "NO_INDEX_LIMIT",
    "Position",
    "position_choices",
    "ImageRecord",
    "dumps_images",
    "loads_images",
    # Composition
    "segment",
    "compose",
    "find_position_conflicts",
    "HeroImage",
    "Paragraph",
    "IndexedImage",
    # Posts
    "PostContent",
    "PostContentMixin",
    "generate_slug",
    "ImageEditingSession",
]
