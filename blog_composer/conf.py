"""
Configuration settings for django-blog-composer.

Override these in your Django settings.py:

    BLOG_COMPOSER = {
        'MAX_INDEXED_IMAGES': 5,
        'EXCERPT_LENGTH': 200,
        'REJECT_DUPLICATE_POSITIONS': True,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Image placement
    "MAX_INDEXED_IMAGES": 3,  # index-1 .. index-N
    "DEFAULT_IMAGE_POSITION": "hero",
    "REJECT_DUPLICATE_POSITIONS": False,

    # Embedded uploads
    "MEDIA_MAX_SIZE_MB": 5,
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/png", "image/gif", "image/webp"],

    # Posts
    "TITLE_MAX_LENGTH": 200,
    "EXCERPT_MAX_LENGTH": 500,
    "EXCERPT_LENGTH": 150,
    "POSTS_PER_PAGE": 10,

    # SEO
    "SLUG_MAX_LENGTH": 100,
}


class BlogComposerSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_composer.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_composer setting: {name}")

        user_settings = getattr(settings, "BLOG_COMPOSER", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def MEDIA_MAX_SIZE_BYTES(self):
        """Return the upload size limit in bytes."""
        return int(self.MEDIA_MAX_SIZE_MB * 1024 * 1024)


blog_settings = BlogComposerSettings()
