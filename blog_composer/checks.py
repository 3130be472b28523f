"""
System checks for BLOG_COMPOSER settings.
"""
from django.core import checks

from .conf import blog_settings
from .content.positions import Position
from .exceptions import ValidationError


@checks.register()
def check_image_settings(app_configs=None, **kwargs):
    errors = []

    max_index = blog_settings.MAX_INDEXED_IMAGES
    if isinstance(max_index, bool) or not isinstance(max_index, int) or max_index < 1:
        errors.append(
            checks.Error(
                "BLOG_COMPOSER['MAX_INDEXED_IMAGES'] must be a positive integer.",
                hint=f"Got {max_index!r}.",
                id="blog_composer.E001",
            )
        )
        return errors

    try:
        Position.parse(blog_settings.DEFAULT_IMAGE_POSITION)
    except ValidationError as exc:
        errors.append(
            checks.Error(
                "BLOG_COMPOSER['DEFAULT_IMAGE_POSITION'] is not a valid position.",
                hint=str(exc),
                id="blog_composer.E002",
            )
        )
    return errors
