"""
Models for django-blog-composer.

All models are importable from blog_composer.models:

    from blog_composer.models import Post, ImageListField
"""
from .fields import ImageListField, ImageListFormField
from .posts import Post, PostQuerySet

__all__ = [
    # Posts
    "Post",
    "PostQuerySet",
    # Fields
    "ImageListField",
    "ImageListFormField",
]
