"""
Exceptions raised by the composition engine.

Views and forms translate these into Django's own error reporting; the
content layer never imports Django's ValidationError.
"""


class BlogComposerError(Exception):
    """Base class for all blog_composer errors."""


class ValidationError(BlogComposerError, ValueError):
    """A value failed validation (bad position, empty required field...)."""


class ParseError(ValidationError):
    """A serialized image collection could not be parsed as a whole."""


class NotFoundError(BlogComposerError, IndexError):
    """An image index does not exist in the collection."""
