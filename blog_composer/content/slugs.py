"""
URL slugs derived from post titles.
"""
import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(title, max_length=None):
    """
    Derive a URL-safe slug from ``title``.

    Only ASCII lowercase letters, digits and hyphens survive. Never fails;
    an empty or all-punctuation title gives an empty slug. Uniqueness is up
    to the caller.
    """
    if not title:
        return ""

    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug).strip("-")

    if max_length is not None:
        slug = slug[:max_length].rstrip("-")
    return slug
