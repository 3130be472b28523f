"""
Image positions: where an embedded image sits relative to the post body.

The vocabulary is closed: ``hero`` plus ``index-1`` .. ``index-N``, where N is
the MAX_INDEXED_IMAGES setting unless a caller passes ``max_index``.
"""
import re
from dataclasses import dataclass

from ..conf import blog_settings
from ..exceptions import ValidationError

HERO = "hero"
INDEX_PREFIX = "index-"

# Accepts any index-n; for values stored under an older MAX_INDEXED_IMAGES.
NO_INDEX_LIMIT = float("inf")

_INDEX_RE = re.compile(r"^index-([1-9][0-9]*)$")


def _resolve_max_index(max_index):
    if max_index is None:
        return blog_settings.MAX_INDEXED_IMAGES
    return max_index


@dataclass(frozen=True, order=True)
class Position:
    """
    A placement slot. Index 0 is the hero slot, index i >= 1 renders after
    paragraph i.
    """

    index: int

    @classmethod
    def hero(cls):
        return cls(0)

    @classmethod
    def after_paragraph(cls, number):
        return cls(number)

    @classmethod
    def parse(cls, value, max_index=None):
        """
        Parse a wire value such as ``"hero"`` or ``"index-2"``.

        Surrounding whitespace and letter case are normalized; anything else
        outside the vocabulary raises ValidationError.
        """
        if isinstance(value, Position):
            value = str(value)
        if not isinstance(value, str):
            raise ValidationError(f"Invalid image position: {value!r}")

        normalized = value.strip().lower()
        if normalized == HERO:
            return cls.hero()

        match = _INDEX_RE.match(normalized)
        if not match:
            raise ValidationError(f"Invalid image position: {value!r}")

        number = int(match.group(1))
        limit = _resolve_max_index(max_index)
        if number > limit:
            raise ValidationError(
                f"Invalid image position: {value!r} (at most {INDEX_PREFIX}{limit})"
            )
        return cls(number)

    @property
    def is_hero(self):
        return self.index == 0

    @property
    def is_indexed(self):
        return self.index > 0

    def __str__(self):
        if self.is_hero:
            return HERO
        return f"{INDEX_PREFIX}{self.index}"


def position_choices(max_index=None):
    """Return the position vocabulary as Django form choices."""
    choices = [(HERO, "Hero (before the text)")]
    for number in range(1, _resolve_max_index(max_index) + 1):
        choices.append((f"{INDEX_PREFIX}{number}", f"After paragraph {number}"))
    return choices
