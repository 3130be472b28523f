"""
Model and form fields for a post's image collection.

The database column holds the JSON text; Python code sees a list of
ImageRecord.
"""
import logging

from django import forms
from django.core.exceptions import ValidationError
from django.db import models

from ..content.positions import NO_INDEX_LIMIT
from ..content.serialization import dumps_images, loads_images
from ..exceptions import ParseError

logger = logging.getLogger(__name__)


class ImageListFormField(forms.Field):
    """
    Hidden form field carrying the serialized image collection.

    A submitted value that does not parse is invalid, and the bound field
    falls back to the initial value so the form is re-presented with the
    last valid collection.
    """

    widget = forms.HiddenInput

    def __init__(self, *, max_index=None, **kwargs):
        self.max_index = max_index
        kwargs.setdefault("required", False)
        super().__init__(**kwargs)

    def prepare_value(self, value):
        if isinstance(value, (list, tuple)):
            return dumps_images(value)
        return value

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        try:
            return loads_images(value, max_index=self.max_index)
        except ParseError as exc:
            raise ValidationError(str(exc), code="invalid_images") from exc

    def bound_data(self, data, initial):
        try:
            self.to_python(data)
        except ValidationError:
            return initial
        return super().bound_data(data, initial)

    def has_changed(self, initial, data):
        try:
            return self.to_python(initial) != self.to_python(data)
        except ValidationError:
            return True


class ImageListField(models.Field):
    """Ordered list of ImageRecord stored as JSON text."""

    description = "Positioned post images"

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("blank", True)
        kwargs.setdefault("default", list)
        super().__init__(*args, **kwargs)

    def get_internal_type(self):
        return "TextField"

    def from_db_value(self, value, expression, connection):
        # Stored rows may predate a lower MAX_INDEXED_IMAGES.
        try:
            return loads_images(value, max_index=NO_INDEX_LIMIT)
        except ParseError as exc:
            logger.error("Unreadable images column, showing no images: %s", exc)
            return []

    def to_python(self, value):
        if isinstance(value, (list, tuple)):
            return list(value)
        try:
            return loads_images(value)
        except ParseError as exc:
            raise ValidationError(str(exc), code="invalid_images") from exc

    def get_prep_value(self, value):
        if value is None:
            return None
        return dumps_images(self.to_python(value))

    def value_to_string(self, obj):
        return self.get_prep_value(self.value_from_object(obj))

    def formfield(self, **kwargs):
        return super().formfield(
            **{
                "form_class": ImageListFormField,
                "show_hidden_initial": False,
                **kwargs,
            }
        )
