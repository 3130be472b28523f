"""
Shared fixtures for django-blog-composer tests.
"""
import io

import pytest
from django.contrib.auth import get_user_model
from PIL import Image

from blog_composer.content import ImageRecord, Position


def make_image_bytes(image_format="PNG", size=(2, 2)):
    """Return the bytes of a tiny solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color="red").save(buffer, format=image_format)
    return buffer.getvalue()


def image(src="https://example.com/a.jpg", position="hero", alt="", caption=""):
    return ImageRecord(src=src, alt=alt, caption=caption, position=Position.parse(position))


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def user(db):
    """Create a test user."""
    return get_user_model().objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(username="other", password="pass")
