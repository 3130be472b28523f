"""Django app configuration for blog_composer."""
from django.apps import AppConfig


class BlogComposerConfig(AppConfig):
    """Configuration for the blog composer app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "blog_composer"
    verbose_name = "Blog Composer"

    def ready(self):
        """Register system checks."""
        from . import checks  # noqa: F401
