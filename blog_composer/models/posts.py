"""
Post model for django-blog-composer.
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Q
from django.urls import reverse
from django.utils import timezone

from ..conf import blog_settings
from ..content import PostContentMixin, find_position_conflicts, generate_slug
from .fields import ImageListField

logger = logging.getLogger(__name__)

slug_format_validator = RegexValidator(
    r"^[a-z0-9-]+$",
    "Slug must contain only lowercase letters, numbers, and hyphens.",
    code="invalid_slug",
)


class PostQuerySet(models.QuerySet):
    def published(self):
        return self.filter(published=True)

    def recent(self):
        return self.order_by("-created_at")

    def published_recent(self):
        return self.published().recent()

    def search(self, term):
        """Return posts whose title or body contains ``term``."""
        if not term or not term.strip():
            return self.none()
        term = term.strip()
        return self.filter(Q(title__icontains=term) | Q(body__icontains=term))


class Post(PostContentMixin, models.Model):
    """
    Blog post with an embedded, positioned image collection.

    Images live in one JSON text column (see ImageListField) and are
    interleaved with the body's paragraphs at render time by compose().
    """

    # Content
    title = models.CharField(max_length=blog_settings.TITLE_MAX_LENGTH)
    slug = models.SlugField(
        max_length=blog_settings.SLUG_MAX_LENGTH,
        unique=True,
        blank=True,
        validators=[slug_format_validator],
        help_text="Generated from the title if left blank.",
    )
    body = models.TextField(
        help_text="Separate paragraphs with a blank line.",
    )
    excerpt = models.TextField(
        blank=True,
        max_length=blog_settings.EXCERPT_MAX_LENGTH,
        help_text="Optional manual excerpt. Auto-generated if blank.",
    )
    images = ImageListField(
        help_text="JSON list of images with src, alt, caption and position.",
    )

    # Author - uses Django's AUTH_USER_MODEL
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="composed_posts",
    )

    # Status
    published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["published", "published_at"]),
        ]

    def __str__(self):
        return self.title

    def clean(self):
        super().clean()
        if blog_settings.REJECT_DUPLICATE_POSITIONS and isinstance(self.images, list):
            conflicts = find_position_conflicts(self.images)
            if conflicts:
                raise ValidationError(
                    {"images": f"More than one image uses: {', '.join(conflicts)}"}
                )

    def save(self, *args, **kwargs):
        # Auto-generate slug from title
        if not self.slug:
            self.slug = self._unique_slug(
                generate_slug(self.title, max_length=blog_settings.SLUG_MAX_LENGTH)
                or "post"
            )

        if self.published and not self.published_at:
            self.published_at = timezone.now()

        super().save(*args, **kwargs)

    def _unique_slug(self, base_slug):
        slug = base_slug
        counter = 1
        while Post.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            counter += 1
            suffix = f"-{counter}"
            slug = f"{base_slug[:blog_settings.SLUG_MAX_LENGTH - len(suffix)]}{suffix}"
        if slug != base_slug:
            logger.info("Slug %r taken, using %r", base_slug, slug)
        return slug

    def get_absolute_url(self):
        return reverse("blog_composer:post_detail", kwargs={"slug": self.slug})

    def get_preview_url(self):
        return reverse("blog_composer:post_preview", kwargs={"slug": self.slug})

    @property
    def author_name(self):
        return getattr(self.author, "email", "") or str(self.author)

    def publish(self):
        """Publish the post immediately."""
        self.published = True
        self.published_at = timezone.now()
        self.save(update_fields=["published", "published_at", "updated_at"])
        logger.info("Published post %s", self.slug)

    def unpublish(self):
        """Hide the post from the public blog."""
        self.published = False
        self.save(update_fields=["published", "updated_at"])
        logger.info("Unpublished post %s", self.slug)
