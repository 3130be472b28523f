"""
Django admin configuration for blog_composer.
"""
from django import forms
from django.contrib import admin
from django.utils.html import format_html, format_html_join

from .models import ImageListField, Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "published",
        "image_count",
        "created_at",
    ]
    list_filter = ["published", "created_at"]
    search_fields = ["title", "body", "author__username"]
    raw_id_fields = ["author"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "composition_outline",
        "published_at",
        "created_at",
        "updated_at",
    ]
    prepopulated_fields = {"slug": ("title",)}

    # Raw JSON editing; the field still validates positions on save.
    formfield_overrides = {
        ImageListField: {"widget": forms.Textarea(attrs={"rows": 6, "cols": 80})},
    }

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "body", "excerpt", "author")
        }),
        ("Images", {
            "fields": ("images", "composition_outline"),
        }),
        ("Status", {
            "fields": ("published", "published_at"),
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "unpublish_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    def composition_outline(self, obj):
        """Order in which the post's paragraphs and images will render."""
        if not obj.pk:
            return "-"
        rows = []
        for block in obj.compose():
            if block.kind == "paragraph":
                text = block.text[:60] + "..." if len(block.text) > 60 else block.text
                rows.append((f"Paragraph {block.number}", text))
            else:
                label = "Hero image" if block.kind == "hero" else f"Image after {block.after}"
                rows.append((label, block.image.alt or block.image.caption or "(no alt text)"))
        if not rows:
            return "-"
        return format_html(
            "<ol>{}</ol>",
            format_html_join("", "<li><strong>{}</strong>: {}</li>", rows),
        )

    composition_outline.short_description = "Rendering order"

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        for post in queryset:
            post.publish()
        self.message_user(request, f"{queryset.count()} posts published.")

    @admin.action(description="Unpublish selected posts")
    def unpublish_posts(self, request, queryset):
        for post in queryset:
            post.unpublish()
        self.message_user(request, f"{queryset.count()} posts unpublished.")
