"""
Forms for editing posts and their images.
"""
from django import forms

from .conf import blog_settings
from .content import PostContent, position_choices
from .models import Post


class PostForm(forms.ModelForm):
    """
    Post editing form.

    ``images`` is a hidden field holding the serialized collection kept by
    an ImageEditingSession; the per-image inputs are a separate formset.
    """

    class Meta:
        model = Post
        fields = ["title", "slug", "excerpt", "body", "images", "published"]
        widgets = {
            "excerpt": forms.Textarea(attrs={"rows": 3}),
            "body": forms.Textarea(attrs={"rows": 20}),
        }

    def to_content(self):
        """Build unsaved PostContent from cleaned data, for previewing."""
        data = self.cleaned_data
        return PostContent(
            title=data["title"],
            body=data["body"],
            slug=data.get("slug") or "",
            excerpt=data.get("excerpt") or "",
            images=data.get("images") or [],
        )


class ImageMetadataForm(forms.Form):
    """Alt text, caption and position of one pending image."""

    alt = forms.CharField(required=False, max_length=500, label="Alt text")
    caption = forms.CharField(required=False, max_length=500)
    position = forms.ChoiceField()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["position"].choices = position_choices()


ImageMetadataFormSet = forms.formset_factory(ImageMetadataForm, extra=0)


class ImageSourceForm(forms.Form):
    """A new image to add: an uploaded file or a URL."""

    image_file = forms.FileField(required=False, label="Image file")
    image_url = forms.URLField(required=False, label="Image URL")
    image_position = forms.ChoiceField(label="Position", required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["image_position"].choices = position_choices()
        self.fields["image_position"].initial = blog_settings.DEFAULT_IMAGE_POSITION

    def clean(self):
        cleaned_data = super().clean()
        image_file = cleaned_data.get("image_file")
        image_url = cleaned_data.get("image_url")
        if image_file and image_url:
            raise forms.ValidationError("Choose a file or a URL, not both.")
        if not image_file and not image_url and not self.errors:
            raise forms.ValidationError("Choose an image file or enter a URL.")
        return cleaned_data

    @property
    def source(self):
        return self.cleaned_data.get("image_file") or self.cleaned_data.get("image_url")
