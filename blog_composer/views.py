"""
Views for django-blog-composer.

Public views show published posts. The management views let a logged-in
author write posts and edit their images; an image edit re-renders the whole
editing form from the updated ImageEditingSession without saving the post.
"""
import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse, reverse_lazy
from django.views import View
from django.views.generic import (
    ListView,
    DetailView,
    CreateView,
    UpdateView,
    DeleteView,
)

from . import exceptions
from .conf import blog_settings
from .content import NO_INDEX_LIMIT, ImageEditingSession, generate_slug
from .content.session import EDITABLE_FIELDS
from .forms import ImageMetadataFormSet, ImageSourceForm, PostForm
from .models import Post

logger = logging.getLogger(__name__)

IMAGE_PREFIX = "image"


class PostListView(ListView):
    """List published posts, newest first, with optional search."""

    model = Post
    template_name = "blog_composer/post_list.html"
    context_object_name = "posts"
    paginate_by = blog_settings.POSTS_PER_PAGE

    def get_queryset(self):
        qs = Post.objects.published_recent().select_related("author")
        term = self.request.GET.get("q", "").strip()
        if term:
            qs = qs.search(term)
        return qs

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["query"] = self.request.GET.get("q", "").strip()
        return context


class PostDetailView(DetailView):
    """Public view of a single published post."""

    model = Post
    template_name = "blog_composer/post_detail.html"
    context_object_name = "post"

    def get_queryset(self):
        return Post.objects.published().select_related("author")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["blocks"] = self.object.compose()
        context["page_description"] = self.object.excerpt_or_content(limit=160)
        return context


class AuthorPostMixin(LoginRequiredMixin):
    """Restrict management views to the current user's posts."""

    def get_queryset(self):
        return Post.objects.filter(author=self.request.user)


class ManagePostListView(AuthorPostMixin, ListView):
    """All of the current user's posts, drafts included."""

    template_name = "blog_composer/manage_list.html"
    context_object_name = "posts"

    def get_queryset(self):
        return super().get_queryset().recent()


class PostPreviewView(AuthorPostMixin, DetailView):
    """Admin preview: the composed post whether or not it is published."""

    template_name = "blog_composer/post_preview.html"
    context_object_name = "post"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["blocks"] = self.object.compose()
        return context


class PostEditingMixin:
    """
    Shared create/update handling.

    The submitted ``action`` selects what happens:

        save                  validate and save the post
        preview               validate and show the composed post unsaved
        generate-slug         fill the slug from the title
        add-image             add an image from an upload or URL
        remove-image:<n>      remove image n
        move-up:<n>           swap image n with the one before it
        move-down:<n>         swap image n with the one after it

    Edits made in the per-image rows are applied before every action.
    """

    form_class = PostForm
    template_name = "blog_composer/post_form.html"

    def get_editing_object(self):
        raise NotImplementedError

    def get_success_url(self):
        return self.object.get_preview_url()

    def get_context_data(self, **kwargs):
        if "session" not in kwargs:
            errors = []
            session = self.saved_session(errors)
            kwargs.update(self.editor_context(session, errors=errors))
        return super().get_context_data(**kwargs)

    def saved_session(self, errors):
        """
        Session over the post's saved images.

        Saved positions may lie beyond a since-lowered MAX_INDEXED_IMAGES; the
        session still opens, and the author is asked to move those images.
        """
        images = list(self.object.images) if self.object else []
        try:
            return ImageEditingSession(images)
        except exceptions.ValidationError as exc:
            errors.append(f"Some saved images need a new position: {exc}")
            return ImageEditingSession(images, max_index=NO_INDEX_LIMIT)

    def editor_context(self, session, source_form=None, errors=(), preview=None):
        formset = ImageMetadataFormSet(
            initial=[
                {"alt": image.alt, "caption": image.caption, "position": str(image.position)}
                for image in session
            ],
            prefix=IMAGE_PREFIX,
        )
        return {
            "session": session,
            "image_formset": formset,
            "image_rows": list(zip(range(1, len(session) + 1), session, formset.forms)),
            "source_form": source_form or ImageSourceForm(),
            "editing_errors": list(errors),
            "preview_blocks": preview,
        }

    def post(self, request, *args, **kwargs):
        self.object = self.get_editing_object()
        action, _, argument = request.POST.get("action", "save").partition(":")
        data = request.POST.copy()
        errors = []

        session = self.load_session(data, errors)
        if errors:
            # Rows and actions were numbered against the unreadable value.
            return self.render_editor(data, session, errors=errors)
        session = self.apply_rows(session, data, errors)

        source_form = None
        if action in ("save", "preview"):
            if not errors:
                return self.submit(action, session, data)
        elif action == "generate-slug":
            data["slug"] = generate_slug(
                data.get("title", ""), max_length=blog_settings.SLUG_MAX_LENGTH
            )
        elif action == "add-image":
            source_form = ImageSourceForm(data, request.FILES)
            if source_form.is_valid():
                try:
                    session.add_from_source(
                        source_form.source,
                        position=source_form.cleaned_data["image_position"] or None,
                    )
                except exceptions.ValidationError as exc:
                    errors.append(str(exc))
                else:
                    source_form = None
        elif action in ("remove-image", "move-up", "move-down"):
            self.apply_index_action(session, action, argument, errors)
        else:
            errors.append(f"Unknown action: {action}")

        return self.render_editor(data, session, source_form, errors)

    def render_editor(self, data, session, source_form=None, errors=()):
        """Re-render the whole unsaved form from ``session``."""
        form = self.get_form_class()(
            initial=self.initial_from_data(data, session),
            instance=self.object,
        )
        return self.render_to_response(
            self.get_context_data(
                form=form, **self.editor_context(session, source_form, errors)
            )
        )

    def load_session(self, data, errors):
        """
        Seed a session from the submitted field, or the saved images.

        Positions are not capped here; the row and add-image forms offer only
        current positions and PostForm checks the collection on save.
        """
        try:
            return ImageEditingSession.load(data.get("images", ""), max_index=NO_INDEX_LIMIT)
        except exceptions.ParseError as exc:
            logger.warning("Discarded unparsable images field: %s", exc)
            errors.append(f"Images could not be read: {exc}")
            return self.saved_session(errors)

    def apply_rows(self, session, data, errors):
        """Apply per-image row edits; on any error keep the session as it was."""
        if f"{IMAGE_PREFIX}-TOTAL_FORMS" not in data:
            return session

        formset = ImageMetadataFormSet(data, prefix=IMAGE_PREFIX)
        if not formset.is_valid():
            errors.append("Image details could not be read.")
            return session
        if len(formset.forms) != len(session):
            errors.append("Image details are out of date; please try again.")
            return session

        edited = ImageEditingSession(session.images, max_index=session.max_index)
        try:
            for number, row in enumerate(formset.forms, start=1):
                for field in EDITABLE_FIELDS:
                    edited.update_metadata(number, field, row.cleaned_data[field])
        except (exceptions.ValidationError, exceptions.NotFoundError) as exc:
            errors.append(str(exc))
            return session
        return edited

    def apply_index_action(self, session, action, argument, errors):
        try:
            number = int(argument)
            if action == "remove-image":
                session.remove(number)
            elif action == "move-up":
                session.move(number, number - 1)
            else:
                session.move(number, number + 1)
        except ValueError:
            errors.append(f"Invalid image number: {argument!r}")
        except exceptions.NotFoundError as exc:
            errors.append(str(exc))

    def submit(self, action, session, data):
        data["images"] = session.submit()
        form = self.get_form_class()(data=data, instance=self.object)
        if not form.is_valid():
            return self.form_invalid(form)
        if action == "preview":
            return self.render_to_response(
                self.get_context_data(
                    form=form,
                    **self.editor_context(session, preview=form.to_content().compose()),
                )
            )
        return self.form_valid(form)

    def form_invalid(self, form):
        # The hidden field falls back to the last valid collection; rebuild
        # the rows from exactly what it will render.
        session = ImageEditingSession.load(form["images"].value(), max_index=NO_INDEX_LIMIT)
        return self.render_to_response(
            self.get_context_data(form=form, **self.editor_context(session))
        )

    def initial_from_data(self, data, session):
        initial = {name: data.get(name, "") for name in ("title", "slug", "excerpt", "body")}
        initial["published"] = PostForm.base_fields["published"].to_python(
            data.get("published")
        )
        initial["images"] = session.images
        return initial


class PostCreateView(AuthorPostMixin, PostEditingMixin, CreateView):
    """Write a new post."""

    def get_editing_object(self):
        return None

    def form_valid(self, form):
        form.instance.author = self.request.user
        return super().form_valid(form)


class PostUpdateView(AuthorPostMixin, PostEditingMixin, UpdateView):
    """Edit an existing post."""

    def get_editing_object(self):
        return self.get_object()


class PostDeleteView(AuthorPostMixin, DeleteView):
    """Delete a post and its images."""

    template_name = "blog_composer/post_confirm_delete.html"
    success_url = reverse_lazy("blog_composer:manage_posts")


class PostPublishView(LoginRequiredMixin, View):
    """Publish or unpublish one of the current user's posts."""

    publish = True

    def post(self, request, slug):
        post = get_object_or_404(Post, slug=slug, author=request.user)
        if self.publish:
            post.publish()
        else:
            post.unpublish()
        return redirect(reverse("blog_composer:post_preview", kwargs={"slug": post.slug}))
