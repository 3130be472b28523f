"""
Tests for the public, preview and editing views.
"""
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from blog_composer.content import dumps_images, loads_images
from blog_composer.models import Post

from .conftest import image, make_image_bytes

BODY = "Opening paragraph.\n\nMiddle paragraph.\n\nClosing paragraph."


@pytest.fixture
def published_post(db, user):
    return Post.objects.create(
        title="Published Post",
        body=BODY,
        author=user,
        published=True,
        images=[
            image(src="https://example.com/hero.jpg", alt="Hero alt"),
            image(src="https://example.com/two.jpg", alt="Second alt", position="index-2"),
        ],
    )


@pytest.fixture
def draft_post(db, user):
    return Post.objects.create(title="Draft Post", body=BODY, author=user)


@pytest.fixture
def author_client(client, user):
    client.force_login(user)
    return client


def rows(images):
    """Per-image formset data matching ``images``."""
    data = {
        "image-TOTAL_FORMS": str(len(images)),
        "image-INITIAL_FORMS": str(len(images)),
    }
    for number, record in enumerate(images):
        data[f"image-{number}-alt"] = record.alt
        data[f"image-{number}-caption"] = record.caption
        data[f"image-{number}-position"] = str(record.position)
    return data


def edit_data(images=(), **kwargs):
    data = {
        "title": "Edited Title",
        "slug": "",
        "excerpt": "",
        "body": BODY,
        "images": dumps_images(images),
    }
    data.update(rows(list(images)))
    data.update(kwargs)
    return data


class TestPublicViews:
    """Tests for the public blog."""

    def test_list_shows_published_only(self, client, published_post, draft_post):
        response = client.get(reverse("blog_composer:post_list"))
        assert response.status_code == 200
        assert list(response.context["posts"]) == [published_post]

    def test_list_search(self, client, published_post, user):
        Post.objects.create(title="Gardening", body="Plants", author=user, published=True)
        response = client.get(reverse("blog_composer:post_list"), {"q": "garden"})
        assert [post.title for post in response.context["posts"]] == ["Gardening"]

    def test_detail_renders_composed_order(self, client, published_post):
        response = client.get(published_post.get_absolute_url())
        assert response.status_code == 200
        html = response.content.decode()
        order = [
            html.index("https://example.com/hero.jpg"),
            html.index("Opening paragraph."),
            html.index("Middle paragraph."),
            html.index("https://example.com/two.jpg"),
            html.index("Closing paragraph."),
        ]
        assert order == sorted(order)
        assert [block.kind for block in response.context["blocks"]] == [
            "hero",
            "paragraph",
            "paragraph",
            "image",
            "paragraph",
        ]

    def test_detail_escapes_text(self, client, user):
        post = Post.objects.create(
            title="Escaping",
            body="<script>alert(1)</script>",
            author=user,
            published=True,
            images=[image(alt='"><b>alt</b>')],
        )
        html = client.get(post.get_absolute_url()).content.decode()
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
        assert "<b>alt</b>" not in html

    def test_unpublished_detail_is_404(self, client, draft_post):
        response = client.get(reverse("blog_composer:post_detail", args=[draft_post.slug]))
        assert response.status_code == 404


class TestPreviewView:
    """Tests for the author preview."""

    def test_requires_login(self, client, draft_post):
        response = client.get(draft_post.get_preview_url())
        assert response.status_code == 302

    def test_author_sees_draft(self, author_client, draft_post):
        response = author_client.get(draft_post.get_preview_url())
        assert response.status_code == 200
        assert response.context["blocks"][0].text == "Opening paragraph."

    def test_other_users_get_404(self, client, other_user, draft_post):
        client.force_login(other_user)
        response = client.get(draft_post.get_preview_url())
        assert response.status_code == 404

    def test_manage_list(self, author_client, draft_post, published_post, other_user):
        Post.objects.create(title="Not mine", body="x", author=other_user)
        response = author_client.get(reverse("blog_composer:manage_posts"))
        assert set(response.context["posts"]) == {draft_post, published_post}


class TestCreateView:
    """Tests for writing a new post."""

    def test_get(self, author_client):
        response = author_client.get(reverse("blog_composer:post_create"))
        assert response.status_code == 200
        assert len(response.context["session"]) == 0

    def test_save(self, author_client, user):
        images = [image(position="index-1", alt="First image")]
        response = author_client.post(
            reverse("blog_composer:post_create"),
            edit_data(images, action="save"),
        )
        post = Post.objects.get()
        assert response.status_code == 302
        assert response.url == post.get_preview_url()
        assert post.author == user
        assert post.slug == "edited-title"
        assert post.images == images

    def test_save_is_default_action(self, author_client):
        response = author_client.post(reverse("blog_composer:post_create"), edit_data())
        assert response.status_code == 302
        assert Post.objects.count() == 1

    def test_invalid_form_is_redisplayed(self, author_client):
        response = author_client.post(
            reverse("blog_composer:post_create"), edit_data(title="", action="save")
        )
        assert response.status_code == 200
        assert "title" in response.context["form"].errors
        assert not Post.objects.exists()

    def test_add_image_from_url_does_not_save(self, author_client):
        response = author_client.post(
            reverse("blog_composer:post_create"),
            edit_data(action="add-image", image_url="https://example.com/new.jpg"),
        )
        assert response.status_code == 200
        assert not Post.objects.exists()
        session = response.context["session"]
        assert [record.src for record in session] == ["https://example.com/new.jpg"]
        assert str(session.get(1).position) == "hero"
        assert "https://example.com/new.jpg" in response.content.decode()
        assert response.context["form"]["title"].value() == "Edited Title"

    def test_add_image_upload(self, author_client):
        upload = SimpleUploadedFile("photo.png", make_image_bytes(), content_type="image/png")
        data = edit_data(action="add-image", image_position="index-2")
        data["image_file"] = upload
        response = author_client.post(reverse("blog_composer:post_create"), data)
        record = response.context["session"].get(1)
        assert record.src.startswith("data:image/png;base64,")
        assert str(record.position) == "index-2"

    def test_add_unreadable_upload_reports_error(self, author_client):
        upload = SimpleUploadedFile("photo.png", b"garbage", content_type="image/png")
        data = edit_data(action="add-image")
        data["image_file"] = upload
        response = author_client.post(reverse("blog_composer:post_create"), data)
        assert response.status_code == 200
        assert response.context["editing_errors"]
        assert len(response.context["session"]) == 0

    def test_generate_slug(self, author_client):
        response = author_client.post(
            reverse("blog_composer:post_create"),
            edit_data(title="Rails 8: My First App!", slug="", action="generate-slug"),
        )
        assert response.context["form"]["slug"].value() == "rails-8-my-first-app"
        assert not Post.objects.exists()

    def test_preview_action(self, author_client):
        images = [image(position="index-1")]
        response = author_client.post(
            reverse("blog_composer:post_create"), edit_data(images, action="preview")
        )
        assert response.status_code == 200
        assert [block.kind for block in response.context["preview_blocks"]] == [
            "paragraph",
            "image",
            "paragraph",
            "paragraph",
        ]
        assert not Post.objects.exists()

    def test_unparsable_images_block_save(self, author_client):
        data = edit_data(action="save")
        data["images"] = "[{broken"
        del data["image-TOTAL_FORMS"]
        response = author_client.post(reverse("blog_composer:post_create"), data)
        assert response.status_code == 200
        assert response.context["editing_errors"]
        assert not Post.objects.exists()

    def test_unknown_action(self, author_client):
        response = author_client.post(
            reverse("blog_composer:post_create"), edit_data(action="explode")
        )
        assert response.status_code == 200
        assert response.context["editing_errors"] == ["Unknown action: explode"]


class TestUpdateView:
    """Tests for editing an existing post's images."""

    @pytest.fixture
    def three_images(self):
        return [
            image(src="https://example.com/1.jpg", alt="one", position="hero"),
            image(src="https://example.com/2.jpg", alt="two", position="index-1"),
            image(src="https://example.com/3.jpg", alt="three", position="index-2"),
        ]

    @pytest.fixture
    def post(self, user, three_images):
        return Post.objects.create(title="With Images", body=BODY, author=user, images=three_images)

    def url(self, post):
        return reverse("blog_composer:post_update", args=[post.slug])

    def test_get_builds_rows(self, author_client, post, three_images):
        response = author_client.get(self.url(post))
        assert response.status_code == 200
        assert [record for number, record, row in response.context["image_rows"]] == three_images
        assert [number for number, record, row in response.context["image_rows"]] == [1, 2, 3]

    def test_other_users_cannot_edit(self, client, other_user, post):
        client.force_login(other_user)
        assert client.get(self.url(post)).status_code == 404

    def test_remove_first_image_rebuilds_rows(self, author_client, post, three_images):
        response = author_client.post(
            self.url(post), edit_data(three_images, action="remove-image:1")
        )
        assert response.status_code == 200
        session = response.context["session"]
        assert session.images == three_images[1:]
        forms = response.context["image_formset"].forms
        assert [row.initial["alt"] for row in forms] == ["two", "three"]
        post.refresh_from_db()
        assert post.image_count == 3

    def test_remove_missing_image(self, author_client, post, three_images):
        response = author_client.post(
            self.url(post), edit_data(three_images, action="remove-image:7")
        )
        assert response.context["editing_errors"]
        assert response.context["session"].images == three_images

    def test_move_down(self, author_client, post, three_images):
        response = author_client.post(
            self.url(post), edit_data(three_images, action="move-down:1")
        )
        assert [record.alt for record in response.context["session"]] == ["two", "one", "three"]

    def test_row_edits_applied_on_save(self, author_client, post, three_images):
        data = edit_data(three_images, action="save", slug=post.slug, title=post.title)
        data["image-1-alt"] = "Better alt"
        data["image-2-position"] = "index-3"
        response = author_client.post(self.url(post), data)
        assert response.status_code == 302
        post.refresh_from_db()
        assert post.images[1].alt == "Better alt"
        assert str(post.images[2].position) == "index-3"

    def test_invalid_row_position_keeps_prior_state(self, author_client, post, three_images):
        data = edit_data(three_images, action="save", slug=post.slug)
        data["image-0-position"] = "index-9"
        response = author_client.post(self.url(post), data)
        assert response.status_code == 200
        assert response.context["editing_errors"]
        assert response.context["session"].images == three_images
        post.refresh_from_db()
        assert post.title == "With Images"

    def test_stale_rows_rejected(self, author_client, post, three_images):
        data = edit_data(three_images, action="save", slug=post.slug)
        data["image-TOTAL_FORMS"] = "2"
        response = author_client.post(self.url(post), data)
        assert response.status_code == 200
        assert response.context["editing_errors"]

    def test_unparsable_images_fall_back_to_saved(self, author_client, post, three_images):
        data = edit_data(action="add-image", image_url="https://example.com/4.jpg")
        data["images"] = "not json"
        del data["image-TOTAL_FORMS"]
        response = author_client.post(self.url(post), data)
        session = response.context["session"]
        assert response.context["editing_errors"]
        assert session.images == three_images
        assert loads_images(response.context["form"]["images"].value()) == three_images

    def test_rows_ignored_when_images_unparsable(self, author_client, post, three_images):
        data = edit_data(three_images, action="save", slug=post.slug)
        data["images"] = "not json"
        data["image-0-alt"] = "edited"
        data["image-0-position"] = "index-3"
        response = author_client.post(self.url(post), data)
        assert response.status_code == 200
        assert response.context["editing_errors"]
        assert response.context["session"].images == three_images
        assert [row.initial["alt"] for row in response.context["image_formset"].forms] == [
            "one",
            "two",
            "three",
        ]
        post.refresh_from_db()
        assert post.images == three_images


class TestLoweredImageLimit:
    """Tests for posts saved while MAX_INDEXED_IMAGES was higher."""

    @pytest.fixture
    def wide_post(self, user, settings):
        settings.BLOG_COMPOSER = {"MAX_INDEXED_IMAGES": 5}
        post = Post.objects.create(
            title="Wide",
            body=BODY,
            author=user,
            published=True,
            images=[image(src="https://example.com/5.jpg", position="index-5")],
        )
        settings.BLOG_COMPOSER = {}
        return post

    def test_public_pages_still_render(self, client, wide_post, published_post):
        response = client.get(reverse("blog_composer:post_list"))
        assert response.status_code == 200
        assert set(response.context["posts"]) == {wide_post, published_post}
        assert client.get(wide_post.get_absolute_url()).status_code == 200

    def test_edit_page_asks_for_new_positions(self, author_client, wide_post):
        response = author_client.get(
            reverse("blog_composer:post_update", args=[wide_post.slug])
        )
        assert response.status_code == 200
        assert response.context["editing_errors"]
        assert str(response.context["session"].get(1).position) == "index-5"

    def test_save_after_moving_image(self, author_client, wide_post):
        data = edit_data(wide_post.images, action="save", slug=wide_post.slug)
        data["image-0-position"] = "hero"
        response = author_client.post(
            reverse("blog_composer:post_update", args=[wide_post.slug]), data
        )
        assert response.status_code == 302
        wide_post.refresh_from_db()
        assert wide_post.images[0].is_hero

    def test_out_of_range_position_not_saved(self, author_client, wide_post):
        data = edit_data(wide_post.images, action="save", slug=wide_post.slug, title="Renamed")
        response = author_client.post(
            reverse("blog_composer:post_update", args=[wide_post.slug]), data
        )
        assert response.status_code == 200
        assert response.context["editing_errors"]
        wide_post.refresh_from_db()
        assert wide_post.title == "Wide"


class TestPublishAndDelete:
    """Tests for publish, unpublish and delete."""

    def test_publish(self, author_client, draft_post):
        response = author_client.post(
            reverse("blog_composer:post_publish", args=[draft_post.slug])
        )
        assert response.status_code == 302
        draft_post.refresh_from_db()
        assert draft_post.published
        assert author_client.get(draft_post.get_absolute_url()).status_code == 200

    def test_unpublish(self, author_client, published_post):
        author_client.post(reverse("blog_composer:post_unpublish", args=[published_post.slug]))
        published_post.refresh_from_db()
        assert not published_post.published

    def test_publish_other_users_post(self, client, other_user, draft_post):
        client.force_login(other_user)
        response = client.post(reverse("blog_composer:post_publish", args=[draft_post.slug]))
        assert response.status_code == 404

    def test_delete(self, author_client, draft_post):
        response = author_client.post(reverse("blog_composer:post_delete", args=[draft_post.slug]))
        assert response.status_code == 302
        assert not Post.objects.filter(pk=draft_post.pk).exists()
