"""
URL configuration for django-blog-composer.

Include in your project urls.py:

    path('blog/', include('blog_composer.urls')),
"""
from django.urls import path

from . import views

app_name = "blog_composer"

urlpatterns = [
    # Public blog
    path("", views.PostListView.as_view(), name="post_list"),
    path("post/<slug:slug>/", views.PostDetailView.as_view(), name="post_detail"),

    # Management
    path("manage/", views.ManagePostListView.as_view(), name="manage_posts"),
    path("manage/new/", views.PostCreateView.as_view(), name="post_create"),
    path("manage/<slug:slug>/preview/", views.PostPreviewView.as_view(), name="post_preview"),
    path("manage/<slug:slug>/edit/", views.PostUpdateView.as_view(), name="post_update"),
    path("manage/<slug:slug>/delete/", views.PostDeleteView.as_view(), name="post_delete"),
    path("manage/<slug:slug>/publish/", views.PostPublishView.as_view(), name="post_publish"),
    path(
        "manage/<slug:slug>/unpublish/",
        views.PostPublishView.as_view(publish=False),
        name="post_unpublish",
    ),
]
