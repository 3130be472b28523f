"""
django-blog-composer - A Django blog whose posts carry positioned images.

Features:
- Hero image plus images placed after numbered paragraphs
- Deterministic composition of body text and images for any renderer
- Image collection stored as one validated JSON field
- Server-side image editing session (add, edit, reorder, remove)
- Slug generation with collision handling
- Public blog, author preview and Django admin
"""

__version__ = "0.1.0"
