"""
News Admin Module
=================

Admin interface for news article management.

Provides:
- Article list with search
- Article creation and editing
- Image attachment for articles
- Delete with confirmation
"""

from flask import Blueprint

news_bp = Blueprint(
    'news_admin',
    __name__,
    url_prefix='/admin/news',
    template_folder='templates',
)

from . import routes

__all__ = ['news_bp']
