"""
News Public Module
==================

Public, read-only news browser.

Provides:
- /news/              - published articles grouped by category, with tabs
- /news/<article_id>  - single published article
"""

from flask import Blueprint

news_public_bp = Blueprint(
    'news',
    __name__,
    url_prefix='/news',
    template_folder='templates',
    static_folder='static',
    static_url_path='/static',
)

from . import routes

__all__ = ['news_public_bp']
