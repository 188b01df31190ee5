"""
News API Module
===============

JSON backend for news articles, stored in SQLite.

Provides:
- GET    /api/news            - all articles (``?published=1`` for the public list)
- GET    /api/news/<id>       - one article
- POST   /api/news            - create (admin session required)
- PATCH  /api/news/<id>       - update the fields sent (admin session required)
- DELETE /api/news/<id>       - delete (admin session required)
"""

from flask import Blueprint

news_api_bp = Blueprint('news_api', __name__, url_prefix='/api/news')

from . import routes

__all__ = ['news_api_bp']
