"""
News API Routes
===============

JSON endpoints behind the admin manager and the public browser. Reads are
public; writes need an admin session.
"""

from functools import wraps

from flask import jsonify, request, session
from flask_cors import cross_origin

from newsroom.core.config import Config
from newsroom.core.logging_service import LoggingService
from . import news_api_bp
from .database import (
    init_news_db, get_all_articles_db, get_article_db, create_article_db,
    update_article_db, delete_article_db, UPDATABLE_FIELDS,
)

REQUIRED_FIELDS = ('title', 'content', 'category')


def admin_api_required(f):
    """Reject writes without an admin session"""
    @wraps(f)
    def decorated(*args, **kwargs):
        if 'admin_id' not in session:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated


def _clean_text(value):
    return value.strip() if isinstance(value, str) else ''


@news_api_bp.before_request
def ensure_news_db():
    init_news_db()


@news_api_bp.route('', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.NEWS_CORS_ORIGINS, supports_credentials=False)
def list_articles():
    """All articles, newest first. ``?published=1`` limits to published ones."""
    published_only = request.args.get('published') in ('1', 'true', 'yes')
    try:
        return jsonify(get_all_articles_db(published_only=published_only))
    except Exception as e:
        LoggingService.log_error_with_traceback('news_api', e)
        return jsonify({'error': 'Failed to fetch news'}), 500


@news_api_bp.route('/<article_id>', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.NEWS_CORS_ORIGINS, supports_credentials=False)
def get_article(article_id):
    """Single article"""
    try:
        article = get_article_db(article_id)
    except Exception as e:
        LoggingService.log_error_with_traceback('news_api', e, {'article_id': article_id})
        return jsonify({'error': 'Failed to fetch article'}), 500

    if article:
        return jsonify(article)
    return jsonify({'error': 'Article not found'}), 404


@news_api_bp.route('', methods=['POST'])
@admin_api_required
def create_article():
    """Create new article from {title, content, category, imageUrl}"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    title = _clean_text(data.get('title'))
    content = _clean_text(data.get('content'))
    category = _clean_text(data.get('category'))
    if not title or not content or not category:
        return jsonify({'error': 'Title, content and category are required'}), 400

    try:
        article = create_article_db(
            title, content, category,
            image=data.get('imageUrl') or data.get('image'),
            published=data.get('published', False),
        )
    except Exception as e:
        LoggingService.log_error_with_traceback('news_api', e)
        return jsonify({'error': 'Failed to create article'}), 500

    LoggingService.log_user_action('news_api', f"created article {article['id']}",
                                   user_id=str(session.get('admin_id')))
    return jsonify(article), 201


@news_api_bp.route('/<article_id>', methods=['PATCH'])
@admin_api_required
def update_article(article_id):
    """Update the fields sent: title, content, category, image, published"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    fields = {key: value for key, value in data.items() if key in UPDATABLE_FIELDS}
    for key in REQUIRED_FIELDS:
        if key in fields:
            fields[key] = _clean_text(fields[key])
            if not fields[key]:
                return jsonify({'error': f'{key.capitalize()} cannot be empty'}), 400
    if not fields:
        return jsonify({'error': 'No updatable fields provided'}), 400

    try:
        article = update_article_db(article_id, fields)
    except Exception as e:
        LoggingService.log_error_with_traceback('news_api', e, {'article_id': article_id})
        return jsonify({'error': 'Failed to update news article'}), 500

    if article is None:
        return jsonify({'error': 'Article not found'}), 404

    LoggingService.log_user_action('news_api', f"updated article {article_id}",
                                   user_id=str(session.get('admin_id')),
                                   details={'fields': sorted(fields)})
    return jsonify(article)


@news_api_bp.route('/<article_id>', methods=['DELETE'])
@admin_api_required
def delete_article(article_id):
    """Delete article"""
    try:
        deleted = delete_article_db(article_id)
    except Exception as e:
        LoggingService.log_error_with_traceback('news_api', e, {'article_id': article_id})
        return jsonify({'error': 'Failed to delete article'}), 500

    if not deleted:
        return jsonify({'error': 'Article not found'}), 404

    LoggingService.log_user_action('news_api', f"deleted article {article_id}",
                                   user_id=str(session.get('admin_id')))
    return jsonify({'success': True})
