"""
Shared fixtures for the newsroom test suite.

NOTE: pytest and pytest-flask are listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
from flask import Flask

from newsroom import Newsroom
from newsroom.core.api_client import NewsApiError


BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_article(article_id, category='crypto', minutes_ago=0, title=None,
                 content=None, published=True, image=None):
    """Raw article as the API returns it"""
    created = (BASE_TIME - timedelta(minutes=minutes_ago)).isoformat()
    return {
        'id': str(article_id),
        'title': title or f'Article {article_id}',
        'content': content or f'<p>Body of article {article_id}</p>',
        'category': category,
        'image': image,
        'imageUrl': image,
        'published': published,
        'createdAt': created,
        'updatedAt': created,
    }


class FakeNewsClient:
    """In-memory stand-in for NewsApiClient that records every call"""

    def __init__(self, articles=None):
        self.articles = [dict(a) for a in articles or []]
        self.calls = []
        self.fail_list = False
        self.mutation_error = None
        self.opened = 0
        self.closed = 0
        self._next_id = 100

    def __enter__(self):
        self.opened += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        self.closed += 1

    def list_articles(self, published_only=False):
        self.calls.append(('list', published_only))
        if self.fail_list:
            raise NewsApiError('Failed to fetch news', 500)
        items = self.articles
        if published_only:
            items = [a for a in items if a.get('published')]
        return [dict(a) for a in items]

    def get_article(self, article_id):
        self.calls.append(('get', article_id))
        for article in self.articles:
            if article['id'] == article_id:
                return dict(article)
        return None

    def create_article(self, payload):
        self.calls.append(('create', payload))
        if self.mutation_error:
            raise NewsApiError(self.mutation_error, 400)
        self._next_id += 1
        article = make_article(self._next_id, payload['category'], title=payload['title'],
                               content=payload['content'], published=False,
                               image=payload.get('imageUrl'))
        self.articles.insert(0, article)
        return dict(article)

    def update_article(self, article_id, payload):
        self.calls.append(('update', article_id, payload))
        if self.mutation_error:
            raise NewsApiError(self.mutation_error, 400)
        for article in self.articles:
            if article['id'] == article_id:
                article.update(payload)
                article['imageUrl'] = payload.get('image')
                return dict(article)
        raise NewsApiError('Article not found', 404)

    def delete_article(self, article_id):
        self.calls.append(('delete', article_id))
        if self.mutation_error:
            raise NewsApiError(self.mutation_error, 500)
        self.articles = [a for a in self.articles if a['id'] != article_id]
        return True

    def mutation_calls(self):
        return [call for call in self.calls if call[0] in ('create', 'update', 'delete')]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="newsroom-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every newsroom module registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["NEWS_DB"] = os.path.join(tmp_db_dir, "news.db")
    app.config["LOGS_DB"] = os.path.join(tmp_db_dir, "app_logs.db")
    Newsroom(app, {'brand_name': 'Test News'})
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """Test client carrying an admin session."""
    with client.session_transaction() as sess:
        sess['admin_id'] = 1
        sess['admin_email'] = 'admin@test.com'
    return client


@pytest.fixture
def news_client(monkeypatch):
    """Route every view's API traffic to one FakeNewsClient."""
    fake = FakeNewsClient()
    monkeypatch.setattr("newsroom.modules.news.routes.get_news_client", lambda: fake)
    monkeypatch.setattr("newsroom.modules.news_public.routes.get_news_client", lambda: fake)
    return fake
