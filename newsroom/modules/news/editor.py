"""
Article Editor
==============

Create, update and delete flows for the admin manager. Input is validated
locally before any request is made; every outcome comes back as a result
dict ``{'success': bool, 'error': str, 'article': dict | None}`` so the
caller can keep the form open with the entered data on failure.
"""

import logging
import threading

from newsroom.core.api_client import NewsApiError
from newsroom.core.logging_service import LoggingService

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = 'Please fill in all required fields'
BUSY_MESSAGE = 'A request is already in progress'
CREATE_FAILED = 'Failed to create article'
UPDATE_FAILED = 'Failed to update news article'
DELETE_FAILED = 'Failed to delete the article'


def _result(success, error='', article=None, **extra):
    result = {'success': success, 'error': error, 'article': article}
    result.update(extra)
    return result


class ArticleForm:
    """The values entered in the create/edit form"""

    def __init__(self, title='', content='', category='', image='', published=False):
        self.title = title or ''
        self.content = content or ''
        self.category = category or ''
        self.image = image or ''
        self.published = bool(published)

    @classmethod
    def from_article(cls, article):
        return cls(article.title, article.content, article.category,
                   article.image, article.published)

    @classmethod
    def from_request(cls, form):
        """Build from submitted form data (a MultiDict or plain dict)"""
        return cls(
            title=form.get('title', ''),
            content=form.get('content', ''),
            category=form.get('category', ''),
            image=form.get('image', ''),
            published=form.get('published') in ('on', '1', 'true', True),
        )

    def validate(self):
        """Error message when a required field is blank, else None"""
        if not self.title.strip() or not self.content.strip() or not self.category.strip():
            return REQUIRED_MESSAGE
        return None

    def create_payload(self):
        return {
            'title': self.title.strip(),
            'content': self.content.strip(),
            'category': self.category,
            'imageUrl': self.image or None,
        }

    def update_payload(self):
        return {
            'title': self.title.strip(),
            'content': self.content.strip(),
            'category': self.category,
            'image': self.image or None,
            'published': self.published,
        }


class PendingActions:
    """Mutations currently outstanding, keyed by (actor, action).

    One instance can outlive a single request so a repeated submit from the
    same admin is rejected while the first is still running.
    """

    def __init__(self):
        self._pending = set()
        self._lock = threading.Lock()

    def begin(self, key):
        with self._lock:
            if key in self._pending:
                return False
            self._pending.add(key)
            return True

    def finish(self, key):
        with self._lock:
            self._pending.discard(key)

    def __contains__(self, key):
        return key in self._pending


class ArticleEditor:
    """Runs admin mutations against the news API.

    Args:
        client: a NewsApiClient
        articles: optional ListResourceController reloaded after each
            successful mutation
        actor: admin identifier recorded in the app log
        pending: shared PendingActions; a private one when omitted
    """

    def __init__(self, client, articles=None, actor=None, pending=None):
        self.client = client
        self.articles = articles
        self.actor = actor
        self.pending = pending if pending is not None else PendingActions()

    def _begin(self, action):
        return self.pending.begin((self.actor, action))

    def _finish(self, action):
        self.pending.finish((self.actor, action))

    def is_pending(self, action):
        return (self.actor, action) in self.pending

    def _after_mutation(self, action, article_id):
        LoggingService.log_user_action('news', f"{action} article {article_id}", user_id=self.actor)
        if self.articles is not None:
            self.articles.reload()

    def create(self, form):
        """Validate and POST a new article"""
        error = form.validate()
        if error:
            return _result(False, error)
        if not self._begin('create'):
            return _result(False, BUSY_MESSAGE)

        try:
            article = self.client.create_article(form.create_payload())
        except NewsApiError as e:
            logger.error(f"Create article failed: {e.message}")
            return _result(False, e.message or CREATE_FAILED)
        finally:
            self._finish('create')

        self._after_mutation('created', (article or {}).get('id'))
        return _result(True, article=article)

    def update(self, article_id, form):
        """Validate and PATCH the full editable record"""
        error = form.validate()
        if error:
            return _result(False, error)
        action = f'update:{article_id}'
        if not self._begin(action):
            return _result(False, BUSY_MESSAGE)

        try:
            article = self.client.update_article(article_id, form.update_payload())
        except NewsApiError as e:
            logger.error(f"Update article {article_id} failed: {e.message}")
            return _result(False, e.message or UPDATE_FAILED)
        finally:
            self._finish(action)

        self._after_mutation('updated', article_id)
        return _result(True, article=article)

    def delete(self, article_id, confirm):
        """DELETE after ``confirm()`` returns true; otherwise nothing is sent"""
        if not confirm():
            return _result(False, cancelled=True)
        action = f'delete:{article_id}'
        if not self._begin(action):
            return _result(False, BUSY_MESSAGE)

        try:
            self.client.delete_article(article_id)
        except NewsApiError as e:
            logger.error(f"Delete article {article_id} failed: {e.message}")
            return _result(False, DELETE_FAILED)
        finally:
            self._finish(action)

        self._after_mutation('deleted', article_id)
        return _result(True)
