"""
List Resource Controller
========================

Holds the in-memory article list for one view and drives its
loading / error / empty / populated state. Shared by the admin manager and
the public browser; each view owns its own instance and its own snapshot.

Usage:
    with ListResourceController(client.list_articles) as articles:
        articles.load()
        if articles.state == POPULATED:
            ...
"""

import logging
import threading

from .api_client import NewsApiError
from .articles import Article, filter_articles

logger = logging.getLogger(__name__)

LOADING = 'loading'
ERROR = 'error'
EMPTY = 'empty'
POPULATED = 'populated'

LOAD_ERROR_MESSAGE = 'Failed to load news articles'


class CancellationToken:
    """Cancelled once the owning view goes away"""

    def __init__(self):
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self):
        return self._cancelled.is_set()


class ListResourceController:
    """Fetch-and-hold state machine for a list of articles.

    Args:
        fetch: zero-argument callable returning the raw article list
        shape: maps one raw item to the view's display object
    """

    def __init__(self, fetch, shape=Article.from_json):
        self.fetch = fetch
        self.shape = shape
        self.state = LOADING
        self.items = []
        self.error = None
        self.token = CancellationToken()
        self._generation = 0
        self._lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False

    @property
    def disposed(self):
        return self.token.cancelled

    def dispose(self):
        """Stop accepting results; in-flight loads are discarded"""
        self.token.cancel()

    def load(self):
        """Enter loading, fetch once, then settle in populated/empty/error.

        Returns the resulting state. A load that finishes after dispose() or
        after a newer load started leaves the controller untouched.
        """
        if self.disposed:
            return self.state

        with self._lock:
            self._generation += 1
            generation = self._generation
            self.state = LOADING
            self.error = None

        try:
            items = [self.shape(raw) for raw in self.fetch()]
        except (NewsApiError, ValueError) as e:
            logger.error(f"Article list fetch failed: {e}")
            self._settle(generation, ERROR, [], LOAD_ERROR_MESSAGE)
        else:
            self._settle(generation, POPULATED if items else EMPTY, items, None)
        return self.state

    def _settle(self, generation, state, items, error):
        with self._lock:
            if self.disposed or generation != self._generation:
                logger.debug("Discarding stale article list result")
                return
            self.state = state
            self.items = items
            self.error = error

    def retry(self):
        """The user-initiated "try again" action"""
        return self.load()

    def reload(self):
        """Full re-fetch after a mutation"""
        return self.load()

    def filtered(self, term):
        return filter_articles(self.items, term)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
