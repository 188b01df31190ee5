"""
News API Client
===============

Talks to the /api/news contract over HTTP with requests. Every non-2xx
response and every transport failure surfaces as NewsApiError carrying a
user-facing message.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .logging_service import LoggingService

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class NewsApiError(Exception):
    """A failed call to the news API"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response, fallback: str) -> str:
    """Prefer the JSON ``error`` field, then the raw body, then ``fallback``"""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get('error'):
        return str(data['error'])
    text = (response.text or '').strip()
    return text or fallback


class NewsApiClient:
    """Client for GET/POST/PATCH/DELETE /api/news[/<id>]"""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 cookies: Optional[Dict[str, str]] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        # A session passed in belongs to the caller and is left open
        self._owns_session = session is None
        self.session = session or requests.Session()
        if cookies:
            self.session.cookies.update(cookies)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        """Release the connection pool of a session this client created"""
        if self._owns_session:
            self.session.close()

    def _url(self, article_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/api/news"
        if article_id is not None:
            url = f"{url}/{article_id}"
        return url

    def _request(self, method: str, url: str, fallback: str, **kwargs):
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise NewsApiError(fallback) from e

        LoggingService.log_api_call('news_client', url, method, response.status_code)
        if not response.ok:
            raise NewsApiError(_error_message(response, fallback), response.status_code)
        return response

    def list_articles(self, published_only: bool = False) -> List[Dict[str, Any]]:
        """Fetch every article, in backend order"""
        params = {'published': '1'} if published_only else None
        response = self._request('GET', self._url(), 'Failed to fetch news', params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise NewsApiError('Failed to fetch news') from e
        if not isinstance(data, list):
            raise NewsApiError('Failed to fetch news')
        return data

    def get_article(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one article; None when the backend reports 404"""
        try:
            response = self._request('GET', self._url(article_id), 'Failed to fetch article')
        except NewsApiError as e:
            if e.status_code == 404:
                return None
            raise
        try:
            data = response.json()
        except ValueError as e:
            raise NewsApiError('Failed to fetch article') from e
        if not isinstance(data, dict):
            raise NewsApiError('Failed to fetch article')
        return data

    def create_article(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = self._request('POST', self._url(), 'Failed to create article', json=payload)
        return _json_or_none(response)

    def update_article(self, article_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = self._request('PATCH', self._url(article_id), 'Failed to update news article', json=payload)
        return _json_or_none(response)

    def delete_article(self, article_id: str) -> bool:
        self._request('DELETE', self._url(article_id), 'Failed to delete')
        return True


def _json_or_none(response):
    # Mutation bodies are optional in the contract
    try:
        return response.json()
    except ValueError:
        return None


def get_news_client():
    """Client for the current request.

    Uses NEWS_API_URL when configured, otherwise this app's own host, and
    forwards the incoming cookies so the admin session reaches the API.
    Use it as a context manager so its session is closed with the view.
    """
    from flask import request, has_request_context
    from .config import get_config_value

    base_url = get_config_value('NEWS_API_URL')
    cookies = None
    if has_request_context():
        base_url = base_url or request.host_url
        cookies = dict(request.cookies)
    timeout = float(get_config_value('NEWS_API_TIMEOUT', DEFAULT_TIMEOUT))
    return NewsApiClient(base_url or '', timeout=timeout, cookies=cookies)
