"""
Articles
========

The article record as consumed from the news API, plus the helpers every
view needs: timestamp parsing, relative time, excerpts, image fallbacks and
the admin search filter.
"""

import re
from datetime import datetime, timezone

from .categories import category_label, category_color

EXCERPT_LENGTH = 160


def html_to_plain_text(html):
    """Strip HTML tags, convert <p>/<br> to newlines."""
    if not html:
        return ''
    text = html
    text = re.sub(r'<br\s*/?>', '\n', text)
    text = re.sub(r'</p>\s*<p[^>]*>', '\n\n', text)
    text = re.sub(r'<[^>]+>', '', text)
    text = re.sub(r'&nbsp;', ' ', text)
    text = re.sub(r'&amp;', '&', text)
    text = re.sub(r'&lt;', '<', text)
    text = re.sub(r'&gt;', '>', text)
    text = re.sub(r'&#39;', "'", text)
    text = re.sub(r'&quot;', '"', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def make_excerpt(content, length=EXCERPT_LENGTH):
    """Plain-text teaser cut on a word boundary"""
    text = ' '.join(html_to_plain_text(content).split())
    if len(text) <= length:
        return text
    cut = text[:length].rsplit(' ', 1)[0]
    return cut.rstrip('.,;:') + '...'


def parse_timestamp(value):
    """Parse an API timestamp into an aware UTC datetime, or None"""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        # Naive values are stored as UTC by the backend
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def time_ago(value, now=None):
    """Relative time such as '5 minutes ago' or 'about 2 hours ago'"""
    moment = parse_timestamp(value)
    if moment is None:
        return ''
    now = now or datetime.now(timezone.utc)
    seconds = max(0, int((now - moment).total_seconds()))

    def plural(count, unit):
        return f"{count} {unit}{'' if count == 1 else 's'}"

    minutes = round(seconds / 60)
    if seconds < 30:
        return 'less than a minute ago'
    if minutes < 45:
        return f"{plural(max(minutes, 1), 'minute')} ago"
    hours = round(seconds / 3600)
    if hours < 24:
        return f"about {plural(max(hours, 1), 'hour')} ago"
    days = round(seconds / 86400)
    if days < 30:
        return f"{plural(days, 'day')} ago"
    months = round(days / 30)
    if months < 12:
        return f"about {plural(months, 'month')} ago"
    return f"about {plural(round(days / 365), 'year')} ago"


def image_src(url, placeholder):
    """Normalise an article image reference for an <img> tag"""
    if not url:
        return placeholder
    if url.startswith('data:'):
        return url
    if not url.startswith('http') and not url.startswith('/'):
        return f"/{url}"
    return url


def _text(value):
    return '' if value is None else str(value)


class Article:
    """A news article as returned by GET /api/news"""

    def __init__(self, id, title='', content='', category='', image=None,
                 published=False, created_at=None, updated_at=None, excerpt=None):
        self.id = id
        self.title = title or ''
        self.content = content or ''
        self.category = category or ''
        self.image = image or None
        self.published = bool(published)
        self.created_at = created_at
        self.updated_at = updated_at
        self._excerpt = excerpt

    @classmethod
    def from_json(cls, data):
        """Build from either response shape.

        The admin shape carries full ``content`` and ``imageUrl``; the public
        shape may carry only an ``excerpt``.
        """
        if not isinstance(data, dict) or data.get('id') in (None, ''):
            raise ValueError(f"Not an article: {data!r}")
        return cls(
            id=str(data['id']),
            title=_text(data.get('title')),
            content=_text(data.get('content')),
            category=_text(data.get('category')),
            image=data.get('image') or data.get('imageUrl'),
            published=data.get('published', False),
            created_at=data.get('createdAt') or data.get('created_at'),
            updated_at=data.get('updatedAt') or data.get('updated_at'),
            excerpt=data.get('excerpt'),
        )

    @property
    def excerpt(self):
        if self._excerpt:
            return self._excerpt
        return make_excerpt(self.content)

    @property
    def created(self):
        return parse_timestamp(self.created_at)

    @property
    def label(self):
        return category_label(self.category)

    @property
    def color(self):
        return category_color(self.category)

    def image_src(self, placeholder):
        return image_src(self.image, placeholder)

    def matches(self, term):
        """Case-insensitive substring match on title, content or category"""
        needle = term.lower()
        return (needle in self.title.lower()
                or needle in self.content.lower()
                or needle in self.category.lower())

    def __repr__(self):
        return f"<Article {self.id} {self.category!r} {self.title!r}>"


def filter_articles(articles, term):
    """Admin search: keep articles matching ``term``; empty term keeps all"""
    if not term:
        return list(articles)
    return [article for article in articles if article.matches(term)]
