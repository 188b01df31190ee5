"""
News API Storage
================

SQLite persistence for news articles.
"""

import os
import uuid
from datetime import datetime, timezone

from flask import current_app

from newsroom.core.database import Database
from newsroom.core.articles import make_excerpt

ARTICLE_COLUMNS = 'id, title, content, category, image, published, created_at, updated_at'

# Fields a PATCH may touch, mapped to their columns
UPDATABLE_FIELDS = {
    'title': 'title',
    'content': 'content',
    'category': 'category',
    'image': 'image',
    'imageUrl': 'image',
    'published': 'published',
}


def get_db_config():
    """Get the news database path from config or environment (3-tier pattern)"""
    try:
        val = current_app.config.get('NEWS_DB')
        if val:
            return val
    except RuntimeError:
        pass
    from newsroom.core.config import Config
    return getattr(Config, 'NEWS_DB', None) or os.getenv('NEWS_DB', 'news.db')


def _now():
    return datetime.now(timezone.utc).isoformat()


def init_news_db():
    """Initialize news database"""
    with Database.connect(get_db_config()) as conn:
        cursor = conn.cursor()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS news (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                category TEXT NOT NULL,
                image TEXT,
                published BOOLEAN DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        ''')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_news_created ON news(created_at)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_news_published ON news(published)')
        conn.commit()


def row_to_article(row):
    """API representation of a stored row"""
    return {
        'id': row['id'],
        'title': row['title'],
        'content': row['content'],
        'excerpt': make_excerpt(row['content']),
        'category': row['category'],
        'image': row['image'],
        'imageUrl': row['image'],
        'published': bool(row['published']),
        'createdAt': row['created_at'],
        'updatedAt': row['updated_at'],
    }


def get_all_articles_db(published_only=False):
    """Get all articles, newest first"""
    with Database.connect(get_db_config()) as conn:
        if published_only:
            rows = conn.execute(
                f'SELECT {ARTICLE_COLUMNS} FROM news WHERE published = 1 ORDER BY created_at DESC'
            ).fetchall()
        else:
            rows = conn.execute(
                f'SELECT {ARTICLE_COLUMNS} FROM news ORDER BY created_at DESC'
            ).fetchall()
    return [row_to_article(row) for row in rows]


def get_article_db(article_id):
    """Get single article by ID"""
    with Database.connect(get_db_config()) as conn:
        row = conn.execute(f'SELECT {ARTICLE_COLUMNS} FROM news WHERE id = ?', (article_id,)).fetchone()
    return row_to_article(row) if row else None


def create_article_db(title, content, category, image=None, published=False):
    """Create new article in database"""
    article_id = uuid.uuid4().hex
    timestamp = _now()
    with Database.connect(get_db_config()) as conn:
        conn.execute(f'''
            INSERT INTO news ({ARTICLE_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (article_id, title, content, category, image or None, int(bool(published)),
              timestamp, timestamp))
        conn.commit()
    return get_article_db(article_id)


def update_article_db(article_id, fields):
    """Update exactly the given fields; returns the article or None if missing"""
    columns = {}
    for key, value in fields.items():
        column = UPDATABLE_FIELDS[key]
        if column == 'published':
            value = int(bool(value))
        elif column == 'image':
            value = value or None
        columns[column] = value
    assignments = [f'{column} = ?' for column in columns]
    values = list(columns.values())

    with Database.connect(get_db_config()) as conn:
        exists = conn.execute('SELECT 1 FROM news WHERE id = ?', (article_id,)).fetchone()
        if not exists:
            return None
        assignments.append('updated_at = ?')
        values.extend([_now(), article_id])
        conn.execute(f'UPDATE news SET {", ".join(assignments)} WHERE id = ?', values)
        conn.commit()
    return get_article_db(article_id)


def delete_article_db(article_id):
    """Delete article from database"""
    with Database.connect(get_db_config()) as conn:
        cursor = conn.execute('DELETE FROM news WHERE id = ?', (article_id,))
        conn.commit()
        return cursor.rowcount > 0
