import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the newsroom framework.
    Projects should provide database paths and the API location via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    NEWS_DB = os.getenv('NEWS_DB', os.path.join(DB_DIR, "news.db"))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, "app_logs.db"))

    # News API - empty means "same host as the incoming request"
    NEWS_API_URL = os.getenv('NEWS_API_URL', '')
    NEWS_API_TIMEOUT = float(os.getenv('NEWS_API_TIMEOUT', '30'))

    # Allowed origins for the public read endpoints (comma separated)
    NEWS_CORS_ORIGINS = [o.strip() for o in os.getenv('NEWS_CORS_ORIGINS', '*').split(',') if o.strip()]

    # Article images
    NEWS_MAX_IMAGE_BYTES = int(os.getenv('NEWS_MAX_IMAGE_BYTES', str(10 * 1024 * 1024)))
    NEWS_PLACEHOLDER_IMAGE = os.getenv('NEWS_PLACEHOLDER_IMAGE', '/news/static/placeholder-news.svg')

    # Public browser: items shown per category section before "Show More"
    NEWS_SECTION_LIMIT = int(os.getenv('NEWS_SECTION_LIMIT', '3'))

    # Where unauthenticated admin requests are sent
    LOGIN_URL = os.getenv('LOGIN_URL', '/admin/login')


def get_config_value(key, default=None):
    """Get config value: app.config > Config class > env var."""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None and val != '':
            return val
    except RuntimeError:
        pass
    if hasattr(Config, key):
        val = getattr(Config, key)
        if val is not None and val != '':
            return val
    return os.getenv(key, default)
