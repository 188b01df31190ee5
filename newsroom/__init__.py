"""
Newsroom - News Articles for Flask
==================================

A modular Flask package for publishing news articles:
- Admin article manager (create, edit, delete, search)
- Public article browser grouped by category
- JSON news API backed by SQLite

Usage:
    from newsroom import Newsroom

    app = Flask(__name__)
    Newsroom(app, {'brand_name': 'Naallofy'})
"""

import os
import copy

__version__ = '0.1.0'

DEFAULT_CONFIG = {
    'brand_name': 'Newsroom',
    'features': {
        'news': True,
        'news_public': True,
        'news_api': True,
    },
}

# app.config keys seeded from newsroom.core.config.Config when the host app has not set them
CONFIG_DEFAULT_KEYS = [
    'NEWS_API_URL',
    'NEWS_API_TIMEOUT',
    'NEWS_MAX_IMAGE_BYTES',
    'NEWS_PLACEHOLDER_IMAGE',
    'NEWS_SECTION_LIMIT',
    'LOGIN_URL',
]


class Newsroom:
    """Flask extension that configures the app and registers the news modules"""

    def __init__(self, app=None, config=None):
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._registered = []
        if app is not None:
            self.init_app(app, config)

    def init_app(self, app, config=None):
        if config:
            self._merge_config(config)

        self._apply_app_config(app)
        self._setup_database_dir(app)
        self._register_template_helpers(app)
        self._register_modules(app)

        app.extensions['newsroom'] = self

    @property
    def config(self):
        return self._config

    def _merge_config(self, config):
        for key, value in config.items():
            if isinstance(value, dict) and isinstance(self._config.get(key), dict):
                self._config[key].update(value)
            else:
                self._config[key] = value

    def _apply_app_config(self, app):
        """Seed app.config from Config without overriding the host app"""
        from .core.config import Config

        if not app.config.get('SECRET_KEY') and Config.SECRET_KEY:
            app.config['SECRET_KEY'] = Config.SECRET_KEY

        db_dir = app.config.setdefault('DB_DIR', Config.DB_DIR)
        app.config.setdefault('NEWS_DB', os.getenv('NEWS_DB') or os.path.join(db_dir, 'news.db'))
        app.config.setdefault('LOGS_DB', os.getenv('LOGS_DB') or os.path.join(db_dir, 'app_logs.db'))

        for key in CONFIG_DEFAULT_KEYS:
            app.config.setdefault(key, getattr(Config, key))

    def _setup_database_dir(self, app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)

    def _register_template_helpers(self, app):
        from .core.articles import time_ago
        from .core.categories import category_label

        app.add_template_filter(time_ago, 'time_ago')
        app.add_template_filter(category_label, 'category_label')

        brand_name = self._config.get('brand_name') or DEFAULT_CONFIG['brand_name']

        @app.context_processor
        def inject_newsroom():
            return {'newsroom_config': self._config, 'brand_name': brand_name}

    def _register_modules(self, app):
        features = self._config.get('features', {})

        if features.get('news_api', True):
            from .modules.news_api import news_api_bp
            app.register_blueprint(news_api_bp)
            self._registered.append('news_api')

        if features.get('news', True):
            from .modules.news import news_bp
            app.register_blueprint(news_bp)
            self._registered.append('news')

        if features.get('news_public', True):
            from .modules.news_public import news_public_bp
            app.register_blueprint(news_public_bp)
            self._registered.append('news_public')

    def get_registered_modules(self):
        return list(self._registered)


__all__ = ['Newsroom', '__version__']
