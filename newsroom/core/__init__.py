"""
Newsroom Core
=============

Core utilities and shared functionality for newsroom modules: configuration,
storage helpers, logging, the news API client and the article view state
shared by the admin and public modules.
"""

from .config import Config, get_config_value
from .database import Database
from .logging_service import LoggingService, logger
from .api_client import NewsApiClient, NewsApiError
from .list_controller import ListResourceController

__all__ = [
    'Config', 'get_config_value', 'Database', 'LoggingService', 'logger',
    'NewsApiClient', 'NewsApiError', 'ListResourceController',
]
