"""
Newsroom Modules
================

Flask blueprint modules for news management and browsing.
"""

__all__ = ['news', 'news_public', 'news_api']
