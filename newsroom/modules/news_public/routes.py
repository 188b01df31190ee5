from flask import render_template, request, redirect, url_for, flash

from newsroom.core.api_client import NewsApiError, get_news_client
from newsroom.core.articles import Article
from newsroom.core.categories import ALL_TAB
from newsroom.core.config import get_config_value
from newsroom.core.grouping import CategoryBrowser
from newsroom.core.list_controller import ListResourceController
from newsroom.core.logging_service import LoggingService
from . import news_public_bp


@news_public_bp.route('/')
def news_list():
    """Public news page - published articles grouped by category"""
    active = request.args.get('category', ALL_TAB)
    expanded = request.args.getlist('expanded')
    limit = int(get_config_value('NEWS_SECTION_LIMIT', 3))

    with get_news_client() as news, \
            ListResourceController(lambda: news.list_articles(published_only=True)) as articles:
        articles.load()
        browser = CategoryBrowser(articles.items, active=active, expanded=expanded, limit=limit)
        return render_template(
            'news_public/news.html',
            articles=articles,
            browser=browser,
            placeholder=get_config_value('NEWS_PLACEHOLDER_IMAGE'),
        )


@news_public_bp.route('/<article_id>')
def article_detail(article_id):
    """Individual article page - only shows published articles"""
    article = None
    try:
        with get_news_client() as news:
            data = news.get_article(article_id)
        if data:
            article = Article.from_json(data)
    except (NewsApiError, ValueError) as e:
        LoggingService.warning('news_public', f"Article {article_id} unavailable: {e}")

    if article is None or not article.published:
        flash('Article not found', 'error')
        return redirect(url_for('news.news_list'))

    return render_template(
        'news_public/article.html',
        article=article,
        placeholder=get_config_value('NEWS_PLACEHOLDER_IMAGE'),
    )
