"""
News Admin Routes
=================

Article list, create, edit and delete pages. Every successful mutation
redirects back to the list, which re-fetches from the API.
"""

from functools import wraps
from urllib.parse import urlencode

from flask import render_template, request, redirect, url_for, session, flash

from newsroom.core.api_client import NewsApiError, get_news_client
from newsroom.core.articles import Article
from newsroom.core.attachments import ImageAttachment, AttachmentError
from newsroom.core.categories import NEWS_CATEGORIES
from newsroom.core.config import get_config_value
from newsroom.core.list_controller import ListResourceController
from . import news_bp
from .editor import ArticleEditor, ArticleForm, PendingActions

NOT_FOUND_MESSAGE = 'Article not found'

# Outstanding mutations across requests, so a repeated submit is rejected
pending_actions = PendingActions()


def admin_required(f):
    """Send visitors without an admin session to the login page"""
    @wraps(f)
    def decorated(*args, **kwargs):
        if 'admin_id' not in session:
            login_url = get_config_value('LOGIN_URL', '/admin/login')
            return redirect(f"{login_url}?{urlencode({'next': request.path})}")
        return f(*args, **kwargs)
    return decorated


def _placeholder():
    return get_config_value('NEWS_PLACEHOLDER_IMAGE')


def _editor(news):
    return ArticleEditor(news, actor=str(session.get('admin_id')), pending=pending_actions)


def _load_article(article_id):
    """The article to edit or delete, or None after flashing why not"""
    try:
        with get_news_client() as news:
            data = news.get_article(article_id)
        if data is None:
            return None
        return Article.from_json(data)
    except NewsApiError as e:
        flash(e.message, 'error')
    except ValueError:
        flash(NOT_FOUND_MESSAGE, 'error')
    return None


def _apply_upload(attachment, form):
    """Fold the uploaded file (or a removal) into the form; returns an error or None"""
    if request.form.get('remove_image'):
        attachment.clear()
    else:
        upload = request.files.get('image_file')
        if upload and upload.filename:
            try:
                attachment.attach(upload)
            except AttachmentError as e:
                return str(e)
    form.image = attachment.value
    return None


def _render_form(form, mode, article_id=None, status=200):
    return render_template(
        'news/news_form.html',
        form=form,
        mode=mode,
        article_id=article_id,
        categories=NEWS_CATEGORIES,
        placeholder=_placeholder(),
    ), status


def _submit(form, mutate):
    """Shared POST handling for create and edit; returns an error or None.

    ``mutate(editor, form)`` runs the editor call.
    """
    max_bytes = int(get_config_value('NEWS_MAX_IMAGE_BYTES'))
    with ImageAttachment(form.image, max_bytes=max_bytes) as attachment:
        error = _apply_upload(attachment, form)
        if error:
            return error
        with get_news_client() as news:
            result = mutate(_editor(news), form)
    if result['success']:
        return None
    return result['error']


# ===== Routes =====

@news_bp.route('/')
@admin_required
def news_list():
    """Article table with client search over title, content and category"""
    search = request.args.get('q', '')
    with get_news_client() as news, ListResourceController(news.list_articles) as articles:
        articles.load()
        return render_template(
            'news/news_list.html',
            articles=articles,
            visible=articles.filtered(search),
            search=search,
            placeholder=_placeholder(),
        )


@news_bp.route('/create', methods=['GET', 'POST'])
@admin_required
def create_news():
    """Create article form"""
    if request.method == 'GET':
        return _render_form(ArticleForm(), 'create')

    form = ArticleForm.from_request(request.form)
    error = _submit(form, lambda editor, f: editor.create(f))
    if error is None:
        flash('News article created successfully', 'success')
        return redirect(url_for('news_admin.news_list'))

    flash(error, 'error')
    return _render_form(form, 'create', status=400)


@news_bp.route('/<article_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_news(article_id):
    """Edit article form"""
    if request.method == 'GET':
        article = _load_article(article_id)
        if article is None:
            return redirect(url_for('news_admin.news_list'))
        return _render_form(ArticleForm.from_article(article), 'edit', article_id)

    form = ArticleForm.from_request(request.form)
    error = _submit(form, lambda editor, f: editor.update(article_id, f))
    if error is None:
        flash('News article updated successfully', 'success')
        return redirect(url_for('news_admin.news_list'))

    flash(error, 'error')
    return _render_form(form, 'edit', article_id, status=400)


@news_bp.route('/<article_id>/delete', methods=['GET'])
@admin_required
def confirm_delete(article_id):
    """Ask before deleting"""
    article = _load_article(article_id)
    if article is None:
        return redirect(url_for('news_admin.news_list'))
    return render_template('news/confirm_delete.html', article=article)


@news_bp.route('/<article_id>/delete', methods=['POST'])
@admin_required
def delete_news(article_id):
    """Delete once the confirmation form says yes"""
    with get_news_client() as news:
        result = _editor(news).delete(article_id, confirm=lambda: request.form.get('confirm') == 'yes')
    if result['success']:
        flash('Article deleted', 'success')
    elif result['error']:
        flash(result['error'], 'error')
    return redirect(url_for('news_admin.news_list'))
