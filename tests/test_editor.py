"""
Admin mutation flow tests: validation before any request, payload shapes,
server error surfacing, confirmation, duplicate-submit guard and the reload
after every successful mutation.
"""

import pytest

from newsroom.core.api_client import NewsApiError
from newsroom.core.list_controller import ListResourceController
from newsroom.modules.news.editor import (
    ArticleEditor, ArticleForm, PendingActions, REQUIRED_MESSAGE, BUSY_MESSAGE, DELETE_FAILED,
)
from conftest import FakeNewsClient, make_article


@pytest.fixture
def fake():
    return FakeNewsClient([make_article('a1'), make_article('a2', category='tech')])


@pytest.fixture
def listing(fake):
    articles = ListResourceController(fake.list_articles)
    articles.load()
    return articles


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("field", ["title", "content", "category"])
@pytest.mark.parametrize("blank", ["", "   ", "\n\t"])
def test_blank_required_field_never_hits_network(fake, field, blank):
    values = {'title': 'Title', 'content': '<p>Body</p>', 'category': 'crypto'}
    values[field] = blank
    editor = ArticleEditor(fake)

    created = editor.create(ArticleForm(**values))
    updated = editor.update('a1', ArticleForm(**values))

    assert created == {'success': False, 'error': REQUIRED_MESSAGE, 'article': None}
    assert updated['error'] == REQUIRED_MESSAGE
    assert fake.mutation_calls() == []


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

def test_create_sends_trimmed_payload_and_reloads(fake, listing):
    editor = ArticleEditor(fake, articles=listing)
    form = ArticleForm(title='  Gold climbs  ', content=' <p>Up</p> ', category='commodities')

    result = editor.create(form)

    assert result['success'] is True
    assert fake.calls[-2] == ('create', {
        'title': 'Gold climbs',
        'content': '<p>Up</p>',
        'category': 'commodities',
        'imageUrl': None,
    })
    assert fake.calls[-1] == ('list', False)
    assert len(listing) == 3
    assert listing.items[0].title == 'Gold climbs'


def test_create_failure_surfaces_server_text_and_keeps_form(fake, listing):
    fake.mutation_error = 'Title already used'
    editor = ArticleEditor(fake, articles=listing)
    form = ArticleForm(title='Dup', content='Body', category='crypto', image='data:image/png;base64,AA==')

    result = editor.create(form)

    assert result == {'success': False, 'error': 'Title already used', 'article': None}
    assert form.title == 'Dup'
    assert form.image == 'data:image/png;base64,AA=='
    assert ('list', False) not in fake.calls[1:], "failed create must not reload"


def test_create_failure_without_text_uses_fallback():
    class SilentFailure(FakeNewsClient):
        def create_article(self, payload):
            raise NewsApiError('')

    result = ArticleEditor(SilentFailure()).create(ArticleForm('t', 'c', 'crypto'))
    assert result['error'] == 'Failed to create article'


def test_second_submit_while_pending_is_rejected(fake):
    editor = ArticleEditor(fake)
    inner = {}

    def create_article(payload):
        inner['result'] = editor.create(ArticleForm('again', 'c', 'crypto'))
        return make_article('n1')

    fake.create_article = create_article
    result = editor.create(ArticleForm('first', 'c', 'crypto'))

    assert result['success'] is True
    assert inner['result']['error'] == BUSY_MESSAGE
    assert not editor.is_pending('create')


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def test_update_sends_full_record(fake, listing):
    editor = ArticleEditor(fake, articles=listing)
    form = ArticleForm(title='New title', content='New body', category='tech',
                       image='https://cdn.example.com/x.png', published=True)

    result = editor.update('a1', form)

    assert result['success'] is True
    assert ('update', 'a1', {
        'title': 'New title',
        'content': 'New body',
        'category': 'tech',
        'image': 'https://cdn.example.com/x.png',
        'published': True,
    }) in fake.calls
    assert listing.items[0].title == 'New title'
    assert listing.items[0].published is True


def test_update_failure_leaves_list_untouched(fake, listing):
    fake.mutation_error = 'Failed to update news article'
    editor = ArticleEditor(fake, articles=listing)

    result = editor.update('a1', ArticleForm('x', 'y', 'crypto'))

    assert result['success'] is False
    assert listing.items[0].title == 'Article a1'


def test_form_round_trips_from_article(listing):
    form = ArticleForm.from_article(listing.items[0])
    assert form.title == 'Article a1'
    assert form.category == 'crypto'
    assert form.published is True


def test_form_from_request_reads_checkbox():
    form = ArticleForm.from_request({'title': 't', 'content': 'c', 'category': 'tech', 'published': 'on'})
    assert form.published is True
    assert ArticleForm.from_request({'title': 't'}).published is False


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def test_delete_without_confirmation_sends_nothing(fake, listing):
    editor = ArticleEditor(fake, articles=listing)

    result = editor.delete('a1', confirm=lambda: False)

    assert result['success'] is False
    assert result['cancelled'] is True
    assert fake.mutation_calls() == []
    assert [a.id for a in listing] == ['a1', 'a2']


def test_confirmed_delete_removes_item_from_refetch(fake, listing):
    editor = ArticleEditor(fake, articles=listing)

    result = editor.delete('a1', confirm=lambda: True)

    assert result['success'] is True
    assert [a.id for a in listing] == ['a2']


def test_failed_delete_reports_generic_message(fake, listing):
    fake.mutation_error = 'database locked'
    editor = ArticleEditor(fake, articles=listing)

    result = editor.delete('a1', confirm=lambda: True)

    assert result['error'] == DELETE_FAILED
    assert [a.id for a in listing] == ['a1', 'a2']


def test_shared_pending_registry_spans_editors(fake):
    pending = PendingActions()
    first = ArticleEditor(fake, actor='1', pending=pending)
    second = ArticleEditor(fake, actor='1', pending=pending)
    other_admin = ArticleEditor(fake, actor='2', pending=pending)
    inner = {}

    def create_article(payload):
        inner['same'] = second.create(ArticleForm('again', 'c', 'crypto'))
        inner['other'] = other_admin.is_pending('create')
        return make_article('n1')

    fake.create_article = create_article
    first.create(ArticleForm('first', 'c', 'crypto'))

    assert inner['same']['error'] == BUSY_MESSAGE
    assert inner['other'] is False
    assert not first.is_pending('create')
