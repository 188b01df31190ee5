"""
News Categories
===============

The closed set of article categories. Lookups are permissive: a category
outside the set is passed through and rendered by its raw value.
"""

NEWS_CATEGORIES = [
    {'id': 'crypto', 'label': 'Cryptocurrency'},
    {'id': 'stocks', 'label': 'Stock Market'},
    {'id': 'commodities', 'label': 'Oil & Gold'},
    {'id': 'markets', 'label': 'Markets'},
    {'id': 'tech', 'label': 'Technology'},
]

CATEGORY_LABELS = {cat['id']: cat['label'] for cat in NEWS_CATEGORIES}

# Badge colour classes for the admin table and public cards
CATEGORY_COLORS = {
    'crypto': 'badge-amber',
    'stocks': 'badge-sky',
    'commodities': 'badge-emerald',
    'markets': 'badge-indigo',
    'tech': 'badge-violet',
}
DEFAULT_COLOR = 'badge-gray'

ALL_TAB = 'All'
PUBLIC_TABS = [ALL_TAB, 'Crypto', 'Stocks', 'Commodities', 'Markets', 'Tech']


def category_label(category):
    """Human label for a category, falling back to the raw value"""
    if not category:
        return ''
    return CATEGORY_LABELS.get(category.lower(), category)


def category_color(category):
    return CATEGORY_COLORS.get((category or '').lower(), DEFAULT_COLOR)


def resolve_tab(name):
    """Match a tab name case-insensitively; unknown names fall back to All"""
    if name:
        for tab in PUBLIC_TABS:
            if tab.lower() == name.strip().lower():
                return tab
    return ALL_TAB
