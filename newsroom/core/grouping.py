"""
Category Grouping
=================

Partitions the public article list by category and decides what each
category section shows: the "All" tab lists every non-empty category, a
category tab lists just that one, and every section is capped until the
visitor asks for more.
"""

from collections import OrderedDict
from datetime import datetime, timezone

from .categories import ALL_TAB, PUBLIC_TABS, category_label, resolve_tab

SECTION_LIMIT = 3
EMPTY_CATEGORY_MESSAGE = "Stay tuned! We're working on bringing you the latest news in this category."

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def newest_first(articles):
    """Stable sort by creation time, newest first; undated articles last"""
    return sorted(articles, key=lambda article: article.created or _OLDEST, reverse=True)


def group_by_category(articles):
    """Map each category (in order of first appearance) to its articles, newest first"""
    groups = OrderedDict()
    for article in articles:
        groups.setdefault(article.category, []).append(article)
    for category in groups:
        groups[category] = newest_first(groups[category])
    return groups


class CategorySection:
    """One category block on the public page"""

    def __init__(self, category, articles, expanded=False, limit=SECTION_LIMIT):
        self.category = category
        self.articles = articles
        self.expanded = expanded
        self.limit = limit

    @property
    def label(self):
        return category_label(self.category)

    @property
    def total(self):
        return len(self.articles)

    @property
    def has_more(self):
        return self.total > self.limit

    @property
    def visible(self):
        if self.expanded:
            return self.articles
        return self.articles[:self.limit]


class CategoryBrowser:
    """Tab selection and per-section expansion over a fixed article list"""

    def __init__(self, articles, active=ALL_TAB, expanded=(), limit=SECTION_LIMIT):
        self.articles = list(articles)
        self.active = resolve_tab(active)
        self.expanded = {category.lower() for category in expanded if category}
        self.limit = limit

    @property
    def groups(self):
        return group_by_category(self.articles)

    def is_expanded(self, category):
        return category.lower() in self.expanded

    def toggle(self, category):
        """Show more / show less for one section"""
        key = category.lower()
        if key in self.expanded:
            self.expanded.discard(key)
        else:
            self.expanded.add(key)

    def expanded_after_toggle(self, category):
        """Expansion set the toggle link for ``category`` should carry"""
        key = category.lower()
        return sorted(self.expanded ^ {key})

    @property
    def tabs(self):
        return [{'name': tab, 'active': tab == self.active} for tab in PUBLIC_TABS]

    def sections(self):
        """Sections for the active tab.

        "All" yields one section per category that has articles. A category
        tab always yields exactly one section, possibly empty.
        """
        if self.active == ALL_TAB:
            return [
                CategorySection(category, items, self.is_expanded(category), self.limit)
                for category, items in self.groups.items() if items
            ]

        key = self.active.lower()
        matching = newest_first(a for a in self.articles if a.category.lower() == key)
        return [CategorySection(key, matching, self.is_expanded(key), self.limit)]

    @property
    def empty_message(self):
        """Message for a category tab that currently has no articles"""
        if self.active == ALL_TAB:
            return None
        if self.sections()[0].total == 0:
            return EMPTY_CATEGORY_MESSAGE
        return None
