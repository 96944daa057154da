# services/list_query.py
"""
Pure transitions over ListQuery, one per catalog control.

Each function takes the current query and returns the next one; none of them
touch the network or any shared state.
"""
from datetime import date
from typing import Optional

from schemas import ListQuery, SortDirection

# Fields whose change causes the product page to be fetched again.
RELOAD_FIELDS = ("page", "search", "sort", "attributes", "start_date", "end_date")


def initial(limit: int) -> ListQuery:
    return ListQuery(limit=limit)


def with_search(query: ListQuery, text: str) -> ListQuery:
    return query.model_copy(update={"search": text})


def with_sort(query: ListQuery, sort: SortDirection) -> ListQuery:
    return query.model_copy(update={"sort": SortDirection(sort)})


def with_start_date(query: ListQuery, value: Optional[date]) -> ListQuery:
    return query.model_copy(update={"start_date": value})


def with_end_date(query: ListQuery, value: Optional[date]) -> ListQuery:
    return query.model_copy(update={"end_date": value})


def with_attribute(query: ListQuery, key: str, value: str) -> ListQuery:
    """A different filter means a different result set, so go back to page 1."""
    attributes = dict(query.attributes)
    attributes[key] = value
    return query.model_copy(update={"attributes": attributes, "page": 1})


def cleared(query: ListQuery) -> ListQuery:
    return ListQuery(limit=query.limit)


def previous_page(query: ListQuery) -> ListQuery:
    if not query.has_previous():
        return query
    return query.model_copy(update={"page": query.page - 1})


def next_page(query: ListQuery, total: int) -> ListQuery:
    if not query.has_next(total):
        return query
    return query.model_copy(update={"page": query.page + 1})


def triggers_reload(old: ListQuery, new: ListQuery) -> bool:
    return any(getattr(old, f) != getattr(new, f) for f in RELOAD_FIELDS)


def is_fetchable(query: ListQuery) -> bool:
    return query.page >= 1
