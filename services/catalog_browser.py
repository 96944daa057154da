# services/catalog_browser.py
from __future__ import annotations

import threading
from datetime import date
from typing import List, Optional

import schemas
from product_api import ProductAPI, ProductAPIError
from utils import get_logger, resolve_image_url
from . import list_query
from .debounce import Debouncer, TimerFactory
from .notifications import Notifier

logger = get_logger("catalog_browser")

LOAD_FAILED_MESSAGE = "Failed to load products"


class CatalogBrowser:
    """
    Owns the list query for one browser session and keeps the product page
    and the attribute filters in sync with it.

    Controls call the transition methods below. A transition that changes a
    reload field fetches the page again; the response is applied only if
    its query is still the current one when it arrives.
    """

    def __init__(self, api: ProductAPI, notifier: Notifier, page_size: int = 5,
                 debounce_seconds: float = 0.5, timer_factory: Optional[TimerFactory] = None):
        self.api = api
        self.notifier = notifier
        self._lock = threading.Lock()
        self._query = list_query.initial(page_size)
        self._search_text = ""
        self._products: List[schemas.Product] = []
        self._total = 0
        self._filters: List[schemas.AttributeFilter] = []
        self._in_flight = 0
        self._loaded = False
        self._mounted = False
        debounce_kwargs = {"timer_factory": timer_factory} if timer_factory else {}
        self._debouncer = Debouncer(debounce_seconds, self._commit_search, **debounce_kwargs)

    # -------------------- state accessors --------------------
    @property
    def query(self) -> schemas.ListQuery:
        with self._lock:
            return self._query

    @property
    def products(self) -> List[schemas.Product]:
        with self._lock:
            return list(self._products)

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def attribute_filters(self) -> List[schemas.AttributeFilter]:
        with self._lock:
            return list(self._filters)

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    @property
    def refreshing(self) -> bool:
        """A search commit is still due or a page request is outstanding."""
        with self._lock:
            in_flight = self._in_flight > 0
        return in_flight or self._debouncer.pending

    # -------------------- lifecycle --------------------
    def mount(self):
        """First render: load the attribute filters once, then page 1."""
        with self._lock:
            if self._mounted:
                return
            self._mounted = True
        filters = self.api.get_attribute_filters()
        with self._lock:
            self._filters = list(filters or [])
        self._load(self.query)

    def close(self):
        self._debouncer.close()

    # -------------------- controls --------------------
    def set_search(self, text: str):
        with self._lock:
            self._search_text = text
        self._debouncer.trigger(text)

    def _commit_search(self, text: str):
        self._transition(lambda q: list_query.with_search(q, text))

    def set_sort(self, sort: schemas.SortDirection):
        self._transition(lambda q: list_query.with_sort(q, sort))

    def set_start_date(self, value: Optional[date]):
        self._transition(lambda q: list_query.with_start_date(q, value))

    def set_end_date(self, value: Optional[date]):
        self._transition(lambda q: list_query.with_end_date(q, value))

    def handle_attribute_change(self, key: str, value: str):
        self._transition(lambda q: list_query.with_attribute(q, key, value))

    def handle_clear_filters(self):
        # a pending search commit would otherwise cause a second reload
        self._debouncer.cancel()
        with self._lock:
            self._search_text = ""
        self._transition(list_query.cleared)

    def previous_page(self):
        self._transition(list_query.previous_page)

    def next_page(self):
        self._transition(lambda q: list_query.next_page(q, self._total))

    def _transition(self, fn):
        with self._lock:
            old = self._query
            new = fn(old)
            self._query = new
        if list_query.triggers_reload(old, new):
            self._load(new)

    # -------------------- loading --------------------
    def _load(self, query: schemas.ListQuery):
        if not list_query.is_fetchable(query):
            return
        with self._lock:
            self._in_flight += 1
        try:
            result = self.api.list_products(query)
        except ProductAPIError as e:
            logger.error("Error loading products: %s", e)
            with self._lock:
                stale = query != self._query
            if stale:
                logger.debug("Dropping error for superseded query %s", query)
            elif not e.notified:
                self.notifier.error(e.message or LOAD_FAILED_MESSAGE)
            return
        finally:
            with self._lock:
                self._in_flight -= 1

        with self._lock:
            if query != self._query:
                logger.debug("Discarding stale page for %s; current is %s", query, self._query)
                return
            self._products = list(result.data)
            self._total = result.total
            self._loaded = True
        if result.message:
            self.notifier.success(result.message)

    # -------------------- rendering --------------------
    def view(self) -> schemas.BrowserView:
        with self._lock:
            q = self._query
            filters = [
                schemas.FilterSection(key=f.key, values=f.values, selected=q.attributes.get(f.key, ""))
                for f in self._filters
            ]
            cards = [
                schemas.ProductCard(
                    id=p.id,
                    name=p.name,
                    description=p.description,
                    image_url=resolve_image_url(p.image),
                    attributes=p.attributes,
                    edit_url=f"/edit/{p.id}" if p.id is not None else None,
                )
                for p in self._products
            ]
            return schemas.BrowserView(
                search_text=self._search_text,
                sort=q.sort,
                sort_options={d.value: label for d, label in schemas.SORT_LABELS.items()},
                start_date=q.start_date,
                end_date=q.end_date,
                filters=filters,
                products=cards,
                page=q.page,
                page_count=q.page_count(self._total),
                total=self._total,
                has_previous=q.has_previous(),
                has_next=q.has_next(self._total),
                loading=self._in_flight > 0,
                loaded=self._loaded,
            )
