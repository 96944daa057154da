"""Shared fakes and fixtures for the catalog client tests."""

from typing import Callable, List, Optional

import pytest

import schemas
from product_api import ProductAPIError
from services.notifications import Notifier


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function()


class TimerBox:
    def __init__(self):
        self.timers: List[FakeTimer] = []

    def factory(self, interval, function) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    def live(self) -> List[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_pending(self):
        for timer in self.live():
            timer.fire()


def make_product(n: int, **overrides) -> schemas.Product:
    data = {
        "id": n,
        "name": f"Product {n}",
        "price": "9.99",
        "description": f"Description {n}",
        "attributes": [{"key": "color", "value": "red"}],
    }
    data.update(overrides)
    return schemas.Product.model_validate(data)


class FakeProductAPI:
    """In-memory double for ProductAPI that records every call."""

    def __init__(self, products: Optional[List[schemas.Product]] = None,
                 filters: Optional[List[schemas.AttributeFilter]] = None):
        self.products = products if products is not None else []
        self.filters = filters if filters is not None else []
        self.list_calls: List[schemas.ListQuery] = []
        self.list_error: Optional[ProductAPIError] = None
        self.list_message: Optional[str] = None
        self.on_list: Optional[Callable[[schemas.ListQuery], None]] = None
        self.stored: dict = {}
        self.fetch_error: Optional[ProductAPIError] = None
        self.save_error: Optional[ProductAPIError] = None
        self.save_message: Optional[str] = "Product saved successfully"
        self.created = []
        self.updated = []

    def list_products(self, query: schemas.ListQuery) -> schemas.ListResult:
        self.list_calls.append(query)
        if self.on_list is not None:
            self.on_list(query)
        if self.list_error is not None:
            raise self.list_error
        start = (query.page - 1) * query.limit
        page = self.products[start:start + query.limit]
        return schemas.ListResult(data=page, total=len(self.products), message=self.list_message)

    def get_attribute_filters(self) -> List[schemas.AttributeFilter]:
        return list(self.filters)

    def get_product(self, product_id) -> schemas.Product:
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.stored[str(product_id)]

    def create_product(self, payload) -> schemas.MessageResponse:
        if self.save_error is not None:
            raise self.save_error
        self.created.append(payload)
        return schemas.MessageResponse(message=self.save_message)

    def update_product(self, product_id, payload) -> schemas.MessageResponse:
        if self.save_error is not None:
            raise self.save_error
        self.updated.append((product_id, payload))
        return schemas.MessageResponse(message=self.save_message)


class FakeResponse:
    """Minimal requests.Response stand-in."""

    _NO_JSON = object()

    def __init__(self, status_code: int = 200, body=_NO_JSON):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is FakeResponse._NO_JSON:
            raise ValueError("No JSON body")
        return self._body


@pytest.fixture
def timers():
    return TimerBox()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def fake_api():
    return FakeProductAPI()
