# product_api.py
from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import ValidationError

import schemas
from payload import MultipartPayload
from utils import get_logger

logger = get_logger("product_api")

ProductId = Union[int, str]

# Only these statuses raise a toast from the client layer itself.
STATUS_MESSAGES = {
    400: "Bad request",
    401: "Unauthorized",
    500: "Internal server error",
}


class ProductAPIError(Exception):
    """
    A failed call to the product API.

    status is None when no HTTP response was received. notified is True when
    the client already showed a toast for this failure.
    """
    def __init__(self, message: Optional[str] = None, status: Optional[int] = None,
                 path: str = "", notified: bool = False):
        super().__init__(message or f"Request to {path} failed (status={status})")
        self.message = message
        self.status = status
        self.path = path
        self.notified = notified


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return None


class ProductAPI:
    """
    Client for the remote product service ({API_BASE}/product).
    """
    def __init__(self, base_url: str, notifier=None, timeout: float = 15.0):
        if not base_url:
            raise ValueError("API base URL is required.")
        self.api_endpoint = f"{base_url.rstrip('/')}/product"
        self.notifier = notifier
        self.timeout = timeout

    # -------------------- internal helpers --------------------
    def _request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                 payload: Optional[MultipartPayload] = None, notify: bool = True) -> Any:
        url = f"{self.api_endpoint}{path}"
        kwargs: Dict[str, Any] = {"params": params, "timeout": self.timeout}
        if payload is not None:
            kwargs["data"] = payload.fields()
            kwargs["files"] = payload.files() or None

        try:
            response = requests.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed without a response: %s", method, path, e)
            raise ProductAPIError(None, status=None, path=path) from e

        if response.status_code >= 400:
            message = _server_message(response)
            logger.error("%s %s -> %s message=%r", method, path, response.status_code, message)
            notified = False
            if notify and self.notifier is not None and response.status_code in STATUS_MESSAGES:
                self.notifier.error(message or STATUS_MESSAGES[response.status_code])
                notified = True
            raise ProductAPIError(message, status=response.status_code, path=path, notified=notified)

        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s -> %s returned a non-JSON body", method, path, response.status_code)
            raise ProductAPIError(None, status=response.status_code, path=path) from e

    def _parse(self, model, body: Any, path: str, status: int = 200):
        try:
            return model.model_validate(body)
        except ValidationError as e:
            logger.error("Unexpected payload from %s: %s", path, e)
            raise ProductAPIError(None, status=status, path=path) from e

    # -------------------- operations --------------------
    def list_products(self, query: schemas.ListQuery) -> schemas.ListResult:
        body = self._request("GET", "/all", params=query.to_params())
        return self._parse(schemas.ListResult, body, "/all")

    def create_product(self, payload: MultipartPayload) -> schemas.MessageResponse:
        body = self._request("POST", "/create", payload=payload)
        return self._parse(schemas.MessageResponse, body or {}, "/create")

    def get_product(self, product_id: ProductId) -> schemas.Product:
        path = f"/fetch/{product_id}"
        body = self._request("GET", path)
        return self._parse(schemas.Product, body, path)

    def update_product(self, product_id: ProductId, payload: MultipartPayload) -> schemas.MessageResponse:
        path = f"/update/{product_id}"
        body = self._request("PUT", path, payload=payload)
        return self._parse(schemas.MessageResponse, body or {}, path)

    def get_attribute_filters(self) -> List[schemas.AttributeFilter]:
        """
        Every attribute key with its known values. Failures are logged and
        yield an empty list; the browser treats missing filters as non-fatal.
        """
        try:
            body = self._request("GET", "/attribute", notify=False)
            if not isinstance(body, list):
                raise ProductAPIError(None, status=200, path="/attribute")
            return [self._parse(schemas.AttributeFilter, item, "/attribute") for item in body]
        except ProductAPIError as e:
            logger.error("Error fetching attribute filters: %s", e)
            return []
