# services/product_editor.py
from __future__ import annotations

import json
import re
import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, List, Optional, Union

import schemas
from payload import MultipartPayload
from product_api import ProductAPI, ProductAPIError
from utils import get_logger
from .notifications import Notifier

logger = get_logger("product_editor")

PRICE_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")

NAME_REQUIRED = "Product name is required"
TOO_LONG = f"Max length is {schemas.MAX_FIELD_LENGTH} characters"
PRICE_REQUIRED = "Price is required"
PRICE_INVALID = "Enter a valid price"
KEY_REQUIRED = "Key is required"
VALUE_REQUIRED = "Value is required"
IMAGE_REQUIRED = "Product image is required"
IMAGE_NOT_IMAGE = "The uploaded file must be an image"
ATTRIBUTES_REQUIRED = "Add at least one attribute"

LOAD_FAILED_MESSAGE = "Failed to load product"
SAVE_FAILED_MESSAGE = "Failed to save product"

# field name -> message; attribute rows use "attributes.<row_id>.key|value"
FormErrors = Dict[str, str]


class EditorMode(str, Enum):
    NEW = "new"
    EDIT = "edit"


def new_row(key: str = "", value: str = "") -> schemas.AttributeRow:
    return schemas.AttributeRow(row_id=uuid.uuid4().hex, key=key, value=value)


@dataclass
class SubmitResult:
    ok: bool
    message: Optional[str] = None
    redirect_to: Optional[str] = None
    errors: FormErrors = field(default_factory=dict)


class ProductEditor:
    """
    Create/edit form for a single product.

    Without a product id the editor is in NEW mode and submits a create;
    with one it is in EDIT mode, hydrates from the API on ``load`` and
    submits an update.
    """

    def __init__(self, api: ProductAPI, notifier: Notifier,
                 product_id: Optional[Union[int, str]] = None, require_image_on_update: bool = True):
        self.api = api
        self.notifier = notifier
        self.product_id = product_id
        self.require_image_on_update = require_image_on_update
        self.name = ""
        self.price = ""
        self.attributes: List[schemas.AttributeRow] = [new_row()]
        self.image: Optional[schemas.UploadedImage] = None
        self.errors: FormErrors = {}
        self.load_failed = False

    @property
    def mode(self) -> EditorMode:
        return EditorMode.NEW if self.product_id is None else EditorMode.EDIT

    @property
    def title(self) -> str:
        return "Create Product" if self.mode is EditorMode.NEW else "Edit Product"

    @property
    def submit_label(self) -> str:
        return "Create Product" if self.mode is EditorMode.NEW else "Update Product"

    # -------------------- hydration --------------------
    def load(self) -> bool:
        """Fill name, price and attributes from the stored product. The image is never pre-filled."""
        if self.mode is EditorMode.NEW:
            return True
        try:
            product = self.api.get_product(self.product_id)
        except ProductAPIError as e:
            logger.error("Error loading product %s: %s", self.product_id, e)
            if not e.notified:
                self.notifier.error(e.message or LOAD_FAILED_MESSAGE)
            self.load_failed = True
            return False
        self.name = product.name
        self.price = format(product.price, "f") if product.price is not None else ""
        self.attributes = [new_row(a.key, a.value) for a in product.attributes] or [new_row()]
        return True

    # -------------------- field edits --------------------
    def add_attribute(self) -> schemas.AttributeRow:
        row = new_row()
        self.attributes.append(row)
        return row

    def remove_attribute(self, index: int):
        if 0 <= index < len(self.attributes):
            del self.attributes[index]

    def remove_attribute_row(self, row_id: str):
        for i, row in enumerate(self.attributes):
            if row.row_id == row_id:
                self.remove_attribute(i)
                return

    def update_attribute(self, index: int, key: Optional[str] = None, value: Optional[str] = None):
        row = self.attributes[index]
        if key is not None:
            row.key = key
        if value is not None:
            row.value = value

    def set_image(self, image: Optional[schemas.UploadedImage]):
        self.image = image

    def remove_image(self):
        self.image = None

    # -------------------- validation --------------------
    def validate(self) -> FormErrors:
        errors: FormErrors = {}

        name = (self.name or "").strip()
        if not name:
            errors["name"] = NAME_REQUIRED
        elif len(name) > schemas.MAX_FIELD_LENGTH:
            errors["name"] = TOO_LONG

        price = (self.price or "").strip()
        if not price:
            errors["price"] = PRICE_REQUIRED
        elif not PRICE_PATTERN.match(price) or not _positive(price):
            errors["price"] = PRICE_INVALID

        image_required = self.mode is EditorMode.NEW or self.require_image_on_update
        if self.image is None:
            if image_required:
                errors["image"] = IMAGE_REQUIRED
        elif not (self.image.content_type or "").startswith("image/"):
            errors["image"] = IMAGE_NOT_IMAGE

        if not self.attributes:
            errors["attributes"] = ATTRIBUTES_REQUIRED
        for row in self.attributes:
            for part, required in (("key", KEY_REQUIRED), ("value", VALUE_REQUIRED)):
                text = (getattr(row, part) or "").strip()
                if not text:
                    errors[f"attributes.{row.row_id}.{part}"] = required
                elif len(text) > schemas.MAX_FIELD_LENGTH:
                    errors[f"attributes.{row.row_id}.{part}"] = TOO_LONG

        self.errors = errors
        return errors

    # -------------------- submission --------------------
    def build_payload(self) -> MultipartPayload:
        payload = MultipartPayload()
        payload.add_field("name", self.name.strip())
        payload.add_field("price", self.price.strip())
        payload.add_field("attributes", json.dumps([{"key": r.key, "value": r.value} for r in self.attributes]))
        if self.image is not None:
            payload.add_file("image", self.image.filename, self.image.content, self.image.content_type)
        return payload

    def submit(self) -> SubmitResult:
        errors = self.validate()
        if errors:
            return SubmitResult(ok=False, errors=errors)

        payload = self.build_payload()
        try:
            if self.mode is EditorMode.NEW:
                response = self.api.create_product(payload)
            else:
                response = self.api.update_product(self.product_id, payload)
        except ProductAPIError as e:
            logger.error("Error saving product (mode=%s id=%s): %s", self.mode.value, self.product_id, e)
            if not e.notified:
                self.notifier.error(e.message or SAVE_FAILED_MESSAGE)
            return SubmitResult(ok=False, message=e.message)

        if response.message:
            self.notifier.success(response.message)
        return SubmitResult(ok=True, message=response.message, redirect_to="/")


def _positive(price: str) -> bool:
    try:
        return Decimal(price) > 0
    except InvalidOperation:
        return False
