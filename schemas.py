# schemas.py
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_FIELD_LENGTH = 100

# =========================
# Base model configurations
# =========================

class APIBase(BaseModel):
    """Base for models mapped to the product API payloads."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

# ======================================================
# Product API payloads
# ======================================================

class Attribute(APIBase):
    key: str = ""
    value: str = ""

class Product(APIBase):
    id: Optional[Union[int, str]] = None
    name: str = ""
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image: Optional[str] = None
    attributes: List[Attribute] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("price", mode="before")
    @classmethod
    def _price_from_json_number(cls, v):
        # JSON floats go through str() so 19.99 stays 19.99
        if isinstance(v, float):
            return str(v)
        return v

    @field_validator("attributes", mode="before")
    @classmethod
    def _null_attributes(cls, v):
        return v or []

class ListResult(APIBase):
    data: List[Product] = Field(default_factory=list)
    total: int = 0
    message: Optional[str] = None

    @field_validator("data", mode="before")
    @classmethod
    def _null_data(cls, v):
        return v or []

    @field_validator("total", mode="before")
    @classmethod
    def _null_total(cls, v):
        return v or 0

class AttributeFilter(APIBase):
    key: str
    values: List[str] = Field(default_factory=list)

class MessageResponse(APIBase):
    message: Optional[str] = None

# ======================================================
# Catalog browser query state
# ======================================================

class SortDirection(str, Enum):
    UNSPECIFIED = ""
    ASCENDING = "ASC"
    DESCENDING = "DESC"

SORT_LABELS = {
    SortDirection.UNSPECIFIED: "Sort by",
    SortDirection.DESCENDING: "Newest",
    SortDirection.ASCENDING: "Oldest",
}

class ListQuery(BaseModel):
    """
    Everything that determines which product page is fetched.

    Instances are immutable; the transition helpers in services.list_query
    return new copies.
    """
    model_config = ConfigDict(frozen=True)

    page: int = 1
    limit: int = 5
    search: str = ""
    sort: SortDirection = SortDirection.UNSPECIFIED
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    attributes: Dict[str, str] = Field(default_factory=dict)

    def page_count(self, total: int) -> int:
        return math.ceil(total / self.limit) if total > 0 else 0

    def has_previous(self) -> bool:
        return self.page > 1

    def has_next(self, total: int) -> bool:
        return self.page * self.limit < total

    def to_params(self) -> Dict[str, Union[int, str]]:
        """Query parameters for GET /product/all."""
        params: Dict[str, Union[int, str]] = {
            key: value for key, value in self.attributes.items() if value
        }
        params.update(page=self.page, limit=self.limit, name=self.search, sort=self.sort.value)
        if self.start_date:
            params["startDate"] = self.start_date.isoformat()
        if self.end_date:
            params["endDate"] = self.end_date.isoformat()
        return params

# ======================================================
# View models
# ======================================================

class ProductCard(BaseModel):
    id: Optional[Union[int, str]] = None
    name: str
    description: Optional[str] = None
    image_url: str
    attributes: List[Attribute] = Field(default_factory=list)
    edit_url: Optional[str] = None

class FilterSection(BaseModel):
    key: str
    values: List[str]
    selected: str = ""

class BrowserView(BaseModel):
    search_text: str
    sort: SortDirection
    sort_options: Dict[str, str]
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    filters: List[FilterSection]
    products: List[ProductCard]
    page: int
    page_count: int
    total: int
    has_previous: bool
    has_next: bool
    loading: bool
    loaded: bool

    @property
    def is_empty(self) -> bool:
        return self.loaded and not self.products

class AttributeRow(BaseModel):
    row_id: str
    key: str = ""
    value: str = ""

class UploadedImage(BaseModel):
    filename: str
    content_type: Optional[str] = None
    content: bytes = b""
