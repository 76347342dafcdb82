"""Pydantic contracts shared across the transactions backend."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConfigurationError(ValueError):
    """Raised when store configuration is missing or malformed."""


class TransactionSortField(str, Enum):
    """Whitelisted sort keys accepted from callers."""

    DATE = "date"
    QUANTITY = "quantity"
    CUSTOMER_NAME = "customerName"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TransactionFilters(BaseModel):
    """Canonical, already-normalized filter request for one listing call.

    Empty multi-select lists and `None` bounds mean "not applied".
    """

    model_config = ConfigDict(extra="forbid")

    q: str | None = None
    regions: list[str] = Field(default_factory=list)
    genders: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    payment_methods: list[str] = Field(default_factory=list)
    age_min: float | None = None
    age_max: float | None = None
    date_from: str | None = None
    date_to: str | None = None
    sort_by: TransactionSortField = TransactionSortField.DATE
    sort_order: SortOrder = SortOrder.DESC
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PageMeta(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    total: int = Field(ge=0)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1, alias="pageSize")
    total_pages: int = Field(ge=0, alias="totalPages")


class TransactionPage(BaseModel):
    """Response envelope: normalized rows plus pagination metadata."""

    model_config = ConfigDict(extra="forbid")

    data: list[dict[str, Any]]
    meta: PageMeta

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TransactionsSummary(BaseModel):
    """Aggregate figures displayed by the dashboard summary cards."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    total_units: int = Field(default=0, alias="totalUnits")
    total_amount: float = Field(default=0.0, alias="totalAmount")
    total_discount: float = Field(default=0.0, alias="totalDiscount")
    count: int = 0


class TransactionFilterOptions(BaseModel):
    """Closed option lists offered by the dashboard multi-select controls."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    regions: list[str] = Field(default_factory=lambda: ["North", "South", "East", "West"])
    genders: list[str] = Field(default_factory=lambda: ["Male", "Female", "Other"])
    categories: list[str] = Field(default_factory=lambda: ["Clothing", "Footwear", "Electronics"])
    tags: list[str] = Field(default_factory=lambda: ["sale", "new", "popular"])
    payment_methods: list[str] = Field(
        default_factory=lambda: ["Card", "UPI", "Cash"],
        alias="paymentMethods",
    )
