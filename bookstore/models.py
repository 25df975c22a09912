# bookstore/models.py
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class CamelModel(BaseModel):
    # Documents on disk use camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Specifications(CamelModel):
    pages: str = ""
    language: str = "Romanian"
    publisher: str = ""
    year: str = ""
    format: str = "Paperback"


class Product(CamelModel):
    id: int
    title: str
    author: str
    isbn: str = ""
    category: str = "General"
    price: float = Field(..., ge=0)
    discount_price: Optional[float] = None
    description: str = ""
    image_url: str = "/images/default-book.jpg"
    stock: int = Field(..., ge=0)
    is_active: bool = True
    featured: bool = False
    rating: Optional[float] = None
    review_count: int = 0
    tags: List[str] = Field(default_factory=list)
    specifications: Specifications = Field(default_factory=Specifications)
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)
    created_by: Optional[Union[int, str]] = None


class CartItem(CamelModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    title: str = ""
    author: str = ""
    # Unit price captured when the item was added
    price: float = 0
    image_url: Optional[str] = None
    added_at: str = Field(default_factory=utc_now_iso)


class Cart(CamelModel):
    items: List[CartItem] = Field(default_factory=list)
    total: float = 0
    total_items: int = 0
    last_updated: Optional[str] = None

    def recompute(self) -> None:
        """Derive ``total`` and ``total_items`` from the line items."""
        self.total = sum(i.price * i.quantity for i in self.items)
        self.total_items = sum(i.quantity for i in self.items)


class Identity(BaseModel):
    """Claims carried by an admin token."""

    id: Union[int, str]
    email: str
    role: str
    name: str = ""
    exp: Optional[datetime] = None
