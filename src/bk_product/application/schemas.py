"""Pydantic schemas for the product admin screen.

Prices travel as decimal text on input ("12.5") and are stored as int
cents; output carries both the cents and the formatted currency string.
"""

from pydantic import BaseModel, Field, field_validator

from src.bk_common.cents import format_as_currency, format_price, parse_price, validate_price
from src.bk_crud.service import Page
from src.bk_product.domain.models import Product


class ProductForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: str = Field(..., description="Decimal price, e.g. '12.50'")

    @field_validator("price")
    @classmethod
    def price_in_range(cls, v: str) -> str:
        validate_price(parse_price(v))
        return v

    @property
    def price_cents(self) -> int:
        return parse_price(self.price)

    def write_to(self, entity: Product) -> None:
        entity.name = self.name
        entity.price = self.price_cents


class ProductUpdateForm(ProductForm):
    version: int = Field(..., ge=0)

    def write_to(self, entity: Product) -> None:
        super().write_to(entity)
        entity.version = self.version


class ProductOut(BaseModel):
    id: int
    version: int
    name: str
    price: int
    price_text: str
    price_display: str

    @classmethod
    def from_domain(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,  # type: ignore[arg-type]
            version=product.version,
            name=product.name,
            price=product.price,
            price_text=format_price(product.price),
            price_display=format_as_currency(product.price),
        )


class ProductListResponse(BaseModel):
    items: list[ProductOut]
    total: int
    page: int
    size: int
    has_more: bool

    @classmethod
    def from_page(cls, page: Page[Product]) -> "ProductListResponse":
        return cls(
            items=[ProductOut.from_domain(p) for p in page.items],
            total=page.total,
            page=page.page,
            size=page.size,
            has_more=page.has_more,
        )
