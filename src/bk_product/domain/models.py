"""Product domain model."""

from dataclasses import dataclass

from src.bk_common.cents import MAX_PRICE_CENTS
from src.bk_common.entity import AbstractEntity
from src.bk_common.errors import RequiredFieldsMissingError, UserFriendlyDataError


@dataclass(kw_only=True)
class Product(AbstractEntity):
    name: str = ""
    price: int = 0  # cents

    def validate(self) -> None:
        if not self.name or not self.name.strip():
            raise RequiredFieldsMissingError("Product name is required")
        if len(self.name) > 255:
            raise UserFriendlyDataError("Product name must be at most 255 characters")
        if not 0 <= self.price <= MAX_PRICE_CENTS:
            raise UserFriendlyDataError(
                f"Price must be between 0 and {MAX_PRICE_CENTS} cents"
            )
