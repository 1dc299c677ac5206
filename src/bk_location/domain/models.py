"""Pickup location domain model."""

from dataclasses import dataclass

from src.bk_common.entity import AbstractEntity
from src.bk_common.errors import RequiredFieldsMissingError


@dataclass(kw_only=True)
class PickupLocation(AbstractEntity):
    name: str = ""

    def validate(self) -> None:
        if not self.name or not self.name.strip():
            raise RequiredFieldsMissingError("Pickup location name is required")
