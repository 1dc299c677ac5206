"""Pydantic schemas for pickup locations."""

from pydantic import BaseModel, Field

from src.bk_crud.service import Page
from src.bk_location.domain.models import PickupLocation


class PickupLocationForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

    def write_to(self, entity: PickupLocation) -> None:
        entity.name = self.name


class PickupLocationUpdateForm(PickupLocationForm):
    version: int = Field(..., ge=0)

    def write_to(self, entity: PickupLocation) -> None:
        super().write_to(entity)
        entity.version = self.version


class PickupLocationOut(BaseModel):
    id: int
    version: int
    name: str

    @classmethod
    def from_domain(cls, location: PickupLocation) -> "PickupLocationOut":
        return cls(id=location.id, version=location.version, name=location.name)  # type: ignore[arg-type]


class PickupLocationListResponse(BaseModel):
    items: list[PickupLocationOut]
    total: int
    page: int
    size: int
    has_more: bool

    @classmethod
    def from_page(cls, page: Page[PickupLocation]) -> "PickupLocationListResponse":
        return cls(
            items=[PickupLocationOut.from_domain(loc) for loc in page.items],
            total=page.total,
            page=page.page,
            size=page.size,
            has_more=page.has_more,
        )
