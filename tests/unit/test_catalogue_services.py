"""Unit tests for ProductService and PickupLocationService (mocked repositories)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.bk_common.errors import (
    EntityNotFoundError,
    ReferenceIntegrityError,
    RequiredFieldsMissingError,
    UserFriendlyDataError,
)
from src.bk_location.application.service import PickupLocationService
from src.bk_location.domain.models import PickupLocation
from src.bk_product.application.schemas import ProductForm, ProductOut, ProductUpdateForm
from src.bk_product.application.service import DUPLICATE_NAME_MESSAGE, ProductService
from src.bk_product.domain.models import Product
from src.bk_user.domain.models import User

ADMIN = User(id=1, email="admin@bakery.example", role="admin")


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestProductService:
    async def test_duplicate_name_is_user_friendly(self, db: AsyncMock) -> None:
        repo = MagicMock()
        repo.insert = AsyncMock(side_effect=ReferenceIntegrityError())
        with pytest.raises(UserFriendlyDataError, match="already a product"):
            await ProductService(repo).save(db, ADMIN, Product(name="Bun", price=100))
        db.rollback.assert_awaited_once()

    async def test_update_commits(self, db: AsyncMock) -> None:
        repo = MagicMock()
        product = Product(id=4, version=1, name="Bun", price=100)
        repo.update = AsyncMock(return_value=Product(id=4, version=2, name="Bun", price=100))
        saved = await ProductService(repo).save(db, ADMIN, product)
        assert saved.version == 2
        db.commit.assert_awaited_once()

    async def test_load_missing(self, db: AsyncMock) -> None:
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=None)
        with pytest.raises(EntityNotFoundError):
            await ProductService(repo).load(db, 4)

    async def test_delete_referenced_rolls_back(self, db: AsyncMock) -> None:
        repo = MagicMock()
        repo.delete = AsyncMock(side_effect=ReferenceIntegrityError())
        with pytest.raises(ReferenceIntegrityError):
            await ProductService(repo).delete(db, ADMIN, Product(id=4, name="Bun"))
        db.rollback.assert_awaited_once()

    def test_duplicate_message_text(self) -> None:
        assert DUPLICATE_NAME_MESSAGE.startswith("There is already a product")


class TestProductModel:
    def test_name_required(self) -> None:
        with pytest.raises(RequiredFieldsMissingError):
            Product(name="  ", price=100).validate()

    def test_price_range(self) -> None:
        with pytest.raises(UserFriendlyDataError):
            Product(name="Gold Cake", price=100_001).validate()


class TestProductForm:
    def test_price_parsed_to_cents(self) -> None:
        form = ProductForm(name="Tart", price="8.25")
        product = Product()
        form.write_to(product)
        assert product.price == 825

    def test_bad_price_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            ProductForm(name="Tart", price="cheap")

    def test_price_too_high_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            ProductForm(name="Tart", price="1000.01")

    def test_update_form_carries_version(self) -> None:
        product = Product(id=3, version=5, name="Tart", price=100)
        ProductUpdateForm(name="Tart", price="2", version=4).write_to(product)
        assert product.version == 4
        assert product.price == 200

    def test_update_form_requires_version(self) -> None:
        with pytest.raises(PydanticValidationError):
            ProductUpdateForm(name="Tart", price="2")

    def test_out(self) -> None:
        out = ProductOut.from_domain(Product(id=1, name="Tart", price=123456))
        assert out.price_text == "1234.56"
        assert out.price_display == "$1,234.56"


class TestPickupLocationService:
    async def test_default_is_first(self, db: AsyncMock) -> None:
        repo = MagicMock()
        repo.get_first = AsyncMock(return_value=PickupLocation(id=1, name="Store"))
        location = await PickupLocationService(repo).get_default(db)
        assert location.name == "Store"

    async def test_no_locations(self, db: AsyncMock) -> None:
        repo = MagicMock()
        repo.get_first = AsyncMock(return_value=None)
        assert await PickupLocationService(repo).get_default(db) is None

    async def test_delete_in_use(self, db: AsyncMock) -> None:
        repo = MagicMock()
        repo.delete = AsyncMock(side_effect=ReferenceIntegrityError())
        with pytest.raises(ReferenceIntegrityError):
            await PickupLocationService(repo).delete(db, ADMIN, PickupLocation(id=1, name="x"))
        db.rollback.assert_awaited_once()

    def test_name_required(self) -> None:
        with pytest.raises(RequiredFieldsMissingError):
            PickupLocation().validate()
