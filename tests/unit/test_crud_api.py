"""Unit tests for CrudEntityPresenter and the router helpers in bk_crud.api."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bk_common.errors import (
    ConcurrentUpdateError,
    ConfirmationRequiredError,
    EntityNotFoundError,
    OperationFailedError,
    ReferenceIntegrityError,
    UserFriendlyDataError,
)
from src.bk_crud.api import create_entity, delete_entity, load_entity, update_entity
from src.bk_crud.crud_presenter import CrudEntityPresenter
from src.bk_crud.messages import CrudErrorMessage
from src.bk_crud.view import Notification, RequestView
from src.bk_location.domain.models import PickupLocation
from src.bk_user.domain.models import User


class _LocationForm:
    def __init__(self, name: str, version: int = 0) -> None:
        self.name = name
        self.version = version

    def write_to(self, entity: PickupLocation) -> None:
        entity.name = self.name
        if entity.id is not None:
            entity.version = self.version


class _ClosedLocationForm:
    def write_to(self, entity: PickupLocation) -> None:
        raise UserFriendlyDataError("Location is closed")


def _make_user() -> User:
    return User(id=1, email="admin@bakery.example", role="admin")


@pytest.fixture
def service() -> MagicMock:
    svc = MagicMock()
    svc.create_new.side_effect = lambda actor: PickupLocation()
    svc.load = AsyncMock(return_value=PickupLocation(id=3, version=1, name="Store"))
    svc.save = AsyncMock(side_effect=lambda db, actor, loc: PickupLocation(
        id=loc.id or 10, version=loc.version + 1, name=loc.name
    ))
    svc.delete = AsyncMock()
    return svc


class TestCrudEntityPresenter:
    async def test_save_success_passes_saved_entity(self, service: MagicMock) -> None:
        view: RequestView[PickupLocation] = RequestView()
        presenter = CrudEntityPresenter(service, _make_user(), AsyncMock(), view)
        ok, fail = MagicMock(), MagicMock()
        await presenter.save(PickupLocation(name="Bakery"), ok, fail)
        saved = ok.call_args.args[0]
        assert saved.id == 10
        fail.assert_not_called()

    async def test_save_failure_passes_original(self, service: MagicMock) -> None:
        service.save.side_effect = ConcurrentUpdateError("PickupLocation", 3)
        view: RequestView[PickupLocation] = RequestView()
        presenter = CrudEntityPresenter(service, _make_user(), AsyncMock(), view)
        original = PickupLocation(id=3, name="Store")
        ok, fail = MagicMock(), MagicMock()
        await presenter.save(original, ok, fail)
        fail.assert_called_once_with(original)
        assert view.notifications == [Notification(CrudErrorMessage.CONCURRENT_UPDATE, True)]

    async def test_delete_failure(self, service: MagicMock) -> None:
        service.delete.side_effect = ReferenceIntegrityError()
        view: RequestView[PickupLocation] = RequestView()
        presenter = CrudEntityPresenter(service, _make_user(), AsyncMock(), view)
        ok, fail = MagicMock(), MagicMock()
        await presenter.delete(PickupLocation(id=3, name="Store"), ok, fail)
        ok.assert_not_called()
        fail.assert_called_once()

    async def test_load_entity(self, service: MagicMock) -> None:
        view: RequestView[PickupLocation] = RequestView()
        presenter = CrudEntityPresenter(service, _make_user(), AsyncMock(), view)
        loaded: list[PickupLocation] = []
        assert await presenter.load_entity(3, loaded.append) is True
        assert loaded[0].name == "Store"


class TestRouterHelpers:
    async def test_load_entity_not_found(self, service: MagicMock) -> None:
        service.load.side_effect = EntityNotFoundError("PickupLocation", 3)
        with pytest.raises(OperationFailedError) as exc_info:
            await load_entity(service, _make_user(), AsyncMock(), 3)
        assert exc_info.value.http_status == 404
        assert exc_info.value.message == CrudErrorMessage.ENTITY_NOT_FOUND

    async def test_create_entity(self, service: MagicMock) -> None:
        created = await create_entity(service, _make_user(), AsyncMock(), _LocationForm("Bakery"))
        assert created.id == 10
        assert created.name == "Bakery"

    async def test_create_entity_form_rule_is_reported(self, service: MagicMock) -> None:
        with pytest.raises(OperationFailedError) as exc_info:
            await create_entity(service, _make_user(), AsyncMock(), _ClosedLocationForm())
        assert exc_info.value.message == "Location is closed"
        assert exc_info.value.http_status == 422
        assert exc_info.value.data == {"persistent": True}
        service.save.assert_not_awaited()

    async def test_update_entity_uses_client_version(self, service: MagicMock) -> None:
        updated = await update_entity(
            service, _make_user(), AsyncMock(), 3, _LocationForm("Cafe", version=1)
        )
        sent = service.save.call_args.args[2]
        assert sent.version == 1
        assert updated.version == 2
        assert updated.name == "Cafe"

    async def test_update_entity_stale(self, service: MagicMock) -> None:
        service.save.side_effect = ConcurrentUpdateError("PickupLocation", 3)
        with pytest.raises(OperationFailedError) as exc_info:
            await update_entity(service, _make_user(), AsyncMock(), 3, _LocationForm("Cafe"))
        assert exc_info.value.http_status == 409
        assert exc_info.value.data == {"persistent": True}

    async def test_delete_without_confirmation(self, service: MagicMock) -> None:
        with pytest.raises(ConfirmationRequiredError) as exc_info:
            await delete_entity(service, _make_user(), AsyncMock(), 3, confirm=False)
        dialog = exc_info.value.data["confirmation"]
        assert dialog["header"] == "Confirm Delete"
        assert dialog["confirm_text"] == "Delete"
        service.delete.assert_not_awaited()

    async def test_delete_confirmed(self, service: MagicMock) -> None:
        deleted = await delete_entity(service, _make_user(), AsyncMock(), 3, confirm=True)
        assert deleted.id == 3
        service.delete.assert_awaited_once()

    async def test_delete_referenced(self, service: MagicMock) -> None:
        service.delete.side_effect = ReferenceIntegrityError()
        with pytest.raises(OperationFailedError) as exc_info:
            await delete_entity(service, _make_user(), AsyncMock(), 3, confirm=True)
        assert exc_info.value.http_status == 409
        assert exc_info.value.message == CrudErrorMessage.OPERATION_PREVENTED_BY_REFERENCES
