"""EntityPresenter — coordinates one editing session of one entity.

Mediates between a CrudService, the acting user and an EntityView. Every
backend call goes through ``_execute_operation``, which classifies the
known persistence failures into user-facing messages and reports them to
the view; none of them propagate past the presenter.

One presenter instance belongs to one session (one HTTP request when
driven by a router) and is never shared.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.entity import AbstractEntity
from src.bk_common.errors import (
    ConcurrentUpdateError,
    EntityNotFoundError,
    ReferenceIntegrityError,
    RequiredFieldsMissingError,
    UserFriendlyDataError,
    ValidationError,
)
from src.bk_crud.messages import CONFIRM_DELETE, UNSAVED_CHANGES, CrudErrorMessage, Message
from src.bk_crud.service import CrudService
from src.bk_crud.view import EntityView, Registration, call_listener
from src.bk_user.domain.models import User

logger = logging.getLogger("bk.crud")

T = TypeVar("T", bound=AbstractEntity)

CrudOperationListener = Callable[[T], Awaitable[None] | None]
Callback = Callable[[], Awaitable[None] | None]


async def _noop() -> None:
    return None


class EntityPresenterState(Generic[T]):
    """Current entity, its is-new flag and the pending dialog registrations."""

    def __init__(self) -> None:
        self.entity: T | None = None
        self.entity_name: str | None = None
        self.is_new = False
        self._ok_registration: Registration | None = None
        self._cancel_registration: Registration | None = None

    def update_entity(self, entity: T, is_new: bool) -> None:
        self.entity = entity
        self.entity_name = entity.entity_name()
        self.is_new = is_new

    def update_registration(
        self, ok_registration: Registration | None, cancel_registration: Registration | None
    ) -> None:
        # Previous dialog listeners are detached before the new ones take over
        for registration in (self._ok_registration, self._cancel_registration):
            if registration is not None:
                registration.remove()
        self._ok_registration = ok_registration
        self._cancel_registration = cancel_registration

    def clear(self) -> None:
        self.entity = None
        self.entity_name = None
        self.is_new = False
        self.update_registration(None, None)


class EntityPresenter(Generic[T]):
    def __init__(
        self,
        crud_service: CrudService[T],
        current_user: User,
        db: AsyncSession,
        view: EntityView[T] | None = None,
    ) -> None:
        self._crud_service = crud_service
        self._current_user = current_user
        self._db = db
        self._view = view
        self._state: EntityPresenterState[T] = EntityPresenterState()

    # ------------------------------------------------------------------
    # View binding
    # ------------------------------------------------------------------

    @property
    def view(self) -> EntityView[T]:
        if self._view is None:
            raise RuntimeError("EntityPresenter has no view bound")
        return self._view

    def set_view(self, view: EntityView[T]) -> None:
        self._view = view

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def entity(self) -> T | None:
        return self._state.entity

    @property
    def is_new(self) -> bool:
        return self._state.is_new

    @property
    def state(self) -> EntityPresenterState[T]:
        return self._state

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_new(self) -> T:
        self._state.update_entity(self._crud_service.create_new(self._current_user), True)
        return self._state.entity  # type: ignore[return-value]

    async def load_entity(self, entity_id: int, on_success: CrudOperationListener[T]) -> bool:
        async def _load() -> None:
            self._state.update_entity(await self._crud_service.load(self._db, entity_id), False)
            await call_listener(on_success, self._state.entity)

        return await self._execute_operation(_load)

    async def save(self, on_success: CrudOperationListener[T]) -> bool:
        """Validate and persist the current entity.

        The entity is replaced by the persisted value (server-assigned id and
        version). ``is_new`` still reports the pre-save value while
        ``on_success`` runs and is False afterwards.
        """
        if await self._execute_operation(self._save_entity):
            await call_listener(on_success, self._state.entity)
            self._state.is_new = False
            return True
        return False

    async def delete(
        self, on_success: CrudOperationListener[T], skip_confirmation: bool = False
    ) -> None:
        async def _delete() -> None:
            entity = self._state.entity
            if await self._execute_operation(
                lambda: self._crud_service.delete(self._db, self._current_user, entity)  # type: ignore[arg-type]
            ):
                await call_listener(on_success, entity)

        await self._confirm_if_necessary_and_execute(
            not skip_confirmation, CONFIRM_DELETE.create_message(), _delete, _noop
        )

    async def execute_update(self, updater: Callable[[T], Awaitable[T]]) -> bool:
        """Replace the current entity with ``updater(entity)``; failures are reported."""

        async def _update() -> None:
            updated = await updater(self._state.entity)  # type: ignore[arg-type]
            self._state.update_entity(updated, self.is_new)

        return await self._execute_operation(_update)

    def write_entity(self) -> bool:
        """Apply the view's form values to the current entity."""
        if self._state.entity is None:
            return False
        try:
            self.view.write(self._state.entity)
            return True
        except RequiredFieldsMissingError:
            self.view.show_error(CrudErrorMessage.REQUIRED_FIELDS_MISSING, False)
        except UserFriendlyDataError as e:
            self.view.show_error(e.message, True)
        except ValidationError as e:
            self.view.show_error(e.message, False)
        return False

    def close(self) -> None:
        self._state.clear()
        self.view.clear()

    async def cancel(self, on_confirmed: Callback, on_cancelled: Callback) -> None:
        async def _discard() -> None:
            self.view.clear()
            await call_listener(on_confirmed)

        await self._confirm_if_necessary_and_execute(
            self.view.is_dirty(),
            UNSAVED_CHANGES.create_message(self._state.entity_name or "item"),
            _discard,
            on_cancelled,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _save_entity(self) -> None:
        entity = self._state.entity
        if entity is None:
            raise RequiredFieldsMissingError("Nothing to save")
        entity.validate()
        saved = await self._crud_service.save(self._db, self._current_user, entity)
        self._state.update_entity(saved, self.is_new)

    async def _execute_operation(self, operation: Callable[[], Awaitable[Any]]) -> bool:
        try:
            await operation()
            return True
        except UserFriendlyDataError as e:
            # application-level data rule
            self._consume_error(e, e.message, True)
        except ReferenceIntegrityError as e:
            self._consume_error(e, CrudErrorMessage.OPERATION_PREVENTED_BY_REFERENCES, True)
        except ConcurrentUpdateError as e:
            self._consume_error(e, CrudErrorMessage.CONCURRENT_UPDATE, True)
        except EntityNotFoundError as e:
            self._consume_error(e, CrudErrorMessage.ENTITY_NOT_FOUND, False)
        except RequiredFieldsMissingError as e:
            self._consume_error(e, CrudErrorMessage.REQUIRED_FIELDS_MISSING, False)
        return False

    def _consume_error(self, exc: Exception, message: str, persistent: bool) -> None:
        logger.debug("%s (%s)", message, exc, exc_info=exc)
        self.view.show_error(message, persistent)

    async def _confirm_if_necessary_and_execute(
        self,
        needs_confirmation: bool,
        message: Message,
        on_confirmed: Callback,
        on_cancelled: Callback,
    ) -> None:
        if needs_confirmation:
            self._show_confirmation_request(message, on_confirmed, on_cancelled)
        else:
            await call_listener(on_confirmed)

    def _show_confirmation_request(
        self, message: Message, on_ok: Callback, on_cancel: Callback
    ) -> None:
        dialog = self.view.confirm_dialog
        dialog.open(message)
        ok_registration = dialog.add_confirm_listener(on_ok)
        cancel_registration = dialog.add_cancel_listener(on_cancel)
        self._state.update_registration(ok_registration, cancel_registration)
