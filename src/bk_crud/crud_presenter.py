"""CrudEntityPresenter — stateless save/delete/load for list screens.

Same error classification as EntityPresenter, but it keeps no entity and
asks for no confirmation; the outcome is reported through callbacks.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.entity import AbstractEntity
from src.bk_common.errors import (
    ConcurrentUpdateError,
    EntityNotFoundError,
    ReferenceIntegrityError,
    RequiredFieldsMissingError,
    UserFriendlyDataError,
)
from src.bk_crud.messages import CrudErrorMessage
from src.bk_crud.service import CrudService
from src.bk_crud.view import call_listener
from src.bk_user.domain.models import User

logger = logging.getLogger("bk.crud")

E = TypeVar("E", bound=AbstractEntity)

Consumer = Callable[[E], Awaitable[None] | None]


class HasNotifications(Protocol):
    def show_error(self, message: str, persistent: bool) -> None: ...


class CrudEntityPresenter(Generic[E]):
    def __init__(
        self,
        crud_service: CrudService[E],
        current_user: User,
        db: AsyncSession,
        view: HasNotifications,
    ) -> None:
        self._crud_service = crud_service
        self._current_user = current_user
        self._db = db
        self._view = view

    async def delete(self, entity: E, on_success: Consumer[E], on_fail: Consumer[E]) -> None:
        ok = await self._execute_operation(
            lambda: self._crud_service.delete(self._db, self._current_user, entity)
        )
        await call_listener(on_success if ok else on_fail, entity)

    async def save(
        self,
        entity: E,
        on_success: Consumer[E],
        on_fail: Consumer[E],
        write: Callable[[E], None] | None = None,
    ) -> None:
        """Save ``entity``, first applying ``write`` to it when given.

        Failures of ``write`` are classified the same way as those of the save.
        """
        saved: list[E] = []

        async def _save() -> None:
            if write is not None:
                write(entity)
            saved.append(await self._crud_service.save(self._db, self._current_user, entity))

        if await self._execute_operation(_save):
            await call_listener(on_success, saved[0])
        else:
            await call_listener(on_fail, entity)

    async def load_entity(self, entity_id: int, on_success: Consumer[E]) -> bool:
        async def _load() -> None:
            await call_listener(on_success, await self._crud_service.load(self._db, entity_id))

        return await self._execute_operation(_load)

    async def _execute_operation(self, operation: Callable[[], Awaitable[Any]]) -> bool:
        try:
            await operation()
            return True
        except UserFriendlyDataError as e:
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
        self._view.show_error(message, persistent)
