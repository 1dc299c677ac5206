"""Router helpers shared by the CRUD endpoints.

Each helper drives a presenter against a per-request RequestView and turns a
reported failure into an AppError for the global exception handler.
"""

from typing import TypeVar

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.entity import AbstractEntity
from src.bk_common.errors import ConfirmationRequiredError
from src.bk_common.response import ApiResponse, success_response
from src.bk_crud.crud_presenter import CrudEntityPresenter
from src.bk_crud.presenter import EntityPresenter
from src.bk_crud.service import CrudService
from src.bk_crud.view import EntityForm, RequestView
from src.bk_user.domain.models import User

T = TypeVar("T", bound=AbstractEntity)


def get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


def respond(request: Request, data: object = None, message: str = "success") -> ApiResponse:
    return success_response(data, message, get_request_id(request))


async def load_entity(
    service: CrudService[T], actor: User, db: AsyncSession, entity_id: int
) -> T:
    view: RequestView[T] = RequestView()
    presenter = EntityPresenter(service, actor, db, view)
    await presenter.load_entity(entity_id, lambda _: None)
    view.raise_if_failed()
    return presenter.entity  # type: ignore[return-value]


async def create_entity(
    service: CrudService[T], actor: User, db: AsyncSession, form: EntityForm[T]
) -> T:
    view: RequestView[T] = RequestView(form)
    saved: list[T] = []
    presenter = CrudEntityPresenter(service, actor, db, view)
    await presenter.save(service.create_new(actor), saved.append, lambda _: None, view.write)
    view.raise_if_failed()
    return saved[0]


async def update_entity(
    service: CrudService[T],
    actor: User,
    db: AsyncSession,
    entity_id: int,
    form: EntityForm[T],
) -> T:
    view: RequestView[T] = RequestView(form)
    presenter = EntityPresenter(service, actor, db, view)
    if await presenter.load_entity(entity_id, lambda _: None) and presenter.write_entity():
        await presenter.save(lambda _: None)
    view.raise_if_failed()
    return presenter.entity  # type: ignore[return-value]


async def delete_entity(
    service: CrudService[T],
    actor: User,
    db: AsyncSession,
    entity_id: int,
    confirm: bool,
) -> T:
    """Two-phase delete: without ``confirm`` the dialog texts are returned as a 409."""
    view: RequestView[T] = RequestView()
    presenter = EntityPresenter(service, actor, db, view)
    deleted: list[T] = []
    if await presenter.load_entity(entity_id, lambda _: None):
        await presenter.delete(deleted.append)
        if not confirm:
            dialog = view.confirm_dialog
            await dialog.cancel()
            raise ConfirmationRequiredError(dialog.text, dialog.as_dict())
        await view.confirm_dialog.confirm()
    view.raise_if_failed()
    presenter.close()
    return deleted[0]
