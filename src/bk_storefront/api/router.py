"""Storefront endpoints: the order list and the order workflow.

GET    /storefront/orders                 — cards with bucket headers
POST   /storefront/orders/new             — a prefilled, unsaved order
GET    /storefront/orders/{id}            — view (or ?edit=true) one order
POST   /storefront/orders/review          — validate + preview, nothing saved
POST   /storefront/orders                 — review and create
PUT    /storefront/orders/{id}            — review and update (``version``)
POST   /storefront/orders/{id}/comments   — append a comment
DELETE /storefront/orders/{id}            — delete, requires ?confirm=true

Each request builds its own presenter, view and header generator.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.errors import FieldValidationError, RequiredFieldsMissingError
from src.bk_common.response import ApiResponse
from src.bk_crud.api import delete_entity, respond
from src.bk_crud.presenter import EntityPresenter
from src.bk_gateway.auth.dependencies import get_current_user
from src.bk_order.application.service import OrderService
from src.bk_order.domain.models import Order
from src.bk_storefront.application.schemas import (
    CommentForm,
    OrderCardOut,
    OrderDetailsOut,
    OrderForm,
    OrderListResponse,
    OrderUpdateForm,
)
from src.bk_storefront.data_provider import OrdersGridDataProvider
from src.bk_storefront.presenter import OrderPresenter
from src.bk_storefront.view import RequestStorefrontView
from src.bk_user.domain.models import User

router = APIRouter(prefix="/storefront/orders", tags=["storefront"])

_service = OrderService()


def _build(
    current_user: User, db: AsyncSession, form: OrderForm | None = None
) -> tuple[OrderPresenter, RequestStorefrontView]:
    view = RequestStorefrontView(form)
    presenter = OrderPresenter(
        _service,
        OrdersGridDataProvider(_service, db),
        EntityPresenter(_service, current_user, db),
        current_user,
        db,
    )
    presenter.init(view)
    return presenter, view


async def _review(presenter: OrderPresenter, view: RequestStorefrontView, form: OrderForm) -> None:
    await presenter.bind_form(form)
    presenter.review()
    if view.focused is not None:
        raise FieldValidationError(form.validate_fields())
    view.raise_if_failed()


def _shown(view: RequestStorefrontView) -> Order:
    if view.shown is None:
        raise RequiredFieldsMissingError("No order opened")
    return view.shown


@router.get("")
async def list_orders(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    filter: str | None = Query(None, description="Customer name fragment"),
    include_past: bool = Query(False),
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ApiResponse:
    presenter, _ = _build(current_user, db)
    presenter.filter_changed(filter, include_past)
    result = await presenter.fetch_page(page, size)
    data = OrderListResponse(
        items=[
            OrderCardOut.from_domain(order, presenter.get_header_by_order_id(order.id))
            for order in result.items
        ],
        total=result.total,
        page=result.page,
        size=result.size,
        has_more=result.has_more,
    )
    return respond(request, data.model_dump())


@router.post("/new")
async def new_order(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    presenter, view = _build(current_user, db)
    await presenter.create_new_order()
    data = OrderDetailsOut.from_domain(_shown(view), is_new=True)
    return respond(request, data.model_dump())


@router.post("/review")
async def review_order(
    request: Request,
    body: OrderForm,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    order_id: int | None = Query(None, description="Existing order; omit for a new one"),
) -> ApiResponse:
    presenter, view = _build(current_user, db, body)
    if order_id is None:
        await presenter.create_new_order()
    elif not await presenter.on_navigation(order_id, True):
        view.raise_if_failed()
    await _review(presenter, view, body)
    data = OrderDetailsOut.from_domain(_shown(view), is_new=presenter.is_new, review=True)
    return respond(request, data.model_dump())


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    edit: bool = Query(False),
) -> ApiResponse:
    presenter, view = _build(current_user, db)
    await presenter.on_navigation(order_id, edit)
    view.raise_if_failed()
    return respond(request, OrderDetailsOut.from_domain(_shown(view)).model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    request: Request,
    body: OrderForm,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    presenter, view = _build(current_user, db, body)
    await presenter.create_new_order()
    await _review(presenter, view, body)
    await presenter.save()
    view.raise_if_failed()
    data = OrderDetailsOut.from_domain(presenter.saved)  # type: ignore[arg-type]
    return respond(request, data.model_dump(), view.info[-1])


@router.put("/{order_id}")
async def update_order(
    order_id: int,
    request: Request,
    body: OrderUpdateForm,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    presenter, view = _build(current_user, db, body)
    if not await presenter.on_navigation(order_id, True):
        view.raise_if_failed()
    await _review(presenter, view, body)
    await presenter.save()
    view.raise_if_failed()
    data = OrderDetailsOut.from_domain(presenter.saved)  # type: ignore[arg-type]
    return respond(request, data.model_dump(), view.info[-1])


@router.post("/{order_id}/comments")
async def add_comment(
    order_id: int,
    request: Request,
    body: CommentForm,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    presenter, view = _build(current_user, db)
    if await presenter.on_navigation(order_id, False):
        await presenter.add_comment(body.message)
    view.raise_if_failed()
    return respond(request, OrderDetailsOut.from_domain(_shown(view)).model_dump())


@router.delete("/{order_id}")
async def delete_order(
    order_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    confirm: bool = Query(False),
) -> ApiResponse:
    order = await delete_entity(_service, current_user, db, order_id, confirm)
    return respond(request, {"id": order.id}, "Order deleted")
