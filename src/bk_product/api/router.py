"""Product catalogue endpoints.

GET    /products           — filtered, paged list (any signed-in user; the
                             order form picks products from it)
GET    /products/{id}      — one product (admin)
POST   /products           — create (admin)
PUT    /products/{id}      — update, optimistic lock on ``version`` (admin)
DELETE /products/{id}      — delete, requires ?confirm=true (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse
from src.bk_crud.api import create_entity, delete_entity, load_entity, respond, update_entity
from src.bk_gateway.auth.dependencies import get_current_user, require_admin
from src.bk_product.application.schemas import (
    ProductForm,
    ProductListResponse,
    ProductOut,
    ProductUpdateForm,
)
from src.bk_product.application.service import ProductService
from src.bk_user.domain.models import User

router = APIRouter(prefix="/products", tags=["products"])

_service = ProductService()


@router.get("")
async def list_products(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    filter: str | None = Query(None, description="Case-insensitive name fragment"),
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ApiResponse:
    result = await _service.find_any_matching(db, filter, page, size)
    return respond(request, ProductListResponse.from_page(result).model_dump())


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    product = await load_entity(_service, current_user, db, product_id)
    return respond(request, ProductOut.from_domain(product).model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    request: Request,
    body: ProductForm,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    product = await create_entity(_service, current_user, db, body)
    return respond(request, ProductOut.from_domain(product).model_dump(), "Product created")


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    request: Request,
    body: ProductUpdateForm,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    product = await update_entity(_service, current_user, db, product_id, body)
    return respond(request, ProductOut.from_domain(product).model_dump(), "Product updated")


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    confirm: bool = Query(False),
) -> ApiResponse:
    product = await delete_entity(_service, current_user, db, product_id, confirm)
    return respond(request, {"id": product.id}, "Product deleted")
