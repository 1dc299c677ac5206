"""User admin endpoints (admin role only).

GET    /users              — filtered, paged list
GET    /users/{id}         — one user
POST   /users              — create
PUT    /users/{id}         — update (optimistic lock on ``version``)
DELETE /users/{id}         — delete; requires ?confirm=true
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse
from src.bk_crud.api import create_entity, delete_entity, load_entity, respond, update_entity
from src.bk_gateway.auth.dependencies import require_admin
from src.bk_user.application.schemas import (
    UserForm,
    UserListResponse,
    UserOut,
    UserUpdateForm,
)
from src.bk_user.application.service import UserService
from src.bk_user.domain.models import User

router = APIRouter(prefix="/users", tags=["users"])

_service = UserService()


@router.get("")
async def list_users(
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    filter: str | None = Query(None, description="Matches email, name or role"),
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ApiResponse:
    result = await _service.find_any_matching(db, filter, page, size)
    return respond(request, UserListResponse.from_page(result).model_dump())


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await load_entity(_service, current_user, db, user_id)
    return respond(request, UserOut.from_domain(user).model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    body: UserForm,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await create_entity(_service, current_user, db, body)
    return respond(request, UserOut.from_domain(user).model_dump(), "User created")


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    request: Request,
    body: UserUpdateForm,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await update_entity(_service, current_user, db, user_id, body)
    return respond(request, UserOut.from_domain(user).model_dump(), "User updated")


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    confirm: bool = Query(False),
) -> ApiResponse:
    user = await delete_entity(_service, current_user, db, user_id, confirm)
    return respond(request, {"id": user.id}, "User deleted")
