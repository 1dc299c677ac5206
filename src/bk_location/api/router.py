"""Pickup location endpoints.

GET    /pickup-locations          — filtered, paged list (any signed-in user)
GET    /pickup-locations/{id}     — one location (admin)
POST   /pickup-locations          — create (admin)
PUT    /pickup-locations/{id}     — update, optimistic lock on ``version`` (admin)
DELETE /pickup-locations/{id}     — delete, requires ?confirm=true (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse
from src.bk_crud.api import create_entity, delete_entity, load_entity, respond, update_entity
from src.bk_gateway.auth.dependencies import get_current_user, require_admin
from src.bk_location.application.schemas import (
    PickupLocationForm,
    PickupLocationListResponse,
    PickupLocationOut,
    PickupLocationUpdateForm,
)
from src.bk_location.application.service import PickupLocationService
from src.bk_user.domain.models import User

router = APIRouter(prefix="/pickup-locations", tags=["pickup-locations"])

_service = PickupLocationService()


@router.get("")
async def list_pickup_locations(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    filter: str | None = Query(None),
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ApiResponse:
    result = await _service.find_any_matching(db, filter, page, size)
    return respond(request, PickupLocationListResponse.from_page(result).model_dump())


@router.get("/{location_id}")
async def get_pickup_location(
    location_id: int,
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    location = await load_entity(_service, current_user, db, location_id)
    return respond(request, PickupLocationOut.from_domain(location).model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_pickup_location(
    request: Request,
    body: PickupLocationForm,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    location = await create_entity(_service, current_user, db, body)
    return respond(
        request, PickupLocationOut.from_domain(location).model_dump(), "Pickup location created"
    )


@router.put("/{location_id}")
async def update_pickup_location(
    location_id: int,
    request: Request,
    body: PickupLocationUpdateForm,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    location = await update_entity(_service, current_user, db, location_id, body)
    return respond(
        request, PickupLocationOut.from_domain(location).model_dump(), "Pickup location updated"
    )


@router.delete("/{location_id}")
async def delete_pickup_location(
    location_id: int,
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    confirm: bool = Query(False),
) -> ApiResponse:
    location = await delete_entity(_service, current_user, db, location_id, confirm)
    return respond(request, {"id": location.id}, "Pickup location deleted")
