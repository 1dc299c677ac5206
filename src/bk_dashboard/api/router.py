# src/bk_dashboard/api/router.py
"""Dashboard REST API (admin only)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse
from src.bk_crud.api import respond
from src.bk_dashboard.application.schemas import DashboardOut
from src.bk_dashboard.application.service import DashboardService
from src.bk_gateway.auth.dependencies import require_admin
from src.bk_user.domain.models import User

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
_service = DashboardService()


@router.get("")
async def get_dashboard(
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    counters = await _service.get_counters(db)
    data = await _service.get_dashboard_data(db)
    return respond(request, DashboardOut.from_domain(counters, data).model_dump())
