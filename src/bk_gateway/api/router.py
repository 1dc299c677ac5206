"""Auth API router: login.

Returns ApiResponse with the access token and a summary of the user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse
from src.bk_crud.api import respond
from src.bk_gateway.application.schemas import LoginRequest, LoginResponse, UserInfo
from src.bk_gateway.application.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = AuthService()


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Staff login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user, access_token = await _service.login(db, body.email, body.password)

    data = LoginResponse(
        access_token=access_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo(
            user_id=user.id,  # type: ignore[arg-type]
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
        ),
    )
    return respond(request, data.model_dump(), "Login successful")
