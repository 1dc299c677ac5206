"""Pydantic request/response schemas for the login endpoint."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class UserInfo(BaseModel):
    """Minimal user info embedded in the login response."""

    user_id: int
    email: str
    first_name: str
    last_name: str
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserInfo
