"""Pydantic schemas for the user admin screen."""

from pydantic import BaseModel, EmailStr, Field

from src.bk_common.enums import Role
from src.bk_common.errors import RequiredFieldsMissingError
from src.bk_crud.service import Page
from src.bk_gateway.auth.password import hash_password
from src.bk_user.domain.models import User


class UserForm(BaseModel):
    """Editable user fields."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    role: Role
    password: str | None = Field(None, min_length=4, max_length=255)
    locked: bool = False

    def write_to(self, entity: User) -> None:
        if self.password:
            entity.password_hash = hash_password(self.password)
        elif entity.id is None:
            # a new account needs a password; existing ones keep theirs
            raise RequiredFieldsMissingError("Password is required for a new user")
        entity.email = self.email
        entity.first_name = self.first_name
        entity.last_name = self.last_name
        entity.role = self.role.value
        entity.locked = self.locked


class UserUpdateForm(UserForm):
    """``version`` is the value the client last read."""

    version: int = Field(..., ge=0)

    def write_to(self, entity: User) -> None:
        super().write_to(entity)
        entity.version = self.version


class UserOut(BaseModel):
    id: int
    version: int
    email: str
    first_name: str
    last_name: str
    role: str
    locked: bool

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,  # type: ignore[arg-type]
            version=user.version,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            locked=user.locked,
        )


class UserListResponse(BaseModel):
    items: list[UserOut]
    total: int
    page: int
    size: int
    has_more: bool

    @classmethod
    def from_page(cls, page: Page[User]) -> "UserListResponse":
        return cls(
            items=[UserOut.from_domain(u) for u in page.items],
            total=page.total,
            page=page.page,
            size=page.size,
            has_more=page.has_more,
        )
