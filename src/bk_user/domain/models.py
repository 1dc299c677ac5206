"""User domain model — pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass

from src.bk_common.entity import AbstractEntity
from src.bk_common.enums import Role
from src.bk_common.errors import RequiredFieldsMissingError


@dataclass(kw_only=True)
class User(AbstractEntity):
    email: str = ""
    password_hash: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = Role.BARISTA.value
    locked: bool = False  # demo accounts; locked users cannot be edited or deleted

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def validate(self) -> None:
        missing = [
            name
            for name in ("email", "password_hash", "first_name", "last_name", "role")
            if not getattr(self, name)
        ]
        if missing:
            raise RequiredFieldsMissingError(f"Missing user fields: {', '.join(missing)}")
