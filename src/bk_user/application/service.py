"""UserService — CRUD for bakery staff accounts.

Writes commit on success and roll back on any failure. Locked accounts
(the demo users) can be neither modified nor deleted, and nobody can delete
the account they are signed in with.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import EntityNotFoundError, UserFriendlyDataError
from src.bk_crud.service import Page
from src.bk_user.domain.models import User
from src.bk_user.domain.repository import UserRepositoryProtocol
from src.bk_user.infrastructure.persistence import UserRepository

MODIFY_LOCKED_USER_NOT_PERMITTED = "User has been locked and cannot be modified or deleted"
DELETE_SELF_NOT_PERMITTED = "You cannot delete your own account"


class UserService:
    def __init__(self, repo: UserRepositoryProtocol | None = None) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    def create_new(self, actor: User) -> User:
        return User()

    async def load(self, db: AsyncSession, entity_id: int) -> User:
        user = await self._repo.get_by_id(db, entity_id)
        if user is None:
            raise EntityNotFoundError("User", entity_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        return await self._repo.get_by_email(db, email)

    async def save(self, db: AsyncSession, actor: User, entity: User) -> User:
        if entity.id is not None:
            await self._throw_if_user_locked(db, entity.id)
        try:
            if entity.id is None:
                saved = await self._repo.insert(db, entity)
            else:
                saved = await self._repo.update(db, entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return saved

    async def delete(self, db: AsyncSession, actor: User, entity: User) -> None:
        if actor.id is not None and actor.id == entity.id:
            raise UserFriendlyDataError(DELETE_SELF_NOT_PERMITTED)
        await self._throw_if_user_locked(db, entity.id)
        try:
            await self._repo.delete(db, entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def find_any_matching(
        self, db: AsyncSession, filter_text: str | None, page: int, size: int
    ) -> Page[User]:
        filter_text = filter_text or None
        items = await self._repo.find_matching(db, filter_text, page * size, size)
        total = await self._repo.count_matching(db, filter_text)
        return Page(items=items, total=total, page=page, size=size)

    async def count_any_matching(self, db: AsyncSession, filter_text: str | None) -> int:
        return await self._repo.count_matching(db, filter_text or None)

    async def _throw_if_user_locked(self, db: AsyncSession, user_id: int | None) -> None:
        # The stored flag decides; a client cannot unlock by submitting locked=False
        if user_id is None:
            return
        stored = await self._repo.get_by_id(db, user_id)
        if stored is not None and stored.locked:
            raise UserFriendlyDataError(MODIFY_LOCKED_USER_NOT_PERMITTED)
