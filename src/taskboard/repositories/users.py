"""User repository — CRUD, login stamping and role listings."""
from __future__ import annotations

from taskboard.core.types import EntityKind, User, UserRole, utcnow
from taskboard.query.builder import active_users, users_by_role
from taskboard.query.predicates import Eq
from taskboard.repositories.base import Repository


class UserRepository(Repository[User]):
    """Tasks reference users by name (``Task.assigned_to``), not by id."""

    kind = EntityKind.USERS
    model = User

    async def count_tasks(self, user_id: str) -> int:
        user = await self._get(user_id)
        return await self.store.count(EntityKind.TASKS, Eq("assigned_to", user.name))

    async def get_by_id(self, entity_id: str) -> User:
        user = await self._get(entity_id)
        count = await self.store.count(EntityKind.TASKS, Eq("assigned_to", user.name))
        return user.model_copy(update={"task_count": count})

    async def touch_last_login(self, user_id: str) -> User:
        return await self.update(user_id, {"last_login": utcnow()})

    async def list_active(self) -> list[User]:
        return await self._find(active_users())

    async def list_by_role(self, role: UserRole | str) -> list[User]:
        """Active users holding *role*, by name."""
        return await self._find(users_by_role(role))


__all__ = ["UserRepository"]
