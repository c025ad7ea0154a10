"""``/users`` routes."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request, status

from taskboard.core.types import User
from taskboard.dependencies import UserRepositoryDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(request: Request, users: UserRepositoryDep) -> list[User]:
    """Filter with ``role``, ``department``, ``active`` and ``search``."""
    return await users.list(dict(request.query_params))


@router.get("/active/list")
async def active_users(users: UserRepositoryDep) -> list[User]:
    return await users.list_active()


@router.get("/role/{role}")
async def users_by_role(role: str, users: UserRepositoryDep) -> list[User]:
    return await users.list_by_role(role)


@router.get("/{user_id}")
async def get_user(user_id: str, users: UserRepositoryDep) -> User:
    return await users.get_by_id(user_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(users: UserRepositoryDep, payload: Any = Body(None)) -> User:
    return await users.create(payload)


@router.put("/{user_id}")
async def update_user(user_id: str, users: UserRepositoryDep, payload: Any = Body(None)) -> User:
    return await users.update(user_id, payload)


@router.delete("/{user_id}")
async def delete_user(user_id: str, users: UserRepositoryDep) -> dict[str, str]:
    await users.delete(user_id)
    return {"message": "User deleted successfully"}


@router.post("/{user_id}/login")
async def record_login(user_id: str, users: UserRepositoryDep) -> User:
    return await users.touch_last_login(user_id)
