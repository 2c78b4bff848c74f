"""List Service — CRUD over lists with single-owner access control.

Invariants:
    - get/update/delete: malformed id -> InvalidIdError, absent -> NotFoundError,
      requester != owner -> UnauthorizedError, checked in that order
    - create binds the list to the requester with an empty item set
    - delete releases the owner's reference and removes the list, its
      list_items rows and its to-dos in one commit
    - get_lists is unscoped (returns every list)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.domain_types import ListId, UserId
from tasklist.core.enforce_access import check_owner, parse_id
from tasklist.core.errors import NotFoundError
from tasklist.infrastructure.error_adapter import persistence_boundary
from tasklist.models.task_list import TaskList
from tasklist.models.user import User
from tasklist.schemas.task_list import ListCreate, ListUpdate

logger = logging.getLogger(__name__)


class ListService:
    """Owner-scoped list operations on one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_list(self, owner_id: UserId, data: ListCreate) -> TaskList:
        """Persist a new list owned by owner_id. Duplicate names -> DuplicateKeyError."""
        async with persistence_boundary(self.db):
            owner = await self.db.get(User, owner_id)
            if owner is None:
                raise NotFoundError("User not found")
            task_list = TaskList(name=data.name, owner_id=owner_id, items=[])
            owner.lists.append(task_list)
            await self.db.commit()
        logger.info(
            "List created",
            extra={"list_id": task_list.id, "user_id": owner_id},
        )
        return task_list

    async def get_lists(self) -> list[TaskList]:
        # TODO: filter by owner_id once browsing every user's lists is confirmed unintended
        async with persistence_boundary(self.db):
            result = await self.db.execute(
                select(TaskList).order_by(TaskList.created_at),
            )
            return list(result.scalars().all())

    async def get_list_by_id(self, requester_id: UserId, list_id: str | ListId) -> TaskList:
        task_list = await self._load(list_id)
        check_owner(
            task_list.owner_id, requester_id,
            "You are not authorized to access this list, because you're not the owner",
        )
        return task_list

    async def update_list(
        self, requester_id: UserId, list_id: str | ListId, patch: ListUpdate,
    ) -> TaskList:
        task_list = await self._load(list_id)
        check_owner(
            task_list.owner_id, requester_id,
            "You are not authorized to update this list, because you're not the owner",
        )
        async with persistence_boundary(self.db):
            for field, value in patch.model_dump(exclude_unset=True).items():
                setattr(task_list, field, value)
            await self.db.commit()
        return task_list

    async def delete_list(self, requester_id: UserId, list_id: str | ListId) -> None:
        task_list = await self._load(list_id)
        check_owner(
            task_list.owner_id, requester_id,
            "You are not authorized to delete this list, because you're not the owner",
        )
        async with persistence_boundary(self.db):
            owner = await self.db.get(User, task_list.owner_id)
            if owner is not None and task_list in owner.lists:
                owner.lists.remove(task_list)
            await self.db.delete(task_list)
            await self.db.commit()
        logger.info(
            "List deleted",
            extra={"list_id": task_list.id, "user_id": requester_id},
        )

    async def _load(self, raw_id: str | ListId) -> TaskList:
        list_id = parse_id(raw_id, "list")
        async with persistence_boundary(self.db):
            task_list = await self.db.get(TaskList, list_id)
        if task_list is None:
            raise NotFoundError("List not found")
        return task_list
