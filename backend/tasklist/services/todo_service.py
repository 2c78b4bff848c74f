"""ToDo Service — CRUD over to-dos with ownership resolved through the owning list.

Invariants:
    - A to-do's owner is the owner of the list whose item set contains it (owner resolution)
    - An unreferenced (orphan) to-do is NotFound for every requester
    - create: list must exist and be owned by the requester; to-do row and item-set
      row are written in one commit
    - delete: resolve the owning list first, then remove that list's item and the
      to-do in one commit (no dangling item ids)
    - get_todos is admin-only (ForbiddenError otherwise) and unscoped
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.domain_types import ListId, ToDoId, UserId
from tasklist.core.enforce_access import check_admin, check_owner, parse_id
from tasklist.core.errors import NotFoundError
from tasklist.infrastructure.error_adapter import persistence_boundary
from tasklist.models.task_list import TaskList, list_items
from tasklist.models.todo import ToDo
from tasklist.models.user import User
from tasklist.schemas.todo import ToDoCreate, ToDoUpdate

logger = logging.getLogger(__name__)


class ToDoService:
    """To-do operations authorized through list ownership."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_todo(
        self, list_id: str | ListId, requester_id: UserId, data: ToDoCreate,
    ) -> ToDo:
        task_list = await self._load_list(list_id)
        check_owner(
            task_list.owner_id, requester_id,
            "You are not allowed to create a ToDo in this list, try creating a new list",
        )
        async with persistence_boundary(self.db):
            todo = ToDo(name=data.name, done=data.done)
            task_list.items.append(todo)
            await self.db.commit()
        logger.info(
            "ToDo created",
            extra={"todo_id": todo.id, "list_id": task_list.id, "user_id": requester_id},
        )
        return todo

    async def get_todos(self, requester_id: UserId) -> list[ToDo]:
        async with persistence_boundary(self.db):
            requester = await self.db.get(User, requester_id)
        check_admin(requester.role if requester else "")
        async with persistence_boundary(self.db):
            result = await self.db.execute(select(ToDo).order_by(ToDo.created_at))
            return list(result.scalars().all())

    async def get_todos_by_list_id(
        self, requester_id: UserId, list_id: str | ListId,
    ) -> TaskList:
        """Return the list with its items resolved."""
        task_list = await self._load_list(list_id)
        check_owner(
            task_list.owner_id, requester_id,
            "You are not allowed to view this list because it's not yours, "
            "try creating a new list",
        )
        return task_list

    async def get_todo_by_id(self, requester_id: UserId, todo_id: str | ToDoId) -> ToDo:
        owning_list, todo = await self._resolve(todo_id)
        check_owner(
            owning_list.owner_id, requester_id,
            "You are not allowed to view this ToDo",
        )
        return todo

    async def update_todo(
        self, todo_id: str | ToDoId, requester_id: UserId, patch: ToDoUpdate,
    ) -> ToDo:
        owning_list, todo = await self._resolve(todo_id)
        check_owner(
            owning_list.owner_id, requester_id,
            "You are not allowed to update this ToDo",
        )
        async with persistence_boundary(self.db):
            for field, value in patch.model_dump(exclude_unset=True).items():
                setattr(todo, field, value)
            await self.db.commit()
        return todo

    async def delete_todo(self, requester_id: UserId, todo_id: str | ToDoId) -> ToDo:
        owning_list, todo = await self._resolve(todo_id)
        check_owner(
            owning_list.owner_id, requester_id,
            "You are not allowed to delete this ToDo",
        )
        async with persistence_boundary(self.db):
            owning_list.items.remove(todo)
            await self.db.delete(todo)
            await self.db.commit()
        logger.info(
            "ToDo deleted",
            extra={"todo_id": todo.id, "list_id": owning_list.id, "user_id": requester_id},
        )
        return todo

    # ─── Owner resolution ───────────────────────────────────────

    async def find_owning_list(self, todo_id: ToDoId) -> TaskList | None:
        """The list whose item set contains todo_id, if any."""
        async with persistence_boundary(self.db):
            result = await self.db.execute(
                select(TaskList)
                .join(list_items, list_items.c.list_id == TaskList.id)
                .where(list_items.c.todo_id == todo_id),
            )
            return result.scalar_one_or_none()

    async def _resolve(self, raw_id: str | ToDoId) -> tuple[TaskList, ToDo]:
        """Resolve (owning list, to-do) or raise NotFoundError.

        The to-do is taken from the owning list's own items, so later writes
        act on exactly the row the authorization was decided on.
        """
        todo_id = parse_id(raw_id, "ToDo")
        owning_list = await self.find_owning_list(todo_id)
        if owning_list is None:
            raise NotFoundError("ToDo not found")
        todo = next((t for t in owning_list.items if t.id == todo_id), None)
        if todo is None:
            raise NotFoundError("ToDo not found")
        return owning_list, todo

    async def _load_list(self, raw_id: str | ListId) -> TaskList:
        list_id = parse_id(raw_id, "list")
        async with persistence_boundary(self.db):
            task_list = await self.db.get(TaskList, list_id)
        if task_list is None:
            raise NotFoundError("List not found")
        return task_list
