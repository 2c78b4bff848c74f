"""ToDo Routes — to-do CRUD authorized through the owning list.

Invariants:
    - Every route requires a session token
    - GET /api/todo is admin-only (ForbiddenError from the service)
"""

from fastapi import APIRouter, Depends, status

from tasklist.api.dependencies import get_current_user, get_todo_service
from tasklist.schemas.envelope import Envelope
from tasklist.schemas.task_list import ListWithItemsResponse
from tasklist.schemas.todo import ToDoCreate, ToDoResponse, ToDoUpdate
from tasklist.services.todo_service import ToDoService
from tasklist.services.token_service import SessionClaims

router = APIRouter(prefix="/api/todo", tags=["todo"])


@router.post(
    "/{list_id}", response_model=Envelope[ToDoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_todo(
    list_id: str,
    body: ToDoCreate,
    claims: SessionClaims = Depends(get_current_user),
    todos: ToDoService = Depends(get_todo_service),
):
    todo = await todos.create_todo(list_id, claims.user_id, body)
    return Envelope(
        status=201, message="ToDo created successfully",
        data=ToDoResponse.model_validate(todo),
    )


@router.get("", response_model=Envelope[list[ToDoResponse]])
async def get_todos(
    claims: SessionClaims = Depends(get_current_user),
    todos: ToDoService = Depends(get_todo_service),
):
    found = await todos.get_todos(claims.user_id)
    return Envelope(
        status=200, message="ToDos found",
        data=[ToDoResponse.model_validate(t) for t in found],
    )


@router.get("/list/{list_id}", response_model=Envelope[ListWithItemsResponse])
async def get_todos_by_list_id(
    list_id: str,
    claims: SessionClaims = Depends(get_current_user),
    todos: ToDoService = Depends(get_todo_service),
):
    task_list = await todos.get_todos_by_list_id(claims.user_id, list_id)
    return Envelope(
        status=200, message="ToDos found",
        data=ListWithItemsResponse.model_validate(task_list),
    )


@router.get("/{todo_id}", response_model=Envelope[ToDoResponse])
async def get_todo_by_id(
    todo_id: str,
    claims: SessionClaims = Depends(get_current_user),
    todos: ToDoService = Depends(get_todo_service),
):
    todo = await todos.get_todo_by_id(claims.user_id, todo_id)
    return Envelope(
        status=200, message="ToDo found", data=ToDoResponse.model_validate(todo),
    )


@router.put("/{todo_id}", response_model=Envelope[ToDoResponse])
async def update_todo(
    todo_id: str,
    body: ToDoUpdate,
    claims: SessionClaims = Depends(get_current_user),
    todos: ToDoService = Depends(get_todo_service),
):
    todo = await todos.update_todo(todo_id, claims.user_id, body)
    return Envelope(
        status=200, message="ToDo updated successfully",
        data=ToDoResponse.model_validate(todo),
    )


@router.delete("/{todo_id}", response_model=Envelope[ToDoResponse])
async def delete_todo(
    todo_id: str,
    claims: SessionClaims = Depends(get_current_user),
    todos: ToDoService = Depends(get_todo_service),
):
    todo = await todos.delete_todo(claims.user_id, todo_id)
    return Envelope(
        status=200, message="ToDo deleted successfully",
        data=ToDoResponse.model_validate(todo),
    )
