"""List Routes — owner-scoped CRUD over lists.

Invariants:
    - Every route requires a session token
    - The owner of a new list is always the requester, never the body
"""

from fastapi import APIRouter, Depends, status

from tasklist.api.dependencies import get_current_user, get_list_service
from tasklist.schemas.envelope import Envelope
from tasklist.schemas.task_list import ListCreate, ListResponse, ListUpdate
from tasklist.services.list_service import ListService
from tasklist.services.token_service import SessionClaims

router = APIRouter(prefix="/api/list", tags=["list"])


@router.post(
    "", response_model=Envelope[ListResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_list(
    body: ListCreate,
    claims: SessionClaims = Depends(get_current_user),
    lists: ListService = Depends(get_list_service),
):
    task_list = await lists.create_list(claims.user_id, body)
    return Envelope(
        status=201, message="List created successfully",
        data=ListResponse.model_validate(task_list),
    )


@router.get("", response_model=Envelope[list[ListResponse]])
async def get_lists(
    claims: SessionClaims = Depends(get_current_user),
    lists: ListService = Depends(get_list_service),
):
    found = await lists.get_lists()
    return Envelope(
        status=200, message="Lists found",
        data=[ListResponse.model_validate(tl) for tl in found],
    )


@router.get("/{list_id}", response_model=Envelope[ListResponse])
async def get_list_by_id(
    list_id: str,
    claims: SessionClaims = Depends(get_current_user),
    lists: ListService = Depends(get_list_service),
):
    task_list = await lists.get_list_by_id(claims.user_id, list_id)
    return Envelope(
        status=200, message="List found",
        data=ListResponse.model_validate(task_list),
    )


@router.put("/{list_id}", response_model=Envelope[ListResponse])
async def update_list(
    list_id: str,
    body: ListUpdate,
    claims: SessionClaims = Depends(get_current_user),
    lists: ListService = Depends(get_list_service),
):
    task_list = await lists.update_list(claims.user_id, list_id, body)
    return Envelope(
        status=200, message="List updated successfully",
        data=ListResponse.model_validate(task_list),
    )


@router.delete("/{list_id}", response_model=Envelope[None])
async def delete_list(
    list_id: str,
    claims: SessionClaims = Depends(get_current_user),
    lists: ListService = Depends(get_list_service),
):
    await lists.delete_list(claims.user_id, list_id)
    return Envelope(status=200, message="List deleted successfully")
