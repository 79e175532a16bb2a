from fastapi import APIRouter, HTTPException, status
from pymongo.errors import DuplicateKeyError
from typing import List
from .schemas import GroupCreateRequest, GroupResponse
from .utils import list_groups_from_db, create_group_in_db
from dsa_notebook.database.mongo import log_error

router = APIRouter(prefix="/api/groups", tags=["groups"])

@router.get("", response_model=List[GroupResponse])
async def list_groups():
    """
    List every print folder, sorted by print order.
    """
    try:
        return await list_groups_from_db()
    except Exception as e:
        await log_error(
            error=e,
            location="groups/routes.py - list_groups"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load folders"
        )

@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(group_request: GroupCreateRequest):
    """
    Create a print folder. Folders are written as soon as they are created,
    independently of the bulk save-order call.

    Args:
        group_request: Folder id, name and print order

    Returns:
        GroupResponse with the stored folder
    """
    try:
        return await create_group_in_db(group_request)

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except DuplicateKeyError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Folder with id {group_request.id} already exists"
        )
    except Exception as e:
        await log_error(
            error=e,
            location="groups/routes.py - create_group",
            additional_info=group_request.model_dump()
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create folder."
        )
