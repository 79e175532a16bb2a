from fastapi import APIRouter, HTTPException, status, Response
from pymongo.errors import DuplicateKeyError
from typing import List
from .schemas import EntryCreateRequest, EntryUpdateRequest, EntryResponse
from .utils import list_entries_from_db, create_entry_in_db, get_entry_by_storage_id, update_entry_in_db
from dsa_notebook.database.mongo import log_error

router = APIRouter(prefix="/api/entries", tags=["entries"])

@router.get("", response_model=List[EntryResponse])
async def list_entries():
    """
    List every entry, sorted by print order.
    """
    try:
        return await list_entries_from_db()
    except Exception as e:
        await log_error(
            error=e,
            location="entries/routes.py - list_entries"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load entries"
        )

@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(entry_request: EntryCreateRequest, response: Response):
    """
    Create a new study entry.

    Args:
        entry_request: Entry content plus its client-assigned id
        response: FastAPI response object to set headers

    Returns:
        EntryResponse with the stored entry
    """
    try:
        entry = await create_entry_in_db(entry_request)
        response.headers["Location"] = f"/api/entries/{entry.storage_id}"
        return entry

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except DuplicateKeyError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Entry with id {entry_request.id} already exists"
        )
    except Exception as e:
        await log_error(
            error=e,
            location="entries/routes.py - create_entry",
            additional_info={"id": entry_request.id}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create entry. Please try again."
        )

@router.get("/{entry_object_id}", response_model=EntryResponse)
async def get_entry(entry_object_id: str):
    """
    Retrieve an entry by its storage id.
    """
    try:
        entry = await get_entry_by_storage_id(entry_object_id)

        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Entry {entry_object_id} not found"
            )

        return entry

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        await log_error(
            error=e,
            location="entries/routes.py - get_entry",
            additional_info={"entry_object_id": entry_object_id}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve entry"
        )

@router.put("/{entry_object_id}", response_model=EntryResponse)
async def update_entry(entry_object_id: str, update_request: EntryUpdateRequest):
    """
    Replace the given fields of an entry addressed by its storage id.

    Args:
        entry_object_id: MongoDB _id of the entry
        update_request: Fields to replace, unset fields are left alone

    Returns:
        EntryResponse with the updated entry
    """
    try:
        entry = await update_entry_in_db(entry_object_id, update_request)

        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Entry {entry_object_id} not found"
            )

        return entry

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        await log_error(
            error=e,
            location="entries/routes.py - update_entry",
            additional_info={"entry_object_id": entry_object_id}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update entry"
        )
