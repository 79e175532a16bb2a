from dsa_notebook.database.mongo import get_db, log_error, ENTRIES_COLLECTION, GROUPS_COLLECTION
from dsa_notebook.core.schemas import UNORGANIZED_GROUP_ID
from typing import List, Optional
from bson import ObjectId
from pymongo import ReturnDocument
from .schemas import EntryCreateRequest, EntryUpdateRequest, EntryResponse


# Text fields can be cleared with null, lists and ordering fields cannot
NULLABLE_FIELDS = {"title", "intuition", "dryRun", "timeComplexity", "spaceComplexity", "code"}


def parse_storage_id(entry_object_id: str) -> ObjectId:
    """Convert a storage id string to an ObjectId, raising ValueError when malformed."""
    if not ObjectId.is_valid(entry_object_id):
        raise ValueError(f"Invalid entry identifier: {entry_object_id}")
    return ObjectId(entry_object_id)


async def ensure_group_exists(db, parent_id: str) -> None:
    """Entries may only point at an existing folder or the unorganized sentinel."""
    if parent_id == UNORGANIZED_GROUP_ID:
        return
    group = await db[GROUPS_COLLECTION].find_one({"id": parent_id}, {"_id": 1})
    if not group:
        raise ValueError(f"Folder {parent_id} does not exist")


async def list_entries_from_db() -> List[EntryResponse]:
    try:
        db = await get_db()
        # _id grows with insertion time, so ties on printOrder keep insertion order
        docs = await db[ENTRIES_COLLECTION].find({}).sort(
            [("printOrder", 1), ("_id", 1)]
        ).to_list(length=None)
        return [EntryResponse.model_validate(doc) for doc in docs]

    except Exception as e:
        await log_error(
            error=e,
            location="entries/utils.py - list_entries_from_db"
        )
        raise


async def create_entry_in_db(entry_request: EntryCreateRequest) -> EntryResponse:
    try:
        db = await get_db()
        await ensure_group_exists(db, entry_request.parent_id)

        doc = entry_request.model_dump(by_alias=True, exclude_none=True)

        # DuplicateKeyError propagates to the route, the unique index on id rejects repeats
        result = await db[ENTRIES_COLLECTION].insert_one(doc)
        if not result.inserted_id:
            raise Exception("Database insertion failed")

        doc["_id"] = result.inserted_id
        return EntryResponse.model_validate(doc)

    except ValueError:
        raise
    except Exception as e:
        await log_error(
            error=e,
            location="entries/utils.py - create_entry_in_db",
            additional_info={"id": entry_request.id}
        )
        raise


async def get_entry_by_storage_id(entry_object_id: str) -> Optional[EntryResponse]:
    object_id = parse_storage_id(entry_object_id)
    try:
        db = await get_db()
        doc = await db[ENTRIES_COLLECTION].find_one({"_id": object_id})

        if not doc:
            return None

        return EntryResponse.model_validate(doc)

    except Exception as e:
        await log_error(
            error=e,
            location="entries/utils.py - get_entry_by_storage_id",
            additional_info={"entry_object_id": entry_object_id}
        )
        raise


async def update_entry_in_db(entry_object_id: str, update_request: EntryUpdateRequest) -> Optional[EntryResponse]:
    object_id = parse_storage_id(entry_object_id)
    try:
        db = await get_db()
        fields = {
            key: value
            for key, value in update_request.model_dump(by_alias=True, exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }

        if "parentId" in fields:
            await ensure_group_exists(db, fields["parentId"])

        if not fields:
            doc = await db[ENTRIES_COLLECTION].find_one({"_id": object_id})
        else:
            doc = await db[ENTRIES_COLLECTION].find_one_and_update(
                {"_id": object_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER
            )

        if not doc:
            return None

        return EntryResponse.model_validate(doc)

    except ValueError:
        raise
    except Exception as e:
        await log_error(
            error=e,
            location="entries/utils.py - update_entry_in_db",
            additional_info={"entry_object_id": entry_object_id}
        )
        raise
