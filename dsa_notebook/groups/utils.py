from dsa_notebook.database.mongo import get_db, log_error, GROUPS_COLLECTION
from dsa_notebook.core.schemas import UNORGANIZED_GROUP_ID
from typing import List
from .schemas import GroupCreateRequest, GroupResponse


async def list_groups_from_db() -> List[GroupResponse]:
    try:
        db = await get_db()
        docs = await db[GROUPS_COLLECTION].find({}).sort(
            [("printOrder", 1), ("_id", 1)]
        ).to_list(length=None)
        return [GroupResponse.model_validate(doc) for doc in docs]

    except Exception as e:
        await log_error(
            error=e,
            location="groups/utils.py - list_groups_from_db"
        )
        raise


async def create_group_in_db(group_request: GroupCreateRequest) -> GroupResponse:
    if group_request.id == UNORGANIZED_GROUP_ID:
        raise ValueError(f"'{UNORGANIZED_GROUP_ID}' is a reserved folder id")

    try:
        db = await get_db()
        doc = group_request.model_dump(by_alias=True)

        result = await db[GROUPS_COLLECTION].insert_one(doc)
        if not result.inserted_id:
            raise Exception("Database insertion failed")

        doc["_id"] = result.inserted_id
        return GroupResponse.model_validate(doc)

    except Exception as e:
        await log_error(
            error=e,
            location="groups/utils.py - create_group_in_db",
            additional_info=group_request.model_dump()
        )
        raise
