from dsa_notebook.database.mongo import get_db, log_error, ENTRIES_COLLECTION, GROUPS_COLLECTION
from dsa_notebook.core.schemas import UNORGANIZED_GROUP_ID
from pymongo import UpdateOne
from typing import Iterable, Set
from .schemas import SaveOrderRequest, SaveOrderResponse, ResetOrderResponse


async def _existing_ids(collection, ids: Iterable[str]) -> Set[str]:
    """Return the subset of ids that exist in the collection."""
    ids = list(ids)
    if not ids:
        return set()
    docs = await collection.find({"id": {"$in": ids}}, {"_id": 0, "id": 1}).to_list(length=None)
    return {doc["id"] for doc in docs}


async def save_order_in_db(order_request: SaveOrderRequest) -> SaveOrderResponse:
    """
    Apply a save-order batch as independent per-record updates.

    Records pointing at unknown entries or folders are skipped, entries whose
    parentId is neither a stored folder nor "unorganized" are skipped as well.
    An entry sent without parentId keeps its folder.
    Everything else is written with one bulk_write per collection.
    """
    try:
        db = await get_db()
        entries = db[ENTRIES_COLLECTION]
        groups = db[GROUPS_COLLECTION]

        known_entries = await _existing_ids(entries, (item.id for item in order_request.entries))
        known_groups = await _existing_ids(
            groups,
            {item.id for item in order_request.groups}
            | {item.parent_id for item in order_request.entries if item.parent_id is not None}
        )
        valid_parents = known_groups | {UNORGANIZED_GROUP_ID}

        missing_entry_ids = []
        invalid_parent_entry_ids = []
        entry_operations = []
        for item in order_request.entries:
            if item.id not in known_entries:
                missing_entry_ids.append(item.id)
            elif item.parent_id is not None and item.parent_id not in valid_parents:
                invalid_parent_entry_ids.append(item.id)
            else:
                fields = {"printOrder": item.print_order}
                if item.parent_id is not None:
                    fields["parentId"] = item.parent_id
                entry_operations.append(UpdateOne({"id": item.id}, {"$set": fields}))

        missing_group_ids = []
        group_operations = []
        for item in order_request.groups:
            if item.id not in known_groups:
                missing_group_ids.append(item.id)
            else:
                group_operations.append(UpdateOne(
                    {"id": item.id},
                    {"$set": {"printOrder": item.print_order}}
                ))

        entries_updated = 0
        groups_updated = 0
        if entry_operations:
            result = await entries.bulk_write(entry_operations, ordered=False)
            entries_updated = result.matched_count
        if group_operations:
            result = await groups.bulk_write(group_operations, ordered=False)
            groups_updated = result.matched_count

        skipped = len(missing_entry_ids) + len(invalid_parent_entry_ids) + len(missing_group_ids)
        message = "Order saved successfully!" if not skipped else f"Order saved, {skipped} record(s) skipped"

        return SaveOrderResponse(
            success=True,
            message=message,
            entries_updated=entries_updated,
            groups_updated=groups_updated,
            missing_entry_ids=missing_entry_ids,
            missing_group_ids=missing_group_ids,
            invalid_parent_entry_ids=invalid_parent_entry_ids
        )

    except Exception as e:
        await log_error(
            error=e,
            location="organization/utils.py - save_order_in_db",
            additional_info={
                "entries": len(order_request.entries),
                "groups": len(order_request.groups)
            }
        )
        raise


async def reset_order_in_db() -> ResetOrderResponse:
    """
    Put every entry back in the unorganized folder at printOrder 0 and delete every folder.
    This cannot be undone.
    """
    try:
        db = await get_db()

        entries_result = await db[ENTRIES_COLLECTION].update_many(
            {},
            {"$set": {"printOrder": 0, "parentId": UNORGANIZED_GROUP_ID}}
        )
        groups_result = await db[GROUPS_COLLECTION].delete_many({})

        return ResetOrderResponse(
            success=True,
            message="Order has been reset.",
            entries_reset=entries_result.matched_count,
            groups_deleted=groups_result.deleted_count
        )

    except Exception as e:
        await log_error(
            error=e,
            location="organization/utils.py - reset_order_in_db"
        )
        raise
