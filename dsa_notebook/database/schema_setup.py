from .mongo import get_db, ENTRIES_COLLECTION, GROUPS_COLLECTION
from dsa_notebook.core.schemas import UNORGANIZED_GROUP_ID

ENTRIES_SCHEMA = {
    "bsonType": "object",
    "required": ["id", "printOrder", "parentId"],
    "properties": {
        "_id": {"bsonType": "objectId"},
        "id": {"bsonType": "string", "minLength": 1},
        "title": {"bsonType": ["string", "null"]},
        "intuition": {"bsonType": ["string", "null"]},
        "approach": {"bsonType": "array", "items": {"bsonType": "string"}},
        "dryRun": {"bsonType": ["string", "null"]},
        "timeComplexity": {"bsonType": ["string", "null"]},
        "spaceComplexity": {"bsonType": ["string", "null"]},
        "quickRevision": {"bsonType": "array", "items": {"bsonType": "string"}},
        "code": {"bsonType": ["string", "null"]},
        "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
        "images": {"bsonType": "array", "items": {"bsonType": "string"}},
        "printOrder": {"bsonType": ["int", "long"]},
        "parentId": {"bsonType": "string", "minLength": 1}
    },
    "additionalProperties": False
}

GROUPS_SCHEMA = {
    "bsonType": "object",
    "required": ["id", "name", "printOrder"],
    "properties": {
        "_id": {"bsonType": "objectId"},
        "id": {"bsonType": "string", "minLength": 1, "not": {"enum": [UNORGANIZED_GROUP_ID]}},
        "name": {"bsonType": "string", "minLength": 1, "maxLength": 200},
        "printOrder": {"bsonType": ["int", "long"]}
    },
    "additionalProperties": False
}


async def _apply_validator(db, name: str, schema: dict):
    """Create the collection with its validator, or update the validator if it already exists."""
    try:
        await db.create_collection(
            name,
            validator={"$jsonSchema": schema},
            validationLevel="strict",
            validationAction="error"
        )
        print(f"✅ {name} collection created with schema validation")
    except Exception as e:
        if "already exists" in str(e):
            await db.command({
                "collMod": name,
                "validator": {"$jsonSchema": schema},
                "validationLevel": "strict",
                "validationAction": "error"
            })
            print(f"✅ {name} collection validation updated")
        else:
            raise

    # Client-assigned ids must be unique; a duplicate insert is a constraint violation
    await db[name].create_index("id", unique=True)


async def setup_mongodb_schemas():
    """
    Set up MongoDB collection validation schemas and unique indexes.
    """
    try:
        db = await get_db()

        await _apply_validator(db, ENTRIES_COLLECTION, ENTRIES_SCHEMA)
        await _apply_validator(db, GROUPS_COLLECTION, GROUPS_SCHEMA)

        print("🔒 MongoDB schema validation enabled")

    except Exception as e:
        print(f"❌ Failed to setup MongoDB schemas: {e}")
        raise
