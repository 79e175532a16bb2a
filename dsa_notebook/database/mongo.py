'''
NOTE:

1.One AsyncMongoClient is shared by the notebook API, created on first use.
2.The notebook database holds entries, print folders (groups) and error_logs.
3.log_error never raises, it prints when the error_logs write itself fails.

'''
# database/mongo.py

from pymongo import AsyncMongoClient
from dsa_notebook.core.config import settings
from datetime import datetime, timezone
import traceback

ENTRIES_COLLECTION = "entries"
GROUPS_COLLECTION = "groups"
ERROR_LOGS_COLLECTION = "error_logs"

# Shared by every route, see get_client / close_client
client: AsyncMongoClient | None = None
db = None


async def get_client():
    """
    Get or initialize the MongoDB client.
    """
    global client
    if client is None:
        try:
            client = AsyncMongoClient(
                settings.MONGO_URI,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=50,
                retryWrites=True
            )
            # Test the connection immediately
            await client.admin.command('ping')
            print("MongoDB client initialized and tested")
        except Exception as e:
            print(f"Failed to initialize MongoDB client: {str(e)}")
            client = None  # Reset on failure
            raise
    return client

async def get_db():
    """Get the database instance."""
    global db
    if db is None:
        client = await get_client()
        db = client[settings.DATABASE_NAME]
    return db

async def close_client():
    """Close the shared client on shutdown so the next get_db reconnects."""
    global client, db
    if client is not None:
        await client.close()
        print("MongoDB client closed")
    client = None
    db = None

async def log_error(error: Exception, location: str, additional_info: dict = None):
    """
    Record a failed notebook API operation in the error_logs collection.

    Args:
        error: The exception that occurred
        location: Module and function, e.g. "entries/utils.py - create_entry_in_db"
        additional_info: Any additional information to log (optional)
    """
    try:
        db = await get_db()
        error_collection = db[ERROR_LOGS_COLLECTION]

        error_doc = {
            "timestamp": datetime.now(timezone.utc),
            "error_type": type(error).__name__,
            "error_message": str(error),
            "location": location,
            "traceback": traceback.format_exc(),
            "additional_info": additional_info or {}
        }

        await error_collection.insert_one(error_doc)
    except Exception as e:
        # If error logging fails, print to console as fallback
        print(f"Failed to log error to MongoDB: {str(e)}")
        print(f"Original error: {str(error)}")
        print(f"Location: {location}")
        if additional_info:
            print(f"Additional info: {additional_info}")
