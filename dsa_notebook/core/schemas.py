"""
Shared schema pieces for the notebook API

NOTE:
1.Documents are stored with camelCase keys (printOrder, parentId, dryRun, ...), python code uses snake_case.
2."unorganized" is the reserved folder id every entry falls back to; it is never stored as a group.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

UNORGANIZED_GROUP_ID = "unorganized"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
