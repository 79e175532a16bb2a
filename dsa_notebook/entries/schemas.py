"""
Entry schemas for study notes

NOTE:
1.id is assigned by the client when the entry is written, _id is assigned by MongoDB.
2.Updates address entries by _id, ordering (save-order) addresses them by id.
"""
from pydantic import Field, field_validator
from typing import List, Optional
from dsa_notebook.core.schemas import CamelModel, UNORGANIZED_GROUP_ID


class EntryContent(CamelModel):
    """Content fields of a study entry, opaque to ordering"""
    title: Optional[str] = None
    intuition: Optional[str] = None
    approach: List[str] = Field(default_factory=list, description="Ordered approach steps")
    dry_run: Optional[str] = None
    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None
    quick_revision: List[str] = Field(default_factory=list)
    code: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list, description="Image URLs or data URIs")


class EntryCreateRequest(EntryContent):
    """
    Request model for creating a new entry
    """
    id: str = Field(..., min_length=1, description="Client-assigned unique identifier")
    print_order: int = Field(default=0, description="Position within the parent folder")
    parent_id: str = Field(default=UNORGANIZED_GROUP_ID, min_length=1, description="Owning folder id")


class EntryUpdateRequest(CamelModel):
    """
    Request model for updating an entry. Only the fields that are sent get replaced,
    unknown keys (id, _id) are ignored so a full entry can be sent back as-is.
    """
    title: Optional[str] = None
    intuition: Optional[str] = None
    approach: Optional[List[str]] = None
    dry_run: Optional[str] = None
    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None
    quick_revision: Optional[List[str]] = None
    code: Optional[str] = None
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None
    print_order: Optional[int] = None
    parent_id: Optional[str] = Field(default=None, min_length=1)


class EntryResponse(EntryCreateRequest):
    """
    Response model for an entry as stored
    """
    storage_id: Optional[str] = Field(default=None, alias="_id", description="MongoDB document id")

    @field_validator("storage_id", mode="before")
    @classmethod
    def stringify_object_id(cls, value):
        return str(value) if value is not None else None
