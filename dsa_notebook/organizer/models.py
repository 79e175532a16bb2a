"""
In-memory models for the print organizer

NOTE:
1.Inside the organizer an entry without a folder has parent_id None, the "unorganized"
  string only exists on the wire (see organizer/client.py).
2.The Unorganized folder is a presentation-only group with id None, it is never saved.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

UNORGANIZED_NAME = "Unorganized"


class Entry(BaseModel):
    """A study entry as seen by the organizer. Content fields ride along as extras."""
    model_config = ConfigDict(extra="allow")

    id: str
    title: Optional[str] = None
    parent_id: Optional[str] = Field(default=None, description="Folder id, None when unorganized")
    print_order: int = 0
    storage_id: Optional[str] = Field(default=None, description="MongoDB _id, used for updates")


class Group(BaseModel):
    """A print folder"""
    id: Optional[str]
    name: str
    print_order: int = 0

    @property
    def is_virtual(self) -> bool:
        return self.id is None


def unorganized_group() -> Group:
    """The synthetic folder holding every entry without a parent"""
    return Group(id=None, name=UNORGANIZED_NAME, print_order=-1)


class EntryPlacement(BaseModel):
    """Where one entry ends up after a save"""
    model_config = ConfigDict(frozen=True)

    id: str
    print_order: int
    parent_id: Optional[str]


class GroupPlacement(BaseModel):
    """Where one folder ends up after a save"""
    model_config = ConfigDict(frozen=True)

    id: str
    print_order: int


class SaveBatch(BaseModel):
    """Everything a save-order request carries"""
    model_config = ConfigDict(frozen=True)

    groups: List[GroupPlacement] = Field(default_factory=list)
    entries: List[EntryPlacement] = Field(default_factory=list)


class PrintPage(BaseModel):
    """One printed page: an entry and its 1-based page number"""
    entry: Entry
    page_number: int
    group_id: Optional[str] = None
    group_name: str = ""
