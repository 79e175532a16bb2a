"""
Schemas for bulk print ordering (save-order / reset-order)

NOTE:
1.Every record in a save-order request is applied as its own update, the response says which ones were skipped.
2.Groups carry only a print order, entries carry a print order and their folder.
"""
from pydantic import Field
from typing import List, Optional
from dsa_notebook.core.schemas import CamelModel


class EntryOrderItem(CamelModel):
    """New placement of one entry"""
    id: str = Field(..., min_length=1)
    print_order: int
    parent_id: Optional[str] = Field(default=None, min_length=1, description="Left unchanged when omitted")


class GroupOrderItem(CamelModel):
    """New position of one folder"""
    id: str = Field(..., min_length=1)
    print_order: int


class SaveOrderRequest(CamelModel):
    """
    Request model for saving the organizer's order in one call
    """
    entries: List[EntryOrderItem] = Field(default_factory=list)
    groups: List[GroupOrderItem] = Field(default_factory=list)


class SaveOrderResponse(CamelModel):
    """
    Response model for save-order with a per-record report
    """
    success: bool
    message: str
    entries_updated: int = 0
    groups_updated: int = 0
    missing_entry_ids: List[str] = Field(default_factory=list, description="Entries that do not exist")
    missing_group_ids: List[str] = Field(default_factory=list, description="Folders that do not exist")
    invalid_parent_entry_ids: List[str] = Field(
        default_factory=list,
        description="Entries skipped because their folder does not exist"
    )


class ResetOrderResponse(CamelModel):
    """
    Response model for reset-order
    """
    success: bool
    message: str
    entries_reset: int = 0
    groups_deleted: int = 0
