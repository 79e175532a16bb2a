"""
Group (print folder) schemas
"""
from pydantic import Field, field_validator
from typing import Optional
from dsa_notebook.core.schemas import CamelModel


class GroupCreateRequest(CamelModel):
    """
    Request model for creating a print folder
    """
    id: str = Field(..., min_length=1, description="Client-assigned unique identifier")
    name: str = Field(..., max_length=200, description="Folder name shown in the organizer")
    print_order: int = Field(default=0, description="Position among folders")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Folder name must not be blank")
        return value


class GroupResponse(GroupCreateRequest):
    """
    Response model for a stored folder
    """
    storage_id: Optional[str] = Field(default=None, alias="_id", description="MongoDB document id")

    @field_validator("storage_id", mode="before")
    @classmethod
    def stringify_object_id(cls, value):
        return str(value) if value is not None else None
