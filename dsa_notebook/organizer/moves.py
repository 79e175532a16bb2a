"""
Drag and drop moves for the print organizer

A drag starts on a DragSource (a folder or an entry) and ends on a DropTarget
(a folder header, a folder id of None meaning the Unorganized area, or another
entry). PrintOrganizer.resolve_drop turns the pair into one of the moves below,
each move applies itself to the organizer.
"""
from dataclasses import dataclass
from typing import List, Optional, TypeVar, Union

GROUP = "group"
ENTRY = "entry"

T = TypeVar("T")


def array_move(items: List[T], from_index: int, to_index: int) -> List[T]:
    """Return a copy of items with the item at from_index removed and reinserted at to_index."""
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


@dataclass(frozen=True)
class DragSource:
    kind: str
    id: Optional[str]


@dataclass(frozen=True)
class DropTarget:
    kind: str
    id: Optional[str]


@dataclass(frozen=True)
class GroupReorder:
    moved_id: str
    target_id: str

    def apply(self, organizer) -> bool:
        return organizer.reorder_groups(self.moved_id, self.target_id)


@dataclass(frozen=True)
class EntryReorderSameParent:
    group_id: Optional[str]
    moved_id: str
    target_id: str

    def apply(self, organizer) -> bool:
        return organizer.reorder_entries_within_group(self.group_id, self.moved_id, self.target_id)


@dataclass(frozen=True)
class EntryReparent:
    entry_id: str
    target_id: str
    dest_group_id: Optional[str]

    def apply(self, organizer) -> bool:
        return organizer.move_entry_next_to(self.entry_id, self.target_id)


@dataclass(frozen=True)
class EntryDropOnGroup:
    entry_id: str
    dest_group_id: Optional[str]

    def apply(self, organizer) -> bool:
        return organizer.move_entry_to_group(self.entry_id, self.dest_group_id)


Move = Union[GroupReorder, EntryReorderSameParent, EntryReparent, EntryDropOnGroup]
