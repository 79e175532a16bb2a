"""
Print organizer: the in-memory ordering model behind the folder view

NOTE:
1.The entry sequence is the display order inside each folder. Stored printOrder values
  are only used to build that sequence at load time and are rewritten on save.
2.Operations on ids that no longer exist are ignored, drag references can go stale
  between render and drop.
3.While a save or reset is waiting on the API every structural change raises
  SaveInProgressError, so the batch on the wire always matches what is in memory.
"""
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple
import asyncio
import uuid
from dsa_notebook.core.config import settings
from .client import NotebookAPIError
from .models import Entry, Group, EntryPlacement, GroupPlacement, SaveBatch, PrintPage, unorganized_group
from .moves import (
    GROUP, ENTRY, DragSource, DropTarget, Move, array_move,
    GroupReorder, EntryReorderSameParent, EntryReparent, EntryDropOnGroup
)
from .printing import paginate

Notifier = Callable[[str, str], None]

NOTIFICATION_ICONS = {"success": "✅", "warning": "⚠️", "error": "❌"}


def print_notification(level: str, message: str) -> None:
    """Default notifier, prints the message with a status icon"""
    print(f"{NOTIFICATION_ICONS.get(level, 'ℹ️')} {message}")


class OrganizerError(Exception):
    """Base class for errors raised by the print organizer"""


class SelectionValidationError(OrganizerError):
    """A bulk move was requested without entries or without a destination folder"""


class SaveInProgressError(OrganizerError):
    """A structural change was attempted while a save or reset was in flight"""


class PrintOrganizer:
    """Owns the folders, entries and selection of one organizing session"""

    def __init__(self, client, notify: Optional[Notifier] = None, unorganized_position: Optional[str] = None) -> None:
        """
        Args:
            client: NotebookAPIClient or anything with the same async methods
            notify: Callable(level, message) for user-facing outcomes
            unorganized_position: "first" or "last", where Unorganized prints
        """
        self.client = client
        self.notify: Notifier = notify or print_notification
        self.unorganized_position: str = unorganized_position or settings.UNORGANIZED_PRINT_POSITION

        self._groups: List[Group] = []
        self._entries: List[Entry] = []
        self._selected: Set[str] = set()
        self._active: Optional[DragSource] = None
        self._saving: bool = False

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def groups(self) -> List[Group]:
        """Folders in display order, the synthetic Unorganized folder first"""
        return [unorganized_group()] + list(self._groups)

    @property
    def entries(self) -> List[Entry]:
        return list(self._entries)

    @property
    def selected(self) -> frozenset:
        return frozenset(self._selected)

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def active_drag(self) -> Optional[DragSource]:
        return self._active

    def entries_in(self, group_id: Optional[str]) -> List[Entry]:
        """Entries of one folder in display order (None is the Unorganized folder)"""
        return [entry for entry in self._entries if entry.parent_id == group_id]

    def get_entry(self, entry_id: Optional[str]) -> Optional[Entry]:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    def get_group(self, group_id: Optional[str]) -> Optional[Group]:
        if group_id is None:
            return unorganized_group()
        return next((group for group in self._groups if group.id == group_id), None)

    def _ensure_idle(self) -> None:
        if self._saving:
            raise SaveInProgressError("A save is in progress, try again when it finishes")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _replace_state(self, groups: Iterable[Group], entries: Iterable[Entry]) -> None:
        real_groups = [group.model_copy() for group in groups if not group.is_virtual]
        # sorted() is stable, equal printOrder keeps the order the store returned
        self._groups = sorted(real_groups, key=lambda group: group.print_order)
        self._entries = sorted((entry.model_copy() for entry in entries), key=lambda entry: entry.print_order)
        self._selected.clear()
        self._active = None

    def load_snapshot(self, groups: Iterable[Group], entries: Iterable[Entry]) -> None:
        """Replace the whole state with a snapshot of the store."""
        self._ensure_idle()
        self._replace_state(groups, entries)

    async def _fetch_snapshot(self) -> Tuple[List[Group], List[Entry]]:
        groups, entries = await asyncio.gather(self.client.list_groups(), self.client.list_entries())
        return groups, entries

    async def load(self) -> bool:
        """
        Fetch folders and entries from the API and load them.

        Returns:
            bool: False when the API call failed, the state is then left empty
        """
        self._ensure_idle()
        try:
            groups, entries = await self._fetch_snapshot()
        except NotebookAPIError as e:
            self._replace_state([], [])
            self.notify("error", f"Failed to load organization data: {e}")
            return False

        self._replace_state(groups, entries)
        return True

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def add_group(self, name: str) -> Optional[Group]:
        """
        Create a folder and write it to the store right away.

        A blank name only raises a warning notification. The folder is added
        to the session only when the store accepted it.
        """
        self._ensure_idle()
        name = (name or "").strip()
        if not name:
            self.notify("warning", "Please enter a folder name.")
            return None

        group = Group(id=str(uuid.uuid4()), name=name, print_order=len(self.groups))
        self._saving = True
        try:
            await self.client.create_group(group)
        except NotebookAPIError as e:
            self.notify("error", f"Failed to create folder: {e}")
            return None
        finally:
            self._saving = False

        self._groups.append(group)
        self.notify("success", f'Folder "{name}" created.')
        return group

    def reorder_groups(self, moved_id: Optional[str], target_id: Optional[str]) -> bool:
        """Move a folder to the position of another. Unknown ids and the Unorganized folder are ignored."""
        self._ensure_idle()
        if moved_id is None or target_id is None or moved_id == target_id:
            return False

        ids = [group.id for group in self._groups]
        if moved_id not in ids or target_id not in ids:
            return False

        self._groups = array_move(self._groups, ids.index(moved_id), ids.index(target_id))
        return True

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def reorder_entries_within_group(self, group_id: Optional[str], moved_id: str, target_id: str) -> bool:
        """
        Move an entry to the position of another entry of the same folder.
        Entries of other folders keep their places in the sequence.
        """
        self._ensure_idle()
        if moved_id == target_id:
            return False

        slots = [index for index, entry in enumerate(self._entries) if entry.parent_id == group_id]
        members = [self._entries[index] for index in slots]
        member_ids = [entry.id for entry in members]
        if moved_id not in member_ids or target_id not in member_ids:
            return False

        reordered = array_move(members, member_ids.index(moved_id), member_ids.index(target_id))
        for index, entry in zip(slots, reordered):
            self._entries[index] = entry
        return True

    def move_entry_to_group(self, entry_id: str, dest_group_id: Optional[str]) -> bool:
        """Change an entry's folder. Its position is settled when the order is saved."""
        self._ensure_idle()
        entry = self.get_entry(entry_id)
        if entry is None or self.get_group(dest_group_id) is None:
            return False
        if entry.parent_id == dest_group_id:
            return False

        entry.parent_id = dest_group_id
        return True

    def move_entry_next_to(self, entry_id: str, target_id: str) -> bool:
        """Move an entry into the folder of another entry, taking that entry's position."""
        self._ensure_idle()
        if entry_id == target_id:
            return False

        ids = [entry.id for entry in self._entries]
        if entry_id not in ids or target_id not in ids:
            return False

        old_index = ids.index(entry_id)
        new_index = ids.index(target_id)
        self._entries[old_index].parent_id = self._entries[new_index].parent_id
        self._entries = array_move(self._entries, old_index, new_index)
        return True

    def move_selected_entries(self, entry_ids: Optional[Iterable[str]], dest_group_id: Optional[str]) -> int:
        """
        Move several entries into one folder.

        Args:
            entry_ids: Ids to move, None uses the current selection
            dest_group_id: Destination folder id

        Returns:
            int: Number of entries moved

        Raises:
            SelectionValidationError: No entries, no destination, or an unknown destination
        """
        self._ensure_idle()
        ids = set(self._selected if entry_ids is None else entry_ids)
        if not dest_group_id or not ids:
            raise SelectionValidationError("Please select a folder and at least one entry.")
        if self.get_group(dest_group_id) is None:
            raise SelectionValidationError(f"Folder {dest_group_id} does not exist.")

        moved = 0
        for entry in self._entries:
            if entry.id in ids:
                entry.parent_id = dest_group_id
                moved += 1

        self._selected.clear()
        return moved

    def toggle_selection(self, entry_id: str) -> bool:
        """Flip an entry in or out of the selection, returns whether it is now selected."""
        if self.get_entry(entry_id) is None:
            return False
        if entry_id in self._selected:
            self._selected.discard(entry_id)
            return False
        self._selected.add(entry_id)
        return True

    def clear_selection(self) -> None:
        self._selected.clear()

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def begin_drag(self, source: DragSource) -> bool:
        """Remember the dragged item. Unknown items and the Unorganized folder cannot be dragged."""
        self._ensure_idle()
        if source.kind == GROUP:
            known = source.id is not None and self.get_group(source.id) is not None
        else:
            known = self.get_entry(source.id) is not None

        self._active = source if known else None
        return known

    def cancel_drag(self) -> None:
        self._active = None

    def end_drag(self, target: Optional[DropTarget]) -> Optional[Move]:
        """
        Finish the current drag on target and apply the resulting move.

        Returns:
            The move that was applied, or None when the drop was ignored
        """
        self._ensure_idle()
        source, self._active = self._active, None
        if source is None or target is None:
            return None

        move = self.resolve_drop(source, target)
        if move is None or not move.apply(self):
            return None
        return move

    def resolve_drop(self, source: DragSource, target: DropTarget) -> Optional[Move]:
        """Classify a drop into one of the four moves, None when it should be ignored."""
        if source.kind == target.kind and source.id == target.id:
            return None

        if source.kind == GROUP:
            if target.kind != GROUP or source.id is None or target.id is None:
                return None
            return GroupReorder(moved_id=source.id, target_id=target.id)

        entry = self.get_entry(source.id)
        if entry is None:
            return None

        if target.kind == ENTRY:
            over = self.get_entry(target.id)
            if over is None:
                return None
            if over.parent_id == entry.parent_id:
                return EntryReorderSameParent(group_id=entry.parent_id, moved_id=entry.id, target_id=over.id)
            return EntryReparent(entry_id=entry.id, target_id=over.id, dest_group_id=over.parent_id)

        if self.get_group(target.id) is None or target.id == entry.parent_id:
            return None
        return EntryDropOnGroup(entry_id=entry.id, dest_group_id=target.id)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def compute_save_batch(self) -> SaveBatch:
        """
        Number folders by their sequence position and entries by their position
        inside their folder, starting at 0 in every folder.
        """
        groups = [
            GroupPlacement(id=group.id, print_order=index)
            for index, group in enumerate(self._groups)
        ]

        positions: Dict[Optional[str], int] = {}
        entries = []
        for entry in self._entries:
            position = positions.get(entry.parent_id, 0)
            positions[entry.parent_id] = position + 1
            entries.append(EntryPlacement(id=entry.id, print_order=position, parent_id=entry.parent_id))

        return SaveBatch(groups=groups, entries=entries)

    def _apply_batch(self, batch: SaveBatch) -> None:
        group_orders = {item.id: item.print_order for item in batch.groups}
        entry_orders = {item.id: item.print_order for item in batch.entries}
        for group in self._groups:
            group.print_order = group_orders.get(group.id, group.print_order)
        for entry in self._entries:
            entry.print_order = entry_orders.get(entry.id, entry.print_order)

    async def save(self) -> bool:
        """
        Send the current order to the store in one bulk request.

        Returns:
            bool: False when the request failed, memory is then left untouched
        """
        self._ensure_idle()
        batch = self.compute_save_batch()

        self._saving = True
        try:
            report = await self.client.save_order(batch)
        except NotebookAPIError as e:
            self.notify("error", f"Failed to save organization: {e}")
            return False
        finally:
            self._saving = False

        self._apply_batch(batch)

        skipped = (
            list((report or {}).get("missingEntryIds", []))
            + list((report or {}).get("invalidParentEntryIds", []))
            + list((report or {}).get("missingGroupIds", []))
        )
        if skipped:
            self.notify("warning", f"Organization saved, {len(skipped)} record(s) were skipped: {', '.join(skipped)}")
        else:
            self.notify("success", "Organization saved successfully!")
        return True

    async def reset_all(self) -> bool:
        """
        Delete every folder and put every entry back in Unorganized, then reload.
        This cannot be undone.
        """
        self._ensure_idle()

        self._saving = True
        try:
            await self.client.reset_order()
        except NotebookAPIError as e:
            self._saving = False
            self.notify("error", f"Failed to reset organization: {e}")
            return False

        try:
            groups, entries = await self._fetch_snapshot()
        except NotebookAPIError as e:
            self._replace_state([], [])
            self.notify("error", f"Organization was reset but reloading failed: {e}")
            return False
        finally:
            self._saving = False

        self._replace_state(groups, entries)
        self.notify("success", "Organization has been reset.")
        return True

    # ------------------------------------------------------------------
    # Printing
    # ------------------------------------------------------------------

    def flatten_for_print(self) -> List[PrintPage]:
        """
        Pages in print order, numbered from 1. Reflects unsaved moves: every entry
        is numbered with the print order a save would give it. Recomputed on each call.
        """
        orders = {item.id: item.print_order for item in self.compute_save_batch().entries}
        entries = [
            entry.model_copy(update={"print_order": orders.get(entry.id, entry.print_order)})
            for entry in self._entries
        ]
        return paginate(self.groups, entries, self.unorganized_position)
