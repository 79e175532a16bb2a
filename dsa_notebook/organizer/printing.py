"""
Print rendering: turns ordered folders and entries into numbered pages.
"""
from typing import Iterable, List, Sequence
from .models import Entry, Group, PrintPage


def order_groups_for_print(groups: Sequence[Group], unorganized_position: str = "last") -> List[Group]:
    """Put the synthetic Unorganized folder first or last, keeping the real folders in sequence."""
    real = [group for group in groups if not group.is_virtual]
    virtual = [group for group in groups if group.is_virtual]
    if unorganized_position == "first":
        return virtual + real
    return real + virtual


def paginate(groups: Sequence[Group], entries: Iterable[Entry], unorganized_position: str = "last") -> List[PrintPage]:
    """
    Flatten folders into a single page sequence.

    Each folder contributes its entries sorted by print_order (ties keep the
    order they were given in), folders follow the given order. Pages are
    numbered from 1 with no gaps. Entries whose folder is not in groups are
    left out.

    Args:
        groups: Folders in display order, may include the synthetic Unorganized folder
        entries: Entries with their print_order already assigned
        unorganized_position: "first" or "last"

    Returns:
        List[PrintPage]: One page per printed entry
    """
    entries = list(entries)
    pages: List[PrintPage] = []

    for group in order_groups_for_print(groups, unorganized_position):
        members = sorted(
            (entry for entry in entries if entry.parent_id == group.id),
            key=lambda entry: entry.print_order
        )
        for entry in members:
            pages.append(PrintPage(
                entry=entry,
                page_number=len(pages) + 1,
                group_id=group.id,
                group_name=group.name
            ))

    return pages
