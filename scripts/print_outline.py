'''
NOTE:
1.This script prints the current print outline (folders, their entries and page numbers) as a tree.
2.It reads from the running notebook API (API_BASE_URL) and never writes anything.
'''

import argparse
import asyncio
from typing import List

from dsa_notebook.organizer.client import NotebookAPIClient
from dsa_notebook.organizer.engine import PrintOrganizer
from dsa_notebook.organizer.models import PrintPage
from dsa_notebook.organizer.printing import order_groups_for_print


def outline_lines(organizer: PrintOrganizer, pages: List[PrintPage]) -> List[str]:
    """Render folders and their pages as tree lines."""
    page_numbers = {page.entry.id: page.page_number for page in pages}
    groups = order_groups_for_print(organizer.groups, organizer.unorganized_position)

    lines = []
    for group_index, group in enumerate(groups):
        last_group = group_index == len(groups) - 1
        connector = "└── " if last_group else "├── "
        lines.append(connector + group.name)

        extension = "    " if last_group else "│   "
        entries = organizer.entries_in(group.id)
        for entry_index, entry in enumerate(entries):
            entry_connector = "└── " if entry_index == len(entries) - 1 else "├── "
            page = page_numbers.get(entry.id)
            lines.append(f"{extension}{entry_connector}[p.{page}] {entry.title or entry.id}")
    return lines


async def main(base_url: str = None):
    organizer = PrintOrganizer(NotebookAPIClient(base_url=base_url))
    if not await organizer.load():
        return 1

    pages = organizer.flatten_for_print()
    print(f"🖨️ Print outline ({len(pages)} pages):\n")
    for line in outline_lines(organizer, pages):
        print(line)
    return 0

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print the current print outline of the notebook")
    parser.add_argument("--base-url", default=None, help="Notebook API root, e.g. http://localhost:3001/api")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.base_url)))
