"""
HTTP client for the notebook API, used by the print organizer

NOTE:
1.requests is blocking, every call runs in a worker thread via asyncio.to_thread.
2.This is the only place that knows about the "unorganized" wire sentinel,
  the organizer itself uses None for entries without a folder.
3.One request per call, no retries. Failures raise NotebookAPIError with the server's detail.
"""
from typing import Any, Dict, List, Optional
import asyncio
import requests
from dsa_notebook.core.config import settings
from dsa_notebook.core.schemas import UNORGANIZED_GROUP_ID
from .models import Entry, Group, SaveBatch


class NotebookAPIError(Exception):
    """A request to the notebook API failed"""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def parent_to_wire(parent_id: Optional[str]) -> str:
    return UNORGANIZED_GROUP_ID if parent_id is None else parent_id


def parent_from_wire(parent_id: Optional[str]) -> Optional[str]:
    return None if parent_id in (None, UNORGANIZED_GROUP_ID) else parent_id


def entry_from_wire(doc: Dict[str, Any]) -> Entry:
    """Build an Entry from an API document, keeping content fields as extras."""
    data = dict(doc)
    return Entry(
        id=data.pop("id"),
        title=data.pop("title", None),
        parent_id=parent_from_wire(data.pop("parentId", None)),
        print_order=data.pop("printOrder", 0),
        storage_id=data.pop("_id", None),
        **data
    )


def group_from_wire(doc: Dict[str, Any]) -> Group:
    return Group(id=doc["id"], name=doc["name"], print_order=doc.get("printOrder", 0))


def group_to_wire(group: Group) -> Dict[str, Any]:
    return {"id": group.id, "name": group.name, "printOrder": group.print_order}


def save_batch_to_wire(batch: SaveBatch) -> Dict[str, Any]:
    return {
        "entries": [
            {"id": item.id, "printOrder": item.print_order, "parentId": parent_to_wire(item.parent_id)}
            for item in batch.entries
        ],
        "groups": [
            {"id": item.id, "printOrder": item.print_order}
            for item in batch.groups
        ]
    }


class NotebookAPIClient:
    """Client for the entries, groups and ordering endpoints"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        """
        Args:
            base_url: API root such as http://localhost:3001/api, defaults to API_BASE_URL
            timeout: Per-request timeout in seconds, defaults to REQUEST_TIMEOUT_SECONDS
        """
        self.base_url: str = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout: float = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS

    def _request_sync(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Blocking HTTP call executed in a thread via asyncio.to_thread."""
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotebookAPIError(f"Could not reach notebook API: {e}") from e

        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
            raise NotebookAPIError(str(detail or response.reason), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise NotebookAPIError(f"Invalid response from {url}", status_code=response.status_code) from e

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        return await asyncio.to_thread(self._request_sync, method, path, payload)

    async def list_entries(self) -> List[Entry]:
        docs = await self._request("GET", "/entries")
        return [entry_from_wire(doc) for doc in docs]

    async def list_groups(self) -> List[Group]:
        docs = await self._request("GET", "/groups")
        return [group_from_wire(doc) for doc in docs]

    async def create_group(self, group: Group) -> Group:
        doc = await self._request("POST", "/groups", group_to_wire(group))
        return group_from_wire(doc)

    async def create_entry(self, entry: Entry) -> Entry:
        payload = entry.model_dump(exclude={"parent_id", "print_order", "storage_id"}, exclude_none=True)
        payload["printOrder"] = entry.print_order
        payload["parentId"] = parent_to_wire(entry.parent_id)
        doc = await self._request("POST", "/entries", payload)
        return entry_from_wire(doc)

    async def update_entry(self, storage_id: str, fields: Dict[str, Any]) -> Entry:
        """Replace the given camelCase fields of the entry stored under storage_id."""
        doc = await self._request("PUT", f"/entries/{storage_id}", fields)
        return entry_from_wire(doc)

    async def save_order(self, batch: SaveBatch) -> Dict[str, Any]:
        """Send a save batch, returns the per-record report."""
        return await self._request("POST", "/save-order", save_batch_to_wire(batch))

    async def reset_order(self) -> Dict[str, Any]:
        return await self._request("POST", "/reset-order")
