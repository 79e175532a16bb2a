"""
Shared fixtures: an in-memory stand-in for the async MongoDB database and a fake
notebook API client for the print organizer.
"""
import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from dsa_notebook.database import mongo
from dsa_notebook.organizer.client import NotebookAPIError
from dsa_notebook.organizer.models import Entry, Group


def _matches(doc, query):
    for key, expected in (query or {}).items():
        if isinstance(expected, dict) and "$in" in expected:
            if doc.get(key) not in expected["$in"]:
                return False
        elif doc.get(key) != expected:
            return False
    return True


def _project(doc, projection):
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    included = [key for key, flag in projection.items() if flag and key != "_id"]
    if included:
        result = {key: doc[key] for key in included if key in doc}
        if projection.get("_id", 1) and "_id" in doc:
            result["_id"] = doc["_id"]
        return result
    return {key: value for key, value in doc.items() if projection.get(key, 1)}


def _apply_update(doc, update):
    for key, value in update.get("$set", {}).items():
        doc[key] = value


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, keys, direction=1):
        if isinstance(keys, str):
            keys = [(keys, direction)]
        for key, key_direction in reversed(keys):
            self.docs.sort(key=lambda doc: doc.get(key, 0), reverse=key_direction < 0)
        return self

    async def to_list(self, length=None):
        return self.docs if length is None else self.docs[:length]


class FakeCollection:
    def __init__(self, unique_id=False):
        self.docs = []
        self.unique_id = unique_id

    def find(self, query=None, projection=None):
        return FakeCursor([_project(doc, projection) for doc in self.docs if _matches(doc, query)])

    async def find_one(self, query=None, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def insert_one(self, doc):
        if self.unique_id and any(existing.get("id") == doc.get("id") for existing in self.docs):
            raise DuplicateKeyError("E11000 duplicate key error collection: id")
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one_and_update(self, query, update, return_document=None):
        for doc in self.docs:
            if _matches(doc, query):
                _apply_update(doc, update)
                return copy.deepcopy(doc)
        return None

    async def update_many(self, query, update):
        matched = [doc for doc in self.docs if _matches(doc, query)]
        for doc in matched:
            _apply_update(doc, update)
        return SimpleNamespace(matched_count=len(matched), modified_count=len(matched))

    async def delete_many(self, query):
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)

    async def bulk_write(self, operations, ordered=True):
        matched = 0
        for operation in operations:
            for doc in self.docs:
                if _matches(doc, operation._filter):
                    _apply_update(doc, operation._doc)
                    matched += 1
                    break
        return SimpleNamespace(matched_count=matched, modified_count=matched)

    async def create_index(self, keys, unique=False):
        self.unique_id = self.unique_id or unique
        return "id_1"


class FakeDatabase:
    def __init__(self):
        self.collections = {
            mongo.ENTRIES_COLLECTION: FakeCollection(unique_id=True),
            mongo.GROUPS_COLLECTION: FakeCollection(unique_id=True),
        }

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

    async def create_collection(self, name, **kwargs):
        self[name]

    async def command(self, command):
        return {"ok": 1}


@pytest.fixture
def fake_db(monkeypatch):
    """Install an in-memory database as the shared MongoDB handle."""
    database = FakeDatabase()
    monkeypatch.setattr(mongo, "db", database)
    return database


@pytest.fixture
def api(fake_db):
    from fastapi.testclient import TestClient
    from main import app
    return TestClient(app)


class FakeNotebookClient:
    """In-memory notebook API with the same async surface as NotebookAPIClient"""

    def __init__(self, groups=None, entries=None):
        self.groups = list(groups or [])
        self.entries = list(entries or [])
        self.failing = set()
        self.saved_batches = []
        self.created_groups = []
        self.reset_calls = 0
        self.report = {"success": True, "message": "Order saved successfully!"}
        self.on_save = None

    def _check(self, operation):
        if operation in self.failing:
            raise NotebookAPIError(f"{operation} failed", status_code=500)

    async def list_groups(self):
        self._check("list_groups")
        return sorted((group.model_copy() for group in self.groups), key=lambda group: group.print_order)

    async def list_entries(self):
        self._check("list_entries")
        return sorted((entry.model_copy() for entry in self.entries), key=lambda entry: entry.print_order)

    async def create_group(self, group):
        self._check("create_group")
        self.created_groups.append(group)
        self.groups.append(group.model_copy())
        return group

    async def save_order(self, batch):
        if self.on_save is not None:
            self.on_save()
        self._check("save_order")
        self.saved_batches.append(batch)
        placements = {item.id: item for item in batch.entries}
        for entry in self.entries:
            if entry.id in placements:
                entry.print_order = placements[entry.id].print_order
                entry.parent_id = placements[entry.id].parent_id
        orders = {item.id: item.print_order for item in batch.groups}
        for group in self.groups:
            group.print_order = orders.get(group.id, group.print_order)
        return self.report

    async def reset_order(self):
        self._check("reset_order")
        self.reset_calls += 1
        self.groups = []
        for entry in self.entries:
            entry.parent_id = None
            entry.print_order = 0
        return {"success": True, "message": "Order has been reset."}


def make_entry(entry_id, parent_id=None, print_order=0, title=None):
    return Entry(id=entry_id, title=title or entry_id, parent_id=parent_id, print_order=print_order)


def make_group(group_id, name=None, print_order=0):
    return Group(id=group_id, name=name or group_id, print_order=print_order)


class NotificationLog:
    def __init__(self):
        self.messages = []

    def __call__(self, level, message):
        self.messages.append((level, message))

    def levels(self):
        return [level for level, _ in self.messages]


@pytest.fixture
def notifications():
    return NotificationLog()
