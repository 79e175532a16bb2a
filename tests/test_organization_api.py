"""
Save-order and reset-order endpoints, plus the organizer driving them end to end.
"""
import asyncio

from dsa_notebook.organizer.engine import PrintOrganizer
from dsa_notebook.organizer.models import EntryPlacement, GroupPlacement, SaveBatch
from dsa_notebook.organizer.client import entry_from_wire, group_from_wire, save_batch_to_wire


def seed(api):
    api.post("/api/groups", json={"id": "g1", "name": "Trees", "printOrder": 0})
    api.post("/api/groups", json={"id": "g2", "name": "Graphs", "printOrder": 1})
    for entry_id, parent, order in [("a", "g1", 0), ("b", "g1", 1), ("c", "unorganized", 0)]:
        api.post("/api/entries", json={"id": entry_id, "title": entry_id, "parentId": parent, "printOrder": order})


def stored(fake_db, name):
    return {doc["id"]: doc for doc in fake_db[name].docs}


class TestSaveOrder:
    def test_applies_every_record(self, api, fake_db):
        seed(api)
        response = api.post("/api/save-order", json={
            "entries": [
                {"id": "a", "printOrder": 1, "parentId": "g2"},
                {"id": "b", "printOrder": 0, "parentId": "g1"},
                {"id": "c", "printOrder": 0, "parentId": "g2"},
            ],
            "groups": [{"id": "g2", "printOrder": 0}, {"id": "g1", "printOrder": 1}],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["entriesUpdated"] == 3
        assert body["groupsUpdated"] == 2
        assert body["missingEntryIds"] == []

        entries = stored(fake_db, "entries")
        assert (entries["a"]["parentId"], entries["a"]["printOrder"]) == ("g2", 1)
        assert (entries["c"]["parentId"], entries["c"]["printOrder"]) == ("g2", 0)
        assert stored(fake_db, "groups")["g2"]["printOrder"] == 0

    def test_reports_skipped_records(self, api, fake_db):
        seed(api)
        response = api.post("/api/save-order", json={
            "entries": [
                {"id": "a", "printOrder": 0, "parentId": "unorganized"},
                {"id": "ghost", "printOrder": 1, "parentId": "g1"},
                {"id": "b", "printOrder": 0, "parentId": "deleted-folder"},
            ],
            "groups": [{"id": "gone", "printOrder": 0}],
        })

        body = response.json()
        assert response.status_code == 200
        assert body["entriesUpdated"] == 1
        assert body["missingEntryIds"] == ["ghost"]
        assert body["invalidParentEntryIds"] == ["b"]
        assert body["missingGroupIds"] == ["gone"]
        assert stored(fake_db, "entries")["b"]["parentId"] == "g1"

    def test_omitted_parent_keeps_folder(self, api, fake_db):
        seed(api)
        response = api.post("/api/save-order", json={
            "entries": [{"id": "a", "printOrder": 3}],
            "groups": [],
        })

        assert response.status_code == 200
        assert response.json()["entriesUpdated"] == 1
        assert response.json()["invalidParentEntryIds"] == []
        entry = stored(fake_db, "entries")["a"]
        assert (entry["parentId"], entry["printOrder"]) == ("g1", 3)

    def test_empty_batch(self, api):
        response = api.post("/api/save-order", json={})
        assert response.status_code == 200
        assert response.json()["message"] == "Order saved successfully!"


class TestResetOrder:
    def test_reset(self, api, fake_db):
        seed(api)
        response = api.post("/api/reset-order")

        assert response.status_code == 200
        assert response.json()["entriesReset"] == 3
        assert response.json()["groupsDeleted"] == 2
        assert api.get("/api/groups").json() == []
        assert all(
            entry["parentId"] == "unorganized" and entry["printOrder"] == 0
            for entry in api.get("/api/entries").json()
        )


class ApiBackedClient:
    """Routes the organizer's client calls through the FastAPI test client"""

    def __init__(self, api):
        self.api = api

    async def _call(self, method, path, payload=None):
        response = await asyncio.to_thread(self.api.request, method, path, json=payload)
        assert response.status_code < 400, response.text
        return response.json()

    async def list_groups(self):
        return [group_from_wire(doc) for doc in await self._call("GET", "/api/groups")]

    async def list_entries(self):
        return [entry_from_wire(doc) for doc in await self._call("GET", "/api/entries")]

    async def create_group(self, group):
        payload = {"id": group.id, "name": group.name, "printOrder": group.print_order}
        return group_from_wire(await self._call("POST", "/api/groups", payload))

    async def save_order(self, batch):
        return await self._call("POST", "/api/save-order", save_batch_to_wire(batch))

    async def reset_order(self):
        return await self._call("POST", "/api/reset-order")


def test_organizer_round_trip(api, fake_db):
    for order, entry_id in enumerate(["A", "B", "C"]):
        api.post("/api/entries", json={"id": entry_id, "title": entry_id, "printOrder": order})

    organizer = PrintOrganizer(ApiBackedClient(api), notify=lambda level, message: None)
    assert asyncio.run(organizer.load())
    trees = asyncio.run(organizer.add_group("Trees"))
    organizer.move_selected_entries({"B", "C"}, trees.id)
    assert asyncio.run(organizer.save())

    entries = stored(fake_db, "entries")
    assert (entries["A"]["parentId"], entries["A"]["printOrder"]) == ("unorganized", 0)
    assert (entries["B"]["parentId"], entries["B"]["printOrder"]) == (trees.id, 0)
    assert (entries["C"]["parentId"], entries["C"]["printOrder"]) == (trees.id, 1)

    assert asyncio.run(organizer.reset_all())
    assert len(organizer.groups) == 1
    assert all(entry.parent_id is None and entry.print_order == 0 for entry in organizer.entries)


def test_save_batch_wire_shape_is_accepted(api):
    batch = SaveBatch(
        groups=[GroupPlacement(id="g1", print_order=0)],
        entries=[EntryPlacement(id="x", print_order=0, parent_id=None)]
    )
    response = api.post("/api/save-order", json=save_batch_to_wire(batch))
    assert response.status_code == 200
    assert response.json()["missingEntryIds"] == ["x"]
