"""Tests for the JSON plan store: defaults, corruption, migration and saving."""

import json
import os

import pytest

from config import DEFAULT_SETTINGS
from data.store import PlanStore, generate_id, merge_with_defaults, migrate


@pytest.fixture
def store(tmp_path):
    return PlanStore(str(tmp_path / "plan.json"))


def write(store, payload):
    with open(store.path, "w", encoding="utf-8") as f:
        f.write(payload if isinstance(payload, str) else json.dumps(payload))


class TestLoad:
    def test_missing_file_gives_defaults(self, store):
        doc = store.load()
        assert doc["settings"] == DEFAULT_SETTINGS
        assert doc["goals"] == []
        assert doc["assets"] == {"items": []}
        assert doc["cashflow"] == {"income": [], "expenses": []}

    def test_corrupt_file_gives_defaults(self, store):
        write(store, "{ this is not json")
        doc = store.load()
        assert doc["settings"] == DEFAULT_SETTINGS
        assert doc["goals"] == []

    def test_partial_document_is_merged(self, store):
        write(store, {"settings": {"equity_return": 12}, "goals": []})
        doc = store.load()
        assert doc["settings"]["equity_return"] == 12
        assert doc["settings"]["debt_return"] == DEFAULT_SETTINGS["debt_return"]
        assert doc["liabilities"] == {"items": []}

    def test_non_object_document(self, store):
        write(store, [1, 2, 3])
        assert store.load()["goals"] == []

    def test_defaults_are_not_shared(self, store):
        store.load()["settings"]["equity_return"] = 99
        assert DEFAULT_SETTINGS["equity_return"] == 10


class TestMigration:
    def test_old_document_is_upgraded_and_rewritten(self, store):
        write(store, {
            "assets": {"items": [{"id": "a1", "category": "FDs & RDs", "value": 1000}]},
            "goals": [
                {"id": "g1", "name": "Car", "investments": [], "equity_percent": 60},
                {"id": "g2", "name": "Trip", "linked_assets": [
                    {"asset_id": "a1", "amount": 500},
                    {"asset_id": "gone", "amount": 200},
                ]},
            ],
        })
        doc = store.load()
        g1, g2 = doc["goals"]
        assert g1["linked_assets"] == []
        assert "investments" not in g1
        assert "equity_percent" not in g1
        assert g2["linked_assets"] == [{"asset_id": "a1", "amount": 500}]

        with open(store.path, encoding="utf-8") as f:
            on_disk = json.load(f)
        assert on_disk["goals"][0]["linked_assets"] == []

    def test_current_document_unchanged(self):
        doc = merge_with_defaults({"goals": [{"id": "g", "linked_assets": []}]})
        assert migrate(doc) is False

    def test_merge_handles_garbage(self):
        doc = merge_with_defaults({"assets": "nope", "goals": None, "settings": 3})
        assert doc["assets"] == {"items": []}
        assert doc["goals"] == []
        assert doc["settings"] == DEFAULT_SETTINGS


class TestSave:
    def test_round_trip(self, store, make_document, make_goal):
        doc = make_document(goals=[make_goal("g1", name="Wedding ₹")])
        assert store.save(doc) is True
        assert store.load() == doc

    def test_creates_directory(self, tmp_path):
        store = PlanStore(str(tmp_path / "nested" / "dir" / "plan.json"))
        assert store.save({"goals": []}) is True

    def test_unwritable_path(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")
        store = PlanStore(str(blocker / "plan.json"))
        assert store.save({"goals": []}) is False

    def test_unserialisable_document(self, store):
        assert store.save({"goals": [object()]}) is False
        assert not os.path.exists(store.path + ".tmp")
        assert not os.path.exists(store.path)

    def test_clear(self, store, make_document):
        store.save(make_document(settings={"equity_return": 15}))
        doc = store.clear()
        assert doc["settings"] == DEFAULT_SETTINGS
        assert store.load()["settings"] == DEFAULT_SETTINGS
        store.clear()


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(1000)}
    assert len(ids) == 1000
    assert PlanStore.generate_id() not in ids
