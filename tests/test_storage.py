"""Unit tests for storage backends."""
import json

import pytest
from fitness_tracker.services.session_store import STORAGE_KEY, SessionStore
from fitness_tracker.storage.backends import (
    FileStorage,
    InMemoryStorage,
    get_storage_backend,
)


class TestInMemoryStorage:
    """Test cases for InMemoryStorage."""

    def test_get_missing_key(self):
        assert InMemoryStorage().get_item("missing") is None

    def test_set_and_get(self):
        storage = InMemoryStorage()
        storage.set_item("slot", "[]")
        storage.set_item("slot", "[1]")

        assert storage.get_item("slot") == "[1]"

    def test_initial_items_are_copied(self):
        items = {"slot": "[]"}
        storage = InMemoryStorage(items)
        storage.set_item("slot", "[1]")

        assert items == {"slot": "[]"}


class TestFileStorage:
    """Test cases for FileStorage."""

    def test_missing_file_reads_empty(self, tmp_path):
        assert FileStorage(tmp_path / "storage.json").get_item("slot") is None

    def test_set_item_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        storage = FileStorage(path)
        storage.set_item("slot", "[]")
        storage.set_item("other", "{}")

        assert json.loads(path.read_text(encoding="utf-8")) == {"slot": "[]", "other": "{}"}
        assert storage.get_item("slot") == "[]"
        assert not (tmp_path / "nested" / "storage.json.tmp").exists()

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError):
            FileStorage(path).get_item("slot")

    def test_session_store_survives_corrupt_file(self, tmp_path, make_session):
        """Test that a corrupt file reads as empty and is left alone on save."""
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        store = SessionStore(FileStorage(path))

        assert store.get_all() == []
        store.save(make_session())
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_session_store_round_trip_through_file(self, tmp_path, make_session):
        path = tmp_path / "storage.json"
        session = make_session()
        SessionStore(FileStorage(path)).save(session)

        assert SessionStore(FileStorage(path)).get_all() == [session]
        assert STORAGE_KEY in json.loads(path.read_text(encoding="utf-8"))


class TestGetStorageBackend:
    """Test cases for backend selection."""

    def test_memory(self):
        assert isinstance(get_storage_backend("memory"), InMemoryStorage)

    def test_file(self, tmp_path):
        backend = get_storage_backend("file", str(tmp_path / "storage.json"))

        assert isinstance(backend, FileStorage)
        assert backend.path == tmp_path / "storage.json"

    def test_file_without_path(self):
        assert get_storage_backend("file", None) is None

    def test_none(self):
        assert get_storage_backend("none") is None
