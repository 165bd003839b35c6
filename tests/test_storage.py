"""Tests for the local storage backends"""

import json

import pytest

from storefront.core.storage import FileStorage, MemoryStorage, create_storage
from storefront.exceptions import StorageError
from storefront.services.cart_store import CART_STORAGE_KEY, CartStore


@pytest.fixture
def storage_file(tmp_path):
    return tmp_path / "state" / "local_storage.json"


class TestFileStorage:

    def test_missing_file_reads_as_empty(self, storage_file):
        storage = FileStorage(str(storage_file))

        assert storage.get_item("anything") is None
        assert not storage_file.exists()

    def test_set_get_and_remove(self, storage_file):
        storage = FileStorage(str(storage_file))

        storage.set_item("user-session-id", "session_1_abc")
        storage.set_item("other", "valor")

        assert storage.get_item("user-session-id") == "session_1_abc"
        assert json.loads(storage_file.read_text(encoding="utf-8")) == {
            "user-session-id": "session_1_abc",
            "other": "valor",
        }

        storage.remove_item("user-session-id")

        assert storage.get_item("user-session-id") is None
        assert storage.get_item("other") == "valor"

    def test_creates_parent_directories_without_leftovers(self, storage_file):
        FileStorage(str(storage_file)).set_item("k", "v")

        assert storage_file.exists()
        assert [p.name for p in storage_file.parent.iterdir()] == ["local_storage.json"]

    def test_remove_absent_key_does_not_write(self, storage_file):
        storage = FileStorage(str(storage_file))

        storage.remove_item("missing")

        assert not storage_file.exists()

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "local_storage.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            FileStorage(str(path)).get_item("k")

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "local_storage.json"
        path.write_text('["a", "b"]', encoding="utf-8")

        with pytest.raises(StorageError):
            FileStorage(str(path)).get_item("k")

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        storage = FileStorage(str(blocker / "local_storage.json"))

        with pytest.raises(StorageError):
            storage.set_item("k", "v")


class TestCreateStorage:

    def test_path_gives_file_storage(self, storage_file):
        storage = create_storage(str(storage_file))

        assert isinstance(storage, FileStorage)
        assert storage.path == str(storage_file)

    @pytest.mark.parametrize("path", ["", None])
    def test_no_path_gives_memory_storage(self, path):
        assert isinstance(create_storage(path), MemoryStorage)


def test_cart_survives_restart_on_file_storage(storage_file, make_product):
    first = CartStore(FileStorage(str(storage_file)))
    first.load()
    first.add_to_cart(make_product(1, 89.9, "Perfume"), 2)
    first.add_to_cart(make_product(2, 45.0, "Batom"))

    second = CartStore(create_storage(str(storage_file)))
    second.load()

    assert [(item.product.id, item.quantity) for item in second.items] == [(1, 2), (2, 1)]
    assert second.get_total_price() == pytest.approx(224.8)

    second.clear_cart()

    assert FileStorage(str(storage_file)).get_item(CART_STORAGE_KEY) is None


def test_cart_with_corrupt_file_starts_empty(tmp_path, make_product):
    path = tmp_path / "local_storage.json"
    path.write_text("{not json", encoding="utf-8")
    store = CartStore(FileStorage(str(path)))

    store.load()
    store.add_to_cart(make_product(1, 50.0))

    assert store.is_loaded
    assert store.get_total_items() == 1
