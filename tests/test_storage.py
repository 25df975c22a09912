import json

import pytest

from bookstore.errors import StorageError
from bookstore.storage import (
    CART,
    PRODUCTS,
    USERS,
    JsonDocumentStore,
    MemoryDocumentStore,
    load_products,
    save_products,
)


def test_missing_files_read_as_defaults(tmp_path):
    store = JsonDocumentStore(tmp_path)
    assert store.read(PRODUCTS) == {"products": []}
    assert store.read(USERS) == {"users": []}
    assert store.read(CART)["items"] == []


def test_malformed_file_reads_as_default(tmp_path):
    (tmp_path / "books.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "users.json").write_text("[1, 2]", encoding="utf-8")
    store = JsonDocumentStore(tmp_path)
    assert load_products(store) == []
    assert store.read(USERS) == {"users": []}


def test_write_replaces_whole_document(tmp_path):
    store = JsonDocumentStore(tmp_path / "data")
    save_products(store, [{"id": 1, "title": "Ion"}])
    save_products(store, [{"id": 2, "title": "Maitreyi"}])
    on_disk = json.loads((tmp_path / "data" / "books.json").read_text(encoding="utf-8"))
    assert on_disk == {"products": [{"id": 2, "title": "Maitreyi"}]}
    assert load_products(store) == [{"id": 2, "title": "Maitreyi"}]


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonDocumentStore(blocker / "data")
    with pytest.raises(StorageError):
        save_products(store, [])


def test_unknown_collection(tmp_path):
    with pytest.raises(KeyError):
        JsonDocumentStore(tmp_path).read("orders")
    with pytest.raises(KeyError):
        MemoryDocumentStore().write("orders", {})


def test_memory_store_isolates_callers_from_stored_state():
    store = MemoryDocumentStore()
    document = {"products": [{"id": 1}]}
    store.write(PRODUCTS, document)
    document["products"].append({"id": 2})
    read = store.read(PRODUCTS)
    read["products"].clear()
    assert load_products(store) == [{"id": 1}]


def test_last_writer_wins():
    store = MemoryDocumentStore({"products": {"products": []}})
    first = load_products(store)
    second = load_products(store)
    first.append({"id": 1})
    second.append({"id": 2})
    save_products(store, first)
    save_products(store, second)
    assert load_products(store) == [{"id": 2}]
