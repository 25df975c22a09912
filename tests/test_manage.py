import pytest

from bookstore.auth import verify_password
from bookstore.manage import create_admin, main
from bookstore.storage import JsonDocumentStore, MemoryDocumentStore, load_users


def test_create_admin_hashes_password():
    store = MemoryDocumentStore({"users": {"users": [{"id": 3, "email": "a@b.c"}]}})
    user = create_admin(store, "new@bookstore.com", "s3cret", "New Admin")
    assert user["id"] == 4
    assert user["role"] == "admin"
    assert user["password"] != "s3cret"
    assert verify_password("s3cret", load_users(store)[-1]["password"])


def test_create_admin_rejects_duplicate_email():
    store = MemoryDocumentStore({"users": {"users": [{"id": 1, "email": "a@b.c"}]}})
    with pytest.raises(ValueError):
        create_admin(store, "a@b.c", "x")


def test_cli_writes_users_file(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "bookstore.manage.get_settings",
        lambda: type("S", (), {"data_dir": tmp_path})(),
    )
    assert main(["create-admin", "--email", "cli@bookstore.com", "--password", "pw"]) == 0
    assert main(["create-admin", "--email", "cli@bookstore.com", "--password", "pw"]) == 1
    users = load_users(JsonDocumentStore(tmp_path))
    assert [u["email"] for u in users] == ["cli@bookstore.com"]
