import json
from pathlib import Path

import pytest

from studio_cms.auth.passwords import hash_password, verify_password
from studio_cms.services.user_store import UserStore
from studio_cms.utils.exceptions import ConfigError, UserNotFoundError


def make_store(tmp_path: Path) -> UserStore:
    return UserStore(tmp_path / "users.json", bcrypt_rounds=4)


def test_default_admin_created_once(tmp_path: Path):
    store = make_store(tmp_path)

    created = store.ensure_default_admin("admin", "admin123", "admin@studiopickens.com")
    assert created is not None
    assert created.id == 1
    assert created.role == "admin"
    assert verify_password("admin123", created.password_hash)

    assert store.ensure_default_admin("admin", "other", None) is None
    assert len(store.load_users()) == 1

    raw = json.loads((tmp_path / "users.json").read_text(encoding="utf-8"))
    record = raw["users"][0]
    assert record["username"] == "admin"
    assert "passwordHash" in record
    assert "createdAt" in record


def test_find_by_username_or_email(tmp_path: Path):
    store = make_store(tmp_path)
    store.ensure_default_admin("admin", "admin123", "admin@studiopickens.com")

    assert store.find_by_login("admin").id == 1
    assert store.find_by_login("admin@studiopickens.com").id == 1
    assert store.find_by_login("nobody") is None
    assert store.find_by_login("") is None


def test_record_login_and_change_password(tmp_path: Path):
    store = make_store(tmp_path)
    store.ensure_default_admin("admin", "admin123")

    user = store.record_login(1)
    assert user.last_login is not None

    store.change_password(1, hash_password("new-secret", rounds=4))
    reloaded = store.find_by_id(1)
    assert verify_password("new-secret", reloaded.password_hash)
    assert reloaded.updated_at is not None
    assert reloaded.last_login == user.last_login


def test_update_missing_user(tmp_path: Path):
    store = make_store(tmp_path)
    store.ensure_default_admin("admin", "admin123")

    with pytest.raises(UserNotFoundError):
        store.update_user(99, last_login="2024-01-01T00:00:00Z")


def test_bare_list_file_is_accepted(tmp_path: Path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps([{
        "id": 3,
        "username": "legacy",
        "email": None,
        "passwordHash": hash_password("pw1234", rounds=4),
        "role": "admin",
        "createdAt": "2024-01-01T00:00:00Z",
    }]), encoding="utf-8")

    store = make_store(tmp_path)
    assert store.ensure_default_admin("admin", "admin123") is None
    assert store.find_by_login("legacy").id == 3


def test_corrupt_file_raises_config_error(tmp_path: Path):
    (tmp_path / "users.json").write_text("{not json", encoding="utf-8")
    store = make_store(tmp_path)

    with pytest.raises(ConfigError):
        store.load_users()
