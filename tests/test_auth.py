"""Tests for api.auth."""
import json

from api.auth import Auth


def test_resolve(users_file):
    auth = Auth(str(users_file))
    assert auth.resolve("alice-secret-key") == "user_alice"
    assert auth.resolve("bob-secret-key") == "user_bob"
    assert auth.resolve("wrong") is None
    assert auth.resolve("") is None


def test_missing_file_rejects_everyone(tmp_path):
    assert Auth(str(tmp_path / "absent.json")).resolve("anything") is None


def test_invalid_json_rejects_everyone(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json")
    assert Auth(str(path)).resolve("anything") is None


def test_entries_without_key_never_match(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps({"authorized_users": [{"id": "ghost"}]}))
    assert Auth(str(path)).resolve("") is None
    assert Auth(str(path)).resolve("None") is None
