"""Tests for the hot-reload runner."""
from unittest.mock import patch

import dev


def test_run_server_starts_main():
    with patch("main.main") as main:
        dev._run_server()
    main.assert_called_once_with()


def test_only_python_sources_trigger_reload():
    assert dev._is_source(None, "/srv/app/api/app.py")
    assert not dev._is_source(None, "/srv/app/content.db")
    assert not dev._is_source(None, "/srv/app/config/users.json")
