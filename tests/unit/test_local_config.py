"""Unit tests for the durable local key-value configuration."""

import json

import pytest

from src.core.config import constants, settings
from src.core.local_config import LocalConfigStore, resolve_script_url


@pytest.mark.unit
class TestLocalConfigStore:
    def test_values_survive_reopen(self, tmp_path):
        path = tmp_path / "config.json"
        LocalConfigStore(path).set(constants.ACTIVE_FOREMAN_KEY, "Joe")

        assert LocalConfigStore(path).get(constants.ACTIVE_FOREMAN_KEY) == "Joe"

    def test_delete_persists(self, tmp_path):
        path = tmp_path / "config.json"
        store = LocalConfigStore(path)
        store.set("a", "1")
        store.set("b", "2")

        store.delete("a")

        assert json.loads(path.read_text()) == {"b": "2"}

    def test_delete_missing_key_does_not_write(self, tmp_path):
        path = tmp_path / "config.json"

        LocalConfigStore(path).delete("missing")

        assert not path.exists()

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "config.json"

        LocalConfigStore(path).set("k", "v")

        assert path.exists()

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        store = LocalConfigStore(path)

        assert store.get(constants.ACTIVE_FOREMAN_KEY) is None

    def test_clear(self, tmp_path):
        store = LocalConfigStore(tmp_path / "config.json")
        store.set("k", "v")

        store.clear()

        assert store.get("k") is None


@pytest.mark.unit
class TestResolveScriptUrl:
    def test_falls_back_when_nothing_stored(self, local_config):
        assert resolve_script_url(local_config) == settings.sheet_script_url

    def test_uses_stored_apps_script_url(self, local_config):
        url = "https://script.google.com/macros/s/abc/exec"
        local_config.set(constants.SCRIPT_URL_KEY, url)

        assert resolve_script_url(local_config) == url

    def test_ignores_foreign_url(self, local_config):
        local_config.set(constants.SCRIPT_URL_KEY, "http://localhost:9999/exec")

        assert resolve_script_url(local_config) == settings.sheet_script_url
