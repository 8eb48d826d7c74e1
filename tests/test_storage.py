"""Options, default settings import and expected names."""

import json

import pytest

import storage


class TestOptions:
    def test_defaults(self, monkeypatch):
        for env_name, _ in storage.ENV_OVERRIDES.values():
            monkeypatch.delenv(env_name, raising=False)

        assert storage.get_options() == storage.DEFAULT_OPTIONS

    def test_file_then_environment(self, data_root, monkeypatch):
        """
        Given options.json sets gateway and port
        When AZCONF_PORT is also set
        Then the environment wins over the file, the file over the defaults
        """
        (data_root / "options.json").write_text(json.dumps({"gateway": "mock", "port": 9000, "bogus": 1}))
        monkeypatch.setenv("AZCONF_PORT", "9100")
        monkeypatch.delenv("AZCONF_GATEWAY", raising=False)

        options = storage.get_options()

        assert options["gateway"] == "mock"
        assert options["port"] == 9100
        assert "bogus" not in options

    def test_invalid_environment_value_is_ignored(self, monkeypatch):
        monkeypatch.setenv("AZCONF_AZ_TIMEOUT", "soon")

        assert storage.get_options()["az_timeout"] == storage.DEFAULT_OPTIONS["az_timeout"]


class TestDefaultSettings:
    def test_import_copies_content(self, data_root):
        content = json.dumps([{"name": "A", "value": ""}]).encode()

        target = storage.import_default_settings(content)

        assert target == data_root / "default.json"
        assert target.read_bytes() == content
        assert (data_root / "tmp").is_dir()

    def test_import_rejects_non_json(self, data_root):
        with pytest.raises(ValueError):
            storage.import_default_settings(b"not json")

        assert not (data_root / "default.json").exists()

    def test_expected_names(self, data_root):
        (data_root / "default.json").write_text(json.dumps([
            {"name": "B", "value": "x"},
            {"name": "A", "value": ""},
            {"value": "no name"},
        ]))

        assert storage.read_expected_names() == ["B", "A"]

    def test_no_file_means_no_expected_names(self):
        assert storage.read_expected_names() == []

    def test_wrong_shape_means_no_expected_names(self, data_root):
        (data_root / "default.json").write_text(json.dumps({"A": "1"}))

        assert storage.read_expected_names() == []
