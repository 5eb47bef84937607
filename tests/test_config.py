"""Tests for BuildConfig and load_config."""

import json

import pytest
from pydantic import ValidationError

from crxpack.config import BuildConfig, detect_format, load_config
from crxpack.constants import CrxConstants


class TestBuildConfig:
    """Tests for config defaults and validation."""

    def test_defaults(self):
        config = BuildConfig()
        assert config.manifest == list(CrxConstants.DEFAULT_MANIFEST)
        assert config.key_size == 2048
        assert config.strict_manifest is False
        assert config.key_suffix == ".key"
        assert config.compression_level == -1

    @pytest.mark.parametrize("name", ["/abs.js", "../escape.js", "a/../../b.js", "dir\\file.js", "", "./popup.js"])
    def test_rejects_unsafe_manifest_entries(self, name):
        with pytest.raises(ValidationError):
            BuildConfig(manifest=[name])

    def test_rejects_duplicates(self):
        with pytest.raises(ValidationError):
            BuildConfig(manifest=["a.js", "a.js"])

    def test_rejects_small_keys(self):
        with pytest.raises(ValidationError):
            BuildConfig(key_size=1024)

    @pytest.mark.parametrize("suffix", ["key", ".", ".a/b"])
    def test_rejects_bad_key_suffix(self, suffix):
        with pytest.raises(ValidationError):
            BuildConfig(key_suffix=suffix)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            BuildConfig(manifset=["a.js"])


class TestLoadConfig:
    """Tests for reading config files."""

    def test_detect_format(self):
        assert detect_format("config.json") == "json"
        assert detect_format("config.yaml") == "yaml"
        assert detect_format("config.YML") == "yaml"
        with pytest.raises(ValueError):
            detect_format("config.toml")

    def test_load_json(self, temp_dir):
        path = temp_dir / "build.json"
        path.write_text(json.dumps({"manifest": ["a.js"], "strict_manifest": True}))
        config = load_config(path)
        assert config.manifest == ["a.js"]
        assert config.strict_manifest is True

    def test_load_yaml(self, temp_dir):
        path = temp_dir / "build.yaml"
        path.write_text("manifest:\n  - manifest.json\n  - popup.js\nkey_size: 4096\n")
        config = load_config(path)
        assert config.manifest == ["manifest.json", "popup.js"]
        assert config.key_size == 4096

    def test_empty_yaml_uses_defaults(self, temp_dir):
        path = temp_dir / "empty.yml"
        path.write_text("")
        assert load_config(path) == BuildConfig()

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_mapping_root(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(path)
