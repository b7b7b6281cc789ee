import pytest
import yaml
from overunder.utils.config import Config, ConfigError


class TestConfig:
    def test_load_valid_config(self, tmp_path):
        """Values load from a YAML file"""
        config_content = {
            "llm": {"model": "gpt-4o-mini"},
            "storage": {"backend": "sqlite"},
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(config_content))

        config = Config(str(config_file))

        assert config.get("llm.model") == "gpt-4o-mini"
        assert config.get("storage.backend") == "sqlite"

    def test_get_nested_key(self, tmp_path):
        """Dot keys reach nested mappings and lists"""
        config_content = {
            "storage": {
                "backend": "json",
                "keys": ["overunder_user", "overunder_sessions"],
            }
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(config_content))

        config = Config(str(config_file))

        assert config.get("storage.backend") == "json"
        assert config.get("storage.keys") == ["overunder_user", "overunder_sessions"]

    def test_get_with_default(self, tmp_path):
        """Missing keys return the default"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"llm": {"model": "x"}}))

        config = Config(str(config_file))

        assert config.get("nonexistent.key", "default") == "default"
        assert config.get("nonexistent.key") is None
        assert config.get("llm.model.deeper") is None

    def test_section_returns_mapping(self, tmp_path):
        """section() returns a dict, empty when absent or not a mapping"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"llm": {"model": "x"}, "debug": True}))

        config = Config(str(config_file))

        assert config.section("llm") == {"model": "x"}
        assert config.section("storage") == {}
        assert config.section("debug") == {}

    def test_empty_file_is_empty_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        config = Config(str(config_file))

        assert config.get("llm.model") is None

    def test_missing_file_raises_error(self):
        """A missing file raises ConfigError"""
        with pytest.raises(ConfigError):
            Config("/nonexistent/path/config.yaml")

    def test_invalid_yaml_raises_error(self, tmp_path):
        """Invalid YAML raises ConfigError"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError):
            Config(str(config_file))

    def test_non_mapping_root_raises_error(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            Config(str(config_file))
