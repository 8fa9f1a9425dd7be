"""
Тесты конфигурации: pydantic схема и загрузчик YAML.
"""

import pytest

from azure_ipam.config import load_config
from azure_ipam.core.config_schema import AppConfig, get_default_config, validate_config
from azure_ipam.core.constants import AZURE_QUERY_URL
from azure_ipam.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Переменные окружения не влияют на тесты."""
    for name in (
        "AZURE_IPAM_METADATA_URL",
        "AZURE_IPAM_TIMEOUT",
        "AZURE_IPAM_MIN_POLL_PERIOD",
        "AZURE_IPAM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestConfigSchema:
    """Валидация AppConfig."""

    def test_defaults(self):
        config = get_default_config()

        assert config.metadata.url == AZURE_QUERY_URL
        assert config.metadata.timeout == 10.0
        assert config.metadata.min_poll_period == 30
        assert config.address_space.id == "LocalDefaultAddressSpace"
        assert config.address_space.scope == "local"
        assert config.logging.level == "INFO"
        assert config.debug is False

    def test_partial_override(self):
        config = validate_config({"metadata": {"min_poll_period": 0}})

        assert config.metadata.min_poll_period == 0
        assert config.metadata.url == AZURE_QUERY_URL

    @pytest.mark.parametrize("data,key", [
        ({"metadata": {"url": "ftp://host/"}}, "metadata.url"),
        ({"metadata": {"timeout": 0}}, "metadata.timeout"),
        ({"metadata": {"min_poll_period": -1}}, "metadata.min_poll_period"),
        ({"address_space": {"scope": "regional"}}, "address_space.scope"),
        ({"address_space": {"id": ""}}, "address_space.id"),
        ({"logging": {"level": "VERBOSE"}}, "logging.level"),
    ])
    def test_invalid_values(self, data, key):
        with pytest.raises(ConfigError) as exc_info:
            validate_config(data, config_file="config.yaml")

        assert exc_info.value.key == key
        assert exc_info.value.config_file == "config.yaml"

    @pytest.mark.parametrize("scope", ["local", "global"])
    def test_known_scopes(self, scope):
        assert AppConfig(address_space={"scope": scope}).address_space.scope == scope

    def test_unknown_scope_lists_allowed(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"address_space": {"scope": "Global"}})

        assert "local, global" in str(exc_info.value)

    def test_https_url_allowed(self):
        config = AppConfig(metadata={"url": "https://metadata.local/if"})
        assert config.metadata.url == "https://metadata.local/if"


@pytest.mark.unit
class TestLoadConfig:
    """Загрузка из файла и переменных окружения."""

    def test_no_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config == get_default_config()

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "ipam.yaml"
        path.write_text(
            "metadata:\n"
            "  timeout: 5\n"
            "  min_poll_period: 60\n"
            "address_space:\n"
            "  id: GlobalDefaultAddressSpace\n"
            "  scope: global\n",
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.metadata.timeout == 5
        assert config.metadata.min_poll_period == 60
        assert config.address_space.scope == "global"

    def test_search_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yml").write_text("debug: true\n", encoding="utf-8")

        assert load_config().debug is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == get_default_config()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(tmp_path / "missing.yaml"))

        assert exc_info.value.config_file.endswith("missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("metadata: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_dict_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "ipam.yaml"
        path.write_text("metadata:\n  timeout: 5\n", encoding="utf-8")
        monkeypatch.setenv("AZURE_IPAM_TIMEOUT", "2.5")
        monkeypatch.setenv("AZURE_IPAM_METADATA_URL", "http://127.0.0.1:9000/if")
        monkeypatch.setenv("AZURE_IPAM_LOG_LEVEL", "DEBUG")

        config = load_config(str(path))

        assert config.metadata.timeout == 2.5
        assert config.metadata.url == "http://127.0.0.1:9000/if"
        assert config.logging.level == "DEBUG"

    def test_env_with_null_section(self, tmp_path, monkeypatch):
        path = tmp_path / "ipam.yaml"
        path.write_text("metadata:\n", encoding="utf-8")
        monkeypatch.setenv("AZURE_IPAM_MIN_POLL_PERIOD", "0")

        assert load_config(str(path)).metadata.min_poll_period == 0

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("AZURE_IPAM_TIMEOUT", "soon")

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert exc_info.value.key == "metadata.timeout"
