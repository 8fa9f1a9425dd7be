"""
Загрузчик конфигурации azure_ipam.

Порядок (каждый следующий перекрывает предыдущий):
1. Значения по умолчанию (core/config_schema.py)
2. YAML файл (явный путь или первый найденный из CONFIG_SEARCH_PATHS)
3. Переменные окружения AZURE_IPAM_*

Пример config.yaml:
    metadata:
      timeout: 5
      min_poll_period: 60
    address_space:
      id: LocalDefaultAddressSpace
      scope: local
    logging:
      level: DEBUG
      file_path: logs/azure_ipam.log
"""

import os
import logging
from typing import Any, Dict, Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_SEARCH_PATHS = (
    "config.yaml",
    "config.yml",
    ".azure_ipam.yaml",
)

# Переменная окружения -> (секция, ключ)
ENV_OVERRIDES = {
    "AZURE_IPAM_METADATA_URL": ("metadata", "url"),
    "AZURE_IPAM_TIMEOUT": ("metadata", "timeout"),
    "AZURE_IPAM_MIN_POLL_PERIOD": ("metadata", "min_poll_period"),
    "AZURE_IPAM_LOG_LEVEL": ("logging", "level"),
}


def _find_config_file() -> Optional[str]:
    """Ищет config.yaml в текущей директории."""
    for path in CONFIG_SEARCH_PATHS:
        if os.path.exists(path):
            return path
    return None


def _read_yaml(config_file: str) -> Dict[str, Any]:
    """Читает YAML файл, пустой файл = пустой словарь."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Ошибка чтения конфигурации: {e}",
            config_file=config_file,
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            "Корень конфигурации должен быть словарём",
            config_file=config_file,
        )
    return data


def _apply_env(data: Dict[str, Any]) -> None:
    """Переносит переменные окружения в словарь конфигурации."""
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            section_data = data.get(section) or {}
            section_data[key] = value
            data[section] = section_data
            logger.debug(f"{section}.{key} взят из {env_name}")


def load_config(config_file: Optional[str] = None) -> AppConfig:
    """
    Загружает и валидирует конфигурацию.

    Args:
        config_file: Путь к YAML файлу. Если указан и не существует, это ошибка;
            если не указан, файл ищется в текущей директории.

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: Файл не найден, не читается или не проходит валидацию
    """
    if config_file and not os.path.exists(config_file):
        raise ConfigError("Файл конфигурации не найден", config_file=config_file)

    path = config_file or _find_config_file()
    data: Dict[str, Any] = {}
    if path:
        data = _read_yaml(path)
        logger.debug(f"Конфигурация загружена из {path}")

    _apply_env(data)
    return validate_config(data, config_file=path)
