"""
Pydantic схемы для валидации config.yaml.

Ошибки валидации выбрасывают ConfigError.

Пример использования:
    from azure_ipam.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yaml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from .constants import (
    ADDRESS_SPACE_SCOPES,
    AZURE_QUERY_URL,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MIN_POLL_PERIOD,
    LOCAL_DEFAULT_ADDRESS_SPACE_ID,
    LOCAL_SCOPE,
)
from .exceptions import ConfigError


class MetadataConfig(BaseModel):
    """Настройки metadata-сервиса."""
    url: str = AZURE_QUERY_URL
    timeout: float = Field(default=DEFAULT_FETCH_TIMEOUT, gt=0, le=300)
    min_poll_period: float = Field(default=DEFAULT_MIN_POLL_PERIOD, ge=0, le=86400)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Проверяет что URL валидный."""
        if not v.startswith(("http://", "https://")):
            raise PydanticCustomError(
                "invalid_url",
                "URL metadata-сервиса должен начинаться с http:// или https://",
            )
        return v


class AddressSpaceConfig(BaseModel):
    """Адресное пространство, в которое публикуется конфигурация."""
    id: str = Field(default=LOCAL_DEFAULT_ADDRESS_SPACE_ID, min_length=1)
    scope: str = LOCAL_SCOPE

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v: str) -> str:
        """Проверяет что scope известен."""
        if v not in ADDRESS_SPACE_SCOPES:
            raise PydanticCustomError(
                "invalid_scope",
                "scope должен быть одним из: {scopes}",
                {"scopes": ", ".join(ADDRESS_SPACE_SCOPES)},
            )
        return v


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: str = Field(default="size", pattern="^(size|time|none)$")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    address_space: AddressSpaceConfig = Field(default_factory=AddressSpaceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    debug: bool = False


def validate_config(config_dict: dict, config_file: Optional[str] = None) -> AppConfig:
    """
    Валидирует словарь конфигурации.

    Args:
        config_dict: Словарь из YAML
        config_file: Путь к файлу (для сообщения об ошибке)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig(**config_dict)
    except Exception as e:
        error_msg = str(e)
        key = None
        if hasattr(e, "errors"):
            errors = e.errors()
            if errors:
                first_error = errors[0]
                key = ".".join(str(x) for x in first_error.get("loc", []))
                msg = first_error.get("msg", "Unknown error")
                error_msg = f"{key}: {msg}"

        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {error_msg}",
            config_file=config_file,
            key=key,
        ) from e


def get_default_config() -> AppConfig:
    """Возвращает конфигурацию по умолчанию."""
    return AppConfig()
