"""
Типизированные исключения для azure_ipam.

Иерархия:
    AzureIPAMError (базовый)
    ├── SourceError (обновление конфигурации)
    │   ├── MetadataFetchError (запрос к metadata-сервису)
    │   │   ├── MetadataConnectionError (подключение)
    │   │   ├── MetadataTimeoutError (таймаут)
    │   │   └── MetadataHTTPError (код ответа не 200)
    │   ├── DocumentDecodeError (разбор XML)
    │   ├── LocalInterfaceError (список локальных интерфейсов)
    │   ├── InvalidSubnetError (некорректный префикс)
    │   ├── InvalidAddressError (некорректный IP)
    │   ├── AddressSpaceCreationError
    │   ├── AddressPoolCreationError
    │   └── AddressRecordCreationError
    ├── AddressSinkError (ошибки хранилища адресов)
    │   └── AddressPoolExistsError (пул уже существует)
    └── ConfigError (конфигурация)

Пример использования:
    from azure_ipam.core.exceptions import MetadataFetchError, InvalidSubnetError

    try:
        source.refresh()
    except MetadataFetchError as e:
        logger.warning(f"Metadata недоступен: {e}")
    except InvalidSubnetError as e:
        logger.error(f"Плохой префикс: {e.prefix}")
"""

from typing import Optional, Any


class AzureIPAMError(Exception):
    """
    Базовое исключение для всех ошибок azure_ipam.

    Attributes:
        message: Описание ошибки
        details: Дополнительные детали (dict)
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = dict(details or {})
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> dict:
        """Сериализация для логов/отчётов."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# === Source Errors ===

class SourceError(AzureIPAMError):
    """
    Ошибка при обновлении конфигурации из источника.

    Attributes:
        source: Имя источника (Azure)
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.source = source
        details = dict(details or {})
        if source:
            details["source"] = source
        super().__init__(message, details)


class MetadataFetchError(SourceError):
    """
    Ошибка запроса к metadata-сервису хоста.

    Attributes:
        url: URL запроса

    Пример:
        raise MetadataFetchError("Request failed", url="http://169.254.169.254/...")
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.url = url
        details = dict(details or {})
        if url:
            details["url"] = url
        super().__init__(message, details=details)


class MetadataConnectionError(MetadataFetchError):
    """Metadata-сервис недоступен (connection refused, нет маршрута)."""
    pass


class MetadataTimeoutError(MetadataFetchError):
    """
    Таймаут запроса к metadata-сервису.

    Attributes:
        timeout_seconds: Значение таймаута
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        details: Optional[dict] = None,
    ):
        self.timeout_seconds = timeout_seconds
        details = dict(details or {})
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, url, details)


class MetadataHTTPError(MetadataFetchError):
    """
    Metadata-сервис ответил кодом, отличным от 200.

    Attributes:
        status_code: HTTP код ответа

    Пример:
        raise MetadataHTTPError("Unexpected status", status_code=503)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        self.status_code = status_code
        details = dict(details or {})
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, url, details)


class DocumentDecodeError(SourceError):
    """
    Ошибка разбора XML документа интерфейсов.

    Attributes:
        element: Элемент, на котором споткнулся разбор (если известен)
    """

    def __init__(
        self,
        message: str,
        element: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.element = element
        details = dict(details or {})
        if element:
            details["element"] = element
        super().__init__(message, details=details)


class LocalInterfaceError(SourceError):
    """Не удалось получить список локальных сетевых интерфейсов."""
    pass


class InvalidSubnetError(SourceError):
    """
    Префикс подсети не разбирается как CIDR.

    Attributes:
        prefix: Исходная строка префикса
        interface: Локальный интерфейс
    """

    def __init__(
        self,
        message: str,
        prefix: Optional[str] = None,
        interface: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.prefix = prefix
        self.interface = interface
        details = dict(details or {})
        if prefix is not None:
            details["prefix"] = prefix
        if interface:
            details["interface"] = interface
        super().__init__(message, details=details)


class InvalidAddressError(SourceError):
    """
    IP-адрес не разбирается.

    Attributes:
        address: Исходная строка адреса
        subnet: Подсеть, в которой описан адрес
    """

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        subnet: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.address = address
        self.subnet = subnet
        details = dict(details or {})
        if address is not None:
            details["address"] = address
        if subnet:
            details["subnet"] = subnet
        super().__init__(message, details=details)


class AddressSpaceCreationError(SourceError):
    """Хранилище не смогло создать адресное пространство."""
    pass


class AddressPoolCreationError(SourceError):
    """
    Ошибка создания пула (кроме "пул уже существует").

    Attributes:
        interface: Локальный интерфейс
        priority: Приоритет пула
        subnet: Подсеть пула
    """

    def __init__(
        self,
        message: str,
        interface: Optional[str] = None,
        priority: Optional[int] = None,
        subnet: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.interface = interface
        self.priority = priority
        self.subnet = subnet
        details = dict(details or {})
        if interface:
            details["interface"] = interface
        if priority is not None:
            details["priority"] = priority
        if subnet:
            details["subnet"] = subnet
        super().__init__(message, details=details)


class AddressRecordCreationError(SourceError):
    """
    Ошибка регистрации адреса в пуле.

    Attributes:
        address: IP-адрес
        subnet: Подсеть пула
    """

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        subnet: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.address = address
        self.subnet = subnet
        details = dict(details or {})
        if address:
            details["address"] = address
        if subnet:
            details["subnet"] = subnet
        super().__init__(message, details=details)


# === Sink Errors ===

class AddressSinkError(AzureIPAMError):
    """Ошибка на стороне хранилища адресов."""
    pass


class AddressPoolExistsError(AddressSinkError):
    """
    Пул с таким ключом уже есть в адресном пространстве.

    Не является ошибкой обновления: builder продолжает работу
    с существующим пулом из атрибута pool.

    Attributes:
        pool: Существующий пул
    """

    def __init__(
        self,
        message: str,
        pool: Any = None,
        details: Optional[dict] = None,
    ):
        self.pool = pool
        super().__init__(message, details)


# === Config Errors ===

class ConfigError(AzureIPAMError):
    """
    Ошибка конфигурации.

    Attributes:
        config_file: Путь к файлу конфигурации
        key: Ключ конфигурации с ошибкой

    Пример:
        raise ConfigError("Invalid value", config_file="config.yaml", key="metadata.url")
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.config_file = config_file
        self.key = key
        details = dict(details or {})
        if config_file:
            details["config_file"] = config_file
        if key:
            details["key"] = key
        super().__init__(message, details)


# === Utility Functions ===

def format_error_for_log(error: Exception) -> str:
    """
    Форматирует ошибку для вывода в лог.

    Args:
        error: Исключение

    Returns:
        str: Отформатированная строка ошибки
    """
    if isinstance(error, AzureIPAMError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def is_retryable(error: Exception) -> bool:
    """
    Проверяет, имеет ли смысл ждать следующего тика.

    Повторов внутри обновления нет, но транспортные сбои и 5xx
    обычно проходят сами, в отличие от ошибок в данных.

    Args:
        error: Исключение

    Returns:
        bool: True если ошибка временная
    """
    if isinstance(error, MetadataHTTPError):
        return error.status_code is not None and error.status_code >= 500
    return isinstance(error, (MetadataConnectionError, MetadataTimeoutError))
