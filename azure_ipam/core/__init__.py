"""
Core модули azure_ipam.

- exceptions: типизированные ошибки обновления и хранилища
- logging: структурированное логирование (JSON/human)
- config_schema: pydantic схемы конфигурации
- models: документ интерфейсов и результаты сопоставления
- constants: URL, значения по умолчанию, нормализация MAC
"""

from .exceptions import (
    AzureIPAMError,
    SourceError,
    MetadataFetchError,
    MetadataConnectionError,
    MetadataTimeoutError,
    MetadataHTTPError,
    DocumentDecodeError,
    LocalInterfaceError,
    InvalidSubnetError,
    InvalidAddressError,
    AddressSpaceCreationError,
    AddressPoolCreationError,
    AddressRecordCreationError,
    AddressSinkError,
    AddressPoolExistsError,
    ConfigError,
    format_error_for_log,
    is_retryable,
)
from .logging import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
    StructuredLogger,
    JSONFormatter,
    HumanFormatter,
    OperationLog,
    LogConfig,
    RotationType,
)
from .models import (
    AddressDescriptor,
    SubnetDescriptor,
    InterfaceDescriptor,
    InterfaceDocument,
    LocalInterface,
    CorrelatedInterface,
    BuildStats,
)
from .constants import (
    normalize_mac_raw,
    normalize_mac_ieee,
)

__all__ = [
    # Exceptions
    "AzureIPAMError",
    "SourceError",
    "MetadataFetchError",
    "MetadataConnectionError",
    "MetadataTimeoutError",
    "MetadataHTTPError",
    "DocumentDecodeError",
    "LocalInterfaceError",
    "InvalidSubnetError",
    "InvalidAddressError",
    "AddressSpaceCreationError",
    "AddressPoolCreationError",
    "AddressRecordCreationError",
    "AddressSinkError",
    "AddressPoolExistsError",
    "ConfigError",
    "format_error_for_log",
    "is_retryable",
    # Logging
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
    "StructuredLogger",
    "JSONFormatter",
    "HumanFormatter",
    "OperationLog",
    "LogConfig",
    "RotationType",
    # Models
    "AddressDescriptor",
    "SubnetDescriptor",
    "InterfaceDescriptor",
    "InterfaceDocument",
    "LocalInterface",
    "CorrelatedInterface",
    "BuildStats",
    # MAC
    "normalize_mac_raw",
    "normalize_mac_ieee",
]
