"""
azure_ipam - источник IPAM конфигурации из metadata-сервиса Azure.

Периодически запрашивает у агента хоста описание сетевых интерфейсов,
сопоставляет его с интерфейсами ОС по MAC и публикует адресное
пространство (пулы и адреса) во внешнее хранилище.

Пример использования:
    from azure_ipam import AzureSource, MemoryAddressSink, load_config

    source = AzureSource.from_config(load_config())
    source.start(MemoryAddressSink())
    source.refresh()
"""

from .config import load_config
from .sink import AddressConfigSink, MemoryAddressSink
from .source import AzureSource, SourceState

__version__ = "0.1.0"

__all__ = [
    "AzureSource",
    "SourceState",
    "AddressConfigSink",
    "MemoryAddressSink",
    "load_config",
    "__version__",
]
