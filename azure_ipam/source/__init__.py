"""
Источник IPAM конфигурации из metadata-сервиса Azure.

- poll_gate: ограничение частоты опроса
- fetcher: HTTP запрос к metadata-сервису
- decoder: XML -> InterfaceDocument
- correlator: сопоставление с интерфейсами хоста по MAC
- builder: пулы и записи в адресном пространстве
- azure: AzureSource (start/stop/refresh)
"""

from .poll_gate import PollGate
from .fetcher import MetadataFetcher
from .decoder import InterfaceDocumentDecoder
from .correlator import InterfaceCorrelator, get_local_interfaces
from .builder import AddressHierarchyBuilder
from .azure import AzureSource, SourceState

__all__ = [
    "PollGate",
    "MetadataFetcher",
    "InterfaceDocumentDecoder",
    "InterfaceCorrelator",
    "get_local_interfaces",
    "AddressHierarchyBuilder",
    "AzureSource",
    "SourceState",
]
