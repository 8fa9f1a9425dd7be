"""
Хранилища адресов.

- base: абстрактный интерфейс, который вызывает источник конфигурации
- memory: реализация в памяти (CLI, тесты)
"""

from .base import AddressConfigSink, AddressSpace, AddressPool
from .memory import (
    MemoryAddressSink,
    MemoryAddressSpace,
    MemoryAddressPool,
    MemoryAddressRecord,
)

__all__ = [
    "AddressConfigSink",
    "AddressSpace",
    "AddressPool",
    "MemoryAddressSink",
    "MemoryAddressSpace",
    "MemoryAddressPool",
    "MemoryAddressRecord",
]
