"""
In-memory хранилище адресов.

Используется CLI для показа результата обновления и тестами.
Ничего не сохраняет между перезапусками и не выделяет адреса.

Пример использования:
    sink = MemoryAddressSink()
    source.start(sink)
    source.refresh()
    print(sink.get_address_space("LocalDefaultAddressSpace").to_dict())
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Any

from ..core.exceptions import AddressPoolExistsError, AddressSinkError
from .base import (
    AddressConfigSink,
    AddressPool,
    AddressSpace,
    IPAddress,
    IPNetwork,
)

logger = logging.getLogger(__name__)

PoolKey = Tuple[str, int, IPNetwork]


@dataclass
class MemoryAddressRecord:
    """Зарегистрированный адрес."""
    address: IPAddress
    in_use: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"address": str(self.address), "in_use": self.in_use}


class MemoryAddressPool(AddressPool):
    """
    Пул адресов в памяти.

    Attributes:
        if_name: Локальный интерфейс
        priority: Приоритет (0 основной, 1 вторичный)
        subnet: Подсеть
        records: {адрес: запись} в порядке регистрации
    """

    def __init__(self, if_name: str, priority: int, subnet: IPNetwork):
        self.if_name = if_name
        self.priority = priority
        self.subnet = subnet
        self.records: Dict[IPAddress, MemoryAddressRecord] = {}

    @property
    def key(self) -> PoolKey:
        return (self.if_name, self.priority, self.subnet)

    def new_address_record(self, address: IPAddress) -> MemoryAddressRecord:
        """
        Регистрирует адрес.

        Повторная регистрация того же адреса возвращает существующую запись.

        Raises:
            AddressSinkError: Адрес другой версии IP или вне подсети пула
        """
        if address.version != self.subnet.version or address not in self.subnet:
            raise AddressSinkError(
                "Адрес вне подсети пула",
                details={"address": str(address), "subnet": str(self.subnet)},
            )

        record = self.records.get(address)
        if record is None:
            record = MemoryAddressRecord(address=address)
            self.records[address] = record
        return record

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interface": self.if_name,
            "priority": self.priority,
            "subnet": str(self.subnet),
            "addresses": [r.to_dict() for r in self.records.values()],
        }

    def __repr__(self) -> str:
        return f"MemoryAddressPool({self.if_name!r}, {self.priority}, {str(self.subnet)!r})"


class MemoryAddressSpace(AddressSpace):
    """
    Адресное пространство в памяти.

    Attributes:
        id: Идентификатор пространства
        scope: local или global
        pools: {(интерфейс, приоритет, подсеть): пул}
    """

    def __init__(self, space_id: str, scope: str):
        self.id = space_id
        self.scope = scope
        self.pools: Dict[PoolKey, MemoryAddressPool] = {}

    def new_address_pool(self, if_name: str, priority: int, subnet: IPNetwork) -> MemoryAddressPool:
        key = (if_name, priority, subnet)
        existing = self.pools.get(key)
        if existing is not None:
            raise AddressPoolExistsError(
                "Пул уже существует",
                pool=existing,
                details={"interface": if_name, "priority": priority, "subnet": str(subnet)},
            )

        pool = MemoryAddressPool(if_name, priority, subnet)
        self.pools[key] = pool
        return pool

    def get_pool(self, if_name: str, priority: int, subnet: IPNetwork) -> Optional[MemoryAddressPool]:
        """Пул по ключу или None."""
        return self.pools.get((if_name, priority, subnet))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scope": self.scope,
            "pools": [p.to_dict() for p in self.pools.values()],
        }


class MemoryAddressSink(AddressConfigSink):
    """
    Хранилище адресных пространств в памяти.

    set_address_space заменяет активное пространство с тем же id
    и увеличивает epoch.
    """

    def __init__(self):
        self._spaces: Dict[str, MemoryAddressSpace] = {}
        self.epoch = 0

    def new_address_space(self, space_id: str, scope: str) -> MemoryAddressSpace:
        if not space_id:
            raise AddressSinkError("Пустой id адресного пространства")
        return MemoryAddressSpace(space_id, scope)

    def set_address_space(self, space: AddressSpace) -> None:
        if not isinstance(space, MemoryAddressSpace):
            raise AddressSinkError(
                "Пространство создано другим хранилищем",
                details={"type": type(space).__name__},
            )
        self._spaces[space.id] = space
        self.epoch += 1
        logger.debug(f"Активировано адресное пространство {space.id} (epoch {self.epoch})")

    def get_address_space(self, space_id: str) -> Optional[MemoryAddressSpace]:
        """Активное пространство по id или None."""
        return self._spaces.get(space_id)

    @property
    def address_spaces(self) -> List[MemoryAddressSpace]:
        return list(self._spaces.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "epoch": self.epoch,
            "address_spaces": [s.to_dict() for s in self._spaces.values()],
        }
