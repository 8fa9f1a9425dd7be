"""
Data Models для azure_ipam.

Типизированное представление документа интерфейсов из metadata-сервиса
и результатов сопоставления с интерфейсами хоста.

Документ:
    InterfaceDocument
    └── InterfaceDescriptor (MacAddress, IsPrimary)
        └── SubnetDescriptor (Prefix)
            └── AddressDescriptor (Address, IsPrimary)

Все объекты живут только в рамках одного обновления.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any


@dataclass
class AddressDescriptor:
    """
    IP-адрес в подсети.

    Attributes:
        address: IP-адрес строкой (10.0.0.5)
        is_primary: Адрес хоста, в пул не попадает
    """
    address: str
    is_primary: bool = False


@dataclass
class SubnetDescriptor:
    """
    Подсеть интерфейса.

    Attributes:
        prefix: CIDR префикс (10.0.0.0/24)
        addresses: Адреса в порядке документа
    """
    prefix: str
    addresses: List[AddressDescriptor] = field(default_factory=list)

    @property
    def secondary_addresses(self) -> List[AddressDescriptor]:
        """Адреса, которые отдаются в пул."""
        return [a for a in self.addresses if not a.is_primary]


@dataclass
class InterfaceDescriptor:
    """
    Интерфейс из документа metadata.

    Attributes:
        mac_address: MAC как в документе (обычно 000D3A6E1B2C)
        is_primary: Основной интерфейс виртуальной машины
        subnets: Подсети в порядке документа
    """
    mac_address: str
    is_primary: bool = False
    subnets: List[SubnetDescriptor] = field(default_factory=list)


@dataclass
class InterfaceDocument:
    """Декодированный ответ metadata-сервиса."""
    interfaces: List[InterfaceDescriptor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь."""
        return asdict(self)


@dataclass
class LocalInterface:
    """
    Сетевой интерфейс хоста.

    Attributes:
        name: Имя интерфейса в ОС (eth0)
        mac: Hardware адрес как его отдаёт ОС
    """
    name: str
    mac: str = ""


@dataclass
class CorrelatedInterface:
    """
    Интерфейс документа, найденный на хосте.

    Attributes:
        name: Имя локального интерфейса
        priority: 0 для основного, 1 для вторичного
        descriptor: Исходное описание из документа
    """
    name: str
    priority: int
    descriptor: InterfaceDescriptor

    @property
    def subnets(self) -> List[SubnetDescriptor]:
        return self.descriptor.subnets


@dataclass
class BuildStats:
    """
    Статистика построения адресного пространства.

    Attributes:
        interfaces: Обработано интерфейсов
        pools_created: Создано новых пулов
        pools_reused: Пулов, которые уже существовали
        records: Зарегистрировано адресов
        primary_skipped: Пропущено адресов хоста
    """
    interfaces: int = 0
    pools_created: int = 0
    pools_reused: int = 0
    records: int = 0
    primary_skipped: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Конвертирует в словарь."""
        return asdict(self)
