"""
Интерфейс хранилища адресов (sink).

Источник конфигурации работает с хранилищем только через четыре операции:
    sink.new_address_space(space_id, scope) -> AddressSpace
    space.new_address_pool(if_name, priority, subnet) -> AddressPool
    pool.new_address_record(address) -> AddressRecord
    sink.set_address_space(space)

Всё построенное до set_address_space остаётся приватным для обновления.

Пример реализации:
    class MySink(AddressConfigSink):
        def new_address_space(self, space_id, scope):
            return MySpace(space_id, scope)

        def set_address_space(self, space):
            self.active = space
"""

from abc import ABC, abstractmethod
from ipaddress import IPv4Address, IPv6Address, IPv4Network, IPv6Network
from typing import Any, Union

IPAddress = Union[IPv4Address, IPv6Address]
IPNetwork = Union[IPv4Network, IPv6Network]


class AddressPool(ABC):
    """Набор адресов одного интерфейса, приоритета и подсети."""

    @abstractmethod
    def new_address_record(self, address: IPAddress) -> Any:
        """
        Регистрирует адрес в пуле.

        Args:
            address: IP-адрес

        Returns:
            Запись адреса

        Raises:
            AddressSinkError: Адрес не может быть зарегистрирован
        """


class AddressSpace(ABC):
    """Контейнер пулов, идентифицируется id и scope."""

    @abstractmethod
    def new_address_pool(self, if_name: str, priority: int, subnet: IPNetwork) -> AddressPool:
        """
        Создаёт пул для (интерфейс, приоритет, подсеть).

        Raises:
            AddressPoolExistsError: Пул уже есть, существующий пул в exc.pool
            AddressSinkError: Прочие ошибки
        """


class AddressConfigSink(ABC):
    """Хранилище адресных пространств."""

    @abstractmethod
    def new_address_space(self, space_id: str, scope: str) -> AddressSpace:
        """Создаёт новое приватное адресное пространство."""

    @abstractmethod
    def set_address_space(self, space: AddressSpace) -> None:
        """Публикует полностью построенное пространство как текущее."""
