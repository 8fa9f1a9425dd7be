"""
Построение иерархии пул -> запись внутри адресного пространства.

Для каждой подсети каждого сопоставленного интерфейса:
1. префикс разбирается как CIDR (ошибка прерывает всё построение);
2. пул (интерфейс, приоритет, подсеть) создаётся или берётся существующий;
3. каждый не-основной адрес регистрируется в пуле.

Основные адреса принадлежат хосту и в пул не попадают.
"""

import ipaddress
from typing import Iterable

from ..core.exceptions import (
    AddressPoolCreationError,
    AddressPoolExistsError,
    AddressRecordCreationError,
    InvalidAddressError,
    InvalidSubnetError,
)
from ..core.logging import get_logger
from ..core.models import BuildStats, CorrelatedInterface, SubnetDescriptor
from ..sink.base import AddressPool, AddressSpace

logger = get_logger(__name__)


class AddressHierarchyBuilder:
    """
    Заполняет адресное пространство пулами и адресами.

    Example:
        space = sink.new_address_space("LocalDefaultAddressSpace", "local")
        stats = AddressHierarchyBuilder().build(space, correlated)
        sink.set_address_space(space)
    """

    def build(
        self,
        space: AddressSpace,
        interfaces: Iterable[CorrelatedInterface],
    ) -> BuildStats:
        """
        Строит пулы и записи.

        Args:
            space: Приватное адресное пространство
            interfaces: Сопоставленные интерфейсы

        Returns:
            BuildStats: Статистика построения

        Raises:
            InvalidSubnetError: Префикс не разбирается
            InvalidAddressError: Адрес не разбирается
            AddressPoolCreationError: Хранилище не создало пул
            AddressRecordCreationError: Хранилище не приняло адрес
        """
        stats = BuildStats()

        for iface in interfaces:
            stats.interfaces += 1
            for subnet in iface.subnets:
                pool = self._get_pool(space, iface, subnet, stats)
                self._add_records(pool, subnet, stats)

        return stats

    def _get_pool(
        self,
        space: AddressSpace,
        iface: CorrelatedInterface,
        subnet: SubnetDescriptor,
        stats: BuildStats,
    ) -> AddressPool:
        try:
            network = ipaddress.ip_network(subnet.prefix.strip(), strict=False)
        except ValueError as e:
            raise InvalidSubnetError(
                f"Некорректный префикс подсети: {e}",
                prefix=subnet.prefix,
                interface=iface.name,
            ) from e

        try:
            pool = space.new_address_pool(iface.name, iface.priority, network)
        except AddressPoolExistsError as e:
            if e.pool is None:
                raise AddressPoolCreationError(
                    "Хранилище сообщило о существующем пуле, но не вернуло его",
                    interface=iface.name,
                    priority=iface.priority,
                    subnet=str(network),
                ) from e
            logger.debug(
                "Пул уже существует, используем его",
                interface=iface.name,
                subnet=str(network),
                priority=iface.priority,
            )
            stats.pools_reused += 1
            return e.pool
        except Exception as e:
            raise AddressPoolCreationError(
                f"Не удалось создать пул: {e}",
                interface=iface.name,
                priority=iface.priority,
                subnet=str(network),
            ) from e

        stats.pools_created += 1
        logger.debug(
            "Пул создан",
            interface=iface.name,
            subnet=str(network),
            priority=iface.priority,
        )
        return pool

    def _add_records(
        self,
        pool: AddressPool,
        subnet: SubnetDescriptor,
        stats: BuildStats,
    ) -> None:
        secondary = subnet.secondary_addresses
        stats.primary_skipped += len(subnet.addresses) - len(secondary)

        for entry in secondary:
            try:
                address = ipaddress.ip_address(entry.address.strip())
            except ValueError as e:
                raise InvalidAddressError(
                    f"Некорректный IP-адрес: {e}",
                    address=entry.address,
                    subnet=subnet.prefix,
                ) from e

            try:
                pool.new_address_record(address)
            except Exception as e:
                raise AddressRecordCreationError(
                    f"Не удалось зарегистрировать адрес: {e}",
                    address=str(address),
                    subnet=subnet.prefix,
                ) from e

            stats.records += 1
