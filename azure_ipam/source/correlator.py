"""
Сопоставление интерфейсов документа с интерфейсами хоста по MAC.

MAC с обеих сторон приводится к виду aabbccddeeff, поэтому
"00:0D:3A:6E:1B:2C" из ОС совпадает с "000D3A6E1B2C" из документа.
Интерфейс документа без пары на хосте пропускается: metadata может
описывать интерфейс, который ещё не появился в ОС.
"""

from typing import Iterable, List

import psutil

from ..core.constants import (
    PRIMARY_PRIORITY,
    SECONDARY_PRIORITY,
    normalize_mac_ieee,
    normalize_mac_raw,
)
from ..core.exceptions import LocalInterfaceError
from ..core.logging import get_logger
from ..core.models import CorrelatedInterface, InterfaceDocument, LocalInterface

logger = get_logger(__name__)


def _mac_key(mac: str) -> str:
    """Ключ сопоставления; нулевой MAC (lo) считается отсутствующим."""
    key = normalize_mac_raw(mac)
    return key if key.strip("0") else ""


def get_local_interfaces() -> List[LocalInterface]:
    """
    Список интерфейсов хоста с hardware адресами.

    Берётся адрес семейства psutil.AF_LINK. Интерфейс без него или
    с нулевым адресом (lo в Linux отдаёт 00:00:00:00:00:00)
    возвращается с пустым mac.

    Returns:
        List[LocalInterface]: Интерфейсы в порядке ОС

    Raises:
        LocalInterfaceError: ОС не отдала список интерфейсов
    """
    try:
        addrs = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        raise LocalInterfaceError(f"Не удалось получить интерфейсы хоста: {e}") from e

    result = []
    for name, entries in addrs.items():
        mac = ""
        for entry in entries:
            if entry.family == psutil.AF_LINK and _mac_key(entry.address or ""):
                mac = entry.address
                break
        result.append(LocalInterface(name=name, mac=mac))
    return result


class InterfaceCorrelator:
    """
    Находит локальный интерфейс для каждого интерфейса документа.

    Приоритет: основной интерфейс документа получает 0, вторичные 1.
    Пулы различаются по приоритету, поэтому основной и вторичный
    интерфейсы с одинаковой подсетью дают разные пулы.
    """

    def correlate(
        self,
        document: InterfaceDocument,
        local_interfaces: Iterable[LocalInterface],
    ) -> List[CorrelatedInterface]:
        """
        Сопоставляет интерфейсы документа с интерфейсами хоста.

        Args:
            document: Декодированный документ
            local_interfaces: Интерфейсы хоста

        Returns:
            List[CorrelatedInterface]: Найденные интерфейсы в порядке документа
        """
        # Первый интерфейс с данным MAC выигрывает
        by_mac = {}
        for local in local_interfaces:
            mac = _mac_key(local.mac)
            if mac and mac not in by_mac:
                by_mac[mac] = local.name

        result = []
        for descriptor in document.interfaces:
            mac = _mac_key(descriptor.mac_address)
            name = by_mac.get(mac) if mac else None
            if name is None:
                logger.debug(
                    "Интерфейс из metadata не найден на хосте, пропускаем",
                    mac=descriptor.mac_address,
                )
                continue

            priority = PRIMARY_PRIORITY if descriptor.is_primary else SECONDARY_PRIORITY
            result.append(CorrelatedInterface(name=name, priority=priority, descriptor=descriptor))
            logger.debug(
                "Интерфейс сопоставлен",
                interface=name,
                mac=normalize_mac_ieee(descriptor.mac_address),
                priority=priority,
            )

        return result
