"""
Константы azure_ipam.

Адрес metadata-сервиса, значения по умолчанию, идентификаторы
адресных пространств и нормализация MAC-адресов.
"""

# =============================================================================
# METADATA-СЕРВИС
# =============================================================================

# Агент хоста Azure (nmagent), список интерфейсов в XML
AZURE_QUERY_URL = (
    "http://169.254.169.254/machine/plugins?comp=nmagent&type=getinterfaceinfov1"
)

# Минимальная пауза между опросами (секунды)
DEFAULT_MIN_POLL_PERIOD = 30

# Таймаут HTTP запроса (секунды)
DEFAULT_FETCH_TIMEOUT = 10.0

AZURE_SOURCE_NAME = "Azure"

# =============================================================================
# АДРЕСНЫЕ ПРОСТРАНСТВА
# =============================================================================

LOCAL_DEFAULT_ADDRESS_SPACE_ID = "LocalDefaultAddressSpace"

LOCAL_SCOPE = "local"
GLOBAL_SCOPE = "global"

ADDRESS_SPACE_SCOPES = (LOCAL_SCOPE, GLOBAL_SCOPE)

# Приоритет пулов: основной интерфейс раньше вторичных
PRIMARY_PRIORITY = 0
SECONDARY_PRIORITY = 1


# =============================================================================
# MAC
# =============================================================================

_MAC_SEPARATORS = (":", "-", ".", " ")


def normalize_mac_raw(mac: str) -> str:
    """
    Нормализует MAC-адрес в сырой формат (12 символов, нижний регистр).

    Используется для сравнения MAC из metadata с адресами ОС:
    "00:0D:3A:6E:1B:2C", "00-0d-3a-6e-1b-2c" и "000D3A6E1B2C"
    дают одно и то же значение.

    Args:
        mac: MAC-адрес в любом формате

    Returns:
        str: 12 hex-символов в нижнем регистре или "" если это не MAC
    """
    if not mac:
        return ""
    mac_clean = mac.strip().lower()
    for char in _MAC_SEPARATORS:
        mac_clean = mac_clean.replace(char, "")
    if len(mac_clean) != 12:
        return ""
    if any(c not in "0123456789abcdef" for c in mac_clean):
        return ""
    return mac_clean


def normalize_mac_ieee(mac: str) -> str:
    """
    Нормализует MAC-адрес в IEEE формат (aa:bb:cc:dd:ee:ff).

    Returns:
        str: MAC в формате aa:bb:cc:dd:ee:ff (или пустая строка)
    """
    clean = normalize_mac_raw(mac)
    if not clean:
        return ""
    return ":".join(clean[i : i + 2] for i in range(0, 12, 2))
