"""
Разбор XML документа интерфейсов от агента хоста Azure.

Формат:
    <Interfaces>
      <Interface MacAddress="000D3A6E1B2C" IsPrimary="true">
        <IPSubnet Prefix="10.0.0.0/24">
          <IPAddress Address="10.0.0.4" IsPrimary="true"/>
          <IPAddress Address="10.0.0.5" IsPrimary="false"/>
        </IPSubnet>
      </Interface>
    </Interfaces>

Элементы сравниваются по локальному имени, пространство имён XML
не учитывается. Разбор заканчивается на закрытии корневого элемента,
данные после него игнорируются. Неизвестные элементы игнорируются.
Отсутствующий атрибут даёт "" (для IsPrimary - False). Любая ошибка
внутри корневого элемента отменяет весь документ.
"""

from typing import List
from xml.etree import ElementTree

from ..core.exceptions import DocumentDecodeError
from ..core.models import (
    AddressDescriptor,
    InterfaceDescriptor,
    InterfaceDocument,
    SubnetDescriptor,
)

ROOT_TAG = "Interfaces"
INTERFACE_TAG = "Interface"
SUBNET_TAG = "IPSubnet"
ADDRESS_TAG = "IPAddress"

# Значения, которые агент может прислать в булевых атрибутах
_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(element: ElementTree.Element, name: str) -> bool:
    value = element.get(name)
    if value is None:
        return False
    value = value.strip()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise DocumentDecodeError(
        f"Некорректное значение {name}={value!r}",
        element=_local_name(element.tag),
    )


def _local_name(tag: str) -> str:
    """Имя элемента без {namespace}."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ElementTree.Element, name: str) -> List[ElementTree.Element]:
    return [
        child for child in element
        if isinstance(child.tag, str) and _local_name(child.tag) == name
    ]


def _read_root(data: bytes) -> ElementTree.Element:
    """
    Читает первый элемент верхнего уровня.

    Ошибки разбора после его закрытия не учитываются.
    """
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    depth = 0
    try:
        parser.feed(data)
        for event, element in parser.read_events():
            if event == "start":
                depth += 1
                continue
            depth -= 1
            if depth == 0:
                return element
        parser.close()
    except ElementTree.ParseError as e:
        raise DocumentDecodeError(f"Некорректный XML: {e}") from e

    raise DocumentDecodeError("Некорректный XML: документ оборван")


class InterfaceDocumentDecoder:
    """
    Декодер XML в InterfaceDocument.

    Example:
        doc = InterfaceDocumentDecoder().decode(body)
        for iface in doc.interfaces:
            print(iface.mac_address, len(iface.subnets))
    """

    def decode(self, data: bytes) -> InterfaceDocument:
        """
        Декодирует тело ответа.

        Args:
            data: XML документ

        Returns:
            InterfaceDocument: Интерфейсы в порядке документа

        Raises:
            DocumentDecodeError: XML не разбирается или корень не Interfaces
        """
        if not data or not data.strip():
            raise DocumentDecodeError("Пустой ответ metadata-сервиса")

        root = _read_root(data)
        root_name = _local_name(root.tag)
        if root_name != ROOT_TAG:
            raise DocumentDecodeError(
                f"Ожидался корень <{ROOT_TAG}>, получен <{root_name}>",
                element=root_name,
            )

        return InterfaceDocument(
            interfaces=[self._decode_interface(e) for e in _children(root, INTERFACE_TAG)],
        )

    def _decode_interface(self, element: ElementTree.Element) -> InterfaceDescriptor:
        return InterfaceDescriptor(
            mac_address=element.get("MacAddress", ""),
            is_primary=_parse_bool(element, "IsPrimary"),
            subnets=[self._decode_subnet(e) for e in _children(element, SUBNET_TAG)],
        )

    def _decode_subnet(self, element: ElementTree.Element) -> SubnetDescriptor:
        return SubnetDescriptor(
            prefix=element.get("Prefix", ""),
            addresses=[
                AddressDescriptor(
                    address=a.get("Address", ""),
                    is_primary=_parse_bool(a, "IsPrimary"),
                )
                for a in _children(element, ADDRESS_TAG)
            ],
        )
