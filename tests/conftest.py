"""
Pytest configuration и общие fixtures для тестов.

Предоставляет переиспользуемые fixtures:
- build_xml: Сборка XML документа интерфейсов из простых структур
- sample_xml: Документ из сценария eth0 / 10.0.0.0/24
- local_interfaces: Интерфейсы "хоста"
- memory_sink: In-memory хранилище
- make_source: AzureSource с подменённым fetcher и списком интерфейсов
"""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from azure_ipam.core.models import LocalInterface
from azure_ipam.sink.memory import MemoryAddressSink
from azure_ipam.source.azure import AzureSource
from azure_ipam.source.fetcher import MetadataFetcher
from azure_ipam.source.poll_gate import PollGate


def _bool_attr(value: bool) -> str:
    return "true" if value else "false"


def render_xml(interfaces: List[Dict[str, Any]]) -> bytes:
    """
    Собирает XML документ.

    interfaces: [{"mac": "...", "primary": True,
                  "subnets": [{"prefix": "...", "addresses": [("10.0.0.4", True)]}]}]
    """
    parts = ['<?xml version="1.0" encoding="utf-8"?>', "<Interfaces>"]
    for iface in interfaces:
        parts.append(
            f'<Interface MacAddress="{iface["mac"]}" '
            f'IsPrimary="{_bool_attr(iface.get("primary", False))}">'
        )
        for subnet in iface.get("subnets", []):
            parts.append(f'<IPSubnet Prefix="{subnet["prefix"]}">')
            for address, is_primary in subnet.get("addresses", []):
                parts.append(
                    f'<IPAddress Address="{address}" IsPrimary="{_bool_attr(is_primary)}"/>'
                )
            parts.append("</IPSubnet>")
        parts.append("</Interface>")
    parts.append("</Interfaces>")
    return "\n".join(parts).encode("utf-8")


@pytest.fixture
def build_xml():
    """Fixture-обёртка над render_xml."""
    return render_xml


@pytest.fixture
def sample_xml() -> bytes:
    """Один основной интерфейс, подсеть 10.0.0.0/24, адрес хоста и один вторичный."""
    return render_xml([
        {
            "mac": "00:11:22:33:44:55",
            "primary": True,
            "subnets": [
                {
                    "prefix": "10.0.0.0/24",
                    "addresses": [("10.0.0.4", True), ("10.0.0.5", False)],
                },
            ],
        },
    ])


@pytest.fixture
def local_interfaces() -> List[LocalInterface]:
    """Интерфейсы хоста: lo без MAC, eth0 и eth1."""
    return [
        LocalInterface(name="lo", mac=""),
        LocalInterface(name="eth0", mac="00:11:22:33:44:55"),
        LocalInterface(name="eth1", mac="00:0d:3a:6e:1b:2c"),
    ]


@pytest.fixture
def memory_sink() -> MemoryAddressSink:
    return MemoryAddressSink()


class FakeClock:
    """Управляемые часы для PollGate."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_source(local_interfaces, clock):
    """
    Фабрика AzureSource без сети.

    Usage:
        source, fetcher = make_source(body)
        fetcher.fetch.side_effect = MetadataTimeoutError("timeout")
    """
    def _make(
        body: bytes = b"",
        interfaces: Optional[List[LocalInterface]] = None,
        min_poll_period: float = 30,
        **kwargs,
    ):
        fetcher = MagicMock(spec=MetadataFetcher)
        fetcher.fetch.return_value = body
        ifaces = local_interfaces if interfaces is None else interfaces
        source = AzureSource(
            fetcher=fetcher,
            poll_gate=PollGate(min_poll_period=min_poll_period, clock=clock),
            interface_provider=lambda: list(ifaces),
            **kwargs,
        )
        return source, fetcher
    return _make
