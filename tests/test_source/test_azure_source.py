"""
Тесты AzureSource.

Проверяет полный цикл обновления с фейковым fetcher и in-memory хранилищем:
- Сценарии из документации (eth0, интерфейс без пары)
- Ограничение частоты опроса
- Атомарную публикацию при ошибках
- start/stop и этапы обновления
"""

import ipaddress
from unittest.mock import MagicMock

import pytest

from azure_ipam.core.config_schema import AppConfig
from azure_ipam.core.constants import LOCAL_DEFAULT_ADDRESS_SPACE_ID
from azure_ipam.core.exceptions import (
    AddressRecordCreationError,
    AddressSinkError,
    AddressSpaceCreationError,
    DocumentDecodeError,
    InvalidSubnetError,
    LocalInterfaceError,
    MetadataTimeoutError,
)
from azure_ipam.sink.memory import MemoryAddressSink, MemoryAddressSpace
from azure_ipam.source.azure import AzureSource, SourceState

NET = ipaddress.ip_network("10.0.0.0/24")


@pytest.mark.integration
class TestRefreshScenarios:
    """Полное обновление."""

    def test_single_interface_scenario(self, make_source, memory_sink, sample_xml):
        source, fetcher = make_source(sample_xml)
        source.start(memory_sink)

        assert source.refresh() is True

        space = memory_sink.get_address_space(LOCAL_DEFAULT_ADDRESS_SPACE_ID)
        assert space.scope == "local"
        assert list(space.pools) == [("eth0", 0, NET)]
        records = space.get_pool("eth0", 0, NET).records
        assert list(records) == [ipaddress.ip_address("10.0.0.5")]
        assert ipaddress.ip_address("10.0.0.4") not in records
        assert memory_sink.epoch == 1
        fetcher.fetch.assert_called_once()

    def test_unmatched_interface_activates_empty_space(self, make_source, memory_sink, build_xml):
        body = build_xml([{
            "mac": "DE:AD:BE:EF:00:01",
            "primary": True,
            "subnets": [{"prefix": "10.0.0.0/24", "addresses": [("10.0.0.5", False)]}],
        }])
        source, _ = make_source(body)
        source.start(memory_sink)

        assert source.refresh() is True

        space = memory_sink.get_address_space(LOCAL_DEFAULT_ADDRESS_SPACE_ID)
        assert space is not None
        assert space.pools == {}

    def test_primary_and_secondary_interfaces(self, make_source, memory_sink, build_xml):
        body = build_xml([
            {
                "mac": "001122334455",
                "primary": True,
                "subnets": [{"prefix": "10.0.0.0/24", "addresses": [("10.0.0.4", True)]}],
            },
            {
                "mac": "000D3A6E1B2C",
                "primary": False,
                "subnets": [{
                    "prefix": "10.0.1.0/24",
                    "addresses": [("10.0.1.4", True), ("10.0.1.5", False), ("10.0.1.6", False)],
                }],
            },
        ])
        source, _ = make_source(body)
        source.start(memory_sink)
        source.refresh()

        space = memory_sink.get_address_space(LOCAL_DEFAULT_ADDRESS_SPACE_ID)
        secondary = space.get_pool("eth1", 1, ipaddress.ip_network("10.0.1.0/24"))
        assert [str(a) for a in secondary.records] == ["10.0.1.5", "10.0.1.6"]
        assert space.get_pool("eth0", 0, NET).records == {}

    def test_custom_address_space(self, make_source, memory_sink, sample_xml):
        source, _ = make_source(sample_xml, address_space_id="GlobalDefaultAddressSpace", scope="global")
        source.start(memory_sink)
        source.refresh()

        space = memory_sink.get_address_space("GlobalDefaultAddressSpace")
        assert space.scope == "global"


@pytest.mark.unit
class TestRefreshThrottle:
    """Ограничение частоты опроса."""

    def test_second_call_within_period_skips_fetch(self, make_source, memory_sink, sample_xml, clock):
        source, fetcher = make_source(sample_xml, min_poll_period=30)
        source.start(memory_sink)

        assert source.refresh() is True
        clock.advance(10)
        assert source.refresh() is False

        fetcher.fetch.assert_called_once()
        assert memory_sink.epoch == 1

    def test_refresh_after_period(self, make_source, memory_sink, sample_xml, clock):
        source, fetcher = make_source(sample_xml, min_poll_period=30)
        source.start(memory_sink)

        source.refresh()
        clock.advance(30)
        assert source.refresh() is True

        assert fetcher.fetch.call_count == 2
        assert memory_sink.epoch == 2

    def test_failed_refresh_still_consumes_window(self, make_source, memory_sink, clock):
        """Ошибка не приводит к немедленному повтору: следующий тик ждёт интервал."""
        source, fetcher = make_source(b"<broken", min_poll_period=30)
        source.start(memory_sink)

        with pytest.raises(DocumentDecodeError):
            source.refresh()
        clock.advance(1)

        assert source.refresh() is False
        fetcher.fetch.assert_called_once()


@pytest.mark.unit
class TestRefreshAtomicPublish:
    """Незавершённое пространство никогда не публикуется."""

    def test_record_failure_never_activates(self, make_source, sample_xml):
        space = MemoryAddressSpace(LOCAL_DEFAULT_ADDRESS_SPACE_ID, "local")
        pool = MagicMock()
        pool.new_address_record.side_effect = AddressSinkError("disk full")
        space.new_address_pool = MagicMock(return_value=pool)

        sink = MagicMock()
        sink.new_address_space.return_value = space

        source, _ = make_source(sample_xml)
        source.start(sink)

        with pytest.raises(AddressRecordCreationError):
            source.refresh()

        sink.set_address_space.assert_not_called()

    def test_previous_space_kept_on_failure(self, make_source, memory_sink, sample_xml, build_xml, clock):
        source, fetcher = make_source(sample_xml)
        source.start(memory_sink)
        source.refresh()
        previous = memory_sink.get_address_space(LOCAL_DEFAULT_ADDRESS_SPACE_ID)

        fetcher.fetch.return_value = build_xml([{
            "mac": "001122334455",
            "primary": True,
            "subnets": [
                {"prefix": "10.0.5.0/24", "addresses": [("10.0.5.5", False)]},
                {"prefix": "not-a-prefix"},
            ],
        }])
        clock.advance(60)

        with pytest.raises(InvalidSubnetError):
            source.refresh()

        assert memory_sink.get_address_space(LOCAL_DEFAULT_ADDRESS_SPACE_ID) is previous
        assert memory_sink.epoch == 1

    def test_fetch_failure_creates_nothing(self, make_source):
        sink = MagicMock()
        source, fetcher = make_source()
        fetcher.fetch.side_effect = MetadataTimeoutError("timed out", timeout_seconds=10)
        source.start(sink)

        with pytest.raises(MetadataTimeoutError):
            source.refresh()

        sink.new_address_space.assert_not_called()
        sink.set_address_space.assert_not_called()

    def test_local_interface_failure(self, make_source, memory_sink, sample_xml):
        source, _ = make_source(sample_xml)

        def broken():
            raise LocalInterfaceError("netlink unavailable")

        source.interface_provider = broken
        source.start(memory_sink)

        with pytest.raises(LocalInterfaceError):
            source.refresh()
        assert memory_sink.epoch == 0

    def test_space_creation_failure(self, make_source, sample_xml):
        sink = MagicMock()
        sink.new_address_space.side_effect = AddressSinkError("no space")
        source, _ = make_source(sample_xml)
        source.start(sink)

        with pytest.raises(AddressSpaceCreationError):
            source.refresh()
        sink.set_address_space.assert_not_called()


@pytest.mark.unit
class TestSourceLifecycle:
    """start/stop и состояние."""

    def test_refresh_before_start_is_noop(self, make_source, sample_xml):
        source, fetcher = make_source(sample_xml)

        assert source.refresh() is False
        fetcher.fetch.assert_not_called()
        assert source.poll_gate.last_refresh is None

    def test_refresh_after_stop_is_noop(self, make_source, memory_sink, sample_xml, clock):
        source, fetcher = make_source(sample_xml)
        source.start(memory_sink)
        source.refresh()
        source.stop()
        clock.advance(60)

        assert source.sink is None
        assert source.refresh() is False
        fetcher.fetch.assert_called_once()

    def test_state_idle_after_success_and_failure(self, make_source, memory_sink, sample_xml, clock):
        source, fetcher = make_source(sample_xml)
        source.start(memory_sink)

        source.refresh()
        assert source.state == SourceState.IDLE

        fetcher.fetch.return_value = b"garbage"
        clock.advance(60)
        with pytest.raises(DocumentDecodeError):
            source.refresh()
        assert source.state == SourceState.IDLE

    def test_state_building_while_space_created(self, make_source, sample_xml):
        seen = []
        sink = MemoryAddressSink()
        create_space = sink.new_address_space
        source, _ = make_source(sample_xml)

        def spy(space_id, scope):
            seen.append(source.state)
            return create_space(space_id, scope)

        sink.new_address_space = spy
        source.start(sink)
        source.refresh()

        assert seen == [SourceState.BUILDING]

    def test_from_config(self):
        config = AppConfig(
            metadata={"url": "http://127.0.0.1:9000/if", "timeout": 2, "min_poll_period": 5},
            address_space={"id": "Custom", "scope": "global"},
        )

        source = AzureSource.from_config(config)

        assert source.fetcher.url == "http://127.0.0.1:9000/if"
        assert source.fetcher.timeout == 2
        assert source.poll_gate.min_poll_period == 5
        assert source.address_space_id == "Custom"
        assert source.scope == "global"
        assert source.name == "Azure"
