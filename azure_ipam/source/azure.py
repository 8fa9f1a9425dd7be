"""
Источник IPAM конфигурации Microsoft Azure.

Одно обновление:
    PollGate -> MetadataFetcher -> InterfaceDocumentDecoder
    -> InterfaceCorrelator -> AddressHierarchyBuilder -> sink.set_address_space

Адресное пространство строится приватно и публикуется одним вызовом
set_address_space только после полного успеха. При любой ошибке
активным остаётся предыдущее пространство, следующий тик начинает заново.

refresh() не реентерабелен: вызывающий код обязан сериализовать вызовы
(например, один рабочий цикл опроса).

Пример использования:
    source = AzureSource.from_config(load_config())
    source.start(MemoryAddressSink())
    source.refresh()
"""

from enum import Enum
from typing import Callable, List, Optional

from ..core.config_schema import AppConfig
from ..core.constants import (
    AZURE_QUERY_URL,
    AZURE_SOURCE_NAME,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MIN_POLL_PERIOD,
    LOCAL_DEFAULT_ADDRESS_SPACE_ID,
    LOCAL_SCOPE,
)
from ..core.exceptions import (
    AddressSpaceCreationError,
    AzureIPAMError,
    format_error_for_log,
)
from ..core.logging import OperationLog, get_logger
from ..core.models import LocalInterface
from ..sink.base import AddressConfigSink
from .builder import AddressHierarchyBuilder
from .correlator import InterfaceCorrelator, get_local_interfaces
from .decoder import InterfaceDocumentDecoder
from .fetcher import MetadataFetcher
from .poll_gate import PollGate

logger = get_logger(__name__)


class SourceState(str, Enum):
    """Этап обновления."""
    IDLE = "idle"
    FETCHING = "fetching"
    DECODING = "decoding"
    CORRELATING = "correlating"
    BUILDING = "building"
    ACTIVATED = "activated"


class AzureSource:
    """
    Источник конфигурации на основе metadata-сервиса Azure.

    Attributes:
        name: Имя источника для логов
        sink: Подключённое хранилище (None до start и после stop)
        state: Текущий этап обновления
        address_space_id: Id публикуемого адресного пространства
        scope: Scope публикуемого адресного пространства
    """

    def __init__(
        self,
        fetcher: Optional[MetadataFetcher] = None,
        poll_gate: Optional[PollGate] = None,
        decoder: Optional[InterfaceDocumentDecoder] = None,
        correlator: Optional[InterfaceCorrelator] = None,
        builder: Optional[AddressHierarchyBuilder] = None,
        interface_provider: Callable[[], List[LocalInterface]] = get_local_interfaces,
        address_space_id: str = LOCAL_DEFAULT_ADDRESS_SPACE_ID,
        scope: str = LOCAL_SCOPE,
        name: str = AZURE_SOURCE_NAME,
    ):
        """
        Args:
            fetcher: HTTP клиент metadata (по умолчанию стандартный URL Azure)
            poll_gate: Ограничитель частоты (по умолчанию 30 секунд)
            decoder: Декодер XML
            correlator: Сопоставление по MAC
            builder: Построитель пулов и записей
            interface_provider: Функция, возвращающая интерфейсы хоста
            address_space_id: Id адресного пространства
            scope: Scope адресного пространства (local/global)
            name: Имя источника
        """
        self.name = name
        self.fetcher = fetcher or MetadataFetcher(AZURE_QUERY_URL, DEFAULT_FETCH_TIMEOUT)
        self.poll_gate = poll_gate or PollGate(DEFAULT_MIN_POLL_PERIOD)
        self.decoder = decoder or InterfaceDocumentDecoder()
        self.correlator = correlator or InterfaceCorrelator()
        self.builder = builder or AddressHierarchyBuilder()
        self.interface_provider = interface_provider
        self.address_space_id = address_space_id
        self.scope = scope
        self.sink: Optional[AddressConfigSink] = None
        self.state = SourceState.IDLE
        self._logger = logger.bind(source=name)

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> "AzureSource":
        """
        Создаёт источник из конфигурации.

        Args:
            config: Валидированная конфигурация
            **kwargs: Переопределения аргументов конструктора
        """
        params = dict(
            fetcher=MetadataFetcher(
                url=config.metadata.url,
                timeout=config.metadata.timeout,
            ),
            poll_gate=PollGate(min_poll_period=config.metadata.min_poll_period),
            address_space_id=config.address_space.id,
            scope=config.address_space.scope,
        )
        params.update(kwargs)
        return cls(**params)

    def start(self, sink: AddressConfigSink) -> None:
        """Подключает хранилище. До вызова refresh ничего не делает."""
        self.sink = sink
        self._logger.info("Источник запущен")

    def stop(self) -> None:
        """Отключает хранилище. Последующие refresh ничего не делают."""
        self.sink = None
        self._logger.info("Источник остановлен")

    def refresh(self) -> bool:
        """
        Обновляет конфигурацию.

        Returns:
            bool: True если новое адресное пространство активировано,
                False если источник не запущен или интервал опроса не истёк

        Raises:
            AzureIPAMError: Любая ошибка обновления. Предыдущее активное
                пространство остаётся без изменений.
        """
        sink = self.sink
        if sink is None:
            self._logger.debug("Источник не запущен, обновление пропущено")
            return False

        if not self.poll_gate.should_refresh():
            self._logger.debug("Интервал опроса не истёк, обновление пропущено")
            return False

        op = OperationLog(operation="refresh", source=self.name).start()
        try:
            self.state = SourceState.FETCHING
            body = self.fetcher.fetch()

            self.state = SourceState.DECODING
            document = self.decoder.decode(body)

            self.state = SourceState.CORRELATING
            correlated = self.correlator.correlate(document, self.interface_provider())

            self.state = SourceState.BUILDING
            try:
                space = sink.new_address_space(self.address_space_id, self.scope)
            except Exception as e:
                raise AddressSpaceCreationError(
                    f"Не удалось создать адресное пространство: {e}",
                    source=self.name,
                ) from e
            stats = self.builder.build(space, correlated)

            sink.set_address_space(space)
            self.state = SourceState.ACTIVATED

            op.success(
                interfaces_in_document=len(document.interfaces),
                **stats.to_dict(),
            )
            op.log(self._logger)
            return True

        except AzureIPAMError as e:
            op.failure(format_error_for_log(e))
            op.log(self._logger)
            raise

        finally:
            self.state = SourceState.IDLE
