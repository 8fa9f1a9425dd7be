"""
Команды refresh и poll.

Обе команды публикуют результат в MemoryAddressSink: рабочее
хранилище адресов живёт вне этого пакета, CLI показывает, что
источник отдал бы ему.
"""

import json
import logging
import time
from typing import Callable

from ..core.config_schema import AppConfig
from ..core.exceptions import AzureIPAMError, format_error_for_log, is_retryable
from ..sink.memory import MemoryAddressSink
from ..source.azure import AzureSource

logger = logging.getLogger(__name__)


def _log_refresh_error(error: AzureIPAMError) -> None:
    """Временные ошибки пишутся как warning, ошибки данных как error."""
    if is_retryable(error):
        logger.warning(f"Обновление не удалось, повтор на следующем тике: {format_error_for_log(error)}")
    else:
        logger.error(f"Обновление не удалось: {format_error_for_log(error)}")


def cmd_refresh(args, config: AppConfig) -> int:
    """Обработчик команды refresh: одно обновление и вывод в JSON."""
    sink = MemoryAddressSink()
    source = AzureSource.from_config(config)
    source.start(sink)

    try:
        source.refresh()
    except AzureIPAMError as e:
        _log_refresh_error(e)
        return 1
    finally:
        source.stop()
        source.fetcher.close()

    space = sink.get_address_space(config.address_space.id)
    print(json.dumps(space.to_dict() if space else {}, indent=args.indent, ensure_ascii=False))
    return 0


def cmd_poll(args, config: AppConfig, sleep: Callable[[float], None] = time.sleep) -> int:
    """
    Обработчик команды poll.

    Один рабочий цикл: обновления никогда не выполняются параллельно.
    Ошибка тика логируется, цикл продолжается. Ctrl+C останавливает источник.
    """
    interval = args.interval
    if interval is None:
        interval = config.metadata.min_poll_period or 1.0

    sink = MemoryAddressSink()
    source = AzureSource.from_config(config)
    source.start(sink)

    ticks = 0
    failures = 0
    try:
        while True:
            try:
                if source.refresh():
                    space = sink.get_address_space(config.address_space.id)
                    pools = len(space.pools) if space else 0
                    logger.info(f"Адресное пространство обновлено (epoch={sink.epoch}, pools={pools})")
            except AzureIPAMError as e:
                failures += 1
                _log_refresh_error(e)

            ticks += 1
            if args.count and ticks >= args.count:
                break
            sleep(interval)
    except KeyboardInterrupt:
        logger.info("Опрос прерван пользователем")
    finally:
        source.stop()
        source.fetcher.close()

    logger.info(f"Опрос завершён: тиков {ticks}, ошибок {failures}")
    return 0
