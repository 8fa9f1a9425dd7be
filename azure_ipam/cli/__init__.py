"""
CLI модуль azure_ipam.

Структура:
- commands.py: обработчики команд refresh и poll

Примеры использования:
    python -m azure_ipam refresh
    python -m azure_ipam poll --interval 30
    python -m azure_ipam --json-logs -c config.yaml poll --count 10
"""

import argparse
import logging
from typing import List, Optional

from ..config import load_config
from ..core.exceptions import ConfigError
from ..core.logging import LogConfig, setup_logging, setup_logging_from_config
from .commands import cmd_refresh, cmd_poll

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="azure-ipam",
        description="Обнаружение IP-конфигурации хоста через metadata-сервис Azure",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s refresh
  %(prog)s --url http://127.0.0.1:8080/interfaces refresh
  %(prog)s poll --interval 60 --count 5
        """,
    )

    # Общие аргументы
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный вывод (DEBUG)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к файлу конфигурации YAML (default: config.yaml)",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="URL metadata-сервиса (по умолчанию из конфигурации)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Таймаут запроса в секундах",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Логи в формате JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Команды")

    # === REFRESH ===
    refresh_parser = subparsers.add_parser(
        "refresh",
        help="Одно обновление, вывод адресного пространства в JSON",
    )
    refresh_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Отступ JSON (default: 2)",
    )

    # === POLL ===
    poll_parser = subparsers.add_parser(
        "poll",
        help="Периодический опрос metadata-сервиса",
    )
    poll_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Пауза между тиками в секундах (по умолчанию min_poll_period)",
    )
    poll_parser.add_argument(
        "--count",
        type=int,
        default=0,
        help="Количество тиков (0 = бесконечно)",
    )
    poll_parser.add_argument(
        "--min-poll-period",
        type=float,
        default=None,
        help="Минимальный интервал между обновлениями в секундах",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Главная функция CLI.

    Returns:
        int: Код возврата
    """
    parser = setup_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    try:
        config = load_config(args.config)
    except ConfigError as e:
        setup_logging()
        logger.error(str(e))
        return 2

    # Приоритет: аргументы CLI > переменные окружения > config.yaml
    if args.url:
        config.metadata.url = args.url
    if args.timeout is not None:
        config.metadata.timeout = args.timeout
    if getattr(args, "min_poll_period", None) is not None:
        config.metadata.min_poll_period = args.min_poll_period

    log_config = LogConfig.from_dict(config.logging.model_dump())
    if args.verbose or config.debug:
        log_config.level = logging.DEBUG

    if args.json_logs:
        setup_logging(json_format=True, level=log_config.level)
    else:
        setup_logging_from_config(log_config)

    if args.command == "refresh":
        return cmd_refresh(args, config)
    return cmd_poll(args, config)


__all__ = [
    "cmd_refresh",
    "cmd_poll",
    "setup_parser",
    "main",
]
