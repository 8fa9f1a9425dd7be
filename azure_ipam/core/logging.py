"""
Structured Logging для azure_ipam.

Логгер принимает именованные поля (interface, subnet, operation...),
которые попадают в JSON как отдельные ключи, а в human-формате
выводятся в скобках после сообщения.

Пример использования:
    from azure_ipam.core.logging import setup_logging, get_logger

    setup_logging(json_format=True)

    logger = get_logger(__name__)
    logger.info("Пул создан", interface="eth0", subnet="10.0.0.0/24")

Формат вывода (JSON):
    {"timestamp": "2026-10-18T10:30:15.123456", "level": "INFO",
     "message": "Пул создан", "logger": "azure_ipam.source.builder",
     "interface": "eth0", "subnet": "10.0.0.0/24"}
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from enum import Enum


class RotationType(str, Enum):
    """Тип ротации логов."""
    SIZE = "size"
    TIME = "time"
    NONE = "none"


@dataclass
class LogConfig:
    """
    Конфигурация логирования.

    Attributes:
        level: Уровень логирования
        json_format: JSON для файла (консоль всегда human-readable)
        console: Выводить в консоль
        file_path: Путь к файлу логов (None = без файла)
        rotation: Тип ротации (size, time, none)
        max_bytes: Макс размер файла для size-ротации
        backup_count: Количество backup файлов
        when: Интервал для time-ротации (S, M, H, D, midnight)
        interval: Частота ротации для time
    """
    level: int = logging.INFO
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: RotationType = RotationType.SIZE
    max_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    when: str = "midnight"
    interval: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogConfig":
        """Создаёт конфигурацию из словаря (секция logging в config.yaml)."""
        rotation = data.get("rotation", "size")
        if isinstance(rotation, str):
            rotation = RotationType(rotation)

        level = data.get("level", "INFO")
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)

        return cls(
            level=level,
            json_format=data.get("json_format", False),
            console=data.get("console", True),
            file_path=data.get("file_path"),
            rotation=rotation,
            max_bytes=data.get("max_bytes", 10 * 1024 * 1024),
            backup_count=data.get("backup_count", 5),
            when=data.get("when", "midnight"),
            interval=data.get("interval", 1),
        )


class JSONFormatter(logging.Formatter):
    """
    JSON форматтер.

    Стандартные поля: timestamp, level, message, logger.
    Всё, что передано через extra, добавляется как есть.
    """

    # Атрибуты logging.LogRecord, которые в JSON не нужны
    RESERVED_ATTRS = {
        "args", "asctime", "created", "exc_info", "exc_text",
        "filename", "funcName", "levelname", "levelno", "lineno",
        "module", "msecs", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        for key, value in record.__dict__.items():
            if key in self.RESERVED_ATTRS or key.startswith("_"):
                continue
            log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable форматтер.

    Формат: TIMESTAMP - LEVEL - MESSAGE (source=Azure, interface=eth0)
    """

    EXTRA_FIELDS = ("source", "operation", "interface", "subnet", "address")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        message = record.getMessage()

        extras = []
        for attr in self.EXTRA_FIELDS:
            value = getattr(record, attr, None)
            if value is not None and value != "":
                extras.append(f"{attr}={value}")
        extra_str = f" ({', '.join(extras)})" if extras else ""

        result = f"{timestamp} - {level} - {message}{extra_str}"

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)

        return result


class StructuredLogger:
    """
    Обёртка над logging.Logger с именованными полями.

        logger.info("Интерфейс пропущен", interface="eth1")

    вместо
        logger.info("Интерфейс eth1 пропущен")
    """

    def __init__(self, name: str, default_extra: Optional[Dict[str, Any]] = None):
        """
        Args:
            name: Имя логгера
            default_extra: Поля, добавляемые ко всем сообщениям
        """
        self._logger = logging.getLogger(name)
        self._default_extra = default_extra or {}

    def _log(
        self,
        level: int,
        message: str,
        exc_info: bool = False,
        **kwargs: Any,
    ) -> None:
        extra = {**self._default_extra, **kwargs}
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log DEBUG."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log INFO."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log WARNING."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log ERROR."""
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """
        Создаёт логгер с дополнительными default полями.

        Example:
            source_logger = logger.bind(source="Azure")
            source_logger.info("Обновление")  # добавит source=Azure
        """
        new_extra = {**self._default_extra, **kwargs}
        return StructuredLogger(self._logger.name, default_extra=new_extra)


# Кэш логгеров
_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """
    Получает или создаёт StructuredLogger.

    Args:
        name: Имя логгера (обычно __name__)

    Returns:
        StructuredLogger: Логгер
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def _reset_root_handlers() -> logging.Logger:
    """Убирает существующие handlers у root логгера."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    return root_logger


def setup_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    stream: Any = None,
) -> None:
    """
    Настраивает вывод логов в поток.

    Args:
        json_format: True для JSON, False для human-readable
        level: Уровень логирования
        stream: Поток вывода (по умолчанию sys.stderr)

    Example:
        setup_logging(json_format=args.json_logs)
    """
    if stream is None:
        stream = sys.stderr

    root_logger = _reset_root_handlers()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else HumanFormatter())

    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def _create_file_handler(
    file_path: str,
    rotation: RotationType,
    max_bytes: int,
    backup_count: int,
    when: str,
    interval: int,
) -> logging.Handler:
    """Создаёт file handler с нужной ротацией."""
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    if rotation == RotationType.SIZE:
        return logging.handlers.RotatingFileHandler(
            filename=file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    elif rotation == RotationType.TIME:
        return logging.handlers.TimedRotatingFileHandler(
            filename=file_path,
            when=when,
            interval=interval,
            backupCount=backup_count,
            encoding="utf-8",
        )
    else:
        return logging.FileHandler(file_path, encoding="utf-8")


def setup_logging_from_config(config: LogConfig) -> None:
    """
    Настраивает логирование из LogConfig.

    Консоль всегда в human-формате, файл в формате из json_format.

    Example:
        setup_logging_from_config(LogConfig(
            json_format=True,
            file_path="logs/azure_ipam.log",
            rotation=RotationType.TIME,
            backup_count=7,
        ))
    """
    formatter = JSONFormatter() if config.json_format else HumanFormatter()
    root_logger = _reset_root_handlers()

    handlers: List[logging.Handler] = []

    if config.console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(HumanFormatter())
        handlers.append(console_handler)

    if config.file_path:
        file_handler = _create_file_handler(
            file_path=config.file_path,
            rotation=config.rotation,
            max_bytes=config.max_bytes,
            backup_count=config.backup_count,
            when=config.when,
            interval=config.interval,
        )
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    root_logger.setLevel(config.level)


@dataclass
class OperationLog:
    """
    Лог операции с длительностью и результатом.

    Использование:
        op = OperationLog(operation="refresh", source="Azure").start()
        try:
            stats = ...
            op.success(pools=2, records=5)
        except AzureIPAMError as e:
            op.failure(str(e))
            raise
        finally:
            op.log(logger)
    """
    operation: str
    source: str = ""
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    status: str = "pending"
    result: Dict[str, Any] = field(default_factory=dict)
    error: str = ""

    def start(self) -> "OperationLog":
        """Начало операции."""
        self.started_at = datetime.now()
        self.status = "running"
        return self

    def success(self, **result: Any) -> "OperationLog":
        """Успешное завершение."""
        self.completed_at = datetime.now()
        self.status = "success"
        self.result = result
        return self

    def failure(self, error: str) -> "OperationLog":
        """Завершение с ошибкой."""
        self.completed_at = datetime.now()
        self.status = "failure"
        self.error = error
        return self

    @property
    def duration_ms(self) -> Optional[float]:
        """Длительность в миллисекундах."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds() * 1000
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь для JSON."""
        data: Dict[str, Any] = {
            "operation": self.operation,
            "status": self.status,
        }
        if self.source:
            data["source"] = self.source
        if self.started_at:
            data["started_at"] = self.started_at.isoformat()
        if self.completed_at:
            data["completed_at"] = self.completed_at.isoformat()
        if self.duration_ms is not None:
            data["duration_ms"] = round(self.duration_ms, 2)
        if self.result:
            data["result"] = self.result
        if self.error:
            data["error"] = self.error
        return data

    def log(self, logger: Optional[StructuredLogger] = None) -> None:
        """
        Пишет итог операции в лог.

        Args:
            logger: Логгер (по умолчанию azure_ipam)
        """
        if logger is None:
            logger = get_logger("azure_ipam")

        level = logging.INFO if self.status == "success" else logging.ERROR
        message = f"Operation {self.operation} {self.status}"

        extra: Dict[str, Any] = {"operation": self.operation, "status": self.status}
        if self.source:
            extra["source"] = self.source
        if self.duration_ms is not None:
            extra["duration_ms"] = round(self.duration_ms, 2)
        if self.result:
            extra.update(self.result)
        if self.error:
            extra["error"] = self.error

        logger._log(level, message, **extra)
