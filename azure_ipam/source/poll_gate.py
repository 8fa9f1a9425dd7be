"""
Ограничение частоты опроса metadata-сервиса.

PollGate пропускает обновление не чаще одного раза в min_poll_period.
Проверка и запись времени выполняются под одной блокировкой.
"""

import threading
import time
from typing import Callable, Optional

from ..core.constants import DEFAULT_MIN_POLL_PERIOD


class PollGate:
    """
    Минимальный интервал между обновлениями.

    Attributes:
        min_poll_period: Интервал в секундах
        last_refresh: Время последнего разрешённого обновления (None до первого)

    Example:
        gate = PollGate(min_poll_period=30)
        if gate.should_refresh():
            ...  # опрашиваем сервис
    """

    def __init__(
        self,
        min_poll_period: float = DEFAULT_MIN_POLL_PERIOD,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            min_poll_period: Минимальный интервал (секунды)
            clock: Источник времени, по умолчанию time.monotonic
        """
        if min_poll_period < 0:
            raise ValueError("min_poll_period не может быть отрицательным")
        self.min_poll_period = min_poll_period
        self.last_refresh: Optional[float] = None
        self._clock = clock
        self._lock = threading.Lock()

    def should_refresh(self, now: Optional[float] = None) -> bool:
        """
        Проверяет, пора ли обновляться, и если да, запоминает время.

        Args:
            now: Текущее время в шкале clock (по умолчанию clock())

        Returns:
            bool: True если обновление разрешено
        """
        if now is None:
            now = self._clock()

        with self._lock:
            if (
                self.last_refresh is not None
                and now - self.last_refresh < self.min_poll_period
            ):
                return False
            self.last_refresh = now
            return True

    def seconds_until_next(self, now: Optional[float] = None) -> float:
        """Сколько секунд осталось до следующего разрешённого обновления."""
        if now is None:
            now = self._clock()
        with self._lock:
            if self.last_refresh is None:
                return 0.0
            return max(0.0, self.min_poll_period - (now - self.last_refresh))
