"""
Запрос документа интерфейсов у metadata-сервиса хоста.

Один блокирующий GET на фиксированный link-local адрес. Ответ всегда
читается целиком, соединение возвращается в пул сессии при любом исходе.

Пример использования:
    fetcher = MetadataFetcher(timeout=5)
    body = fetcher.fetch()
"""

from typing import Optional

import requests

from ..core.constants import AZURE_QUERY_URL, DEFAULT_FETCH_TIMEOUT
from ..core.exceptions import (
    MetadataConnectionError,
    MetadataFetchError,
    MetadataHTTPError,
    MetadataTimeoutError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)


class MetadataFetcher:
    """
    HTTP клиент metadata-сервиса.

    Attributes:
        url: URL запроса
        timeout: Таймаут подключения и чтения (секунды)
    """

    def __init__(
        self,
        url: str = AZURE_QUERY_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            url: URL metadata-сервиса
            timeout: Таймаут запроса
            session: Готовая сессия (если None, создаётся своя)
        """
        self.url = url
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()

    def fetch(self) -> bytes:
        """
        Выполняет GET и возвращает тело ответа.

        Returns:
            bytes: Тело ответа

        Raises:
            MetadataTimeoutError: Таймаут
            MetadataConnectionError: Сервис недоступен
            MetadataHTTPError: Код ответа не 200
            MetadataFetchError: Прочие ошибки запроса
        """
        logger.debug("Запрос к metadata-сервису", url=self.url)

        try:
            with self._session.get(self.url, timeout=self.timeout) as resp:
                if resp.status_code != 200:
                    raise MetadataHTTPError(
                        f"Metadata-сервис вернул {resp.status_code}",
                        url=self.url,
                        status_code=resp.status_code,
                    )
                body = resp.content
        except requests.Timeout as e:
            raise MetadataTimeoutError(
                f"Таймаут запроса: {e}",
                url=self.url,
                timeout_seconds=self.timeout,
            ) from e
        except requests.ConnectionError as e:
            raise MetadataConnectionError(
                f"Ошибка подключения: {e}",
                url=self.url,
            ) from e
        except requests.RequestException as e:
            raise MetadataFetchError(
                f"Ошибка запроса: {e}",
                url=self.url,
            ) from e

        logger.debug(f"Получено {len(body)} байт", url=self.url)
        return body

    def close(self) -> None:
        """Закрывает собственную сессию."""
        if self._owns_session:
            self._session.close()
