"""
Non-blocking HTTP transport built on a requests session and a thread pool.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Mapping, Optional

import requests
from requests.adapters import HTTPAdapter

from . import config
from .errors import TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Posts payloads on worker threads and hands back a future per request.

    The session, and with it the connection pool, is shared by every
    request. Nothing request specific is kept on the transport.
    """

    def __init__(
        self,
        connect_timeout: int = config.CONNECT_TIMEOUT_MS,
        read_timeout: int = config.READ_TIMEOUT_MS,
        max_workers: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the transport.

        Args:
            connect_timeout (int): Connect timeout in milliseconds
            read_timeout (int): Read timeout in milliseconds
            max_workers (int, optional): Worker threads. Defaults to config.MAX_WORKERS.
            session (requests.Session, optional): Session to send with
        """
        self.max_workers = max_workers or config.MAX_WORKERS
        self.timeout = (connect_timeout / 1000.0, read_timeout / 1000.0)
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=1, pool_maxsize=self.max_workers)
            session.mount('http://', adapter)
            session.mount('https://', adapter)
        self.session = session
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix='opentsdb-transport'
        )

    def post(self, url: str, body: bytes, headers: Mapping[str, str]) -> 'Future[requests.Response]':
        """
        Submit a POST request without waiting for it.

        Args:
            url (str): Target URL
            body (bytes): Request body
            headers (dict): Request headers

        Returns:
            Future: Resolves with the ``requests.Response``, or fails with
            ``TransportError``

        Raises:
            TransportError: If the transport has been closed
        """
        try:
            return self._executor.submit(self._post, url, body, dict(headers))
        except RuntimeError as e:
            raise TransportError(str(e), url=url) from e

    def _post(self, url: str, body: bytes, headers: Mapping[str, str]) -> requests.Response:
        try:
            return self.session.post(url, data=body, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(str(e), url=url) from e

    def close(self, wait: bool = True) -> None:
        """
        Stop accepting requests and release the connection pool.

        Args:
            wait (bool): Wait for in-flight requests to finish first
        """
        self._executor.shutdown(wait=wait)
        self.session.close()
        logger.debug("HTTP transport closed")
