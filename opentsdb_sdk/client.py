"""
OpenTSDB HTTP client.

``OpenTsdbClient.send`` is fire-and-forget: metrics are batched and handed to
the transport, and the call returns before any request completes. Failed
batches are logged and dropped. There is no retry, no buffering, and no way
for the caller to learn whether a given metric arrived.
"""
import logging
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from . import config
from .batcher import Batch, partition
from .errors import OpenTsdbError, ProtocolError, TransportError
from .metric import Metric, encode_metrics
from .transport import HttpTransport

logger = logging.getLogger(__name__)

JSON_HEADERS = {'Content-Type': 'application/json'}


class BatchState(Enum):
    """Lifecycle of one dispatched batch. The last three states are terminal."""
    BUILT = 'built'
    SUBMITTED = 'submitted'
    SUCCEEDED = 'succeeded'
    PROTOCOL_FAILED = 'protocol_failed'
    TRANSPORT_FAILED = 'transport_failed'


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings, fixed for the lifetime of a client."""
    base_url: str
    connect_timeout: int = config.CONNECT_TIMEOUT_MS
    read_timeout: int = config.READ_TIMEOUT_MS
    batch_size_limit: int = config.BATCH_SIZE_LIMIT

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("base_url is required")
        object.__setattr__(self, 'base_url', self.base_url.rstrip('/'))

    @classmethod
    def from_env(cls) -> 'ClientConfig':
        """Build a config from the ``OPENTSDB_*`` environment defaults."""
        return cls(
            base_url=config.SERVER_URL,
            connect_timeout=config.CONNECT_TIMEOUT_MS,
            read_timeout=config.READ_TIMEOUT_MS,
            batch_size_limit=config.BATCH_SIZE_LIMIT
        )

    @property
    def put_url(self) -> str:
        return f"{self.base_url}{config.PUT_ENDPOINT}"


class OpenTsdbClient:
    """Client for sending metrics to an OpenTSDB ``/api/put`` endpoint."""

    def __init__(self, client_config: ClientConfig, transport: Optional[HttpTransport] = None):
        """
        Initialize the client.

        Args:
            client_config (ClientConfig): Connection and batching settings
            transport (HttpTransport, optional): Transport to post with. Defaults to
                an ``HttpTransport`` using the configured timeouts.
        """
        self.config = client_config
        self.transport = transport or HttpTransport(
            connect_timeout=client_config.connect_timeout,
            read_timeout=client_config.read_timeout
        )
        self._batch_size_limit = client_config.batch_size_limit
        self._closed = False

    @classmethod
    def for_service(cls, base_url: str, **kwargs) -> 'OpenTsdbClient':
        """
        Create a client for the OpenTSDB server at ``base_url``.

        Args:
            base_url (str): Server root, e.g. ``http://tsdb:4242``
            **kwargs: Other ``ClientConfig`` fields (connect_timeout, read_timeout,
                batch_size_limit)

        Returns:
            OpenTsdbClient: The new client
        """
        return cls(ClientConfig(base_url=base_url, **kwargs))

    @property
    def batch_size_limit(self) -> int:
        return self._batch_size_limit

    @batch_size_limit.setter
    def batch_size_limit(self, value: int) -> None:
        """Takes effect for the next ``send`` call; batches already dispatched are unaffected."""
        self._batch_size_limit = int(value)

    def send(self, metrics: Union[Metric, Iterable[Metric]]) -> None:
        """
        Send one metric or a collection of metrics to OpenTSDB.

        Duplicate metrics are sent once. The collection is split into batches
        of at most ``batch_size_limit`` metrics, one request per batch. This
        method returns immediately and never reports delivery failures; they
        are logged at error level and the affected batch is dropped.

        Args:
            metrics (Metric | iterable of Metric): What to send
        """
        if isinstance(metrics, Metric):
            metrics = (metrics,)

        if self._closed:
            logger.error("Client is closed, dropping metrics")
            return

        for batch in partition(metrics, self._batch_size_limit):
            self._dispatch(batch)

    def _dispatch(self, batch: Batch) -> Optional[Future]:
        """Serialize and submit one batch. Returns the pending future, or None if it failed early."""
        url = self.config.put_url
        try:
            body = encode_metrics(batch)
            # A fresh headers dict per request; nothing here is shared between calls
            future = self.transport.post(url, body, dict(JSON_HEADERS))
        except Exception as e:
            if not isinstance(e, OpenTsdbError):
                e = TransportError(str(e), url=url)
            logger.error("Failed to send %d metrics to %s: %s", len(batch), url, e)
            return None

        logger.debug("Submitted batch of %d metrics to %s", len(batch), url)
        future.add_done_callback(lambda done: self._on_complete(done, len(batch), url))
        return future

    def _on_complete(self, future: Future, size: int, url: str) -> BatchState:
        """Classify the outcome of a submitted batch and log failures."""
        if future.cancelled():
            logger.error("Failed to send %d metrics to %s: request cancelled", size, url)
            return BatchState.TRANSPORT_FAILED

        error = future.exception()
        if error is not None:
            if not isinstance(error, OpenTsdbError):
                error = TransportError(str(error), url=url)
            logger.error("Failed to send %d metrics to %s: %s", size, url, error)
            return BatchState.TRANSPORT_FAILED

        response = future.result()
        if response.status_code != config.SUCCESS_STATUS:
            error = ProtocolError(response.status_code, response.text)
            logger.error("Failed to send %d metrics to %s: %s", size, url, error)
            return BatchState.PROTOCOL_FAILED

        return BatchState.SUCCEEDED

    def close(self) -> None:
        """Wait for in-flight batches, then release the transport."""
        if self._closed:
            return
        self._closed = True
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
