"""
Periodic reporter that pushes collector output to OpenTSDB.
"""
import logging
import threading
from typing import Dict, List, Optional

from . import config
from .client import OpenTsdbClient
from .collector import Collector
from .metric import Metric

logger = logging.getLogger(__name__)


class MetricsReporter:
    """
    Collects from registered collectors and sends the result in one call.
    """

    def __init__(self, client: OpenTsdbClient, prefix: Optional[str] = None,
                 tags: Optional[Dict[str, str]] = None):
        """
        Initialize the reporter.

        Args:
            client (OpenTsdbClient): The client to send with
            prefix (str, optional): Prepended to every metric name, joined with a dot
            tags (dict, optional): Tags added to every metric; a metric's own tags win
        """
        self.client = client
        self.prefix = prefix
        self.tags = dict(tags or {})
        self.collectors: List[Collector] = []
        self._stop_event = threading.Event()
        self.thread = None

    def register_collector(self, collector: Collector) -> None:
        """
        Register a collector with the reporter.

        Args:
            collector (Collector): The collector to register
        """
        self.collectors.append(collector)
        logger.debug("Registered collector: %s", collector.name)

    def register_collectors(self, collectors: List[Collector]) -> None:
        for collector in collectors:
            self.register_collector(collector)

    def _decorate(self, metric: Metric) -> Metric:
        name = f"{self.prefix}.{metric.name}" if self.prefix else metric.name
        tags = dict(self.tags)
        tags.update(metric.tags)
        return Metric(name, metric.timestamp, metric.value, tags)

    def report(self) -> int:
        """
        Collect from all registered collectors and send the metrics.

        Returns:
            int: Number of distinct metrics handed to the client
        """
        metrics = set()
        for collector in self.collectors:
            metrics.update(self._decorate(metric) for metric in collector.safe_collect())

        if metrics:
            self.client.send(metrics)
        logger.info("Reported %d metrics from %d collectors", len(metrics), len(self.collectors))
        return len(metrics)

    def start(self, interval: Optional[float] = None) -> None:
        """
        Start reporting on a background thread.

        Args:
            interval (float, optional): Seconds between reports. Defaults to config.REPORT_INTERVAL.
        """
        if self.thread and self.thread.is_alive():
            logger.warning("Reporter already running")
            return

        if interval is None:
            interval = config.REPORT_INTERVAL
        self._stop_event.clear()

        def report_loop():
            logger.info("Starting report loop every %s seconds", interval)
            while not self._stop_event.is_set():
                try:
                    self.report()
                except Exception as e:
                    logger.error("Error in report loop: %s", str(e))
                self._stop_event.wait(interval)

        self.thread = threading.Thread(target=report_loop, name='opentsdb-reporter', daemon=True)
        self.thread.start()

    def stop(self) -> None:
        """Stop the background thread started by ``start``."""
        if not self.thread:
            logger.warning("Reporter not running")
            return

        logger.info("Stopping reporter")
        self._stop_event.set()
        self.thread.join(timeout=5)
        if self.thread.is_alive():
            logger.warning("Reporter thread did not stop cleanly")
        self.thread = None
