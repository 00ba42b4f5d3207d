"""
Base collector class for standardizing metric collection.
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

from .metric import Metric

logger = logging.getLogger(__name__)


class Collector(ABC):
    """
    Abstract base class for all metric collectors.

    Subclasses implement ``collect()`` and return the metrics measured at
    that moment.
    """

    @abstractmethod
    def collect(self) -> Iterable[Metric]:
        """
        Collect metrics.

        Returns:
            iterable of Metric: The collected metrics
        """

    @property
    def name(self) -> str:
        """
        Get the name of the collector.

        Returns:
            str: The name of the collector (class name by default)
        """
        return self.__class__.__name__

    def safe_collect(self) -> List[Metric]:
        """
        Collect metrics, logging and swallowing any failure.

        Returns:
            list: The collected metrics, or an empty list if collection failed
        """
        try:
            return list(self.collect())
        except Exception as e:
            logger.error("Error collecting metrics from %s: %s", self.name, str(e))
            return []
