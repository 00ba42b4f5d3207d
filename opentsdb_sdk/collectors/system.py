"""
Collector for host CPU, memory and disk usage.
"""
import logging
import socket
from typing import List, Optional

import psutil

from ..collector import Collector
from ..metric import Metric, to_epoch_seconds

logger = logging.getLogger(__name__)


class SystemCollector(Collector):
    """Collects system usage percentages with psutil."""

    def __init__(self, host: Optional[str] = None, disk_path: str = '/', cpu_interval: float = 0.0):
        """
        Args:
            host (str, optional): Value of the ``host`` tag. Defaults to the hostname.
            disk_path (str): Mount point whose usage is reported
            cpu_interval (float): Seconds psutil samples the CPU for; 0 compares
                against the previous call
        """
        self.host = host or socket.gethostname()
        self.disk_path = disk_path
        self.cpu_interval = cpu_interval

    def collect(self) -> List[Metric]:
        timestamp = to_epoch_seconds(None)
        tags = {'host': self.host}

        readings = {
            'system.cpu.percent': psutil.cpu_percent(interval=self.cpu_interval),
            'system.memory.percent': psutil.virtual_memory().percent,
            'system.disk.percent': psutil.disk_usage(self.disk_path).percent,
        }
        logger.debug("Collected system readings: %s", readings)

        return [Metric(name, timestamp, float(value), tags) for name, value in readings.items()]
