"""
OpenTSDB SDK for sending metrics over the HTTP ``/api/put`` endpoint.
"""
from .batcher import partition
from .client import BatchState, ClientConfig, OpenTsdbClient
from .collector import Collector
from .errors import (
    InvalidMetricError,
    OpenTsdbError,
    ProtocolError,
    SerializationError,
    TransportError,
)
from .metric import Metric, encode_metrics
from .reporter import MetricsReporter
from .transport import HttpTransport

__version__ = '0.1.0'

__all__ = [
    'BatchState',
    'ClientConfig',
    'Collector',
    'HttpTransport',
    'InvalidMetricError',
    'Metric',
    'MetricsReporter',
    'OpenTsdbClient',
    'OpenTsdbError',
    'ProtocolError',
    'SerializationError',
    'TransportError',
    'encode_metrics',
    'partition',
]
