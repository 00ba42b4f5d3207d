"""
Tests for collectors and the periodic reporter.
"""
import threading
from collections import namedtuple
from unittest import mock

from conftest import make_metrics
from opentsdb_sdk.collector import Collector
from opentsdb_sdk.collectors import SystemCollector
from opentsdb_sdk.metric import Metric
from opentsdb_sdk.reporter import MetricsReporter


class StaticCollector(Collector):
    def __init__(self, metrics):
        self.metrics = list(metrics)

    def collect(self):
        return self.metrics


class FailingCollector(Collector):
    def collect(self):
        raise RuntimeError('sensor offline')


class TestCollector:
    """Collector base class"""

    def test_name_defaults_to_class_name(self):
        assert StaticCollector([]).name == 'StaticCollector'

    def test_safe_collect_swallows_errors(self, caplog):
        assert FailingCollector().safe_collect() == []
        assert 'sensor offline' in caplog.text


class TestSystemCollector:
    """SystemCollector with psutil mocked out"""

    def test_collects_usage_percentages(self):
        usage = namedtuple('usage', 'percent')
        with mock.patch('opentsdb_sdk.collectors.system.psutil') as psutil:
            psutil.cpu_percent.return_value = 12.5
            psutil.virtual_memory.return_value = usage(40)
            psutil.disk_usage.return_value = usage(75.0)
            metrics = SystemCollector(host='web1').collect()

        values = {m.name: m.value for m in metrics}
        assert values == {
            'system.cpu.percent': 12.5,
            'system.memory.percent': 40.0,
            'system.disk.percent': 75.0,
        }
        assert all(dict(m.tags) == {'host': 'web1'} for m in metrics)
        psutil.disk_usage.assert_called_once_with('/')


class TestMetricsReporter:
    """MetricsReporter.report and background loop"""

    def test_report_sends_all_collected(self, client, transport):
        reporter = MetricsReporter(client)
        reporter.register_collectors([StaticCollector(make_metrics(15)), StaticCollector(make_metrics(3, 'other'))])

        assert reporter.report() == 18
        assert sum(len(p) for p in transport.payloads()) == 18

    def test_prefix_and_common_tags(self, client, transport):
        reporter = MetricsReporter(client, prefix='app', tags={'env': 'prod', 'host': 'default'})
        reporter.register_collector(StaticCollector([Metric('requests', 1, 5, {'host': 'web1'})]))

        reporter.report()

        assert transport.payloads() == [[{
            'metric': 'app.requests',
            'timestamp': 1,
            'value': 5,
            'tags': {'env': 'prod', 'host': 'web1'},
        }]]

    def test_failing_collector_does_not_block_others(self, client, transport):
        reporter = MetricsReporter(client)
        reporter.register_collectors([FailingCollector(), StaticCollector([Metric('ok', 1, 1)])])

        assert reporter.report() == 1
        assert len(transport.posts) == 1

    def test_nothing_collected_sends_nothing(self, client, transport):
        reporter = MetricsReporter(client)
        assert reporter.report() == 0
        assert transport.posts == []

    def test_start_and_stop(self, client):
        reporter = MetricsReporter(client)
        reported = threading.Event()
        with mock.patch.object(reporter, 'report', side_effect=lambda: reported.set()):
            reporter.start(interval=60)
            assert reported.wait(timeout=5)
            reporter.stop()
        assert reporter.thread is None

    def test_zero_interval_is_honoured(self, client):
        reporter = MetricsReporter(client)
        rounds = []
        enough = threading.Event()

        def report():
            rounds.append(1)
            if len(rounds) >= 3:
                enough.set()

        with mock.patch.object(reporter, 'report', side_effect=report):
            reporter.start(interval=0)
            assert enough.wait(timeout=5)
            reporter.stop()

    def test_stop_when_not_running(self, client, caplog):
        MetricsReporter(client).stop()
        assert 'not running' in caplog.text
