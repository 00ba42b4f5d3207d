#!/usr/bin/env python3
"""
Command line interface for pushing metrics to OpenTSDB.
"""
import argparse
import logging
import time
from typing import Dict, List, Optional

from . import config
from .client import ClientConfig, OpenTsdbClient
from .collectors import SystemCollector
from .metric import Metric
from .reporter import MetricsReporter

logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """
    Setup logging with the specified log level.

    Args:
        log_level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def parse_tags(specs: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse ``key=value`` strings into a tag dict.

    Args:
        specs (list): Strings such as ``host=web1``

    Returns:
        dict: The parsed tags
    """
    tags = {}
    for spec in specs or []:
        key, sep, value = spec.partition('=')
        if not sep or not key or not value:
            raise argparse.ArgumentTypeError(f"Invalid tag '{spec}', expected key=value")
        tags[key] = value
    return tags


def parse_value(text: str):
    try:
        return int(text)
    except ValueError:
        return float(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='opentsdb-sdk',
        description='Send metrics to an OpenTSDB server',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--url', type=str, default=config.SERVER_URL,
                        help='OpenTSDB server URL')
    parser.add_argument('--connect-timeout', type=int, default=config.CONNECT_TIMEOUT_MS,
                        help='Connect timeout in milliseconds')
    parser.add_argument('--read-timeout', type=int, default=config.READ_TIMEOUT_MS,
                        help='Read timeout in milliseconds')
    parser.add_argument('--batch-size', type=int, default=config.BATCH_SIZE_LIMIT,
                        help='Maximum metrics per request (0 disables batching)')
    parser.add_argument('--log-level', type=str, default=config.LOG_LEVEL,
                        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    put = subparsers.add_parser('put', help='Send a single metric')
    put.add_argument('name', type=str, help='Metric name')
    put.add_argument('value', type=parse_value, help='Metric value')
    put.add_argument('--timestamp', type=int, default=None,
                     help='Epoch seconds (defaults to now)')
    put.add_argument('--tag', action='append', dest='tags', metavar='KEY=VALUE',
                     help='Tag to attach, may be repeated')

    report = subparsers.add_parser('report', help='Report system metrics periodically')
    report.add_argument('--interval', type=int, default=config.REPORT_INTERVAL,
                        help='Seconds between reports')
    report.add_argument('--count', type=int, default=0,
                        help='Number of reports (0 for infinite)')
    report.add_argument('--prefix', type=str, default=None,
                        help='Prefix for every metric name')
    report.add_argument('--tag', action='append', dest='tags', metavar='KEY=VALUE',
                        help='Tag added to every metric, may be repeated')

    return parser


def run_put(client: OpenTsdbClient, args: argparse.Namespace) -> None:
    metric = Metric.create(args.name, args.value, timestamp=args.timestamp, tags=parse_tags(args.tags))
    logger.info("Sending %s", metric)
    client.send(metric)


def run_report(client: OpenTsdbClient, args: argparse.Namespace) -> None:
    reporter = MetricsReporter(client, prefix=args.prefix, tags=parse_tags(args.tags))
    reporter.register_collector(SystemCollector())

    round_count = 0
    try:
        while args.count == 0 or round_count < args.count:
            round_count += 1
            logger.info("Report round %s%s", round_count,
                        ("/%s" % args.count if args.count > 0 else ""))
            reporter.report()
            if args.count == 0 or round_count < args.count:
                time.sleep(args.interval)
    except KeyboardInterrupt:
        logger.info("Reporting interrupted by user.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        client_config = ClientConfig(
            base_url=args.url,
            connect_timeout=args.connect_timeout,
            read_timeout=args.read_timeout,
            batch_size_limit=args.batch_size
        )
    except ValueError as e:
        parser.error(str(e))

    with OpenTsdbClient(client_config) as client:
        try:
            if args.command == 'put':
                run_put(client, args)
            else:
                run_report(client, args)
        except (ValueError, argparse.ArgumentTypeError) as e:
            parser.error(str(e))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
