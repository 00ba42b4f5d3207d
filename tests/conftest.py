"""
Shared fixtures for the OpenTSDB SDK tests.
"""
import json
from concurrent.futures import Future

import pytest

from opentsdb_sdk.client import ClientConfig, OpenTsdbClient
from opentsdb_sdk.metric import Metric


class FakeResponse:
    def __init__(self, status_code=204, text=''):
        self.status_code = status_code
        self.text = text


class FakeTransport:
    """Records posts and resolves each one immediately with a canned outcome."""

    def __init__(self, status_code=204, text='', error=None):
        self.status_code = status_code
        self.text = text
        self.error = error
        self.posts = []
        self.closed = False

    def post(self, url, body, headers):
        self.posts.append((url, body, headers))
        future = Future()
        if self.error is not None:
            future.set_exception(self.error)
        else:
            future.set_result(FakeResponse(self.status_code, self.text))
        return future

    def close(self, wait=True):
        self.closed = True

    def payloads(self):
        return [json.loads(body.decode('utf-8')) for _, body, _ in self.posts]


def make_metrics(count, name='test.metric'):
    return {Metric(name, 1700000000 + i, i, {'host': 'web1'}) for i in range(count)}


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return OpenTsdbClient(ClientConfig(base_url='http://tsdb:4242'), transport=transport)
