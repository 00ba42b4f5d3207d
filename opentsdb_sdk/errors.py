"""
Exceptions raised by the OpenTSDB SDK.

Delivery errors (serialization, transport, protocol) are never raised to the
caller of ``OpenTsdbClient.send``; they are built so the completion handler
can log a single, uniform message per failed batch.
"""
from typing import Optional


class OpenTsdbError(Exception):
    """
    Base exception for OpenTSDB SDK errors.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An error occurred while talking to OpenTSDB"):
        self.message = message
        super().__init__(self.message)


class InvalidMetricError(OpenTsdbError, ValueError):
    """Raised when a metric is constructed with invalid fields."""


class SerializationError(OpenTsdbError):
    """
    Error raised when a batch cannot be encoded into a request payload.

    Args:
        reason (str): What went wrong while encoding.
    """
    def __init__(self, reason: str):
        super().__init__(f"Unable to serialize metrics: {reason}")


class TransportError(OpenTsdbError):
    """
    Error raised when a request fails before a response is received
    (connection refused, timeout, I/O error).

    Args:
        reason (str): The underlying failure.
        url (Optional[str]): The URL the request was sent to.
    """
    def __init__(self, reason: str, url: Optional[str] = None):
        self.url = url
        target = f" to {url}" if url else ""
        super().__init__(f"Request{target} failed: {reason}")


class ProtocolError(OpenTsdbError):
    """
    Error raised when OpenTSDB answers with an unexpected status code.

    Args:
        status_code (int): The HTTP status code received.
        body (str): The response body.
    """
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"({status_code}) {body}")
