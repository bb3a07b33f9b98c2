"""Map transport failures onto `ErrorKind` tags at the fetch boundary."""
import socket
from typing import Iterator, Optional

import requests

from intelcrawl.domain.error_kind import ErrorKind

_DNS_MARKERS = (
    "net::err_name_not_resolved",
    "enotfound",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "failed to resolve",
    "nameresolutionerror",
)
_REFUSED_MARKERS = ("net::err_connection_refused", "econnrefused", "connection refused")
_RESET_MARKERS = (
    "net::err_connection_reset",
    "net::err_network_changed",
    "net::err_internet_disconnected",
    "econnreset",
    "connection reset",
    "connection aborted",
)
_TIMEOUT_MARKERS = ("timeout", "timed out", "net::err_timed_out")
_DETACHED_MARKERS = ("detached", "target closed", "has been closed")
_PROTOCOL_MARKERS = ("protocol error",)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk an exception, its args, `.reason`, and its cause/context chain."""
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(a for a in getattr(current, "args", ()) if isinstance(a, BaseException))
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            stack.append(reason)
        stack.append(current.__cause__)
        stack.append(current.__context__)


def classify_message(message: Optional[str]) -> ErrorKind:
    """Classify a browser/driver error by its message text."""
    text = (message or "").lower()
    if any(m in text for m in _DNS_MARKERS):
        return ErrorKind.DNS
    if any(m in text for m in _REFUSED_MARKERS):
        return ErrorKind.REFUSED
    if any(m in text for m in _RESET_MARKERS):
        return ErrorKind.RESET
    if any(m in text for m in _TIMEOUT_MARKERS):
        return ErrorKind.TIMEOUT
    if any(m in text for m in _DETACHED_MARKERS):
        return ErrorKind.DETACHED
    if any(m in text for m in _PROTOCOL_MARKERS):
        return ErrorKind.PROTOCOL
    return ErrorKind.OTHER


def classify_request_exception(exc: BaseException) -> ErrorKind:
    """Classify a `requests` transport exception."""
    for cause in _causes(exc):
        if isinstance(cause, socket.gaierror):
            return ErrorKind.DNS
        if isinstance(cause, ConnectionRefusedError):
            return ErrorKind.REFUSED
        if isinstance(cause, ConnectionResetError):
            return ErrorKind.RESET
    if isinstance(exc, requests.exceptions.Timeout):
        return ErrorKind.TIMEOUT
    kind = classify_message(str(exc))
    if kind is not ErrorKind.OTHER:
        return kind
    if isinstance(exc, requests.exceptions.ConnectionError):
        return ErrorKind.RESET
    if isinstance(exc, (requests.exceptions.TooManyRedirects, requests.exceptions.InvalidURL)):
        return ErrorKind.PROTOCOL
    return ErrorKind.OTHER


def classify_status(status_code: int) -> Optional[ErrorKind]:
    if 500 <= status_code < 600:
        return ErrorKind.HTTP_5XX
    if 400 <= status_code < 500:
        return ErrorKind.HTTP_4XX
    return None
