from enum import Enum


class ErrorKind(str, Enum):
    """Structured failure tag produced by the fetch layer."""

    TIMEOUT = "timeout"
    DNS = "dns"
    REFUSED = "refused"
    RESET = "reset"
    PROTOCOL = "protocol"
    DETACHED = "detached"
    HTTP_4XX = "http_4xx"
    HTTP_5XX = "http_5xx"
    CONTENT = "content"
    OTHER = "other"

    @property
    def is_terminal(self) -> bool:
        """The network itself rejected the connection; no fetcher will do better."""
        return self in (ErrorKind.DNS, ErrorKind.REFUSED)
