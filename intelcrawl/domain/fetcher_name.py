from enum import Enum


class FetcherName(str, Enum):
    STATIC = "static"
    RENDERED = "rendered"
