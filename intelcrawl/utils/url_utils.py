import ipaddress
from urllib.parse import urlparse

LOCAL_HOSTNAMES = {"localhost", "localhost.localdomain", "ip6-localhost", "ip6-loopback"}


def is_safe_http_url(url: str) -> bool:
    """True for http(s) URLs with a public host.

    Rejects embedded credentials, localhost names, `.local`/`.internal`
    hosts and IP literals in private, loopback, link-local, multicast or
    reserved ranges.
    """
    try:
        parsed = urlparse((url or "").strip())
        host = parsed.hostname
        parsed.port
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not host:
        return False
    if parsed.username or parsed.password:
        return False
    host = host.lower().rstrip(".")
    if host in LOCAL_HOSTNAMES or host.endswith((".localhost", ".local", ".internal")):
        return False
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return True
    return not (
        ip.is_private or ip.is_loopback or ip.is_link_local
        or ip.is_multicast or ip.is_reserved or ip.is_unspecified
    )
