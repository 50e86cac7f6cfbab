from __future__ import annotations

from urllib.parse import urlparse, urlunparse

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}
_SCHEMES = {"http", "https"}


def is_http_url(url: str | None) -> bool:
    """Return True when *url* is an absolute http(s) URL with a host."""
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme.lower() in _SCHEMES and bool(parsed.hostname)


def dockerize_localhost(url: str | None, *, enabled: bool) -> str | None:
    """Point loopback targets at host.docker.internal when running in docker.

    A client container polling ``http://localhost:8080/info`` would otherwise
    talk to itself rather than to the server on the host.
    """

    if not enabled or not url:
        return url

    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host not in _LOCAL_HOSTS:
        return url

    netloc = "host.docker.internal"
    if parsed.port:
        netloc = f"{netloc}:{parsed.port}"
    return urlunparse(parsed._replace(netloc=netloc))
