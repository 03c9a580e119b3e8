"""
Target identity resolution.

A target identity is the filesystem-safe partition name under which all
snapshots of one URL are stored.
"""
from __future__ import annotations

from urllib.parse import urlsplit

from .errors import InvalidTargetError

WWW_PREFIX = "www."


def resolve(url: str) -> str:
    """Derive the target identity for ``url``.

    The host loses a leading ``www.`` and a non-root path is appended with
    every ``/`` replaced by ``_``, so ``https://www.example.com/a/b`` becomes
    ``example.com_a_b``.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidTargetError(f"Not a URL: {url!r}")

    try:
        parts = urlsplit(url.strip())
        # Accessing .port validates the port number
        parts.port
    except ValueError as e:
        raise InvalidTargetError(f"Malformed URL {url!r}: {e}") from e

    if not parts.scheme or not parts.hostname:
        raise InvalidTargetError(f"URL must be absolute with a host: {url!r}")

    host = parts.netloc.rsplit("@", 1)[-1].lower()
    if host.startswith(WWW_PREFIX):
        host = host[len(WWW_PREFIX):]
    if not host:
        raise InvalidTargetError(f"URL has an empty host: {url!r}")

    # Ports keep targets distinct but ':' is unsafe in directory names
    identity = host.replace(":", "_")

    path = parts.path
    if path and path != "/":
        identity = identity + path.replace("/", "_")

    return identity.replace("\\", "_")
