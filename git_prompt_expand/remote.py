"""Classify the upstream remote's host."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .models import KNOWN_HOSTS, Domain


# scp-like syntax: <user>@<host>:<path>
_SCP_PATTERN = re.compile(r"^([^@:]*)@([^@:]*):([^@:]*)$")


def parse_remote_host(remote: str) -> str | None:
    """Return the host of a remote URL, or ``None`` when it has none.

    Handles regular URLs (``https://``, ``ssh://``) and the scp-like
    ``git@host:owner/repo.git`` form git accepts.
    """

    remote = remote.strip()
    if not remote:
        return None
    parsed = urlparse(remote)
    if parsed.scheme and parsed.hostname:
        return parsed.hostname.lower()
    match = _SCP_PATTERN.match(remote)
    if match:
        return match.group(2).lower()
    return None


def classify_host(host: str | None) -> Domain:
    if not host:
        return Domain.GIT
    return KNOWN_HOSTS.get(host.lower(), Domain.GIT)


def classify_remote(remote: str | None) -> Domain:
    if not remote:
        return Domain.GIT
    return classify_host(parse_remote_host(remote))
