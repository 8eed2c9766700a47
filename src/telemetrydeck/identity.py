"""Fallback user identity and user ID hashing."""

from __future__ import annotations

import hashlib
import os
import platform
import socket

import psutil

SEGMENT_SEPARATOR = "|"

_ZERO_MAC = "00:00:00:00:00:00"

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def operating_system() -> str:
    """Lowercase OS name, e.g. ``linux``, ``darwin`` or ``windows``."""
    return platform.system().lower()


def architecture() -> str:
    """CPU architecture using Go-style names (``amd64``, ``arm64``)."""
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def hash_user_id(user_id: str, salt: str = "") -> str:
    """Return the hex SHA-256 digest of ``user_id + salt``."""
    return hashlib.sha256((user_id + salt).encode("utf-8")).hexdigest()


def _hostname() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return ""


def _mac_addresses() -> str:
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error):
        return ""

    addresses: set[str] = set()
    for addrs in interfaces.values():
        for addr in addrs:
            if addr.family != psutil.AF_LINK or not addr.address:
                continue
            mac = addr.address.replace("-", ":").lower()
            if mac != _ZERO_MAC:
                addresses.add(mac)
    # Interface enumeration order is not stable across runs.
    return " ".join(sorted(addresses))


def _numeric_id(name: str) -> str:
    getter = getattr(os, name, None)
    if getter is None:
        return ""
    try:
        return str(getter())
    except OSError:
        return ""


def _username() -> str:
    for key in ("USER", "USERNAME"):
        value = os.environ.get(key)
        if value:
            return value
    return ""


def generate_user_id() -> str:
    """Build a pseudo-unique identifier for this machine and OS user.

    Segments, in order: OS, architecture, hostname, sorted MAC addresses,
    uid, gid and user name. A lookup that fails leaves its segment empty;
    this function never raises.
    """
    segments = [
        operating_system(),
        architecture(),
        _hostname(),
        _mac_addresses(),
        _numeric_id("getuid"),
        _numeric_id("getgid"),
        _username(),
    ]
    return SEGMENT_SEPARATOR.join(segments)
