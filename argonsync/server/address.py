"""Helpers for choosing and formatting the address a server listens on."""

from __future__ import annotations

import socket

_MAX_PORT = 65535


def is_port_free(host: str, port: int) -> bool:
    """Check whether a TCP listener can be bound to `host:port`."""
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (OSError, OverflowError):
        return False

    family = infos[0][0] if infos else socket.AF_INET
    try:
        with socket.create_server((host, port), family=family):
            return True
    except (OSError, OverflowError):
        return False


def get_free_port(host: str, port: int) -> int:
    """Return the first free port at or above `port`, stopping at the last port."""
    while not is_port_free(host, port):
        port += 1
        if port == _MAX_PORT:
            break
    return port


def format_address(host: str, port: int) -> str:
    """Return the HTTP address of a server."""
    return f"http://{host}:{port}"