"""Helpers for local addresses and for finding a client's real IP."""

from __future__ import annotations

import ipaddress
import socket
from collections.abc import Mapping
from typing import Any

_PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(block, strict=False)
    for block in (
        "127.0.0.1/8",  # localhost
        "10.0.0.0/8",  # 24-bit block
        "172.16.0.0/12",  # 20-bit block
        "192.168.0.0/16",  # 16-bit block
        "169.254.0.0/16",  # link local address
        "::1/128",  # localhost IPv6
        "fc00::/7",  # unique local address IPv6
        "fe80::/10",  # link local address IPv6
    )
)


def get_local_ip() -> str:
    """Return a non-loopback IPv4 address of this host, or an empty string."""
    candidates: list[str] = []
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
        candidates.extend(info[4][0] for info in infos)
    except OSError:
        pass
    try:
        # Connecting a datagram socket sends nothing; it only picks a route.
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.254.254.254", 1))
            candidates.append(sock.getsockname()[0])
    except OSError:
        pass
    for candidate in candidates:
        try:
            ip = ipaddress.IPv4Address(candidate)
        except ValueError:
            continue
        if not ip.is_loopback and not ip.is_unspecified:
            return candidate
    return ""


def _parse_ip(address: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    if "%" in address:
        raise ValueError("address is not valid")
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        raise ValueError("address is not valid") from None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_private_address(address: str) -> bool:
    """Return whether the address lies in a private, loopback or link-local block.

    Raises ValueError if the address is not a valid IP address.
    """
    ip = _parse_ip(address)
    return any(ip.version == net.version and ip in net for net in _PRIVATE_NETWORKS)


def _header(headers: Mapping[str, Any] | None, name: str) -> str:
    if not headers:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, (list, tuple)):
            return str(value[0]) if value else ""
        return str(value)
    return ""


def _split_host(hostport: str) -> str:
    """Return the host part of host:port, raising ValueError when malformed."""
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0 or hostport[end + 1 : end + 2] != ":":
            raise ValueError(f"malformed address: {hostport}")
        host = hostport[1:end]
        if "[" in host or "]" in hostport[end + 1 :]:
            raise ValueError(f"malformed address: {hostport}")
        return host
    sep = hostport.rfind(":")
    if sep < 0:
        raise ValueError(f"missing port in address: {hostport}")
    host = hostport[:sep]
    if ":" in host:
        raise ValueError(f"too many colons in address: {hostport}")
    return host


def real_ip(headers: Mapping[str, Any] | None, remote_addr: str) -> str:
    """Return the client's real public IP from proxy headers or the remote address.

    The first global address in X-Forwarded-For wins; failing that X-Real-Ip is
    returned. With neither header set, the host part of ``remote_addr`` is used.
    """
    x_real_ip = _header(headers, "X-Real-Ip")
    x_forwarded_for = _header(headers, "X-Forwarded-For")

    if not x_real_ip and not x_forwarded_for:
        if ":" not in remote_addr:
            return remote_addr
        try:
            return _split_host(remote_addr)
        except ValueError:
            return ""

    for address in (part.strip() for part in x_forwarded_for.split(",")):
        try:
            if not is_private_address(address):
                return address
        except ValueError:
            continue
    return x_real_ip