"""
Network Interfaces
==================

One line listing every interface with its addresses in CIDR form:

    eth0 ~ 192.168.1.20/24, 2001:db8::20/64 | wlan0 ~ 10.0.0.5/8

The loopback interface, link-local IPv6 addresses (fe80::) and
interfaces left without addresses are skipped. Addresses change rarely,
so the line is refreshed every 30 seconds.
"""

import ipaddress
import logging
import socket
from typing import Final, Iterable, Optional

import psutil

from szb.stats.provider import StatsProvider

logger = logging.getLogger(__name__)

REFRESH_INTERVAL: Final[float] = 30.0
LOOPBACK_NAME: Final[str] = "lo"
LINK_LOCAL_PREFIX: Final[str] = "fe80"


def format_address(address: str, netmask: Optional[str]) -> str:
    """
    Format an address with its prefix length, e.g. "10.0.0.5/8".

    The IPv6 zone suffix ("%eth0") is dropped. Without a netmask the bare
    address is returned.
    """
    address = address.split("%", 1)[0]
    if not netmask:
        return address
    try:
        prefix = bin(int(ipaddress.ip_address(netmask))).count("1")
    except ValueError:
        return address
    return f"{address}/{prefix}"


def format_interfaces(interfaces: dict[str, Iterable]) -> str:
    """
    Build the interface line from a ``psutil.net_if_addrs()`` mapping.
    """
    entries = []
    for name, addrs in interfaces.items():
        if name == LOOPBACK_NAME:
            continue

        formatted = [
            format_address(addr.address, addr.netmask)
            for addr in addrs
            if addr.family in (socket.AF_INET, socket.AF_INET6)
            and not addr.address.lower().startswith(LINK_LOCAL_PREFIX)
        ]
        if not formatted:
            continue

        entries.append(f"{name} ~ {', '.join(formatted)}")

    return " | ".join(entries)


class NetworkStats(StatsProvider):
    """Interface address summary, refreshed every 30 seconds."""

    def __init__(self, interval: float = REFRESH_INTERVAL):
        super().__init__(interval)

    def render(self) -> str:
        return format_interfaces(psutil.net_if_addrs())
