"""Outbound network interface selection for multicast sends.

Multicast datagrams leave through the interface chosen by the routing
table unless ``IP_MULTICAST_IF`` names another one. When the host shares
its connection as a Wi-Fi access point (a phone hotspot, a Raspberry Pi
running hostapd) the consumers sit on the access-point interface, which is
rarely the default route, so the forwarder asks a selector for a better
candidate.

A selector is any zero-argument callable returning a ``NetworkInterface``
or None. ``select_hotspot_interface`` is the default; use
``select_interface_by_name`` to pin a specific interface.
"""

import ipaddress
import logging
import socket
from collections.abc import Callable
from dataclasses import dataclass

import psutil

__all__ = [
    "InterfaceSelector",
    "NetworkInterface",
    "list_interfaces",
    "select_hotspot_interface",
    "select_interface_by_name",
]

logger = logging.getLogger(__name__)

# Name prefixes typical of access-point interfaces on Linux and Android
_HOTSPOT_PREFIXES = ("ap", "wlan", "swlan")
_HOTSPOT_SUBSTRING = "hotspot"


@dataclass(frozen=True)
class NetworkInterface:
    """An up, non-loopback interface with an IPv4 address.

    Attributes:
        name: Interface name as reported by the OS (e.g. ``"wlan0"``).
        address: IPv4 address used to select the interface for multicast.
    """

    name: str
    address: str


InterfaceSelector = Callable[[], NetworkInterface | None]


def _ipv4_address(addresses: list) -> str | None:
    for entry in addresses:
        if entry.family != socket.AF_INET:
            continue
        if ipaddress.ip_address(entry.address).is_loopback:
            continue
        return entry.address
    return None


def list_interfaces() -> list[NetworkInterface]:
    """Return the interfaces that are up and have a non-loopback IPv4 address.

    Order follows ``psutil.net_if_addrs()``.
    """
    addresses = psutil.net_if_addrs()
    stats = psutil.net_if_stats()

    interfaces = []
    for name, entries in addresses.items():
        stat = stats.get(name)
        if stat is None or not stat.isup:
            continue
        address = _ipv4_address(entries)
        if address is not None:
            interfaces.append(NetworkInterface(name=name, address=address))
    return interfaces


def _looks_like_hotspot(name: str) -> bool:
    lowered = name.lower()
    return lowered.startswith(_HOTSPOT_PREFIXES) or _HOTSPOT_SUBSTRING in lowered


def select_hotspot_interface() -> NetworkInterface | None:
    """Pick the first interface whose name suggests an access-point role.

    Returns:
        The matching interface, or None if none matches or the interfaces
        could not be enumerated.
    """
    try:
        interfaces = list_interfaces()
    except (OSError, RuntimeError) as e:
        logger.error("Error enumerating network interfaces: %s", e)
        return None

    for interface in interfaces:
        if _looks_like_hotspot(interface.name):
            logger.info("Found potential hotspot interface: %s", interface.name)
            return interface
    return None


def select_interface_by_name(name: str) -> InterfaceSelector:
    """Build a selector that always picks the interface called *name*.

    Example:
        >>> forwarder = UdpForwarder(
        ...     "239.255.49.2", 49002,
        ...     interface_selector=select_interface_by_name("wlan1"),
        ... )
    """

    def _select() -> NetworkInterface | None:
        try:
            interfaces = list_interfaces()
        except (OSError, RuntimeError) as e:
            logger.error("Error enumerating network interfaces: %s", e)
            return None
        for interface in interfaces:
            if interface.name == name:
                return interface
        logger.warning("Interface %s is missing, down, or has no IPv4 address", name)
        return None

    return _select
