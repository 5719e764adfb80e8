"""UDP multicast forwarding of encoded messages."""

from gnssbridge.forwarder.interfaces import (
    InterfaceSelector,
    NetworkInterface,
    select_hotspot_interface,
    select_interface_by_name,
)
from gnssbridge.forwarder.udp import ForwarderStats, UdpForwarder

__all__ = [
    "ForwarderStats",
    "InterfaceSelector",
    "NetworkInterface",
    "UdpForwarder",
    "select_hotspot_interface",
    "select_interface_by_name",
]
