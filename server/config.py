"""Service settings read from ``XGPS_*`` environment variables."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from gnssbridge.fix import InactivityTimeoutPolicy, MonotonicTimePolicy, ReadinessPolicy
from gnssbridge.forwarder import (
    InterfaceSelector,
    select_hotspot_interface,
    select_interface_by_name,
)

__all__ = ["BridgeSettings"]

# X-Plane/ForeFlight GPS port; group in the organization-local scope
_DEFAULT_GROUP = "239.255.49.2"
_DEFAULT_PORT = 49002
_DEFAULT_GPSD_HOST = "localhost"
_DEFAULT_GPSD_PORT = 2947

_POLICY_MONOTONIC = "monotonic"
_POLICY_INACTIVITY = "inactivity"
_POLICIES = (_POLICY_MONOTONIC, _POLICY_INACTIVITY)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_port(name: str, value: str) -> int:
    try:
        port = int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
    if not 0 < port < 65536:
        raise ValueError(f"{name} must be between 1 and 65535, got {port}")
    return port


@dataclass(frozen=True)
class BridgeSettings:
    """Configuration of the bridge service.

    Attributes:
        group: Destination multicast group (``XGPS_GROUP``).
        port: Destination UDP port (``XGPS_PORT``).
        interface: Outbound interface name (``XGPS_INTERFACE``); None
            selects an access-point interface by name heuristic.
        policy: Readiness policy, ``"monotonic"`` or ``"inactivity"``
            (``XGPS_POLICY``).
        gpsd_enabled: Read sentences from gpsd in the background
            (``XGPS_GPSD_ENABLED``).
        gpsd_host: gpsd host (``XGPS_GPSD_HOST``).
        gpsd_port: gpsd TCP port (``XGPS_GPSD_PORT``).
    """

    group: str = _DEFAULT_GROUP
    port: int = _DEFAULT_PORT
    interface: str | None = None
    policy: str = _POLICY_MONOTONIC
    gpsd_enabled: bool = False
    gpsd_host: str = _DEFAULT_GPSD_HOST
    gpsd_port: int = _DEFAULT_GPSD_PORT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BridgeSettings":
        """Build settings from environment variables.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ

        policy = env.get("XGPS_POLICY", _POLICY_MONOTONIC).strip().lower()
        if policy not in _POLICIES:
            raise ValueError(f"XGPS_POLICY must be one of {_POLICIES}, got {policy!r}")

        return cls(
            group=env.get("XGPS_GROUP", _DEFAULT_GROUP),
            port=_parse_port("XGPS_PORT", env.get("XGPS_PORT", str(_DEFAULT_PORT))),
            interface=env.get("XGPS_INTERFACE") or None,
            policy=policy,
            gpsd_enabled=_parse_bool(
                "XGPS_GPSD_ENABLED", env.get("XGPS_GPSD_ENABLED", "")
            ),
            gpsd_host=env.get("XGPS_GPSD_HOST", _DEFAULT_GPSD_HOST),
            gpsd_port=_parse_port(
                "XGPS_GPSD_PORT", env.get("XGPS_GPSD_PORT", str(_DEFAULT_GPSD_PORT))
            ),
        )

    def make_policy(self) -> ReadinessPolicy:
        """Create a fresh readiness policy; one per accumulator."""
        if self.policy == _POLICY_INACTIVITY:
            return InactivityTimeoutPolicy()
        return MonotonicTimePolicy()

    def make_interface_selector(self) -> InterfaceSelector:
        if self.interface is None:
            return select_hotspot_interface
        return select_interface_by_name(self.interface)
