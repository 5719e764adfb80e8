"""Composite fix accumulation from RMC, GGA and GSA sentences."""

from gnssbridge.fix.accumulator import FixAccumulator
from gnssbridge.fix.policies import (
    InactivityTimeoutPolicy,
    MonotonicTimePolicy,
    ReadinessPolicy,
)
from gnssbridge.fix.types import CompositeFix
from gnssbridge.fix.xgps import encode_xgps

__all__ = [
    "CompositeFix",
    "FixAccumulator",
    "InactivityTimeoutPolicy",
    "MonotonicTimePolicy",
    "ReadinessPolicy",
    "encode_xgps",
]
