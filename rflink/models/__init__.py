"""
Data models for the RFLink protocol.

This module contains:

- Typed values and commands (OnOffType, OpenClosedType, PercentType, etc.)
- Device classes used to route outbound commands
- Device, repeat policy and bridge configuration
"""

from rflink.models.config import (
    BridgeConfiguration,
    DeviceClass,
    DeviceConfiguration,
    RepeatPolicy,
)
from rflink.models.types import (
    Command,
    DecimalType,
    OnOffType,
    OpenClosedType,
    PercentType,
    RefreshType,
    State,
    StopMoveType,
    TypedValue,
    UpDownType,
)

__all__ = [
    # Typed values
    "OnOffType",
    "OpenClosedType",
    "UpDownType",
    "StopMoveType",
    "RefreshType",
    "PercentType",
    "DecimalType",
    "State",
    "Command",
    "TypedValue",
    # Configuration
    "DeviceClass",
    "DeviceConfiguration",
    "RepeatPolicy",
    "BridgeConfiguration",
]
