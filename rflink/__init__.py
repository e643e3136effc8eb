"""
rflink - Python library for talking to RFLink 433 MHz gateways.

This library decodes the RFLink serial line protocol into typed device
messages, dispatches them to per-device sessions and encodes commands
for switches, dimmers and rollershutters back onto the wire.

Example:
    >>> from rflink import DeviceClass, DeviceConfiguration, DeviceSession, RFLinkBridge
    >>> from rflink.transport import AsyncSerialTransport
    >>>
    >>> async def main():
    ...     transport = AsyncSerialTransport("/dev/ttyACM0")
    ...     async with RFLinkBridge(transport) as bridge:
    ...         config = DeviceConfiguration(device_id="NewKaku-00c142-1")
    ...         session = DeviceSession(config, DeviceClass.SWITCH, print)
    ...         await bridge.connect()
    ...         session.connect(bridge)
    ...         await bridge.run()
"""

from rflink.bridge import BridgeState, RFLinkBridge
from rflink.exceptions import (
    ConfigurationError,
    ConnectionError,
    ConversionError,
    MalformedFrameError,
    ProtocolError,
    RFLinkError,
    TimeoutError,
    TransportError,
    UnsupportedCommandError,
    UnsupportedMessageTypeError,
)
from rflink.messages import register_all_messages
from rflink.messages.registry import DecodeResult, MessageRegistry, create_default_registry
from rflink.models import (
    BridgeConfiguration,
    DecimalType,
    DeviceClass,
    DeviceConfiguration,
    OnOffType,
    OpenClosedType,
    PercentType,
    RefreshType,
    RepeatPolicy,
    StopMoveType,
    UpDownType,
)
from rflink.session import DeviceSession, RepeatFailurePolicy, SessionStatus
from rflink.transport import AbstractTransport, AsyncSerialTransport

__version__ = "0.1.0"
__all__ = [
    # Bridge and sessions
    "RFLinkBridge",
    "BridgeState",
    "DeviceSession",
    "SessionStatus",
    "RepeatFailurePolicy",
    # Registry
    "MessageRegistry",
    "DecodeResult",
    "create_default_registry",
    "register_all_messages",
    # Models
    "OnOffType",
    "OpenClosedType",
    "UpDownType",
    "StopMoveType",
    "RefreshType",
    "PercentType",
    "DecimalType",
    "DeviceClass",
    "DeviceConfiguration",
    "RepeatPolicy",
    "BridgeConfiguration",
    # Exceptions
    "RFLinkError",
    "ProtocolError",
    "MalformedFrameError",
    "UnsupportedMessageTypeError",
    "ConversionError",
    "UnsupportedCommandError",
    "ConfigurationError",
    "TimeoutError",
    "ConnectionError",
    "TransportError",
    # Transport
    "AbstractTransport",
    "AsyncSerialTransport",
    # Version
    "__version__",
]
