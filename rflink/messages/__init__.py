"""
RFLink message variants.

This package contains one message variant per device class. Each variant
decodes inbound frames into typed state, projects that state onto output
channels and, for actuators, encodes commands into outbound lines.

Supported device classes:
- Switch: on/off receivers, remotes, contacts
- Dimmer: dimmable receivers (16 levels)
- Rollershutter: Somfy RTS motors
- Temperature, Humidity, Rain, Wind, Energy: read-only sensors

Usage:
    >>> from rflink.messages import MessageRegistry, register_all_messages
    >>> registry = MessageRegistry()
    >>> register_all_messages(registry)
"""

from rflink.messages.base import MessageState, RFLinkMessage, compose_device_id
from rflink.messages.dimmer import DimmerMessage
from rflink.messages.energy import EnergyMessage
from rflink.messages.humidity import HumidityMessage
from rflink.messages.rain import RainMessage
from rflink.messages.registry import DecodeResult, MessageRegistry, create_default_registry
from rflink.messages.rollershutter import RollershutterMessage
from rflink.messages.sensor import SensorField, SensorMessage
from rflink.messages.switch import SwitchMessage
from rflink.messages.temperature import TemperatureMessage
from rflink.messages.wind import WindMessage

__all__ = [
    # Base
    "RFLinkMessage",
    "MessageState",
    "compose_device_id",
    "SensorMessage",
    "SensorField",
    # Actuators
    "SwitchMessage",
    "DimmerMessage",
    "RollershutterMessage",
    # Sensors
    "TemperatureMessage",
    "HumidityMessage",
    "RainMessage",
    "WindMessage",
    "EnergyMessage",
    # Registry
    "MessageRegistry",
    "DecodeResult",
    "create_default_registry",
    # Registration
    "register_all_messages",
]


def register_all_messages(registry: MessageRegistry) -> None:
    """
    Register all built-in message variants with a registry.

    Actuators are registered before sensors so that they win ties.

    Args:
        registry: The MessageRegistry to populate.
    """
    # Actuators
    registry.register(SwitchMessage)
    registry.register(DimmerMessage)
    registry.register(RollershutterMessage)

    # Sensors
    registry.register(TemperatureMessage)
    registry.register(HumidityMessage)
    registry.register(RainMessage)
    registry.register(WindMessage)
    registry.register(EnergyMessage)
