"""
Message type registry and factory.

The registry maps device classes to message variants. It answers two
questions:

- Which variant claims an inbound frame? Every registered variant scores
  the frame (`RFLinkMessage.match_score`). Variants bound to the frame's
  protocol name win outright; otherwise the variant recognising the most
  keys wins, and ties go to the variant registered first.
- Which variant sends commands for a device class? A direct lookup.

Adding a device class means registering another variant; the dispatch
logic never changes. Registries are populated once at startup and only
read afterwards.

Architecture:
    MessageRegistry
        ├── SwitchMessage         (switch)
        ├── DimmerMessage         (dimmer)
        ├── RollershutterMessage  (rollershutter, protocol RTS)
        └── SensorMessage
            ├── TemperatureMessage
            ├── HumidityMessage
            ├── RainMessage
            ├── WindMessage
            └── EnergyMessage
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

from rflink.exceptions import MalformedFrameError, UnsupportedMessageTypeError
from rflink.protocol.field_parser import parse_line

if TYPE_CHECKING:
    from rflink.messages.base import RFLinkMessage
    from rflink.models.config import DeviceClass
    from rflink.protocol.field_parser import FieldSet

logger = logging.getLogger(__name__)


class DecodeResult(Enum):
    """
    Result codes for decoding a line.

    Malformed and unsupported lines are routine on a shared radio channel,
    so they are reported as results rather than raised.
    """

    SUCCESS = auto()
    """A variant claimed and decoded the line."""

    MALFORMED_FRAME = auto()
    """The line could not be parsed."""

    UNSUPPORTED_TYPE = auto()
    """No registered variant claims the line."""


class MessageRegistry:
    """
    Registry of message variants keyed by device class.

    Example:
        >>> registry = MessageRegistry()
        >>> registry.register(SwitchMessage)
        >>> result, message = registry.decode_line(
        ...     "20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;"
        ... )
        >>> result, message.device_id
        (<DecodeResult.SUCCESS: 1>, 'NewKaku-00c142-1')
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._variants: dict[DeviceClass, type[RFLinkMessage]] = {}

    def register(self, message_type: type[RFLinkMessage]) -> None:
        """
        Register a message variant.

        Args:
            message_type: Variant class to register.

        Note:
            Replaces any existing variant for the same device class.
        """
        self._variants[message_type.device_class] = message_type

    def unregister(self, device_class: DeviceClass) -> bool:
        """
        Remove a variant registration.

        Returns:
            True if a variant was removed, False if none was registered.
        """
        if device_class in self._variants:
            del self._variants[device_class]
            return True
        return False

    def get_variant(self, device_class: DeviceClass) -> type[RFLinkMessage] | None:
        """Get the variant registered for a device class."""
        return self._variants.get(device_class)

    def has_variant(self, device_class: DeviceClass) -> bool:
        """Check if a variant is registered for a device class."""
        return device_class in self._variants

    @property
    def registered_device_classes(self) -> frozenset[DeviceClass]:
        """Get all device classes with a registered variant."""
        return frozenset(self._variants)

    @property
    def outbound_device_classes(self) -> frozenset[DeviceClass]:
        """Get all device classes that accept commands."""
        return frozenset(
            device_class
            for device_class, variant in self._variants.items()
            if variant.supports_encoding
        )

    # ===== Factory =====

    def select_variant(self, fields: FieldSet) -> type[RFLinkMessage] | None:
        """
        Select the variant that claims a frame.

        Args:
            fields: Parsed line.

        Returns:
            Best matching variant, or None if no variant claims the frame.
        """
        best: type[RFLinkMessage] | None = None
        best_rank: tuple[bool, int] | None = None

        for variant in self._variants.values():
            score = variant.match_score(fields)
            if score is None:
                continue
            rank = (bool(variant.protocols), score)
            if best_rank is None or rank > best_rank:
                best, best_rank = variant, rank

        return best

    def create_for_decoding(self, fields: FieldSet) -> RFLinkMessage:
        """
        Create an empty message of the variant that claims a frame.

        Args:
            fields: Parsed line.

        Returns:
            FRESH message ready for `decode(fields)`.

        Raises:
            UnsupportedMessageTypeError: If no variant claims the frame.
        """
        variant = self.select_variant(fields)
        if variant is None:
            raise UnsupportedMessageTypeError(
                "No message type for frame",
                protocol=fields.protocol,
                keys=fields.keys(),
            )
        return variant()

    def create_for_encoding(self, device_class: DeviceClass) -> RFLinkMessage:
        """
        Create an empty message for sending a command to a device class.

        Args:
            device_class: Device class of the target device.

        Returns:
            FRESH message ready for `encode(config, channel, command)`.

        Raises:
            UnsupportedMessageTypeError: If the device class has no variant
                or its variant cannot send.
        """
        variant = self._variants.get(device_class)
        if variant is None or not variant.supports_encoding:
            raise UnsupportedMessageTypeError(
                f"No outbound message type for device class {device_class.value!r}"
            )
        return variant()

    def decode(self, fields: FieldSet) -> RFLinkMessage:
        """
        Create and decode the message for a parsed line.

        Raises:
            UnsupportedMessageTypeError: If no variant claims the frame.
        """
        message = self.create_for_decoding(fields)
        message.decode(fields)
        return message

    def decode_line(self, line: str) -> tuple[DecodeResult, RFLinkMessage | None]:
        """
        Parse and decode a raw line without raising for routine failures.

        Args:
            line: Raw line as read from the transport.

        Returns:
            Tuple of (result, message). Message is None unless the
            result is SUCCESS.
        """
        try:
            fields = parse_line(line)
        except MalformedFrameError as e:
            logger.warning("Dropping malformed line: %s", e)
            return DecodeResult.MALFORMED_FRAME, None

        variant = self.select_variant(fields)
        if variant is None:
            logger.debug("No message type for %r", fields)
            return DecodeResult.UNSUPPORTED_TYPE, None

        message = variant()
        message.decode(fields)
        return DecodeResult.SUCCESS, message

    def __repr__(self) -> str:
        return f"MessageRegistry(variants={len(self._variants)})"


def create_default_registry() -> MessageRegistry:
    """
    Create a new registry with all built-in message variants registered.

    Returns:
        MessageRegistry with switch, dimmer, rollershutter and sensor
        variants.
    """
    from rflink.messages import register_all_messages

    registry = MessageRegistry()
    register_all_messages(registry)
    return registry
