"""
Base contract shared by all RFLink message variants.

A message is a single-use object. The registry constructs it empty
(FRESH), then exactly one of two things happens:

    FRESH -> decode(fields)                    -> DECODED
    FRESH -> encode(config, channel, command)  -> ENCODED

Calling decode or encode on a message that is not FRESH is an error.
Afterwards the message is projected (`get_outputs()`) or serialized
(`serialize()`) and then discarded.

Each variant declares:
- `keys`: keys that must all be present for the variant to claim a frame
- `optional_keys`: further keys the variant understands
- `identity_keys`: keys appended to the protocol name to form the device id
- `protocols`: protocol names the variant is bound to (explicit
  discriminator); empty means any protocol
- `supports_encoding`: whether commands can be sent to this device class
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar

from rflink.exceptions import (
    ConfigurationError,
    ConversionError,
    ProtocolError,
    UnsupportedCommandError,
)
from rflink.protocol.constants import FieldKey, NodeNumber, ProtocolConstants
from rflink.protocol.conversions import ValueKind, to_typed

if TYPE_CHECKING:
    from rflink.models.config import DeviceClass, DeviceConfiguration
    from rflink.models.types import Command, State, TypedValue
    from rflink.protocol.field_parser import FieldSet

logger = logging.getLogger(__name__)


class MessageState(Enum):
    """Lifecycle state of a message instance."""

    FRESH = auto()
    """Constructed, neither decoded nor encoded."""

    DECODED = auto()
    """Populated from an inbound line."""

    ENCODED = auto()
    """Populated from an outbound command."""


def compose_device_id(protocol: str, identity_values: Iterable[str]) -> str:
    """
    Join a protocol name and identity values into a device id.

    Example:
        >>> compose_device_id("NewKaku", ["00c142", "1"])
        'NewKaku-00c142-1'
    """
    return ProtocolConstants.ID_DELIMITER.join([protocol, *identity_values])


class RFLinkMessage(ABC):
    """
    Abstract base class for RFLink message variants.

    Subclasses implement `_decode_fields()`, `get_outputs()` and, when they
    support sending, `_encode_command()` and `_command_token()`.

    Attributes:
        protocol: Protocol name (e.g. "NewKaku"), None while FRESH.
        device_id: `Protocol-ID[-SWITCH]`, None while FRESH.
        identity: Identity fields in frame order.
        sequence: Sequence number of a decoded frame, None otherwise.
    """

    device_class: ClassVar[DeviceClass]
    keys: ClassVar[tuple[str, ...]] = ()
    optional_keys: ClassVar[tuple[str, ...]] = ()
    identity_keys: ClassVar[tuple[str, ...]] = (FieldKey.ID,)
    protocols: ClassVar[frozenset[str]] = frozenset()
    supports_encoding: ClassVar[bool] = False

    def __init__(self) -> None:
        self._state = MessageState.FRESH
        self.protocol: str | None = None
        self.device_id: str | None = None
        self.identity: dict[str, str] = {}
        self.sequence: str | None = None

    @property
    def state(self) -> MessageState:
        """Current lifecycle state."""
        return self._state

    @classmethod
    def declared_keys(cls) -> frozenset[str]:
        """All keys this variant understands."""
        return frozenset(cls.keys) | frozenset(cls.optional_keys) | frozenset(cls.identity_keys)

    @classmethod
    def match_score(cls, fields: FieldSet) -> int | None:
        """
        Score how well a frame fits this variant.

        Args:
            fields: Parsed line.

        Returns:
            Number of declared keys present on the line, or None when the
            variant cannot claim the frame (required key missing, or bound
            to another protocol).
        """
        if cls.protocols and fields.protocol not in cls.protocols:
            return None
        present = fields.keys_present
        if not cls.keys or not set(cls.keys) <= present:
            return None
        return len(cls.declared_keys() & present)

    # ===== Decoding =====

    def decode(self, fields: FieldSet) -> None:
        """
        Populate this message from a parsed line.

        Values that cannot be converted are logged and left unset; the
        rest of the message is still decoded.

        Args:
            fields: Parsed line.

        Raises:
            ProtocolError: If the message is not FRESH.
        """
        self._ensure_fresh("decode")
        self.protocol = fields.protocol
        self.sequence = fields.sequence
        self.identity = {
            key: value for key, value in fields.items() if key in self.identity_keys
        }
        self.device_id = compose_device_id(self.protocol, self.identity.values())
        self._decode_fields(fields)
        self._state = MessageState.DECODED

    @abstractmethod
    def _decode_fields(self, fields: FieldSet) -> None:
        """Read the variant's own fields into typed state."""
        ...

    def _convert(self, fields: FieldSet, key: str, kind: ValueKind) -> TypedValue | None:
        """
        Convert one field, tolerating bad values.

        Returns:
            Typed value, or None when the key is absent or unconvertible.
        """
        raw = fields.get(key)
        if raw is None:
            return None
        try:
            return to_typed(raw, kind)
        except ConversionError as e:
            logger.warning(
                "Can't convert %s=%r in %s message from %s: %s",
                key,
                raw,
                self.device_class.value,
                self.device_id,
                e,
            )
            return None

    # ===== Encoding =====

    def encode(
        self,
        config: DeviceConfiguration,
        channel: str,
        command: Command,
    ) -> None:
        """
        Populate this message from a command for a configured device.

        Args:
            config: Configuration of the target device.
            channel: Channel the command was issued on.
            command: Typed command.

        Raises:
            UnsupportedCommandError: If the variant cannot send the command.
            ConfigurationError: If the device id cannot be split, or lacks
                the switch part this variant addresses devices by.
            ProtocolError: If the message is not FRESH.
        """
        self._ensure_fresh("encode")
        if not self.supports_encoding:
            raise UnsupportedCommandError(
                "Device class does not accept commands",
                command=command,
                device_class=self.device_class.value,
            )

        protocol, device, switch = config.split_device_id()
        if switch is None and FieldKey.SWITCH in self.keys:
            raise ConfigurationError(
                f"Invalid deviceId {config.device_id!r}: "
                f"{self.device_class.value} devices need Protocol-ID-SWITCH"
            )
        self._encode_command(channel, command)

        self.protocol = protocol
        self.identity = {FieldKey.ID: device}
        if switch is not None and FieldKey.SWITCH in self.identity_keys:
            self.identity[FieldKey.SWITCH] = switch
        self.device_id = compose_device_id(protocol, self.identity.values())
        self._state = MessageState.ENCODED

    def _encode_command(self, channel: str, command: Command) -> None:
        """Validate a command and store it as typed state."""
        raise self._unsupported(channel, command)

    def _unsupported(self, channel: str, command: Command) -> UnsupportedCommandError:
        return UnsupportedCommandError(
            f"No mapping for command on channel {channel!r}",
            command=command,
            device_class=self.device_class.value,
        )

    # ===== Projection and serialization =====

    @abstractmethod
    def get_outputs(self) -> dict[str, State]:
        """
        Project typed state onto output channels.

        Channels without a meaningful value are omitted.
        """
        ...

    def serialize(self) -> str:
        """
        Render this message as an outbound command line.

        Format: `10;<Protocol>;<ID>;[<SWITCH>;]<CMD>;` (without terminator).

        Raises:
            ProtocolError: If the message is FRESH.
            UnsupportedCommandError: If the variant has nothing to send.
        """
        if self._state is MessageState.FRESH or self.protocol is None:
            raise ProtocolError("Cannot serialize a message that was never populated")

        identity = [self.identity[key] for key in self.identity_keys if key in self.identity]
        tokens = [NodeNumber.TO_GATEWAY.value, self.protocol, *identity, self._command_token()]
        return ProtocolConstants.FIELD_DELIMITER.join(tokens) + ProtocolConstants.FIELD_DELIMITER

    def _command_token(self) -> str:
        """The CMD field of the outbound line."""
        raise UnsupportedCommandError(
            "Device class has no command to send",
            device_class=self.device_class.value,
        )

    def _ensure_fresh(self, operation: str) -> None:
        if self._state is not MessageState.FRESH:
            raise ProtocolError(
                f"Cannot {operation} a message in {self._state.name} state"
            )

    def __repr__(self) -> str:
        outputs = ", ".join(f"{k}={v}" for k, v in self.get_outputs().items())
        return (
            f"{type(self).__name__}({self._state.name}, "
            f"device_id={self.device_id!r}, {outputs})"
        )
