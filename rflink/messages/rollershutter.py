"""
Rollershutter message variant (Somfy RTS).

RTS frames carry the same keys as switch frames; they are told apart by
the protocol name, which binds this variant explicitly.

Example lines:
    `20;0E;RTS;ID=1a602a;SWITCH=01;CMD=DOWN;`
    `10;RTS;1a602a;01;UP;`
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rflink.messages.base import RFLinkMessage
from rflink.models.config import DeviceClass
from rflink.models.types import StopMoveType, UpDownType
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind

if TYPE_CHECKING:
    from rflink.models.types import Command, State
    from rflink.protocol.field_parser import FieldSet


class RollershutterMessage(RFLinkMessage):
    """
    Rollershutter message.

    Attributes:
        command: UP, DOWN or STOP. Only UP and DOWN are published; a
            stopped shutter has no known position.
    """

    device_class = DeviceClass.ROLLERSHUTTER
    keys = (FieldKey.SWITCH, FieldKey.CMD)
    identity_keys = (FieldKey.ID, FieldKey.SWITCH)
    protocols = frozenset({"RTS"})
    supports_encoding = True

    def __init__(self) -> None:
        super().__init__()
        self.command: UpDownType | StopMoveType | None = None

    def _decode_fields(self, fields: FieldSet) -> None:
        value = self._convert(fields, FieldKey.CMD, ValueKind.COMMAND)
        if isinstance(value, (UpDownType, StopMoveType)):
            self.command = value

    def _encode_command(self, channel: str, command: Command) -> None:
        if channel != Channel.SHUTTER:
            raise self._unsupported(channel, command)
        if isinstance(command, UpDownType) or command is StopMoveType.STOP:
            self.command = command
        else:
            raise self._unsupported(channel, command)

    def get_outputs(self) -> dict[str, State]:
        if isinstance(self.command, UpDownType):
            return {Channel.SHUTTER: self.command}
        return {}

    def _command_token(self) -> str:
        if self.command is None:
            return super()._command_token()
        return self.command.to_full_string()
