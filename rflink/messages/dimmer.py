"""
Dimmer message variant.

Dimmable receivers report and accept a level between 0 and 15, which is
projected to a percentage. A dimmer may also be switched on or off
without a level, in which case it returns to its last level.

Example lines:
    `20;3A;NewKaku;ID=00c142;SWITCH=2;CMD=ON;SET_LEVEL=8;`
    `10;NewKaku;00c142;2;8;`
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rflink.messages.base import RFLinkMessage
from rflink.models.config import DeviceClass
from rflink.models.types import OnOffType, PercentType
from rflink.protocol.constants import Channel, FieldKey, ProtocolConstants
from rflink.protocol.conversions import ValueKind

if TYPE_CHECKING:
    from rflink.models.types import Command, State
    from rflink.protocol.field_parser import FieldSet


class DimmerMessage(RFLinkMessage):
    """
    Dimmer message.

    Attributes:
        level: Dimming level as a percentage of the 16 RFLink steps.
        command: On/off state, derived from the level when CMD is absent.
    """

    device_class = DeviceClass.DIMMER
    keys = (FieldKey.SWITCH, FieldKey.SET_LEVEL)
    optional_keys = (FieldKey.CMD,)
    identity_keys = (FieldKey.ID, FieldKey.SWITCH)
    supports_encoding = True

    def __init__(self) -> None:
        super().__init__()
        self.level: PercentType | None = None
        self.command: OnOffType | None = None

    def _decode_fields(self, fields: FieldSet) -> None:
        self.level = self._convert(fields, FieldKey.SET_LEVEL, ValueKind.DIM_LEVEL)

        command = self._convert(fields, FieldKey.CMD, ValueKind.COMMAND)
        if not isinstance(command, OnOffType):
            command = None
        if command is None and self.level is not None:
            command = OnOffType.ON if self.level.value > 0 else OnOffType.OFF
        self.command = command

    def _encode_command(self, channel: str, command: Command) -> None:
        if channel not in (Channel.COMMAND, Channel.DIMMING_LEVEL):
            raise self._unsupported(channel, command)

        if isinstance(command, OnOffType):
            self.command = command
            self.level = None
        elif isinstance(command, PercentType):
            # Only 16 steps exist; keep the level that will actually be sent
            steps = command.to_level(ProtocolConstants.MAX_DIM_LEVEL)
            self.level = PercentType.from_level(steps, ProtocolConstants.MAX_DIM_LEVEL)
            self.command = OnOffType.ON if steps > 0 else OnOffType.OFF
        else:
            raise self._unsupported(channel, command)

    def get_outputs(self) -> dict[str, State]:
        outputs: dict[str, State] = {}
        if self.command is not None:
            outputs[Channel.COMMAND] = self.command
        if self.level is not None:
            outputs[Channel.DIMMING_LEVEL] = self.level
        return outputs

    def _command_token(self) -> str:
        if self.level is not None:
            return str(self.level.to_level(ProtocolConstants.MAX_DIM_LEVEL))
        if self.command is not None:
            return self.command.to_full_string()
        return super()._command_token()
