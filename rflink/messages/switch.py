"""
Switch message variant.

Covers on/off receivers, wall switches, remotes and door/window contacts
of every protocol family that reports a SWITCH sub-address and a CMD.
Contacts report ON when they open, so the contact channel is the
open/closed synonym of the command.

Example line: `20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;`
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rflink.messages.base import RFLinkMessage
from rflink.models.config import DeviceClass
from rflink.models.types import OnOffType, OpenClosedType
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind, synonym

if TYPE_CHECKING:
    from rflink.models.types import Command, State
    from rflink.protocol.field_parser import FieldSet

logger = logging.getLogger(__name__)


class SwitchMessage(RFLinkMessage):
    """
    Power switch and contact message.

    Attributes:
        command: Switch state, None if the CMD value was not an on/off word.
        contact: Open/closed synonym of the command.
    """

    device_class = DeviceClass.SWITCH
    keys = (FieldKey.SWITCH, FieldKey.CMD)
    identity_keys = (FieldKey.ID, FieldKey.SWITCH)
    supports_encoding = True

    def __init__(self) -> None:
        super().__init__()
        self.command: OnOffType | None = None
        self.contact: OpenClosedType | None = None

    def _decode_fields(self, fields: FieldSet) -> None:
        value = self._convert(fields, FieldKey.CMD, ValueKind.COMMAND)
        if value is not None and not isinstance(value, OnOffType):
            logger.warning(
                "Can't convert %s to a switch command for %s", value, self.device_id
            )
            value = None
        self._set_command(value)

    def _encode_command(self, channel: str, command: Command) -> None:
        if channel != Channel.COMMAND or not isinstance(command, OnOffType):
            raise self._unsupported(channel, command)
        self._set_command(command)

    def _set_command(self, command: OnOffType | None) -> None:
        self.command = command
        self.contact = synonym(command, OpenClosedType) if command is not None else None

    def get_outputs(self) -> dict[str, State]:
        outputs: dict[str, State] = {}
        if self.command is not None:
            outputs[Channel.COMMAND] = self.command
        if self.contact is not None:
            outputs[Channel.CONTACT] = self.contact
        return outputs

    def _command_token(self) -> str:
        if self.command is None:
            return super()._command_token()
        return self.command.to_full_string()
