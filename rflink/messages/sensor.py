"""
Shared base for read-only sensor message variants.

Sensors only report; they cannot be addressed with commands. A decoded
sensor serializes back to the event line it was read from. Each sensor
variant lists its fields as SensorField entries mapping a key to a value
encoding, an output channel and a unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from rflink.exceptions import ProtocolError
from rflink.messages.base import MessageState, RFLinkMessage
from rflink.models.types import DecimalType
from rflink.protocol.constants import NodeNumber, ProtocolConstants
from rflink.protocol.conversions import ValueKind, to_raw

if TYPE_CHECKING:
    from rflink.models.types import State
    from rflink.protocol.field_parser import FieldSet


@dataclass(frozen=True)
class SensorField:
    """
    One sensor reading carried by a frame.

    Attributes:
        key: Field key on the line (e.g. "TEMP").
        kind: Encoding of the raw value.
        channel: Output channel the typed value is published on.
        unit: Unit attached to decimal readings, if any.
    """

    key: str
    kind: ValueKind
    channel: str
    unit: str | None = None


class SensorMessage(RFLinkMessage):
    """
    Base class for sensor variants.

    Subclasses set `device_class`, `keys`, `optional_keys` and `sensor_fields`.

    Attributes:
        readings: Typed readings by output channel. Fields that were absent
            or could not be converted are missing.
    """

    sensor_fields: ClassVar[tuple[SensorField, ...]] = ()

    def __init__(self) -> None:
        super().__init__()
        self.readings: dict[str, State] = {}

    def _decode_fields(self, fields: FieldSet) -> None:
        for sensor_field in self.sensor_fields:
            value = self._convert(fields, sensor_field.key, sensor_field.kind)
            if value is None:
                continue
            if sensor_field.unit and isinstance(value, DecimalType) and value.unit is None:
                value = value.model_copy(update={"unit": sensor_field.unit})
            self.readings[sensor_field.channel] = value

    def get_outputs(self) -> dict[str, State]:
        return dict(self.readings)

    def serialize(self) -> str:
        """
        Render the readings as a gateway event line.

        Format: `20;<SEQ>;<Protocol>;ID=<id>;<KEY>=<VALUE>;...;`. Readings
        that were dropped during decoding are left out.

        Raises:
            ProtocolError: If the message is FRESH.
            ConversionError: If a reading cannot be rendered.
        """
        if self._state is MessageState.FRESH or self.protocol is None:
            raise ProtocolError("Cannot serialize a message that was never populated")

        tokens = [NodeNumber.FROM_GATEWAY.value, self.sequence or "00", self.protocol]
        tokens.extend(f"{key}={value}" for key, value in self.identity.items())
        for sensor_field in self.sensor_fields:
            reading = self.readings.get(sensor_field.channel)
            if reading is not None:
                tokens.append(f"{sensor_field.key}={to_raw(reading, sensor_field.kind)}")
        return ProtocolConstants.FIELD_DELIMITER.join(tokens) + ProtocolConstants.FIELD_DELIMITER
