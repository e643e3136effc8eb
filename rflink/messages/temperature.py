"""
Temperature sensor message variant.

Example line: `20;46;Cresta;ID=8001;TEMP=00dd;BAT=OK;`
"""

from __future__ import annotations

from rflink.messages.sensor import SensorField, SensorMessage
from rflink.models.config import DeviceClass
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind


class TemperatureMessage(SensorMessage):
    """Temperature-only sensor (room and pool thermometers)."""

    device_class = DeviceClass.TEMPERATURE
    keys = (FieldKey.TEMP,)
    optional_keys = (FieldKey.BAT,)
    sensor_fields = (
        SensorField(FieldKey.TEMP, ValueKind.TEMPERATURE, Channel.TEMPERATURE),
        SensorField(FieldKey.BAT, ValueKind.BATTERY, Channel.LOW_BATTERY),
    )
