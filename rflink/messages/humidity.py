"""
Temperature and humidity sensor message variant.

Example line: `20;47;Cresta;ID=8001;TEMP=00dd;HUM=48;HSTATUS=2;BAT=OK;`
"""

from __future__ import annotations

from rflink.messages.sensor import SensorField, SensorMessage
from rflink.models.config import DeviceClass
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind


class HumidityMessage(SensorMessage):
    """Combined thermo/hygrometer. HSTATUS is 0 normal, 1 comfort, 2 dry, 3 wet."""

    device_class = DeviceClass.HUMIDITY
    keys = (FieldKey.TEMP, FieldKey.HUM)
    optional_keys = (FieldKey.HSTATUS, FieldKey.BAT)
    sensor_fields = (
        SensorField(FieldKey.TEMP, ValueKind.TEMPERATURE, Channel.TEMPERATURE),
        SensorField(FieldKey.HUM, ValueKind.PERCENT, Channel.HUMIDITY),
        SensorField(FieldKey.HSTATUS, ValueKind.DECIMAL_INTEGER, Channel.HUMIDITY_STATUS),
        SensorField(FieldKey.BAT, ValueKind.BATTERY, Channel.LOW_BATTERY),
    )
