"""
Rain gauge message variant.

Example line: `20;2A;Oregon Rain2;ID=2a19;RAIN=0010;RAINRATE=0002;BAT=OK;`
"""

from __future__ import annotations

from rflink.messages.sensor import SensorField, SensorMessage
from rflink.models.config import DeviceClass
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind


class RainMessage(SensorMessage):
    """Rain gauge reporting total rainfall and rain rate in tenths of mm."""

    device_class = DeviceClass.RAIN
    keys = (FieldKey.RAIN,)
    optional_keys = (FieldKey.RAINRATE, FieldKey.BAT)
    sensor_fields = (
        SensorField(FieldKey.RAIN, ValueKind.HEX_TENTHS, Channel.RAIN_TOTAL, "mm"),
        SensorField(FieldKey.RAINRATE, ValueKind.HEX_TENTHS, Channel.RAIN_RATE, "mm/h"),
        SensorField(FieldKey.BAT, ValueKind.BATTERY, Channel.LOW_BATTERY),
    )
