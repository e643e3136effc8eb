"""
Wind meter message variant.

Example line:
    `20;B5;Oregon Wind2;ID=3a0d;WINDIR=0002;WINSP=0060;AWINSP=0040;WINGS=0080;BAT=OK;`
"""

from __future__ import annotations

from rflink.messages.sensor import SensorField, SensorMessage
from rflink.models.config import DeviceClass
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind


class WindMessage(SensorMessage):
    """
    Anemometer and wind vane.

    Speeds are hex tenths of km/h, direction is one of 16 compass sectors,
    chill and wind temperature use the temperature encoding.
    """

    device_class = DeviceClass.WIND
    keys = (FieldKey.WINSP,)
    optional_keys = (
        FieldKey.AWINSP,
        FieldKey.WINGS,
        FieldKey.WINDIR,
        FieldKey.WINCHL,
        FieldKey.WINTMP,
        FieldKey.BAT,
    )
    sensor_fields = (
        SensorField(FieldKey.WINSP, ValueKind.HEX_TENTHS, Channel.WIND_SPEED, "km/h"),
        SensorField(FieldKey.AWINSP, ValueKind.HEX_TENTHS, Channel.AVERAGE_WIND_SPEED, "km/h"),
        SensorField(FieldKey.WINGS, ValueKind.HEX_TENTHS, Channel.WIND_GUST, "km/h"),
        SensorField(FieldKey.WINDIR, ValueKind.WIND_DIRECTION, Channel.WIND_DIRECTION),
        SensorField(FieldKey.WINCHL, ValueKind.TEMPERATURE, Channel.WIND_CHILL),
        SensorField(FieldKey.WINTMP, ValueKind.TEMPERATURE, Channel.WIND_TEMPERATURE),
        SensorField(FieldKey.BAT, ValueKind.BATTERY, Channel.LOW_BATTERY),
    )
