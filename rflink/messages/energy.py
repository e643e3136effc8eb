"""
Energy meter message variant.

Example line: `20;AF;OWL_CM113;ID=0123;WATT=0190;KWATT=0a7d;`
"""

from __future__ import annotations

from rflink.messages.sensor import SensorField, SensorMessage
from rflink.models.config import DeviceClass
from rflink.protocol.constants import Channel, FieldKey
from rflink.protocol.conversions import ValueKind


class EnergyMessage(SensorMessage):
    """Power meter reporting instant power (W) and total usage (kWh), both hex."""

    device_class = DeviceClass.ENERGY
    keys = (FieldKey.WATT,)
    optional_keys = (FieldKey.KWATT,)
    sensor_fields = (
        SensorField(FieldKey.WATT, ValueKind.HEX_INTEGER, Channel.INSTANT_POWER, "W"),
        SensorField(FieldKey.KWATT, ValueKind.HEX_INTEGER, Channel.TOTAL_USAGE, "kWh"),
    )
