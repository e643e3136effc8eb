"""
RFLink protocol constants.

Node numbers, delimiters, field keys and channel names used by the
RFLink gateway's line-oriented ASCII protocol.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class NodeNumber(str, Enum):
    """
    Leading node field of an RFLink line.

    Every line starts with a node number identifying its direction.
    """

    TO_GATEWAY = "10"
    """Host-to-gateway command line (`10;Protocol;ID;SWITCH;CMD;`)."""

    FROM_GATEWAY = "20"
    """Gateway-to-host event line (`20;SEQ;Protocol;KEY=VALUE;...`)."""


class ProtocolConstants:
    """
    RFLink protocol constants.

    Contains delimiters, repeat policy bounds and serial port defaults.
    """

    # ===== Line Structure =====

    FIELD_DELIMITER: Final[str] = ";"
    """Primary token delimiter."""

    ALT_FIELD_DELIMITER: Final[str] = ","
    """Accepted when a line contains no primary delimiter."""

    VALUE_SEPARATOR: Final[str] = "="
    """Separates key from value inside a token (first occurrence only)."""

    ID_DELIMITER: Final[str] = "-"
    """Joins protocol name and identity fields into a device id."""

    LINE_TERMINATOR: Final[str] = "\r\n"
    """Line terminator for both directions."""

    ENCODING: Final[str] = "ascii"
    """Character encoding of the wire protocol."""

    # ===== Control Commands =====

    PING: Final[str] = "PING"
    """Keepalive command, answered with PONG."""

    PONG: Final[str] = "PONG"
    """Gateway answer to PING."""

    VERSION: Final[str] = "VERSION"
    """Version request command."""

    # ===== Repeat Policy =====

    MIN_REPEATS: Final[int] = 1
    """Lowest number of transmissions per command."""

    MAX_REPEATS: Final[int] = 20
    """Highest number of transmissions per command."""

    DEFAULT_REPEATS: Final[int] = 1
    """Transmissions per command when not configured."""

    TIME_BETWEEN_COMMANDS_MS: Final[int] = 50
    """Delay before every repeat after the first, in milliseconds."""

    # ===== Dimming =====

    MAX_DIM_LEVEL: Final[int] = 15
    """Highest RFLink dim level (levels are 0-15)."""

    # ===== Serial Port Configuration =====

    DEFAULT_BAUD_RATE: Final[int] = 57600
    """Baud rate of the RFLink gateway's USB serial port."""

    DEFAULT_RECEIVE_TIMEOUT: Final[float] = 5.0
    """Default read timeout in seconds."""

    MAX_RETRIES: Final[int] = 2
    """Ping retries when connecting."""


class FieldKey:
    """Keys of KEY=VALUE tokens understood by the message variants."""

    ID: Final[str] = "ID"
    SWITCH: Final[str] = "SWITCH"
    CMD: Final[str] = "CMD"
    SET_LEVEL: Final[str] = "SET_LEVEL"
    TEMP: Final[str] = "TEMP"
    HUM: Final[str] = "HUM"
    HSTATUS: Final[str] = "HSTATUS"
    BAT: Final[str] = "BAT"
    RAIN: Final[str] = "RAIN"
    RAINRATE: Final[str] = "RAINRATE"
    WINSP: Final[str] = "WINSP"
    AWINSP: Final[str] = "AWINSP"
    WINGS: Final[str] = "WINGS"
    WINDIR: Final[str] = "WINDIR"
    WINCHL: Final[str] = "WINCHL"
    WINTMP: Final[str] = "WINTMP"
    WATT: Final[str] = "WATT"
    KWATT: Final[str] = "KWATT"


class Channel:
    """Names of the output channels published by message variants."""

    COMMAND: Final[str] = "command"
    CONTACT: Final[str] = "contact"
    DIMMING_LEVEL: Final[str] = "dimminglevel"
    SHUTTER: Final[str] = "shutter"
    TEMPERATURE: Final[str] = "temperature"
    HUMIDITY: Final[str] = "humidity"
    HUMIDITY_STATUS: Final[str] = "humiditystatus"
    LOW_BATTERY: Final[str] = "lowbattery"
    RAIN_TOTAL: Final[str] = "raintotal"
    RAIN_RATE: Final[str] = "rainrate"
    WIND_SPEED: Final[str] = "windspeed"
    AVERAGE_WIND_SPEED: Final[str] = "averagewindspeed"
    WIND_GUST: Final[str] = "windgust"
    WIND_DIRECTION: Final[str] = "winddirection"
    WIND_CHILL: Final[str] = "windchill"
    WIND_TEMPERATURE: Final[str] = "windtemperature"
    INSTANT_POWER: Final[str] = "instantpower"
    TOTAL_USAGE: Final[str] = "totalusage"

