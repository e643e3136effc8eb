"""
Conversions between raw RFLink field values and typed values.

RFLink transmits every value as an ASCII token. Depending on the field
the token is an enumerated word (ON, ALLOFF, UP, LOW), a decimal number
or a hexadecimal number scaled by ten. This module is the only place
that knows those encodings; message variants call `to_typed()` with the
kind of value a field carries.

Two kinds of outcome are kept apart:
- `to_typed()` raises ConversionError when a token cannot be converted
- `synonym()` returns None when a value has no counterpart of another
  type; that is a normal result, not an error

Example:
    >>> to_typed("00cf", ValueKind.TEMPERATURE)
    DecimalType(20.7 °C)
    >>> to_typed("ALLON", ValueKind.COMMAND)
    <OnOffType.ON: 'ON'>
    >>> synonym(OnOffType.ON, OpenClosedType)
    <OpenClosedType.OPEN: 'OPEN'>
    >>> synonym(UpDownType.UP, OpenClosedType) is None
    True
"""

from __future__ import annotations

import re
from enum import Enum, auto
from typing import Final

from pydantic import ValidationError

from rflink.exceptions import ConversionError
from rflink.models.types import (
    DecimalType,
    OnOffType,
    OpenClosedType,
    PercentType,
    StopMoveType,
    TypedValue,
    UpDownType,
)
from rflink.protocol.constants import ProtocolConstants


class ValueKind(Enum):
    """Encodings a raw field value can have."""

    COMMAND = auto()
    """Switch/shutter command word (ON, OFF, ALLON, ALLOFF, UP, DOWN, STOP)."""

    ON_OFF = auto()
    """ON/OFF word only."""

    OPEN_CLOSED = auto()
    """OPEN/CLOSED word."""

    DIM_LEVEL = auto()
    """Decimal dim level 0-15, projected to a percentage."""

    PERCENT = auto()
    """Decimal percentage 0-100."""

    TEMPERATURE = auto()
    """Hex tenths of a degree Celsius, bit 15 is the sign."""

    HEX_TENTHS = auto()
    """Hex value in tenths (rain, wind speed)."""

    HEX_INTEGER = auto()
    """Plain hex value (power)."""

    DECIMAL_INTEGER = auto()
    """Plain decimal value."""

    WIND_DIRECTION = auto()
    """Compass sector 0-15, projected to degrees."""

    BATTERY = auto()
    """OK/LOW, projected to a low-battery switch state."""


COMMAND_WORDS: Final[dict[str, TypedValue]] = {
    "ON": OnOffType.ON,
    "ALLON": OnOffType.ON,
    "OFF": OnOffType.OFF,
    "ALLOFF": OnOffType.OFF,
    "UP": UpDownType.UP,
    "DOWN": UpDownType.DOWN,
    "STOP": StopMoveType.STOP,
}
"""Command vocabulary shared by switch-like variants."""

BATTERY_WORDS: Final[dict[str, OnOffType]] = {
    "OK": OnOffType.OFF,
    "LOW": OnOffType.ON,
}
"""Battery word to low-battery state."""

SYNONYMS: Final[dict[tuple[TypedValue, type], TypedValue]] = {
    (OnOffType.ON, OpenClosedType): OpenClosedType.OPEN,
    (OnOffType.OFF, OpenClosedType): OpenClosedType.CLOSED,
    (OpenClosedType.OPEN, OnOffType): OnOffType.ON,
    (OpenClosedType.CLOSED, OnOffType): OnOffType.OFF,
}
"""Cross-type equivalents. Contacts report ON when they open."""

WIND_DIRECTION_STEP: Final[float] = 22.5
"""Degrees per compass sector."""

TEMPERATURE_SIGN_BIT: Final[int] = 0x8000

TEMPERATURE_DIGITS: Final[int] = 4
"""Temperatures are sent as exactly 16 bits."""

HEX_TOKEN: Final[re.Pattern[str]] = re.compile(r"[0-9A-Fa-f]+")
DECIMAL_TOKEN: Final[re.Pattern[str]] = re.compile(r"[0-9]+")


def to_typed(raw_value: str, kind: ValueKind) -> TypedValue:
    """
    Convert a raw field value to a typed value.

    Args:
        raw_value: Token as found on the line.
        kind: Encoding of the field.

    Returns:
        Typed value.

    Raises:
        ConversionError: If the token is not valid for the kind.
    """
    converter = _CONVERTERS[kind]
    token = raw_value.strip()
    try:
        return converter(token)
    except ConversionError:
        raise
    except (ValueError, KeyError, ValidationError) as e:
        raise ConversionError(
            f"Cannot convert value to {kind.name}",
            raw_value=raw_value,
            kind=kind.name,
        ) from e


def to_raw(value: TypedValue, kind: ValueKind) -> str:
    """
    Render a typed value as the token RFLink uses for a field.

    This is the inverse of `to_typed()` for every kind.

    Args:
        value: Typed value.
        kind: Encoding of the field.

    Returns:
        Raw token.

    Raises:
        ConversionError: If the value cannot be expressed in the encoding.

    Example:
        >>> to_raw(DecimalType(value=-20.0), ValueKind.TEMPERATURE)
        '80c8'
    """
    try:
        return _ENCODERS[kind](value)
    except (ValueError, KeyError, AttributeError, TypeError) as e:
        raise ConversionError(
            f"Cannot render value as {kind.name}",
            raw_value=str(value),
            kind=kind.name,
        ) from e


def synonym(value: TypedValue, target: type) -> TypedValue | None:
    """
    Get the equivalent of a value in another type.

    Args:
        value: Typed value to translate.
        target: Desired type (e.g. OpenClosedType).

    Returns:
        The value itself when it already has the target type, its
        synonym when one exists, or None when there is no meaningful
        equivalent.
    """
    if isinstance(value, target):
        return value
    return SYNONYMS.get((value, target))


def decode_signed_tenths(token: str) -> float:
    """
    Decode an RFLink temperature: hex tenths with bit 15 as the sign.

    Example:
        >>> decode_signed_tenths("80c8")
        -20.0
    """
    raw = _hex(token, TEMPERATURE_DIGITS)
    if raw & TEMPERATURE_SIGN_BIT:
        raw = -(raw & ~TEMPERATURE_SIGN_BIT)
    return raw / 10.0


def encode_signed_tenths(value: float) -> str:
    """
    Encode a temperature as hex tenths with bit 15 as the sign.

    Example:
        >>> encode_signed_tenths(-20.0)
        '80c8'
    """
    raw = round(abs(value) * 10)
    if raw >= TEMPERATURE_SIGN_BIT:
        raise ValueError(f"Temperature out of range: {value}")
    if value < 0:
        raw |= TEMPERATURE_SIGN_BIT
    return _hex_token(raw)


def _hex(token: str, max_digits: int | None = None) -> int:
    if not HEX_TOKEN.fullmatch(token) or (max_digits and len(token) > max_digits):
        raise ValueError(f"Not a hex value: {token!r}")
    return int(token, 16)


def _decimal(token: str) -> int:
    if not DECIMAL_TOKEN.fullmatch(token):
        raise ValueError(f"Not a decimal value: {token!r}")
    return int(token, 10)


def _hex_token(raw: int) -> str:
    if raw < 0:
        raise ValueError(f"Negative value cannot be sent as hex: {raw}")
    return f"{raw:04x}"


def _decimal_token(raw: int) -> str:
    if raw < 0:
        raise ValueError(f"Negative value cannot be sent as decimal: {raw}")
    return str(raw)


def _word(vocabulary: dict[str, TypedValue]):
    def convert(token: str) -> TypedValue:
        return vocabulary[token.upper()]

    return convert


def _dim_level(token: str) -> PercentType:
    level = _decimal(token)
    if not 0 <= level <= ProtocolConstants.MAX_DIM_LEVEL:
        raise ValueError(f"Dim level out of range: {level}")
    return PercentType.from_level(level, ProtocolConstants.MAX_DIM_LEVEL)


def _wind_direction(token: str) -> DecimalType:
    sector = _decimal(token)
    if not 0 <= sector <= 15:
        raise ValueError(f"Wind direction out of range: {sector}")
    return DecimalType(value=sector * WIND_DIRECTION_STEP, unit="°")


_CONVERTERS = {
    ValueKind.COMMAND: _word(COMMAND_WORDS),
    ValueKind.ON_OFF: lambda token: OnOffType(token.upper()),
    ValueKind.OPEN_CLOSED: lambda token: OpenClosedType(token.upper()),
    ValueKind.DIM_LEVEL: _dim_level,
    ValueKind.PERCENT: lambda token: PercentType(value=_decimal(token)),
    ValueKind.TEMPERATURE: lambda token: DecimalType(value=decode_signed_tenths(token), unit="°C"),
    ValueKind.HEX_TENTHS: lambda token: DecimalType(value=_hex(token) / 10.0),
    ValueKind.HEX_INTEGER: lambda token: DecimalType(value=float(_hex(token))),
    ValueKind.DECIMAL_INTEGER: lambda token: DecimalType(value=float(_decimal(token))),
    ValueKind.WIND_DIRECTION: _wind_direction,
    ValueKind.BATTERY: _word(BATTERY_WORDS),
}

# Only the canonical words; ALLON and ALLOFF are never rendered
_COMMAND_TOKENS = {value: word for word, value in COMMAND_WORDS.items() if word == value.value}
_BATTERY_TOKENS = {state: word for word, state in BATTERY_WORDS.items()}

_ENCODERS = {
    ValueKind.COMMAND: lambda value: _COMMAND_TOKENS[value],
    ValueKind.ON_OFF: lambda value: OnOffType(value).value,
    ValueKind.OPEN_CLOSED: lambda value: OpenClosedType(value).value,
    ValueKind.DIM_LEVEL: lambda value: str(value.to_level(ProtocolConstants.MAX_DIM_LEVEL)),
    ValueKind.PERCENT: lambda value: _decimal_token(value.value),
    ValueKind.TEMPERATURE: lambda value: encode_signed_tenths(value.value),
    ValueKind.HEX_TENTHS: lambda value: _hex_token(round(value.value * 10)),
    ValueKind.HEX_INTEGER: lambda value: _hex_token(round(value.value)),
    ValueKind.DECIMAL_INTEGER: lambda value: _decimal_token(round(value.value)),
    ValueKind.WIND_DIRECTION: lambda value: str(round(value.value / WIND_DIRECTION_STEP) % 16),
    ValueKind.BATTERY: lambda value: _BATTERY_TOKENS[value],
}
