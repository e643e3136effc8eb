"""Tests for raw value conversions."""

import pytest

from rflink.exceptions import ConversionError
from rflink.models.types import (
    DecimalType,
    OnOffType,
    OpenClosedType,
    PercentType,
    StopMoveType,
    UpDownType,
)
from rflink.protocol.conversions import (
    ValueKind,
    decode_signed_tenths,
    encode_signed_tenths,
    synonym,
    to_raw,
    to_typed,
)


class TestDecodeSignedTenths:
    """Tests for decode_signed_tenths function."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("0000", 0.0),
            ("00cf", 20.7),
            ("00dd", 22.1),
            ("80c8", -20.0),
            ("8001", -0.1),
            ("7fff", 3276.7),
        ],
    )
    def test_values(self, token, expected):
        """Test positive and sign-bit negative temperatures."""
        assert decode_signed_tenths(token) == pytest.approx(expected)

    def test_uppercase_hex(self):
        """Test uppercase hex digits."""
        assert decode_signed_tenths("00CF") == pytest.approx(20.7)

    def test_out_of_range(self):
        """Test that more than 16 bits is rejected."""
        with pytest.raises(ValueError):
            decode_signed_tenths("10000")

    @pytest.mark.parametrize("token", ["-1", "+0dd", "0xdd", "0_dd", "00dd0", " 0dd"])
    def test_rejects_non_hex_tokens(self, token):
        """Test that signs, prefixes, separators and a fifth digit are rejected."""
        with pytest.raises(ValueError):
            decode_signed_tenths(token)


class TestEncodeSignedTenths:
    """Tests for encode_signed_tenths function."""

    @pytest.mark.parametrize(
        "value,token",
        [(0.0, "0000"), (22.1, "00dd"), (-20.0, "80c8"), (-0.1, "8001"), (3276.7, "7fff")],
    )
    def test_values(self, value, token):
        """Test that the sign goes into bit 15."""
        assert encode_signed_tenths(value) == token

    def test_out_of_range(self):
        """Test that magnitudes needing bit 15 are rejected."""
        with pytest.raises(ValueError):
            encode_signed_tenths(3276.8)


class TestToTyped:
    """Tests for to_typed function."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("ON", OnOffType.ON),
            ("ALLON", OnOffType.ON),
            ("OFF", OnOffType.OFF),
            ("ALLOFF", OnOffType.OFF),
            ("on", OnOffType.ON),
            ("UP", UpDownType.UP),
            ("DOWN", UpDownType.DOWN),
            ("STOP", StopMoveType.STOP),
        ],
    )
    def test_command_words(self, raw, expected):
        """Test the command vocabulary."""
        assert to_typed(raw, ValueKind.COMMAND) is expected

    def test_on_off(self):
        """Test ON_OFF kind."""
        assert to_typed("OFF", ValueKind.ON_OFF) is OnOffType.OFF

    def test_open_closed(self):
        """Test OPEN_CLOSED kind."""
        assert to_typed("open", ValueKind.OPEN_CLOSED) is OpenClosedType.OPEN

    @pytest.mark.parametrize(
        "raw,percent",
        [("0", 0), ("1", 7), ("8", 53), ("15", 100)],
    )
    def test_dim_level(self, raw, percent):
        """Test dim levels projected to percent."""
        assert to_typed(raw, ValueKind.DIM_LEVEL) == PercentType(value=percent)

    def test_percent(self):
        """Test decimal humidity."""
        assert to_typed("48", ValueKind.PERCENT) == PercentType(value=48)

    def test_temperature_has_unit(self):
        """Test temperature carries degrees Celsius."""
        value = to_typed("00cf", ValueKind.TEMPERATURE)
        assert isinstance(value, DecimalType)
        assert value.value == pytest.approx(20.7)
        assert value.unit == "°C"

    def test_hex_tenths(self):
        """Test hex values scaled by ten."""
        assert to_typed("0060", ValueKind.HEX_TENTHS).value == pytest.approx(9.6)

    def test_hex_integer(self):
        """Test plain hex values."""
        assert to_typed("0190", ValueKind.HEX_INTEGER).value == 400.0

    def test_decimal_integer(self):
        """Test plain decimal values."""
        assert to_typed("2", ValueKind.DECIMAL_INTEGER).value == 2.0

    @pytest.mark.parametrize("raw,degrees", [("0", 0.0), ("2", 45.0), ("15", 337.5)])
    def test_wind_direction(self, raw, degrees):
        """Test compass sectors projected to degrees."""
        assert to_typed(raw, ValueKind.WIND_DIRECTION).value == degrees

    def test_battery(self):
        """Test that low battery maps to ON."""
        assert to_typed("OK", ValueKind.BATTERY) is OnOffType.OFF
        assert to_typed("LOW", ValueKind.BATTERY) is OnOffType.ON

    @pytest.mark.parametrize(
        "raw,kind",
        [
            ("MAYBE", ValueKind.COMMAND),
            ("OPEN", ValueKind.ON_OFF),
            ("16", ValueKind.DIM_LEVEL),
            ("-1", ValueKind.DIM_LEVEL),
            ("abc", ValueKind.PERCENT),
            ("150", ValueKind.PERCENT),
            ("zz", ValueKind.TEMPERATURE),
            ("", ValueKind.HEX_TENTHS),
            ("0x", ValueKind.HEX_INTEGER),
            ("-1", ValueKind.TEMPERATURE),
            ("00dd0", ValueKind.TEMPERATURE),
            ("-10", ValueKind.HEX_TENTHS),
            ("+10", ValueKind.HEX_TENTHS),
            ("0x10", ValueKind.HEX_INTEGER),
            ("0_1_0", ValueKind.HEX_INTEGER),
            ("1_0", ValueKind.DECIMAL_INTEGER),
            ("+5", ValueKind.PERCENT),
            ("16", ValueKind.WIND_DIRECTION),
            ("EMPTY", ValueKind.BATTERY),
        ],
    )
    def test_invalid_values_raise(self, raw, kind):
        """Test that unconvertible tokens raise ConversionError."""
        with pytest.raises(ConversionError) as exc_info:
            to_typed(raw, kind)
        assert exc_info.value.raw_value == raw
        assert exc_info.value.kind == kind.name



class TestToRaw:
    """Tests for to_raw function."""

    @pytest.mark.parametrize(
        "value,kind,token",
        [
            (OnOffType.ON, ValueKind.COMMAND, "ON"),
            (StopMoveType.STOP, ValueKind.COMMAND, "STOP"),
            (PercentType(value=53), ValueKind.DIM_LEVEL, "8"),
            (PercentType(value=48), ValueKind.PERCENT, "48"),
            (DecimalType(value=22.1, unit="°C"), ValueKind.TEMPERATURE, "00dd"),
            (DecimalType(value=-20.0), ValueKind.TEMPERATURE, "80c8"),
            (DecimalType(value=9.6), ValueKind.HEX_TENTHS, "0060"),
            (DecimalType(value=400.0), ValueKind.HEX_INTEGER, "0190"),
            (DecimalType(value=2.0), ValueKind.DECIMAL_INTEGER, "2"),
            (DecimalType(value=45.0), ValueKind.WIND_DIRECTION, "2"),
            (OnOffType.OFF, ValueKind.BATTERY, "OK"),
            (OnOffType.ON, ValueKind.BATTERY, "LOW"),
        ],
    )
    def test_values(self, value, kind, token):
        """Test rendering typed values back into tokens."""
        assert to_raw(value, kind) == token

    @pytest.mark.parametrize(
        "value,kind",
        [
            (DecimalType(value=-1.0), ValueKind.HEX_TENTHS),
            (DecimalType(value=-1.0), ValueKind.DECIMAL_INTEGER),
            (DecimalType(value=5000.0), ValueKind.TEMPERATURE),
            (UpDownType.UP, ValueKind.BATTERY),
            (PercentType(value=50), ValueKind.COMMAND),
        ],
    )
    def test_unrenderable_values_raise(self, value, kind):
        """Test that values outside the encoding raise ConversionError."""
        with pytest.raises(ConversionError) as exc_info:
            to_raw(value, kind)
        assert exc_info.value.kind == kind.name

class TestSynonym:
    """Tests for synonym function."""

    def test_on_off_to_open_closed(self):
        """Test ON/OFF and OPEN/CLOSED are synonyms."""
        assert synonym(OnOffType.ON, OpenClosedType) is OpenClosedType.OPEN
        assert synonym(OnOffType.OFF, OpenClosedType) is OpenClosedType.CLOSED
        assert synonym(OpenClosedType.OPEN, OnOffType) is OnOffType.ON
        assert synonym(OpenClosedType.CLOSED, OnOffType) is OnOffType.OFF

    def test_same_type(self):
        """Test that a value is its own synonym."""
        assert synonym(OnOffType.ON, OnOffType) is OnOffType.ON

    @pytest.mark.parametrize(
        "value",
        [
            UpDownType.UP,
            UpDownType.DOWN,
            StopMoveType.STOP,
            PercentType(value=50),
            DecimalType(value=20.5),
        ],
    )
    def test_absent_synonyms(self, value):
        """Test that values without an equivalent yield None, not an error."""
        assert synonym(value, OnOffType) is None
        assert synonym(value, OpenClosedType) is None
