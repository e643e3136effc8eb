"""Tests for the dimmer message variant."""

import pytest

from rflink.exceptions import ConfigurationError, UnsupportedCommandError
from rflink.messages import DimmerMessage
from rflink.messages.base import MessageState
from rflink.messages.registry import create_default_registry
from rflink.models import DeviceConfiguration, OnOffType, PercentType, UpDownType
from rflink.protocol.field_parser import parse_line


def decode(line: str) -> DimmerMessage:
    message = DimmerMessage()
    message.decode(parse_line(line))
    return message


class TestDimmerDecoding:
    """Tests for decoding dimmer frames."""

    def test_level_and_command(self):
        """Test a frame with both level and command."""
        message = decode("20;3A;NewKaku;ID=00c142;SWITCH=2;CMD=ON;SET_LEVEL=8;")

        assert message.device_id == "NewKaku-00c142-2"
        assert message.get_outputs() == {
            "command": OnOffType.ON,
            "dimminglevel": PercentType(value=53),
        }

    def test_command_derived_from_level(self):
        """Test that a missing CMD is derived from the level."""
        assert decode("20;3B;NewKaku;ID=1;SWITCH=2;SET_LEVEL=15;").command is OnOffType.ON
        assert decode("20;3C;NewKaku;ID=1;SWITCH=2;SET_LEVEL=0;").command is OnOffType.OFF

    def test_bad_level_is_dropped(self):
        """Test that an out-of-range level leaves the rest decoded."""
        message = decode("20;3D;NewKaku;ID=1;SWITCH=2;CMD=OFF;SET_LEVEL=99;")
        assert message.state is MessageState.DECODED
        assert message.get_outputs() == {"command": OnOffType.OFF}


class TestDimmerEncoding:
    """Tests for encoding dimmer commands."""

    @pytest.fixture
    def config(self):
        """Create a configured dimmer."""
        return DeviceConfiguration(device_id="NewKaku-00c142-2")

    def test_encode_on(self, config):
        """Test switching on without a level."""
        message = DimmerMessage()
        message.encode(config, "command", OnOffType.ON)
        assert message.serialize() == "10;NewKaku;00c142;2;ON;"
        assert message.get_outputs() == {"command": OnOffType.ON}

    @pytest.mark.parametrize(
        "percent,level,published",
        [(0, 0, 0), (50, 8, 53), (100, 15, 100), (3, 0, 0), (7, 1, 7)],
    )
    def test_encode_percent(self, config, percent, level, published):
        """Test that percentages are quantized to the 16 dim steps."""
        message = DimmerMessage()
        message.encode(config, "dimminglevel", PercentType(value=percent))

        assert message.serialize() == f"10;NewKaku;00c142;2;{level};"
        assert message.get_outputs()["dimminglevel"] == PercentType(value=published)

    def test_zero_percent_is_off(self, config):
        """Test that level 0 publishes OFF."""
        message = DimmerMessage()
        message.encode(config, "dimminglevel", PercentType(value=0))
        assert message.command is OnOffType.OFF

    def test_unsupported_command(self, config):
        """Test that shutter commands are rejected."""
        with pytest.raises(UnsupportedCommandError):
            DimmerMessage().encode(config, "dimminglevel", UpDownType.UP)

    def test_unsupported_channel(self, config):
        """Test that unknown channels are rejected."""
        with pytest.raises(UnsupportedCommandError):
            DimmerMessage().encode(config, "shutter", OnOffType.ON)

    def test_round_trip(self, config):
        """Test that a serialized level decodes to the published level."""
        message = DimmerMessage()
        message.encode(config, "dimminglevel", PercentType(value=40))

        result, decoded = create_default_registry().decode_line(message.serialize())
        assert isinstance(decoded, DimmerMessage)
        assert decoded.device_id == message.device_id
        assert decoded.get_outputs() == message.get_outputs()

    def test_encode_without_switch_raises(self):
        """Test that a dimmer needs the switch part to be addressed."""
        message = DimmerMessage()
        with pytest.raises(ConfigurationError):
            message.encode(DeviceConfiguration(device_id="NewKaku-00c142"), "command", OnOffType.ON)
        assert message.state is MessageState.FRESH
