"""Tests for the switch message variant."""

import pytest

from rflink.exceptions import ConfigurationError, ProtocolError, UnsupportedCommandError
from rflink.messages import SwitchMessage
from rflink.messages.base import MessageState
from rflink.messages.registry import create_default_registry
from rflink.models import (
    DeviceConfiguration,
    OnOffType,
    OpenClosedType,
    PercentType,
    UpDownType,
)
from rflink.protocol.field_parser import parse_line


def decode(line: str) -> SwitchMessage:
    message = SwitchMessage()
    message.decode(parse_line(line))
    return message


class TestSwitchDecoding:
    """Tests for decoding switch frames."""

    def test_decode_on(self):
        """Test decoding an ON command."""
        message = decode("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")

        assert message.state is MessageState.DECODED
        assert message.protocol == "NewKaku"
        assert message.device_id == "NewKaku-00c142-1"
        assert message.command is OnOffType.ON
        assert message.get_outputs() == {
            "command": OnOffType.ON,
            "contact": OpenClosedType.OPEN,
        }

    def test_decode_alloff(self):
        """Test that group commands map to plain on/off."""
        message = decode("20;2E;NewKaku;ID=00c142;SWITCH=1;CMD=ALLOFF;")
        assert message.get_outputs() == {
            "command": OnOffType.OFF,
            "contact": OpenClosedType.CLOSED,
        }

    def test_identity_in_frame_order(self):
        """Test that identity follows frame order, not declaration order."""
        message = decode("20;2D;Kaku;SWITCH=3;ID=41;CMD=ON;")
        assert message.device_id == "Kaku-3-41"

    def test_identity_is_stable(self):
        """Test that the same identity always yields the same device id."""
        first = decode("20;01;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")
        second = decode("20;7F;NewKaku;ID=00c142;SWITCH=1;CMD=OFF;")
        assert first.device_id == second.device_id

    def test_unconvertible_command_is_dropped(self):
        """Test that a bad CMD leaves the message decoded without outputs."""
        message = decode("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=PAIR;")
        assert message.state is MessageState.DECODED
        assert message.device_id == "NewKaku-00c142-1"
        assert message.get_outputs() == {}

    def test_shutter_word_is_not_a_switch_state(self):
        """Test that UP on a switch frame publishes nothing."""
        message = decode("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=UP;")
        assert message.command is None
        assert message.get_outputs() == {}

    def test_decode_twice_raises(self):
        """Test that a message can only be decoded once."""
        message = decode("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")
        with pytest.raises(ProtocolError):
            message.decode(parse_line("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=OFF;"))

    def test_repr(self):
        """Test string representation."""
        message = decode("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")
        assert "NewKaku-00c142-1" in repr(message)
        assert "DECODED" in repr(message)


class TestSwitchEncoding:
    """Tests for encoding switch commands."""

    @pytest.fixture
    def config(self):
        """Create a configured switch."""
        return DeviceConfiguration(device_id="NewKaku-00c142-1")

    def test_encode_on(self, config):
        """Test encoding ON."""
        message = SwitchMessage()
        message.encode(config, "command", OnOffType.ON)

        assert message.state is MessageState.ENCODED
        assert message.device_id == "NewKaku-00c142-1"
        assert message.serialize() == "10;NewKaku;00c142;1;ON;"

    def test_encode_publishes_commanded_state(self, config):
        """Test outputs of an encoded message."""
        message = SwitchMessage()
        message.encode(config, "command", OnOffType.OFF)
        assert message.get_outputs() == {
            "command": OnOffType.OFF,
            "contact": OpenClosedType.CLOSED,
        }

    @pytest.mark.parametrize("device_id", ["X10-A1", "NewKaku-00c142"])
    def test_encode_without_switch_raises(self, device_id):
        """Test that a switch needs the switch part to be addressed."""
        message = SwitchMessage()
        with pytest.raises(ConfigurationError):
            message.encode(DeviceConfiguration(device_id=device_id), "command", OnOffType.ON)
        assert message.state is MessageState.FRESH

    @pytest.mark.parametrize(
        "channel,command",
        [
            ("command", UpDownType.UP),
            ("command", PercentType(value=50)),
            ("contact", OnOffType.ON),
        ],
    )
    def test_unsupported_commands(self, config, channel, command):
        """Test that unmapped commands raise and leave the message FRESH."""
        message = SwitchMessage()
        with pytest.raises(UnsupportedCommandError) as exc_info:
            message.encode(config, channel, command)
        assert exc_info.value.device_class == "switch"
        assert message.state is MessageState.FRESH

    def test_invalid_device_id(self):
        """Test that a device id without an ID part cannot be encoded."""
        message = SwitchMessage()
        with pytest.raises(ConfigurationError):
            message.encode(DeviceConfiguration(device_id="NewKaku"), "command", OnOffType.ON)
        assert message.state is MessageState.FRESH

    def test_serialize_fresh_raises(self):
        """Test that an unpopulated message cannot be serialized."""
        with pytest.raises(ProtocolError):
            SwitchMessage().serialize()

    def test_encode_after_decode_raises(self, config):
        """Test that a decoded message cannot be encoded."""
        message = decode("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")
        with pytest.raises(ProtocolError):
            message.encode(config, "command", OnOffType.OFF)

    def test_round_trip(self, config):
        """Test that a serialized command decodes to the same device and state."""
        message = SwitchMessage()
        message.encode(config, "command", OnOffType.ON)

        result, decoded = create_default_registry().decode_line(message.serialize())
        assert isinstance(decoded, SwitchMessage)
        assert decoded.device_id == message.device_id
        assert decoded.get_outputs() == message.get_outputs()
