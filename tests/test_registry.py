"""Tests for the message registry."""

import logging

import pytest

from rflink.exceptions import UnsupportedMessageTypeError
from rflink.messages import (
    DimmerMessage,
    EnergyMessage,
    HumidityMessage,
    RainMessage,
    RollershutterMessage,
    SwitchMessage,
    TemperatureMessage,
    WindMessage,
)
from rflink.messages.base import MessageState
from rflink.messages.registry import DecodeResult, MessageRegistry, create_default_registry
from rflink.models import DeviceClass
from rflink.protocol.field_parser import parse_line


class TestMessageRegistry:
    """Tests for MessageRegistry class."""

    @pytest.fixture
    def registry(self):
        """Create an empty registry."""
        return MessageRegistry()

    def test_empty_registry(self, registry):
        """Test empty registry behavior."""
        assert registry.get_variant(DeviceClass.SWITCH) is None
        assert not registry.has_variant(DeviceClass.SWITCH)
        assert registry.registered_device_classes == frozenset()
        assert registry.outbound_device_classes == frozenset()

    def test_register(self, registry):
        """Test registering a variant."""
        registry.register(SwitchMessage)
        assert registry.get_variant(DeviceClass.SWITCH) is SwitchMessage
        assert registry.has_variant(DeviceClass.SWITCH)

    def test_unregister(self, registry):
        """Test unregistering a variant."""
        registry.register(SwitchMessage)

        assert registry.unregister(DeviceClass.SWITCH) is True
        assert not registry.has_variant(DeviceClass.SWITCH)

        # Unregistering non-existent returns False
        assert registry.unregister(DeviceClass.SWITCH) is False

    def test_no_variant_claims_frame(self, registry):
        """Test that an empty registry claims nothing."""
        fields = parse_line("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")
        assert registry.select_variant(fields) is None
        with pytest.raises(UnsupportedMessageTypeError) as exc_info:
            registry.create_for_decoding(fields)
        assert exc_info.value.protocol == "NewKaku"
        assert "CMD" in exc_info.value.keys

    def test_repr(self, registry):
        """Test string representation."""
        assert "variants=0" in repr(registry)
        registry.register(SwitchMessage)
        assert "variants=1" in repr(registry)


class TestDefaultRegistry:
    """Tests for variant selection in the default registry."""

    @pytest.fixture
    def registry(self):
        """Create a registry with all built-in variants."""
        return create_default_registry()

    def test_all_device_classes_registered(self, registry):
        """Test that every device class has a variant."""
        assert registry.registered_device_classes == frozenset(DeviceClass)

    def test_outbound_device_classes(self, registry):
        """Test that only actuators accept commands."""
        assert registry.outbound_device_classes == frozenset(
            {DeviceClass.SWITCH, DeviceClass.DIMMER, DeviceClass.ROLLERSHUTTER}
        )

    @pytest.mark.parametrize(
        "line,variant",
        [
            ("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;", SwitchMessage),
            ("20;3A;NewKaku;ID=00c142;SWITCH=2;CMD=ON;SET_LEVEL=8;", DimmerMessage),
            ("20;3B;NewKaku;ID=00c142;SWITCH=2;SET_LEVEL=8;", DimmerMessage),
            ("20;0E;RTS;ID=1a602a;SWITCH=01;CMD=DOWN;", RollershutterMessage),
            ("20;46;Cresta;ID=8001;TEMP=00dd;BAT=OK;", TemperatureMessage),
            ("20;47;Cresta;ID=8001;TEMP=00dd;HUM=48;BAT=OK;", HumidityMessage),
            ("20;2A;Oregon Rain2;ID=2a19;RAIN=0010;RAINRATE=0002;", RainMessage),
            ("20;B5;Oregon Wind2;ID=3a0d;WINDIR=0002;WINSP=0060;", WindMessage),
            ("20;AF;OWL_CM113;ID=0123;WATT=0190;KWATT=0a7d;", EnergyMessage),
        ],
    )
    def test_select_variant(self, registry, line, variant):
        """Test that each frame is claimed by the most specific variant."""
        assert registry.select_variant(parse_line(line)) is variant

    def test_protocol_binding_wins(self, registry):
        """Test that a protocol-bound variant beats a key-only match."""
        fields = parse_line("20;0E;RTS;ID=1a602a;SWITCH=01;CMD=UP;")
        assert SwitchMessage.match_score(fields) == RollershutterMessage.match_score(fields)
        assert registry.select_variant(fields) is RollershutterMessage

    def test_protocol_binding_excludes_other_protocols(self):
        """Test that a protocol-bound variant ignores other protocols."""
        fields = parse_line("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=UP;")
        assert RollershutterMessage.match_score(fields) is None

    def test_ties_go_to_first_registered(self):
        """Test that equally ranked variants resolve by registration order."""
        fields = parse_line("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")

        class OtherSwitch(SwitchMessage):
            device_class = DeviceClass.DIMMER

        registry = MessageRegistry()
        registry.register(SwitchMessage)
        registry.register(OtherSwitch)
        assert registry.select_variant(fields) is SwitchMessage

    @pytest.mark.parametrize(
        "line",
        [
            "20;01;PONG;",
            "20;00;Nodo RadioFrequencyLink - RFLink Gateway V1.1 - R46;",
            "20;02;Unknown;ID=1234;FOO=1;",
            "20;03;NewKaku;ID=00c142;CMD=ON;",
        ],
    )
    def test_unsupported_frames(self, registry, line):
        """Test frames that no variant claims."""
        assert registry.select_variant(parse_line(line)) is None

    def test_create_for_decoding_is_fresh(self, registry):
        """Test that decoding starts from a FRESH message."""
        message = registry.create_for_decoding(
            parse_line("20;46;Cresta;ID=8001;TEMP=00dd;")
        )
        assert isinstance(message, TemperatureMessage)
        assert message.state is MessageState.FRESH

    def test_decode(self, registry):
        """Test create-and-decode in one step."""
        message = registry.decode(parse_line("20;46;Cresta;ID=8001;TEMP=00dd;"))
        assert message.state is MessageState.DECODED
        assert message.device_id == "Cresta-8001"

    def test_create_for_encoding(self, registry):
        """Test creating an outbound message."""
        message = registry.create_for_encoding(DeviceClass.DIMMER)
        assert isinstance(message, DimmerMessage)
        assert message.state is MessageState.FRESH

    def test_create_for_encoding_sensor_raises(self, registry):
        """Test that sensors cannot be sent to."""
        with pytest.raises(UnsupportedMessageTypeError):
            registry.create_for_encoding(DeviceClass.TEMPERATURE)

    def test_create_for_encoding_unregistered_raises(self):
        """Test that unregistered device classes cannot be sent to."""
        with pytest.raises(UnsupportedMessageTypeError):
            MessageRegistry().create_for_encoding(DeviceClass.SWITCH)


class TestDecodeLine:
    """Tests for MessageRegistry.decode_line."""

    @pytest.fixture
    def registry(self):
        """Create a registry with all built-in variants."""
        return create_default_registry()

    def test_success(self, registry):
        """Test decoding a supported line."""
        result, message = registry.decode_line("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;\r\n")
        assert result is DecodeResult.SUCCESS
        assert isinstance(message, SwitchMessage)
        assert message.device_id == "NewKaku-00c142-1"

    def test_malformed(self, registry):
        """Test that malformed lines are reported, not raised."""
        result, message = registry.decode_line("garbage")
        assert result is DecodeResult.MALFORMED_FRAME
        assert message is None

    def test_malformed_logged_as_warning(self, registry, caplog):
        """Test that a dropped malformed line is logged at warning level."""
        with caplog.at_level(logging.DEBUG, logger="rflink.messages.registry"):
            registry.decode_line("garbage")

        assert [r.levelno for r in caplog.records] == [logging.WARNING]
        assert "malformed" in caplog.records[0].getMessage()

    def test_unsupported(self, registry):
        """Test that unclaimed lines are reported, not raised."""
        result, message = registry.decode_line("20;01;PONG;")
        assert result is DecodeResult.UNSUPPORTED_TYPE
        assert message is None

    def test_unsupported_logged_as_debug(self, registry, caplog):
        """Test that routine unclaimed traffic stays below warning level."""
        with caplog.at_level(logging.DEBUG, logger="rflink.messages.registry"):
            registry.decode_line("20;01;PONG;")

        assert caplog.records
        assert all(r.levelno == logging.DEBUG for r in caplog.records)

    def test_stream_survives_bad_lines(self, registry):
        """Test that bad lines do not affect the lines after them."""
        lines = [
            "",
            "20;01;PONG;",
            "20;02;NewKaku;ID=00c142;SWITCH=1;CMD=ON",
            "20;;",
            "20;03;Cresta;ID=8001;TEMP=00dd;",
        ]
        results = [registry.decode_line(line)[0] for line in lines]
        assert results == [
            DecodeResult.MALFORMED_FRAME,
            DecodeResult.UNSUPPORTED_TYPE,
            DecodeResult.SUCCESS,
            DecodeResult.MALFORMED_FRAME,
            DecodeResult.SUCCESS,
        ]
