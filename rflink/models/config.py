"""
Configuration models for RFLink bridges and devices.

All models are frozen Pydantic models. Out-of-range repeat counts are
clamped into range rather than rejected, matching how the gateway's
device configuration has always been interpreted.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rflink.exceptions import ConfigurationError
from rflink.protocol.constants import ProtocolConstants


class DeviceClass(str, Enum):
    """
    Logical device classes a message variant can be registered for.

    Outbound commands are routed to a variant by the device class of
    the session that issues them.
    """

    SWITCH = "switch"
    DIMMER = "dimmer"
    ROLLERSHUTTER = "rollershutter"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    RAIN = "rain"
    WIND = "wind"
    ENERGY = "energy"


def clamp_repeats(value: Any) -> int:
    """
    Clamp a configured repeat count into [MIN_REPEATS, MAX_REPEATS].

    Args:
        value: Configured count (int, numeric string or None).

    Returns:
        Clamped repeat count. None yields the default count.
    """
    if value is None:
        return ProtocolConstants.DEFAULT_REPEATS
    count = int(value)
    return min(max(count, ProtocolConstants.MIN_REPEATS), ProtocolConstants.MAX_REPEATS)


class RepeatPolicy(BaseModel):
    """
    Redundant transmission policy for outbound commands.

    Example:
        >>> RepeatPolicy(count=50).count
        20
        >>> RepeatPolicy(count=3).delays
        2
    """

    model_config = ConfigDict(frozen=True)

    count: int = Field(
        default=ProtocolConstants.DEFAULT_REPEATS,
        description="Number of transmissions (1-20)",
    )
    delay_ms: int = Field(
        default=ProtocolConstants.TIME_BETWEEN_COMMANDS_MS,
        ge=0,
        description="Delay before every repeat after the first",
    )

    @field_validator("count", mode="before")
    @classmethod
    def clamp_count(cls, v: Any) -> int:
        return clamp_repeats(v)

    @property
    def delay_seconds(self) -> float:
        """Inter-command delay in seconds."""
        return self.delay_ms / 1000.0

    @property
    def delays(self) -> int:
        """Number of inter-command delays one command incurs."""
        return self.count - 1


class DeviceConfiguration(BaseModel):
    """
    Configuration of one paired RFLink device.

    Attributes:
        device_id: `Protocol-ID[-SWITCH]`, e.g. "NewKaku-00c142-1".
            None means the device has not been configured yet.
        repeats: Transmissions per command, clamped into [1, 20].
        repeat_delay_ms: Delay before every repeat after the first.
    """

    model_config = ConfigDict(frozen=True)

    device_id: str | None = Field(default=None, description="Protocol-ID[-SWITCH]")
    repeats: int = Field(default=ProtocolConstants.DEFAULT_REPEATS)
    repeat_delay_ms: int = Field(default=ProtocolConstants.TIME_BETWEEN_COMMANDS_MS, ge=0)

    @field_validator("repeats", mode="before")
    @classmethod
    def clamp_repeat_count(cls, v: Any) -> int:
        return clamp_repeats(v)

    @field_validator("device_id")
    @classmethod
    def strip_device_id(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def repeat_policy(self) -> RepeatPolicy:
        """Repeat policy derived from this configuration."""
        return RepeatPolicy(count=self.repeats, delay_ms=self.repeat_delay_ms)

    def split_device_id(self) -> tuple[str, str, str | None]:
        """
        Split the device id into protocol, ID and optional switch.

        Returns:
            Tuple of (protocol, id, switch or None).

        Raises:
            ConfigurationError: If the device id is missing or has fewer
                than two parts.
        """
        if self.device_id is None:
            raise ConfigurationError("Device has no deviceId configured")

        parts = self.device_id.split(ProtocolConstants.ID_DELIMITER)
        if len(parts) < 2 or not all(parts):
            raise ConfigurationError(
                f"Invalid deviceId {self.device_id!r}: expected Protocol-ID[-SWITCH]"
            )
        if len(parts) > 3:
            raise ConfigurationError(
                f"Invalid deviceId {self.device_id!r}: too many parts"
            )
        switch = parts[2] if len(parts) == 3 else None
        return parts[0], parts[1], switch


class BridgeConfiguration(BaseModel):
    """
    Configuration of the RFLink gateway connection.

    Example:
        >>> config = BridgeConfiguration(port="/dev/ttyACM0")
        >>> config.baudrate
        57600
    """

    model_config = ConfigDict(frozen=True)

    port: str = Field(min_length=1, description="Serial port path")
    baudrate: int = Field(default=ProtocolConstants.DEFAULT_BAUD_RATE, gt=0)
    timeout: float = Field(default=ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT, gt=0)
    ping_on_connect: bool = True
    max_retries: int = Field(default=ProtocolConstants.MAX_RETRIES, ge=0)
