"""
Typed values and commands exchanged with RFLink devices.

Message variants decode raw field strings into these types and project
them onto output channels. The same types double as outbound commands
delivered by the host framework.

Design principles:
- Enumerated states (on/off, open/closed, up/down, stop/move) are plain enums
- Numeric values are frozen Pydantic models with validation
- Every type renders back to the token used on the wire via `to_full_string()`
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class OnOffType(str, Enum):
    """Binary switch state."""

    ON = "ON"
    OFF = "OFF"

    def to_full_string(self) -> str:
        return self.value


class OpenClosedType(str, Enum):
    """Contact state."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"

    def to_full_string(self) -> str:
        return self.value


class UpDownType(str, Enum):
    """Rollershutter movement direction."""

    UP = "UP"
    DOWN = "DOWN"

    def to_full_string(self) -> str:
        return self.value


class StopMoveType(str, Enum):
    """Rollershutter stop/move command."""

    STOP = "STOP"
    MOVE = "MOVE"

    def to_full_string(self) -> str:
        return self.value


class RefreshType(str, Enum):
    """Request to refresh a channel. RFLink devices cannot be polled."""

    REFRESH = "REFRESH"

    def to_full_string(self) -> str:
        return self.value


class PercentType(BaseModel):
    """
    Percentage value (0-100), used for dimming levels and humidity.

    Example:
        >>> level = PercentType(value=40)
        >>> str(level)
        '40'
    """

    model_config = ConfigDict(frozen=True)

    value: int = Field(ge=0, le=100, description="Percentage (0-100)")

    def to_full_string(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        return self.to_full_string()

    def __repr__(self) -> str:
        return f"PercentType({self.value}%)"

    @classmethod
    def from_level(cls, level: int, max_level: int) -> PercentType:
        """
        Create a percentage from a stepped level.

        Args:
            level: Level between 0 and max_level.
            max_level: Highest level (e.g. 15 for RFLink dimmers).

        Returns:
            PercentType rounded to the nearest whole percent.
        """
        return cls(value=round(level * 100 / max_level))

    def to_level(self, max_level: int) -> int:
        """Convert this percentage to the nearest stepped level."""
        return round(self.value * max_level / 100)


class DecimalType(BaseModel):
    """
    Numeric measurement with an optional unit.

    Example:
        >>> temp = DecimalType(value=20.7, unit="°C")
        >>> str(temp)
        '20.7 °C'
    """

    model_config = ConfigDict(frozen=True)

    value: float
    unit: str | None = None

    def to_full_string(self) -> str:
        return f"{self.value:g}"

    def __str__(self) -> str:
        if self.unit:
            return f"{self.value:g} {self.unit}"
        return self.to_full_string()

    def __repr__(self) -> str:
        return f"DecimalType({self})"


State = Union[OnOffType, OpenClosedType, UpDownType, PercentType, DecimalType]
"""Values published on output channels."""

Command = Union[OnOffType, UpDownType, StopMoveType, PercentType, RefreshType]
"""Values delivered to a device session as commands."""

TypedValue = Union[State, StopMoveType]
"""Any value produced by the conversion utilities."""
