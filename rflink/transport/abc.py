"""
Abstract transport interface for RFLink communication.

This module defines the abstract base class for all transport implementations.
Transports move complete ASCII lines between the host and the RFLink
gateway, usually over its USB serial port.

The transport layer is responsible for:
- Opening/closing the physical connection
- Reading and writing whole lines
- Line termination and character encoding
- Timeout handling

Implementations:
- AsyncSerialTransport: pyserial-asyncio based serial port
- MockTransport: For testing without hardware
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType


class AbstractTransport(ABC):
    """
    Abstract base class for RFLink line transports.

    Transports support async context manager protocol for safe resource
    management:

        async with AsyncSerialTransport("/dev/ttyACM0") as transport:
            await transport.write_line("10;PING;")
            response = await transport.read_line()

    Attributes:
        is_open: Whether the transport connection is currently open.
        port_name: Identifier for the transport (e.g., serial port name).
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def port_name(self) -> str:
        """
        Get the transport identifier.

        Returns:
            Port name or identifier string (e.g., "/dev/ttyACM0", "COM3").
        """
        ...

    @abstractmethod
    async def open(self) -> None:
        """
        Open the transport connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Close the transport connection.

        Safe to call multiple times (idempotent). After closing, the
        transport can be reopened with open().
        """
        ...

    @abstractmethod
    async def write_line(self, line: str) -> None:
        """
        Write one line to the gateway.

        The line terminator is appended by the transport.

        Args:
            line: Line without terminator, e.g. "10;NewKaku;00c142;1;ON;".

        Raises:
            TransportError: If the transport is not open or write fails.
        """
        ...

    @abstractmethod
    async def read_line(self, timeout: float | None = None) -> str:
        """
        Read one line from the gateway.

        Args:
            timeout: Read timeout in seconds. None uses transport default.

        Returns:
            Line without terminator.

        Raises:
            TimeoutError: If no complete line arrives before the timeout.
            TransportError: If the transport is not open or read fails.
        """
        ...

    @abstractmethod
    def discard_buffers(self) -> None:
        """
        Discard any pending data in input and output buffers.

        Useful for resynchronizing after errors.
        """
        ...

    async def __aenter__(self) -> AbstractTransport:
        """Async context manager entry - opens the transport."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the transport."""
        await self.close()
