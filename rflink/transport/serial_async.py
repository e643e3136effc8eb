"""
Async serial transport using pyserial-asyncio.

This module provides the primary transport implementation for talking to
an RFLink gateway over its USB serial port.

Serial Configuration:
- Baud rate: 57600 (default)
- Data bits: 8
- Parity: None
- Stop bits: 1
- Flow control: None
- Lines terminated by CR LF, ASCII encoded

Example:
    >>> transport = AsyncSerialTransport("/dev/ttyACM0")
    >>> async with transport:
    ...     await transport.write_line("10;PING;")
    ...     response = await transport.read_line()
"""

from __future__ import annotations

import asyncio

import serial
import serial_asyncio

from rflink.exceptions import TimeoutError, TransportError
from rflink.protocol.constants import ProtocolConstants
from rflink.transport.abc import AbstractTransport


class AsyncSerialTransport(AbstractTransport):
    """
    Async serial transport using pyserial-asyncio.

    Attributes:
        port_name: Serial port path (e.g., "/dev/ttyACM0", "COM3").
        is_open: Whether the port is currently open.

    Example:
        >>> transport = AsyncSerialTransport("/dev/ttyACM0", baudrate=57600)
        >>> await transport.open()
        >>> try:
        ...     await transport.write_line("10;NewKaku;00c142;1;ON;")
        ...     line = await transport.read_line(timeout=5.0)
        ... finally:
        ...     await transport.close()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
        default_timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
    ) -> None:
        """
        Initialize the async serial transport.

        Args:
            port: Serial port path (e.g., "/dev/ttyACM0", "COM3").
            baudrate: Baud rate (default: 57600).
            default_timeout: Default read timeout in seconds (default: 5.0).
        """
        self._port = port
        self._baudrate = baudrate
        self._default_timeout = default_timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._serial_instance: serial.Serial | None = None

    @property
    def is_open(self) -> bool:
        """Check if the serial port is currently open."""
        return (
            self._writer is not None
            and not self._writer.is_closing()
            and self._reader is not None
        )

    @property
    def port_name(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the configured baud rate."""
        return self._baudrate

    async def open(self) -> None:
        """
        Open the serial port connection.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self.is_open:
            return

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self._port,
                baudrate=self._baudrate,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                bytesize=serial.EIGHTBITS,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
            # Underlying serial port, for buffer operations
            transport = self._writer.transport
            if hasattr(transport, "serial"):
                self._serial_instance = transport.serial

        except serial.SerialException as e:
            raise TransportError(f"Failed to open serial port {self._port}: {e}") from e
        except OSError as e:
            raise TransportError(f"OS error opening {self._port}: {e}") from e

    async def close(self) -> None:
        """
        Close the serial port connection.

        Safe to call multiple times.
        """
        if self._writer is not None:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except (OSError, serial.SerialException):
                # Port already gone
                pass

        self._reader = None
        self._writer = None
        self._serial_instance = None

    async def write_line(self, line: str) -> None:
        """
        Write a line followed by CR LF.

        Raises:
            TransportError: If the port is not open or write fails.
        """
        if not self.is_open:
            raise TransportError("Serial port is not open")

        data = (line + ProtocolConstants.LINE_TERMINATOR).encode(ProtocolConstants.ENCODING)
        try:
            self._writer.write(data)
            await self._writer.drain()
        except (OSError, serial.SerialException) as e:
            raise TransportError(f"Write failed: {e}") from e

    async def read_line(self, timeout: float | None = None) -> str:
        """
        Read one LF-terminated line.

        Returns:
            Line with CR LF stripped. Non-ASCII bytes are replaced.

        Raises:
            TimeoutError: If timeout expires before a line is received.
            TransportError: If the port is not open or read fails.
        """
        if not self.is_open:
            raise TransportError("Serial port is not open")

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            data = await asyncio.wait_for(
                self._reader.readuntil(b"\n"),
                timeout=effective_timeout,
            )
        except asyncio.TimeoutError:
            raise TimeoutError(
                "Timeout waiting for line",
                timeout_seconds=effective_timeout,
            ) from None
        except asyncio.IncompleteReadError as e:
            if e.partial:
                raise TransportError(
                    f"Connection closed with partial line: {e.partial!r}"
                ) from e
            raise TransportError("Connection closed unexpectedly") from e
        except (asyncio.LimitOverrunError, OSError, serial.SerialException) as e:
            raise TransportError(f"Read failed: {e}") from e

        return data.decode(ProtocolConstants.ENCODING, errors="replace").rstrip("\r\n")

    def discard_buffers(self) -> None:
        """
        Discard any pending data in input and output buffers.

        Note: This operates on the underlying serial port and may not
        affect data already buffered by the asyncio layer.
        """
        if self._serial_instance is not None:
            try:
                self._serial_instance.reset_input_buffer()
                self._serial_instance.reset_output_buffer()
            except (OSError, serial.SerialException):
                # Port may be closed
                pass

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncSerialTransport({self._port!r}, baudrate={self._baudrate}, {status})"
