"""
Mock transport for testing.

This module provides a mock transport implementation that allows testing
the bridge and device sessions without a gateway. Inbound lines can be
pre-configured or generated from written lines with a callback.

Example:
    >>> from rflink.transport import MockTransport
    >>> from rflink import RFLinkBridge
    >>>
    >>> mock = MockTransport()
    >>> mock.add_response("20;01;PONG;")
    >>>
    >>> async with RFLinkBridge(mock) as bridge:
    ...     await bridge.connect()
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable

from rflink.exceptions import TimeoutError, TransportError
from rflink.transport.abc import AbstractTransport


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without hardware.

    Lines queued with add_response() are returned by read_line() in FIFO
    order. All written lines are recorded for verification.

    Attributes:
        written_lines: List of all lines written to the transport.

    Example:
        >>> mock = MockTransport()
        >>> mock.add_response("20;01;PONG;")
        >>>
        >>> async with mock:
        ...     await mock.write_line("10;PING;")
        ...     assert await mock.read_line() == "20;01;PONG;"
        ...     assert mock.written_lines == ["10;PING;"]
    """

    def __init__(
        self,
        port_name: str = "mock://rflink",
        default_timeout: float = 5.0,
    ) -> None:
        """
        Initialize the mock transport.

        Args:
            port_name: Identifier for the mock transport.
            default_timeout: Default timeout for read operations.
        """
        self._port_name = port_name
        self._default_timeout = default_timeout
        self._is_open = False
        self._responses: deque[str | Exception] = deque()
        self._written_lines: list[str] = []
        self._response_callback: Callable[[str], str | None] | None = None
        self._fail_writes = 0

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def port_name(self) -> str:
        """Get the mock port name."""
        return self._port_name

    @property
    def written_lines(self) -> list[str]:
        """Get all lines written to the transport."""
        return self._written_lines.copy()

    @property
    def last_written(self) -> str | None:
        """Get the most recently written line."""
        return self._written_lines[-1] if self._written_lines else None

    @property
    def pending_responses(self) -> int:
        """Number of queued lines not read yet."""
        return len(self._responses)

    def add_response(self, line: str) -> None:
        """
        Queue a line to be returned by read_line().

        Args:
            line: Line without terminator.
        """
        self._responses.append(line)

    def add_responses(self, *lines: str) -> None:
        """
        Queue multiple lines.

        Args:
            *lines: Lines without terminator.
        """
        for line in lines:
            self._responses.append(line)

    def add_error(self, error: Exception) -> None:
        """
        Queue an exception to be raised by read_line() in turn.

        Used to script idle periods (TimeoutError) or a lost port
        (TransportError) between queued lines.
        """
        self._responses.append(error)

    def set_response_callback(
        self,
        callback: Callable[[str], str | None] | None,
    ) -> None:
        """
        Set a callback to dynamically generate responses.

        The callback receives each written line and returns a line to
        queue, or None to queue nothing.

        Args:
            callback: Function that takes the written line and returns a response.
        """
        self._response_callback = callback

    def fail_next_writes(self, count: int = 1) -> None:
        """
        Make the next `count` writes raise TransportError.

        Failed writes are still recorded in written_lines.
        """
        self._fail_writes = count

    def clear(self) -> None:
        """Clear all written lines and pending responses."""
        self._written_lines.clear()
        self._responses.clear()

    async def open(self) -> None:
        """Open the mock transport."""
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True

    async def close(self) -> None:
        """Close the mock transport."""
        self._is_open = False

    async def write_line(self, line: str) -> None:
        """
        Write a line to the mock transport.

        Records the line and optionally triggers the response callback.

        Raises:
            TransportError: If transport is not open or a failure was scripted.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self._written_lines.append(line)

        if self._fail_writes > 0:
            self._fail_writes -= 1
            raise TransportError("Scripted mock write failure")

        if self._response_callback:
            response = self._response_callback(line)
            if response is not None:
                self._responses.append(response)

    async def read_line(self, timeout: float | None = None) -> str:
        """
        Return the next queued line.

        Args:
            timeout: Read timeout (ignored in mock).

        Raises:
            TimeoutError: If no line is queued.
            TransportError: If transport is not open.
        """
        # Yield like a real read so concurrent tasks get to run
        await asyncio.sleep(0)

        if not self._is_open:
            raise TransportError("Mock transport not open")

        if self._responses:
            response = self._responses.popleft()
            if isinstance(response, Exception):
                raise response
            return response

        raise TimeoutError(
            "No mock response available",
            timeout_seconds=timeout if timeout is not None else self._default_timeout,
        )

    def discard_buffers(self) -> None:
        """Discard pending responses."""
        self._responses.clear()

    def assert_written(self, expected: str, index: int = -1) -> None:
        """
        Assert that a specific line was written.

        Args:
            expected: Expected line.
            index: Index in written_lines (-1 for last).

        Raises:
            AssertionError: If the line doesn't match.
        """
        if not self._written_lines:
            raise AssertionError("No lines written to mock transport")

        actual = self._written_lines[index]
        if actual != expected:
            raise AssertionError(f"Written line mismatch: expected {expected!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_lines)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")
