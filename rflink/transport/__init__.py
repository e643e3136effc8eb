"""
Transport layer for RFLink communication.

This package provides line transports for talking to an RFLink gateway.

Available transports:
- AsyncSerialTransport: Async serial port using pyserial-asyncio
- MockTransport: Mock transport for testing without hardware

Example:
    >>> from rflink.transport import AsyncSerialTransport
    >>> async with AsyncSerialTransport("/dev/ttyACM0") as transport:
    ...     await transport.write_line("10;PING;")
    ...     response = await transport.read_line()

Testing Example:
    >>> from rflink.transport import MockTransport
    >>> mock = MockTransport()
    >>> mock.add_response("20;01;PONG;")
"""

from rflink.transport.abc import AbstractTransport
from rflink.transport.mock import MockTransport
from rflink.transport.serial_async import AsyncSerialTransport

__all__ = [
    "AbstractTransport",
    "AsyncSerialTransport",
    "MockTransport",
]
