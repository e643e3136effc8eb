"""
RFLink gateway bridge.

The bridge owns the transport to one RFLink gateway. It reads inbound
lines one at a time, decodes them through the message registry and hands
every decoded message to the registered device sessions. Outbound lines
from any number of sessions are written one at a time.

The bridge implements a small state machine:
    DISCONNECTED -> connect() -> CONNECTING -> CONNECTED
    CONNECTED -> disconnect() -> DISCONNECTING -> DISCONNECTED

Example:
    >>> from rflink import RFLinkBridge
    >>> from rflink.transport import AsyncSerialTransport
    >>>
    >>> async def main():
    ...     transport = AsyncSerialTransport("/dev/ttyACM0")
    ...     async with RFLinkBridge(transport) as bridge:
    ...         await bridge.connect()
    ...         await bridge.run()
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Protocol

from rflink.exceptions import (
    ConnectionError,
    MalformedFrameError,
    RFLinkError,
    TimeoutError,
    TransportError,
)
from rflink.messages.registry import DecodeResult, create_default_registry
from rflink.protocol.constants import NodeNumber, ProtocolConstants
from rflink.protocol.field_parser import FieldSet, parse_line

if TYPE_CHECKING:
    from rflink.messages.base import RFLinkMessage
    from rflink.messages.registry import MessageRegistry
    from rflink.models.config import BridgeConfiguration
    from rflink.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)

ReplyPredicate = Callable[[FieldSet], bool]


class BridgeState(Enum):
    """Gateway connection states."""

    DISCONNECTED = auto()
    """Transport closed or gateway not answering."""

    CONNECTING = auto()
    """Opening the transport and pinging the gateway."""

    CONNECTED = auto()
    """Gateway answered and lines are flowing."""

    DISCONNECTING = auto()
    """Closing the transport."""


class DeviceMessageListener(Protocol):
    """Receiver of decoded messages and bridge state changes."""

    def on_message(self, bridge: RFLinkBridge, message: RFLinkMessage) -> bool:
        """Handle a decoded message. Returns True if it was for this listener."""
        ...

    def bridge_status_changed(self, state: BridgeState) -> None:
        """React to the bridge changing state."""
        ...


class RFLinkBridge:
    """
    Connection to an RFLink gateway shared by all device sessions.

    Attributes:
        state: Current connection state.
        transport: The underlying line transport.
        registry: Message registry used to decode inbound lines.
    """

    def __init__(
        self,
        transport: AbstractTransport,
        registry: MessageRegistry | None = None,
        timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        max_retries: int = ProtocolConstants.MAX_RETRIES,
        ping_on_connect: bool = True,
    ) -> None:
        """
        Initialize the bridge.

        Args:
            transport: Transport layer for communication.
            registry: Message registry (default: all built-in variants).
            timeout: Timeout for gateway replies in seconds.
            max_retries: PING retries when connecting.
            ping_on_connect: Whether connect() waits for a PONG.
        """
        self._transport = transport
        self._registry = registry if registry is not None else create_default_registry()
        self._timeout = timeout
        self._max_retries = max_retries
        self._ping_on_connect = ping_on_connect
        self._state = BridgeState.DISCONNECTED
        self._listeners: list[DeviceMessageListener] = []
        self._write_lock = asyncio.Lock()
        self._reading = False
        self._waiters: list[tuple[ReplyPredicate, asyncio.Future[FieldSet]]] = []

    @classmethod
    def from_config(cls, config: BridgeConfiguration) -> RFLinkBridge:
        """
        Create a bridge on a serial port from its configuration.

        Args:
            config: Bridge configuration.

        Returns:
            Bridge using an AsyncSerialTransport.
        """
        from rflink.transport.serial_async import AsyncSerialTransport

        transport = AsyncSerialTransport(
            config.port,
            baudrate=config.baudrate,
            default_timeout=config.timeout,
        )
        return cls(
            transport,
            timeout=config.timeout,
            max_retries=config.max_retries,
            ping_on_connect=config.ping_on_connect,
        )

    @property
    def state(self) -> BridgeState:
        """Get the current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if the gateway is connected."""
        return self._state == BridgeState.CONNECTED

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def registry(self) -> MessageRegistry:
        """Get the message registry."""
        return self._registry

    @property
    def listeners(self) -> tuple[DeviceMessageListener, ...]:
        """Get the registered listeners."""
        return tuple(self._listeners)

    # ===== Listeners =====

    def register_listener(self, listener: DeviceMessageListener) -> None:
        """Register a listener for decoded messages and state changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_listener(self, listener: DeviceMessageListener) -> bool:
        """
        Remove a listener.

        Returns:
            True if the listener was removed, False if it was not registered.
        """
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    # ===== Connection =====

    async def connect(self) -> None:
        """
        Open the transport and check that the gateway answers.

        Sends `10;PING;` and waits for PONG, retrying up to max_retries
        times on timeout.

        Raises:
            ConnectionError: If the bridge is not disconnected.
            TimeoutError: If the gateway does not answer after all retries.
            TransportError: If the transport cannot be opened.
        """
        if self._state != BridgeState.DISCONNECTED:
            raise ConnectionError(f"Cannot connect: bridge is in {self._state.name} state")

        self._set_state(BridgeState.CONNECTING)
        logger.info("Connecting to RFLink gateway on %s", self._transport.port_name)

        try:
            if not self._transport.is_open:
                await self._transport.open()
            if self._ping_on_connect:
                await self._ping_with_retries()
        except Exception:
            self._set_state(BridgeState.DISCONNECTED)
            raise

        self._set_state(BridgeState.CONNECTED)
        logger.info("Connected to RFLink gateway on %s", self._transport.port_name)

    async def _ping_with_retries(self) -> None:
        last_exception: TimeoutError | None = None

        for attempt in range(self._max_retries + 1):
            try:
                if attempt > 0:
                    logger.debug("Ping attempt %d/%d", attempt + 1, self._max_retries + 1)
                    self._transport.discard_buffers()
                await self._transport.write_line(_control_line(ProtocolConstants.PING))
                await self._await_reply(lambda fields: fields.protocol == ProtocolConstants.PONG)
                return
            except TimeoutError as e:
                last_exception = e
                logger.warning("Ping timeout (attempt %d/%d)", attempt + 1, self._max_retries + 1)

        logger.error("Gateway did not answer after %d attempts", self._max_retries + 1)
        raise last_exception or TimeoutError("Ping timed out")

    async def disconnect(self) -> None:
        """
        Close the transport.

        Safe to call even if not connected.
        """
        if self._state == BridgeState.DISCONNECTED:
            return

        logger.info("Disconnecting from RFLink gateway on %s", self._transport.port_name)
        self._set_state(BridgeState.DISCONNECTING)
        try:
            await self._transport.close()
        finally:
            self._set_state(BridgeState.DISCONNECTED)

    def _set_state(self, state: BridgeState) -> None:
        if state == self._state:
            return
        self._state = state
        if state in (BridgeState.CONNECTED, BridgeState.DISCONNECTED):
            for listener in list(self._listeners):
                listener.bridge_status_changed(state)

    # ===== Inbound =====

    def handle_line(self, line: str) -> DecodeResult:
        """
        Decode one inbound line and dispatch it to every listener.

        Malformed and unsupported lines are logged and dropped.

        Args:
            line: Raw line as read from the transport.

        Returns:
            Outcome of decoding the line.
        """
        result, message = self._registry.decode_line(line)
        if message is None:
            logger.debug("Dropped line %r: %s", line, result.name)
            return result

        logger.debug("Decoded %r", message)
        for listener in list(self._listeners):
            try:
                listener.on_message(self, message)
            except RFLinkError:
                logger.exception("Listener failed to handle message from %s", message.device_id)
        return result

    async def run(self) -> None:
        """
        Process inbound lines until the bridge disconnects.

        Lines are handled strictly in arrival order. A read timeout only
        means there was no traffic. A transport failure disconnects the
        bridge.

        While running, this loop is the only reader of the transport.
        Replies awaited by request_version() are handed to the waiting
        request instead of being dispatched.

        Raises:
            ConnectionError: If the bridge is not connected or already running.
        """
        self._ensure_connected()
        if self._reading:
            raise ConnectionError("Inbound loop is already running")

        self._reading = True
        try:
            while self._state == BridgeState.CONNECTED:
                try:
                    line = await self._transport.read_line(self._timeout)
                except TimeoutError:
                    continue
                except TransportError as e:
                    logger.error("Lost connection to RFLink gateway: %s", e)
                    await self.disconnect()
                    break

                if not self._resolve_waiter(line):
                    self.handle_line(line)
        finally:
            self._reading = False
            for _, waiter in self._waiters:
                if not waiter.done():
                    waiter.set_exception(ConnectionError("Inbound loop stopped"))

    def _resolve_waiter(self, line: str) -> bool:
        """Hand a reply read by run() to the request waiting for it."""
        if not self._waiters:
            return False
        try:
            fields = parse_line(line)
        except MalformedFrameError:
            return False

        for predicate, waiter in self._waiters:
            if not waiter.done() and predicate(fields):
                waiter.set_result(fields)
                return True
        return False

    async def _exchange(self, line: str, predicate: ReplyPredicate) -> FieldSet:
        """
        Send a control line and wait for the matching reply.

        While run() is active it stays the only reader of the transport and
        passes the reply over; otherwise the reply is read directly.

        Raises:
            ConnectionError: If the bridge is not connected.
            TimeoutError: If no matching line arrives within the timeout.
        """
        if not self._reading:
            await self.send_line(line)
            return await self._await_reply(predicate)

        waiter: asyncio.Future[FieldSet] = asyncio.get_running_loop().create_future()
        entry = (predicate, waiter)
        self._waiters.append(entry)
        try:
            await self.send_line(line)
            return await asyncio.wait_for(waiter, self._timeout)
        except asyncio.TimeoutError:
            raise TimeoutError("No reply from gateway", timeout_seconds=self._timeout) from None
        finally:
            self._waiters.remove(entry)

    async def _await_reply(self, predicate: ReplyPredicate) -> FieldSet:
        """
        Read lines from the transport until one satisfies predicate.

        Other lines arriving meanwhile are dispatched normally.

        Raises:
            TimeoutError: If no matching line arrives within the timeout.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout

        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise TimeoutError("No reply from gateway", timeout_seconds=self._timeout)

            line = await self._transport.read_line(remaining)
            try:
                fields = parse_line(line)
            except MalformedFrameError:
                logger.debug("Ignoring malformed line while waiting for reply: %r", line)
                continue

            if predicate(fields):
                return fields
            self.handle_line(line)

    # ===== Outbound =====

    async def send_message(self, message: RFLinkMessage) -> None:
        """
        Send an encoded message to the gateway.

        Args:
            message: Encoded message.

        Raises:
            ConnectionError: If the bridge is not connected.
            TransportError: If the write fails.
        """
        await self.send_line(message.serialize())

    async def send_line(self, line: str) -> None:
        """
        Write one raw line to the gateway.

        Concurrent callers are serialized so lines never interleave.

        Raises:
            ConnectionError: If the bridge is not connected.
            TransportError: If the write fails.
        """
        self._ensure_connected()
        async with self._write_lock:
            logger.debug("Sending %r", line)
            await self._transport.write_line(line)

    async def request_version(self) -> dict[str, str]:
        """
        Ask the gateway for its firmware version.

        Returns:
            The VER, REV and BUILD fields of the reply.

        Raises:
            ConnectionError: If the bridge is not connected.
            TimeoutError: If the gateway does not answer.
        """
        fields = await self._exchange(_control_line(ProtocolConstants.VERSION), _is_version_reply)

        # The first token of the reply sits where the protocol name would be
        key, _, value = fields.protocol.partition(ProtocolConstants.VALUE_SEPARATOR)
        version = {key: value}
        version.update(fields.fields)
        logger.debug("Gateway version %s", version)
        return version

    def _ensure_connected(self) -> None:
        if self._state != BridgeState.CONNECTED:
            raise ConnectionError(f"Not connected (state: {self._state.name})")

    async def __aenter__(self) -> RFLinkBridge:
        """Async context manager entry."""
        if not self._transport.is_open:
            await self._transport.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - disconnect and close transport."""
        try:
            await self.disconnect()
        finally:
            if self._transport.is_open:
                await self._transport.close()

    def __repr__(self) -> str:
        return (
            f"RFLinkBridge(port={self._transport.port_name!r}, "
            f"state={self._state.name}, listeners={len(self._listeners)})"
        )


def _control_line(command: str) -> str:
    return (
        NodeNumber.TO_GATEWAY.value
        + ProtocolConstants.FIELD_DELIMITER
        + command
        + ProtocolConstants.FIELD_DELIMITER
    )


def _is_version_reply(fields: FieldSet) -> bool:
    return fields.is_event and fields.protocol.startswith("VER" + ProtocolConstants.VALUE_SEPARATOR)
