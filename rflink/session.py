"""
Per-device session.

A DeviceSession binds one configured RFLink device to a bridge. Inbound
messages whose device id equals the configured one are projected onto
output channels and published. Commands from the host are encoded,
published as the new state and transmitted `repeats` times.

Example:
    >>> from rflink import DeviceClass, DeviceConfiguration, DeviceSession, OnOffType
    >>>
    >>> def publish(channel, state):
    ...     print(channel, state)
    >>>
    >>> async def switch_on(bridge):
    ...     config = DeviceConfiguration(device_id="NewKaku-00c142-1", repeats=3)
    ...     session = DeviceSession(config, DeviceClass.SWITCH, publish)
    ...     session.connect(bridge)
    ...     await session.handle_command("command", OnOffType.ON)
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Awaitable, Callable

from rflink.bridge import BridgeState
from rflink.exceptions import ConnectionError, TransportError
from rflink.models.types import RefreshType

if TYPE_CHECKING:
    from rflink.bridge import RFLinkBridge
    from rflink.messages.base import RFLinkMessage
    from rflink.messages.registry import MessageRegistry
    from rflink.models.config import DeviceClass, DeviceConfiguration
    from rflink.models.types import Command, State

# Module logger
logger = logging.getLogger(__name__)

StatePublisher = Callable[[str, "State"], None]
"""Callback receiving (channel, state) for every published output."""


class SessionStatus(Enum):
    """Availability of a device session."""

    ONLINE = auto()
    """Bridge connected, or a message from the device was seen."""

    OFFLINE_CONFIGURATION_ERROR = auto()
    """No device id configured."""

    OFFLINE_BRIDGE_UNAVAILABLE = auto()
    """No bridge, or the bridge is not connected."""


class RepeatFailurePolicy(Enum):
    """What to do when one transmission of a repeated command fails."""

    CONTINUE = auto()
    """Log the failure and keep sending the remaining repeats."""

    ABORT = auto()
    """Stop the remaining repeats and raise the failure."""


class DeviceSession:
    """
    Session for one configured device.

    Attributes:
        config: Device configuration.
        device_class: Class used to pick the outbound message variant.
        status: Current availability.
    """

    def __init__(
        self,
        config: DeviceConfiguration,
        device_class: DeviceClass,
        publisher: StatePublisher,
        registry: MessageRegistry | None = None,
        failure_policy: RepeatFailurePolicy = RepeatFailurePolicy.CONTINUE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the session.

        Args:
            config: Device configuration.
            device_class: Device class of the device.
            publisher: Callback receiving published channel states.
            registry: Message registry (default: the bridge's registry).
            failure_policy: Behavior when a repeat fails to send.
            sleep: Coroutine function used for the delay between repeats.
        """
        self._config = config
        self._device_class = device_class
        self._publisher = publisher
        self._registry = registry
        self._failure_policy = failure_policy
        self._sleep = sleep
        self._bridge: RFLinkBridge | None = None
        self._status = self._offline_status()

    @property
    def config(self) -> DeviceConfiguration:
        """Get the device configuration."""
        return self._config

    @property
    def device_class(self) -> DeviceClass:
        """Get the device class."""
        return self._device_class

    @property
    def status(self) -> SessionStatus:
        """Get the current availability."""
        return self._status

    @property
    def bridge(self) -> RFLinkBridge | None:
        """Get the bridge this session is attached to."""
        return self._bridge

    # ===== Lifecycle =====

    def connect(self, bridge: RFLinkBridge) -> None:
        """
        Attach this session to a bridge.

        A session without a device id stays offline and does not register.
        """
        if self._config.device_id is None:
            logger.warning("Device has no deviceId configured; staying offline")
            self._status = SessionStatus.OFFLINE_CONFIGURATION_ERROR
            return

        if self._bridge is not None:
            self.disconnect()

        self._bridge = bridge
        bridge.register_listener(self)
        logger.debug("Session %s attached to %r", self._config.device_id, bridge)
        self.bridge_status_changed(bridge.state)

    def disconnect(self) -> None:
        """Detach this session from its bridge."""
        if self._bridge is not None:
            self._bridge.unregister_listener(self)
            self._bridge = None
        self._status = self._offline_status()

    def bridge_status_changed(self, state: BridgeState) -> None:
        """Follow the bridge's connection state."""
        if self._config.device_id is None:
            self._status = SessionStatus.OFFLINE_CONFIGURATION_ERROR
        elif state == BridgeState.CONNECTED:
            self._status = SessionStatus.ONLINE
        else:
            self._status = SessionStatus.OFFLINE_BRIDGE_UNAVAILABLE

    def _offline_status(self) -> SessionStatus:
        if self._config.device_id is None:
            return SessionStatus.OFFLINE_CONFIGURATION_ERROR
        return SessionStatus.OFFLINE_BRIDGE_UNAVAILABLE

    # ===== Inbound =====

    def on_message(self, bridge: RFLinkBridge, message: RFLinkMessage) -> bool:
        """
        Publish a decoded message if it belongs to this device.

        Messages for other devices are ignored.

        Returns:
            True if the message matched this device.
        """
        if self._config.device_id is None or message.device_id != self._config.device_id:
            return False

        logger.debug("Message for %s: %r", self._config.device_id, message)
        self._status = SessionStatus.ONLINE
        self._publish(message)
        return True

    # ===== Outbound =====

    async def handle_command(self, channel: str, command: Command) -> int:
        """
        Send a command to the device.

        The commanded state is published before the first transmission.
        The line is then sent `repeats` times, waiting the configured delay
        before every repeat after the first.

        Args:
            channel: Channel the command was issued on.
            command: Typed command.

        Returns:
            Number of transmissions that succeeded.

        Raises:
            ConnectionError: If the session has no bridge.
            UnsupportedMessageTypeError: If the device class cannot send.
            UnsupportedCommandError: If the command has no mapping.
            ConfigurationError: If the device id cannot be split.
            TransportError: On a failed transmission with the ABORT policy.
        """
        if isinstance(command, RefreshType):
            logger.debug("Ignoring refresh for %s: devices cannot be polled", self._config.device_id)
            return 0

        bridge = self._bridge
        if bridge is None:
            raise ConnectionError(f"Session {self._config.device_id} has no bridge")

        registry = self._registry if self._registry is not None else bridge.registry
        message = registry.create_for_encoding(self._device_class)
        message.encode(self._config, channel, command)
        self._publish(message)

        policy = self._config.repeat_policy
        sent = 0
        for attempt in range(policy.count):
            if attempt > 0:
                await self._sleep(policy.delay_seconds)
            try:
                await bridge.send_message(message)
                sent += 1
            except (TransportError, ConnectionError) as e:
                logger.error(
                    "Failed to send %s (attempt %d/%d): %s",
                    self._config.device_id,
                    attempt + 1,
                    policy.count,
                    e,
                )
                if self._failure_policy is RepeatFailurePolicy.ABORT:
                    raise

        logger.debug("Sent %d/%d transmissions to %s", sent, policy.count, self._config.device_id)
        return sent

    def _publish(self, message: RFLinkMessage) -> None:
        for channel, state in message.get_outputs().items():
            self._publisher(channel, state)

    def __repr__(self) -> str:
        return (
            f"DeviceSession(device_id={self._config.device_id!r}, "
            f"class={self._device_class.value}, status={self._status.name})"
        )
