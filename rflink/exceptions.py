"""
Exception hierarchy for rflink.

All exceptions inherit from RFLinkError, providing a clean hierarchy
for error handling. The design follows these principles:

1. Decode-time errors (malformed frames, unknown message types, bad values)
   are distinct from encode-time errors (unsupported commands)
2. Protocol errors carry the offending line or value for debugging
3. Transport and connection errors are separate from protocol errors
4. All exceptions provide meaningful error messages
"""

from __future__ import annotations

from collections.abc import Iterable


class RFLinkError(Exception):
    """
    Base exception for all rflink errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all rflink errors with a single except clause.
    """

    pass


class ProtocolError(RFLinkError):
    """
    Protocol-level error.

    Raised when a line or a message violates the RFLink protocol.
    """

    pass


class MalformedFrameError(ProtocolError):
    """
    Unparseable protocol line.

    Raised when a line cannot be split into its positional fields and
    KEY=VALUE tokens, such as:
    - Empty line
    - Unknown node number
    - Missing protocol name
    - Token without '=' or duplicate key
    """

    def __init__(self, message: str, *, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line

    def __str__(self) -> str:
        base = super().__str__()
        if self.line is not None:
            display = self.line[:60] + "..." if len(self.line) > 60 else self.line
            return f"{base} (line={display!r})"
        return base


class UnsupportedMessageTypeError(ProtocolError):
    """
    No registered message variant claims the frame.

    This happens routinely for broadcast traffic from device classes that
    are not modelled, so callers usually log it and move on.
    """

    def __init__(
        self,
        message: str,
        *,
        protocol: str | None = None,
        keys: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.protocol = protocol
        self.keys = tuple(keys)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.protocol:
            parts.append(f"protocol={self.protocol}")
        if self.keys:
            parts.append(f"keys={','.join(self.keys)}")
        return " ".join(parts)


class ConversionError(ProtocolError):
    """
    A raw field value could not be converted to a typed value.

    Raised by the conversion utilities. Message variants catch it while
    decoding and drop only the affected field.
    """

    def __init__(
        self,
        message: str,
        *,
        raw_value: str | None = None,
        kind: str | None = None,
    ) -> None:
        super().__init__(message)
        self.raw_value = raw_value
        self.kind = kind

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.kind:
            parts.append(f"kind={self.kind}")
        if self.raw_value is not None:
            parts.append(f"value={self.raw_value!r}")
        return " ".join(parts)


class UnsupportedCommandError(RFLinkError):
    """
    A command has no outbound mapping for a message variant.

    Always surfaced to the caller: the command is not sent.
    """

    def __init__(
        self,
        message: str,
        *,
        command: object | None = None,
        device_class: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.device_class = device_class

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.device_class:
            parts.append(f"device_class={self.device_class}")
        if self.command is not None:
            parts.append(f"command={self.command!r}")
        return " ".join(parts)


class ConfigurationError(RFLinkError):
    """
    Invalid device or bridge configuration.

    Raised when a configured device id cannot be split into protocol,
    ID and switch parts.
    """

    pass


class TimeoutError(RFLinkError):  # noqa: A001 - intentionally shadows builtin
    """
    Communication timeout.

    Raised by transports when no line arrives within the expected time.
    For inbound traffic this is simply absence of a message.
    """

    def __init__(
        self,
        message: str = "Communication timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class ConnectionError(RFLinkError):  # noqa: A001 - intentionally shadows builtin
    """
    Gateway connection error.

    Raised when:
    - The gateway does not answer a PING
    - A session issues a command without a connected bridge
    - The bridge is used in the wrong state
    """

    pass


class TransportError(RFLinkError):
    """
    Transport-level error.

    Raised for low-level transport issues:
    - Serial port errors
    - I/O errors
    - Writing to a closed transport
    """

    pass
