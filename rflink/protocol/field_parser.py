"""
RFLink line parsing.

This module splits a raw protocol line into its positional fields and an
ordered set of KEY=VALUE tokens. Values are kept verbatim; each message
variant applies its own conversion semantics.

Line formats:

1. **Event lines** (gateway to host): node 20
   - Format: `20;<SEQ>;<Protocol>;KEY=VALUE;KEY=VALUE;...;`
   - Example: `20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;`
   - Control answers carry no tokens: `20;01;PONG;`

2. **Command lines** (host to gateway): node 10
   - Format: `10;<Protocol>;<ID>;[<SWITCH>;]<CMD>;`
   - Example: `10;NewKaku;00c142;1;ON;`
   - Positional ID, SWITCH and CMD are exposed under those keys, an
     all-digit command as SET_LEVEL
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from rflink.exceptions import MalformedFrameError
from rflink.protocol.constants import FieldKey, NodeNumber, ProtocolConstants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSet(Mapping[str, str]):
    """
    A parsed protocol line.

    Behaves as a read-only ordered mapping from field key to raw value.
    Keys are unique and appear in the order they were on the line.

    Attributes:
        node: Node number (direction) of the line.
        protocol: Protocol name, the primary discriminator.
        sequence: Gateway sequence counter (event lines only).
        fields: Ordered KEY=VALUE tokens.
        raw_line: The line as received, without terminator.
    """

    node: NodeNumber
    protocol: str
    sequence: str | None = None
    fields: dict[str, str] = field(default_factory=dict)
    raw_line: str = ""

    def __getitem__(self, key: str) -> str:
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def keys_present(self) -> frozenset[str]:
        """All keys on the line."""
        return frozenset(self.fields)

    @property
    def is_event(self) -> bool:
        """Check if this line came from the gateway."""
        return self.node == NodeNumber.FROM_GATEWAY

    def __repr__(self) -> str:
        tokens = ";".join(f"{k}={v}" for k, v in self.fields.items())
        return f"FieldSet({self.node.value}, {self.protocol!r}, {tokens})"


def split_tokens(line: str) -> list[str]:
    """
    Split a line into whitespace-trimmed tokens.

    The trailing empty token produced by the closing delimiter is dropped.

    Args:
        line: Line without terminator.

    Returns:
        List of tokens.
    """
    delimiter = ProtocolConstants.FIELD_DELIMITER
    if delimiter not in line and ProtocolConstants.ALT_FIELD_DELIMITER in line:
        delimiter = ProtocolConstants.ALT_FIELD_DELIMITER

    tokens = [token.strip() for token in line.split(delimiter)]
    if tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def parse_line(raw_line: str) -> FieldSet:
    """
    Parse a raw protocol line into a FieldSet.

    Args:
        raw_line: Line as read from the transport, with or without CR LF.

    Returns:
        Parsed FieldSet.

    Raises:
        MalformedFrameError: If the line is empty, has an unknown node
            number, lacks the protocol field, contains a token without
            '=' after the protocol (event lines) or repeats a key.

    Example:
        >>> fs = parse_line("20;2D;NewKaku;ID=00c142;SWITCH=1;CMD=ON;")
        >>> fs.protocol, fs["CMD"]
        ('NewKaku', 'ON')
    """
    line = raw_line.strip()
    if not line:
        raise MalformedFrameError("Empty line", line=raw_line)

    tokens = split_tokens(line)

    try:
        node = NodeNumber(tokens[0])
    except ValueError:
        raise MalformedFrameError(f"Unknown node number {tokens[0]!r}", line=line) from None

    if node == NodeNumber.FROM_GATEWAY:
        return _parse_event(tokens, line)
    return _parse_command(tokens, line)


def _parse_event(tokens: list[str], line: str) -> FieldSet:
    """Parse a `20;SEQ;Protocol;KEY=VALUE;...` line."""
    if len(tokens) < 3 or not tokens[2]:
        raise MalformedFrameError("Missing protocol field", line=line)

    sequence = tokens[1]
    protocol = tokens[2]
    fields: dict[str, str] = {}

    for token in tokens[3:]:
        key, sep, value = token.partition(ProtocolConstants.VALUE_SEPARATOR)
        key = key.strip()
        if not sep or not key:
            raise MalformedFrameError(f"Invalid token {token!r}", line=line)
        if key in fields:
            raise MalformedFrameError(f"Duplicate key {key!r}", line=line)
        fields[key] = value.strip()

    return FieldSet(
        node=NodeNumber.FROM_GATEWAY,
        protocol=protocol,
        sequence=sequence,
        fields=fields,
        raw_line=line,
    )


def _parse_command(tokens: list[str], line: str) -> FieldSet:
    """Parse a `10;Protocol;ID;[SWITCH;]CMD;` line."""
    if len(tokens) < 2 or not tokens[1]:
        raise MalformedFrameError("Missing protocol field", line=line)

    protocol = tokens[1]
    positional = tokens[2:]
    if len(positional) not in POSITIONAL_KEYS_BY_COUNT:
        raise MalformedFrameError(
            f"Too many fields in command line ({len(positional)})", line=line
        )

    keys = POSITIONAL_KEYS_BY_COUNT[len(positional)]
    fields: dict[str, str] = {}
    for key, value in zip(keys, positional):
        if not value:
            raise MalformedFrameError(f"Empty {key} field", line=line)
        if key == FieldKey.CMD and value.isdigit():
            key = FieldKey.SET_LEVEL
        fields[key] = value

    return FieldSet(
        node=NodeNumber.TO_GATEWAY,
        protocol=protocol,
        fields=fields,
        raw_line=line,
    )


# Positional keys of a command line, by number of fields after the protocol.
# The last field is always the command.
POSITIONAL_KEYS_BY_COUNT: dict[int, tuple[str, ...]] = {
    0: (),
    1: (FieldKey.CMD,),
    2: (FieldKey.ID, FieldKey.CMD),
    3: (FieldKey.ID, FieldKey.SWITCH, FieldKey.CMD),
}
