"""
Protocol layer for RFLink communication.

This module contains the low-level protocol handling:
- Node numbers, delimiters, field keys and channel names
- Line parsing into ordered key/value field sets
- Conversion of raw field values into typed values and back
"""

from rflink.protocol.constants import Channel, FieldKey, NodeNumber, ProtocolConstants
from rflink.protocol.conversions import (
    ValueKind,
    decode_signed_tenths,
    encode_signed_tenths,
    synonym,
    to_raw,
    to_typed,
)
from rflink.protocol.field_parser import FieldSet, parse_line, split_tokens

__all__ = [
    # Constants
    "NodeNumber",
    "ProtocolConstants",
    "FieldKey",
    "Channel",
    # Line parsing
    "FieldSet",
    "parse_line",
    "split_tokens",
    # Conversions
    "ValueKind",
    "to_typed",
    "to_raw",
    "synonym",
    "decode_signed_tenths",
    "encode_signed_tenths",
]
