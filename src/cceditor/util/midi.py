"""MIDI utility functions.

Control Change constants, range checks and message formatting.
"""

import re
from typing import Optional, Tuple


CONTROL_CHANGE = 0xB0
STATUS_MASK = 0xF0
CHANNEL_MASK = 0x0F

MIN_DATA_VALUE = 0
MAX_DATA_VALUE = 127
CHANNEL_COUNT = 16

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)


def is_data_value(value: int) -> bool:
    """Return True if value fits in a 7-bit MIDI data byte (0-127)."""
    return MIN_DATA_VALUE <= value <= MAX_DATA_VALUE


def is_channel(channel: int) -> bool:
    """Return True if channel is a wire channel (0-15)."""
    return 0 <= channel < CHANNEL_COUNT


def parse_int(text: str) -> int:
    """Parse a decimal field from a layout or preset file.

    Only an optional sign followed by ASCII digits is accepted;
    forms such as "1_0" or non-ASCII digits are rejected.

    Raises:
        ValueError: If text is not a plain decimal integer
    """
    text = text.strip()
    if not INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer '{text}'")
    return int(text)


def cc_message_bytes(channel: int, cc_number: int, value: int) -> bytes:
    """Build the three bytes of a Control Change message.

    Args:
        channel: Wire channel (0-15)
        cc_number: Controller number (0-127)
        value: Controller value (0-127)

    Returns:
        Status byte, controller number and value

    Raises:
        ValueError: If any argument is out of range
    """
    if not is_channel(channel):
        raise ValueError(f"MIDI channel out of range: {channel}")
    if not is_data_value(cc_number):
        raise ValueError(f"CC number out of range: {cc_number}")
    if not is_data_value(value):
        raise ValueError(f"CC value out of range: {value}")
    return bytes((CONTROL_CHANGE | channel, cc_number, value))


def parse_cc_message(msg_bytes: bytes) -> Optional[Tuple[int, int, int]]:
    """Split a Control Change message into (channel, cc_number, value).

    Args:
        msg_bytes: Raw MIDI message bytes

    Returns:
        Tuple of (channel, cc_number, value), or None for anything
        that is not a complete Control Change message
    """
    if len(msg_bytes) < 3:
        return None
    status = msg_bytes[0]
    if status & STATUS_MASK != CONTROL_CHANGE:
        return None
    return (status & CHANNEL_MASK, msg_bytes[1], msg_bytes[2])


def format_midi_message(msg_bytes: bytes) -> str:
    """Format a MIDI message for logging.

    Args:
        msg_bytes: Raw MIDI message bytes

    Returns:
        Human-readable string representation
    """
    parsed = parse_cc_message(msg_bytes)
    if parsed is None:
        return "UNKNOWN " + " ".join(f"{b:02X}" for b in msg_bytes)
    channel, cc_number, value = parsed
    return f"CONTROL_CHANGE ch={channel + 1} cc={cc_number} val={value}"
