"""Shared MIDI output channel.

One instance lives in the editor session and is handed to every
emission path; controls read it when they send, never cache it.
"""

from ..util.midi import CHANNEL_COUNT, is_channel


class MidiChannelContext:
    """The currently selected output channel (wire value 0-15)."""

    def __init__(self, channel: int = 0):
        self._channel = 0
        self.select(channel)

    @property
    def value(self) -> int:
        """Wire channel, 0-15."""
        return self._channel

    @property
    def number(self) -> int:
        """Display channel, 1-16."""
        return self._channel + 1

    def select(self, channel: int) -> None:
        """Select a wire channel.

        Args:
            channel: Channel 0-15

        Raises:
            ValueError: If channel is out of range
        """
        channel = int(channel)
        if not is_channel(channel):
            raise ValueError(f"MIDI channel must be 0-{CHANNEL_COUNT - 1}, got {channel}")
        self._channel = channel

    def select_number(self, number: int) -> None:
        """Select a channel by its display number (1-16)."""
        number = int(number)
        if not 1 <= number <= CHANNEL_COUNT:
            raise ValueError(f"MIDI channel must be 1-{CHANNEL_COUNT}, got {number}")
        self._channel = number - 1

    def __repr__(self) -> str:
        return f"MidiChannelContext(channel={self._channel})"
