"""Control model.

A ControlDescriptor is the immutable line of a layout file; a
ControlState is the live control built from it, holding the current
value and the activation flag that gates MIDI output.
"""

import logging
from dataclasses import dataclass

from ..util.midi import is_data_value

logger = logging.getLogger('cceditor.controls')


@dataclass(frozen=True)
class ControlDescriptor:
    """Structural definition of one CC control."""

    cc_number: int
    label: str
    min_value: int = 0
    max_value: int = 127

    def __post_init__(self):
        if not is_data_value(self.cc_number):
            raise ValueError(f"CC number out of range: {self.cc_number}")
        if not (is_data_value(self.min_value) and is_data_value(self.max_value)):
            raise ValueError(f"Range out of bounds: {self.min_value}-{self.max_value}")
        if self.min_value > self.max_value:
            raise ValueError(f"Range minimum above maximum: {self.min_value}-{self.max_value}")

    @property
    def range_text(self) -> str:
        """Range in layout-file form, e.g. "0-127"."""
        return f"{self.min_value}-{self.max_value}"

    def clamp(self, value: int) -> int:
        """Clamp value into [min_value, max_value]."""
        return max(self.min_value, min(self.max_value, int(value)))


class ControlState:
    """Runtime state of a slider-type CC control.

    The value is clamped into the descriptor range on every write.
    set_value() is a plain state write used by preset loads and resets;
    user_change() is the user-driven path and is the only one that
    transmits on its own, and only while the control is active.
    """

    def __init__(self, descriptor: ControlDescriptor):
        self._descriptor = descriptor
        self._value = descriptor.min_value
        self._active = True

    def configure(self, descriptor: ControlDescriptor) -> None:
        """Rebind the control to a descriptor, re-clamping the value."""
        self._descriptor = descriptor
        self._value = descriptor.clamp(self._value)

    @property
    def descriptor(self) -> ControlDescriptor:
        return self._descriptor

    @property
    def cc_number(self) -> int:
        return self._descriptor.cc_number

    @property
    def label(self) -> str:
        return self._descriptor.label

    @property
    def tooltip(self) -> str:
        return f"CC# {self._descriptor.cc_number}"

    @property
    def value(self) -> int:
        return self._value

    @property
    def active(self) -> bool:
        return self._active

    def set_value(self, value: int) -> int:
        """Store a new value without transmitting it.

        Args:
            value: Requested value, any integer

        Returns:
            The value actually stored after clamping
        """
        self._value = self._descriptor.clamp(value)
        return self._value

    def set_active(self, active: bool) -> None:
        """Flip the activation flag. Never transmits."""
        self._active = bool(active)

    def user_change(self, value: int, channel, transport) -> bool:
        """Apply a value coming from the user and transmit it if active.

        Args:
            value: Requested value
            channel: MidiChannelContext read at send time
            transport: Object with send_cc(channel, cc_number, value)

        Returns:
            True if a message was handed to the transport
        """
        self.set_value(value)
        if not self._active:
            logger.debug(f"CC {self.cc_number} inactive, value {self._value} not sent")
            return False
        if transport is None:
            return False
        return bool(transport.send_cc(channel.value, self.cc_number, self._value))

    def __repr__(self) -> str:
        return (f"ControlState(cc={self.cc_number}, label={self.label!r}, "
                f"value={self._value}, active={self._active})")
