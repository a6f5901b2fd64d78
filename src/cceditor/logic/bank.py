"""Control bank.

Owns the ordered ControlState instances of the loaded layout and the
CC-number index over them, and runs the bank-wide operations: layout
load, preset apply/snapshot, reset-all and send-all.
"""

import enum
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import PortNotOpenError
from ..files.preset_file import PresetEntry
from .channel import MidiChannelContext
from .controls import ControlDescriptor, ControlState

logger = logging.getLogger('cceditor.bank')

RESET_VALUE = 0


class BankState(enum.Enum):
    EMPTY = 'empty'
    LOADED = 'loaded'
    MODIFIED = 'modified'


class ControlBank:
    """Ordered collection of controls for the current layout."""

    def __init__(self, channel: MidiChannelContext, transport=None):
        """Initialize an empty bank.

        Args:
            channel: Session channel context, read at every emission
            transport: MIDI output with is_open and send_cc(channel, cc, value)
        """
        self.channel = channel
        self.transport = transport
        self._controls: List[ControlState] = []
        self._cc_index: Dict[int, ControlState] = {}
        self._state = BankState.EMPTY

    @property
    def state(self) -> BankState:
        return self._state

    @property
    def controls(self) -> Tuple[ControlState, ...]:
        """Controls in layout file order."""
        return tuple(self._controls)

    @property
    def cc_index(self) -> Dict[int, ControlState]:
        return dict(self._cc_index)

    def __len__(self) -> int:
        return len(self._controls)

    def __iter__(self):
        return iter(tuple(self._controls))

    def control_for(self, cc_number: int) -> Optional[ControlState]:
        """Return the control indexed under cc_number, if any."""
        return self._cc_index.get(cc_number)

    def load_layout(self, descriptors: Iterable[ControlDescriptor]) -> int:
        """Replace every control with fresh ones built from descriptors.

        Values of the previous layout are discarded even where CC numbers
        coincide.

        Args:
            descriptors: Layout descriptors in file order

        Returns:
            Number of controls now in the bank
        """
        self._controls = [ControlState(descriptor) for descriptor in descriptors]
        self._rebuild_index()
        self._state = BankState.LOADED
        logger.info(f"Layout loaded with {len(self._controls)} controls")
        return len(self._controls)

    def clear(self) -> None:
        """Drop all controls."""
        self._controls = []
        self._cc_index = {}
        self._state = BankState.EMPTY

    def _rebuild_index(self) -> None:
        # Later controls overwrite earlier ones with the same CC number
        index: Dict[int, ControlState] = {}
        for control in self._controls:
            if control.cc_number in index:
                logger.warning(f"Duplicate CC {control.cc_number} in layout, "
                               f"'{control.label}' takes the index entry")
            index[control.cc_number] = control
        self._cc_index = index

    def apply_preset(self, entries: Mapping[int, PresetEntry]) -> int:
        """Set values and activation from decoded preset entries.

        Entries for CC numbers not in the layout are ignored. Nothing is
        transmitted.

        Args:
            entries: Mapping of CC number to PresetEntry

        Returns:
            Number of controls updated
        """
        updated = 0
        for cc_number, entry in entries.items():
            control = self._cc_index.get(cc_number)
            if control is None:
                logger.debug(f"Preset CC {cc_number} not in layout, ignored")
                continue
            control.set_value(entry.value)
            control.set_active(entry.active)
            updated += 1
        if updated:
            self._state = BankState.MODIFIED
        return updated

    def serialize_preset(self) -> Tuple[PresetEntry, ...]:
        """Snapshot of (cc, value, active) for every control, in bank order."""
        return tuple(
            PresetEntry(control.cc_number, control.value, control.active)
            for control in self._controls
        )

    def set_active(self, control: ControlState, active: bool) -> None:
        """Enable or disable MIDI output for a control."""
        self._check_member(control)
        control.set_active(active)
        self._state = BankState.MODIFIED
        logger.info(f"CC {control.cc_number} {'activated' if active else 'deactivated'}")

    def move(self, control: ControlState, value: int) -> bool:
        """User-driven value change; transmits when the control is active.

        Returns:
            True if a message was sent
        """
        self._check_member(control)
        self._state = BankState.MODIFIED
        transport = self.transport if self._transport_open() else None
        return control.user_change(value, self.channel, transport)

    def reset_all(self) -> int:
        """Reset every active control to the reset value and transmit it.

        The reset value is clamped into each control's range. Inactive
        controls keep their value and are not transmitted.

        Returns:
            Number of reset values the transport accepted

        Raises:
            PortNotOpenError: If no output port is open; nothing changes
        """
        self._require_transport()
        count = 0
        changed = False
        for control in self._controls:
            if not control.active:
                continue
            value = control.set_value(RESET_VALUE)
            changed = True
            if self.transport.send_cc(self.channel.value, control.cc_number, value):
                count += 1
        if changed:
            self._state = BankState.MODIFIED
        logger.info(f"Reset {count} controls on channel {self.channel.number}")
        return count

    def send_all(self) -> int:
        """Transmit the current value of every active control in bank order.

        Returns:
            Number of messages sent

        Raises:
            PortNotOpenError: If no output port is open
        """
        self._require_transport()
        count = 0
        for control in self._controls:
            if not control.active:
                continue
            if self.transport.send_cc(self.channel.value, control.cc_number, control.value):
                count += 1
        logger.info(f"Sent {count} controls on channel {self.channel.number}")
        return count

    def _transport_open(self) -> bool:
        return self.transport is not None and self.transport.is_open

    def _require_transport(self) -> None:
        if not self._transport_open():
            raise PortNotOpenError("No MIDI output port is open")

    def _check_member(self, control: ControlState) -> None:
        if not any(control is member for member in self._controls):
            raise ValueError(f"Control CC {control.cc_number} is not part of the loaded layout")
