"""MIDI output to the controlled device.

Enumerates output ports, keeps at most one of them open and sends
Control Change messages through it.
"""

import mido
from typing import List, Optional

from ..errors import InvalidPortError
from ..util.logging import get_logger
from ..util.midi import cc_message_bytes, format_midi_message

logger = get_logger('midi_output')


class MidiOutput:
    """Handles MIDI output to an external device."""

    def __init__(self, port: Optional[mido.ports.BaseOutput] = None, port_name: Optional[str] = None):
        """Initialize MIDI output handler.

        Args:
            port: Already open output port (used by tests); None to open
                one later with open()
            port_name: Name reported for an injected port
        """
        self.port: Optional[mido.ports.BaseOutput] = port
        self.port_name: Optional[str] = port_name if port is not None else None
        self.init_error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.port is not None and not getattr(self.port, 'closed', False)

    def list_ports(self) -> List[str]:
        """Return the names of the available output ports.

        A backend failure (e.g. no rtmidi) is kept in init_error and
        reported as an empty list.
        """
        try:
            names = list(mido.get_output_names())
            self.init_error = None
            return names
        except Exception as e:
            self.init_error = str(e)
            logger.error(f"MIDI backend initialization error: {e}")
            return []

    def open(self, port_name: str) -> bool:
        """Open an output port by name.

        Opening while a port is already open fails; callers close first.

        Args:
            port_name: Name as returned by list_ports()

        Returns:
            True if the port was opened

        Raises:
            InvalidPortError: If no port has that name
        """
        if self.is_open:
            logger.warning(f"MIDI output port already open: {self.port_name}")
            return False

        available = self.list_ports()
        if port_name not in available:
            raise InvalidPortError(f"Invalid port name: {port_name}. Available: {available}")

        try:
            logger.info(f"Opening MIDI output port: {port_name}")
            self.port = mido.open_output(port_name)
            self.port_name = port_name
            logger.info("MIDI output port opened successfully")
            return True
        except Exception as e:
            logger.error(f"Failed to open MIDI output port: {e}")
            self.port = None
            self.port_name = None
            return False

    def send_cc(self, channel: int, cc_number: int, value: int) -> bool:
        """Send a Control Change message.

        Args:
            channel: Wire channel (0-15)
            cc_number: Controller number
            value: Controller value

        Returns:
            True if the message was handed to the port
        """
        if not self.is_open:
            logger.warning("MIDI output port not open")
            return False

        data = cc_message_bytes(channel, cc_number, value)
        try:
            self.port.send(mido.Message.from_bytes(list(data)))
            logger.debug(f"Sent MIDI: {format_midi_message(data)}")
            return True
        except Exception as e:
            logger.error(f"Failed to send MIDI message: {e}")
            return False

    def close(self):
        """Close the MIDI output port."""
        if self.port is not None:
            logger.info(f"Closing MIDI output port: {self.port_name}")
            self.port.close()
        self.port = None
        self.port_name = None
