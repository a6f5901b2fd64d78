"""
Unified actions for the CC editor.

Every user gesture (load a file, move a slider, pick a port...) maps to
exactly one method here. Each returns a result dict with 'success',
the session 'status' message and, on failure, an 'error' string, so the
web API and any other front end report outcomes the same way.
"""

import logging
from typing import Any, Dict, Optional

from ..errors import CCEditorError, InvalidPortError, PortNotOpenError
from ..files.layout_file import read_layout
from ..files.preset_file import read_preset, write_preset
from .state import LAYOUT_FILES, PRESET_FILES

logger = logging.getLogger(__name__)

PRESET_SUFFIX = '.csv'

# Error kinds carried in failed results
NOT_FOUND = 'not_found'
INVALID = 'invalid'
CONFLICT = 'conflict'
FAILED = 'failed'


class UnknownControlError(CCEditorError):
    """No control at the requested position."""


def _file_error_kind(error: CCEditorError) -> str:
    if isinstance(error.__cause__, FileNotFoundError):
        return NOT_FOUND
    return FAILED


class Actions:
    """Unified actions for CC editing."""

    def __init__(self, controller):
        """Initialize actions with controller reference.

        Args:
            controller: EditorController instance
        """
        self.controller = controller

    @property
    def bank(self):
        return self.controller.bank

    @property
    def output(self):
        return self.controller.midi_output

    @property
    def session(self):
        return self.controller.session

    def _ok(self, message: Optional[str] = None, **data) -> Dict[str, Any]:
        if message is not None:
            self.session.update_status(message)
        result = {'success': True, 'status': self.session.status}
        result.update(data)
        return result

    def _fail(self, message: str, kind: str = FAILED, **data) -> Dict[str, Any]:
        self.session.update_status(message)
        result = {'success': False, 'error': message, 'kind': kind,
                  'status': self.session.status}
        result.update(data)
        return result

    def _control_at(self, index: int):
        controls = self.bank.controls
        if not 0 <= index < len(controls):
            raise UnknownControlError(f"Unknown control: {index}")
        return controls[index]

    @staticmethod
    def _control_info(index: int, control) -> Dict[str, Any]:
        descriptor = control.descriptor
        return {
            'index': index,
            'cc': control.cc_number,
            'label': control.label,
            'min': descriptor.min_value,
            'max': descriptor.max_value,
            'range': descriptor.range_text,
            'value': control.value,
            'active': control.active,
            'tooltip': control.tooltip,
        }

    # --- Files ---

    def load_layout(self, path: str) -> Dict[str, Any]:
        """Load a layout file, replacing every control.

        Args:
            path: Layout file; relative paths use the last layout directory

        Returns:
            dict with 'success', 'status', 'count' and optional 'error'
        """
        try:
            resolved = self.session.resolve_path(LAYOUT_FILES, path)
            descriptors = read_layout(resolved, self.controller.layout_field_order)
            self.session.remember(LAYOUT_FILES, resolved)
            count = self.bank.load_layout(descriptors)
            if not count:
                return self._ok("Layout file is empty or contains no valid controls.",
                                count=0, path=str(resolved))
            return self._ok(f"Layout '{resolved.name}' loaded with {count} controls.",
                            count=count, path=str(resolved))
        except CCEditorError as e:
            return self._fail(f"Error: could not load layout file {path}",
                              kind=_file_error_kind(e), detail=str(e))
        except Exception as e:
            logger.error(f"Error loading layout {path}: {e}")
            return self._fail(str(e))

    def load_preset(self, path: str) -> Dict[str, Any]:
        """Load a preset file into the current controls.

        Returns:
            dict with 'success', 'status', 'updated' and optional 'error'
        """
        try:
            resolved = self.session.resolve_path(PRESET_FILES, path)
            entries = read_preset(resolved)
            self.session.remember(PRESET_FILES, resolved)
            if not entries:
                return self._ok("Preset file is empty or not valid.", updated=0, path=str(resolved))
            updated = self.bank.apply_preset(entries)
            return self._ok(f"Preset '{resolved.name}' loaded. {updated} controls updated.",
                            updated=updated, path=str(resolved))
        except CCEditorError as e:
            return self._fail(f"Error reading preset file: {path}",
                              kind=_file_error_kind(e), detail=str(e))
        except Exception as e:
            logger.error(f"Error loading preset {path}: {e}")
            return self._fail(str(e))

    def save_preset(self, path: str) -> Dict[str, Any]:
        """Save values and activation of all controls to a preset file.

        A missing .csv extension is appended.

        Returns:
            dict with 'success', 'status', 'rows', 'path' and optional 'error'
        """
        try:
            resolved = self.session.resolve_path(PRESET_FILES, path)
            if resolved.suffix.lower() != PRESET_SUFFIX:
                resolved = resolved.with_name(resolved.name + PRESET_SUFFIX)
            rows = write_preset(resolved, self.bank.serialize_preset())
            self.session.remember(PRESET_FILES, resolved)
            return self._ok(f"Preset saved to {resolved}", rows=rows, path=str(resolved))
        except CCEditorError as e:
            return self._fail(f"Error: could not create file {path}", detail=str(e))
        except Exception as e:
            logger.error(f"Error saving preset {path}: {e}")
            return self._fail(str(e))

    # --- MIDI transmission ---

    def send_all(self) -> Dict[str, Any]:
        """Send the value of every active control.

        Returns:
            dict with 'success', 'status', 'count' and optional 'error'
        """
        try:
            count = self.bank.send_all()
            return self._ok(f"Sent the values of {count} controls.", count=count)
        except PortNotOpenError:
            return self._fail("Error: no MIDI port is open to send the data.", kind=CONFLICT)
        except Exception as e:
            logger.error(f"Error sending all controls: {e}")
            return self._fail(str(e))

    def reset_all(self) -> Dict[str, Any]:
        """Reset every active control and send the reset value.

        Returns:
            dict with 'success', 'status', 'count' and optional 'error'
        """
        try:
            count = self.bank.reset_all()
            return self._ok(f"Reset {count} controls.", count=count)
        except PortNotOpenError:
            return self._fail("Error: no MIDI port is open to send the data.", kind=CONFLICT)
        except Exception as e:
            logger.error(f"Error resetting controls: {e}")
            return self._fail(str(e))

    # --- Controls ---

    def list_controls(self) -> Dict[str, Any]:
        """List all controls in layout order."""
        controls = [self._control_info(i, c) for i, c in enumerate(self.bank.controls)]
        return self._ok(controls=controls, state=self.bank.state.value)

    def set_value(self, index: int, value: int) -> Dict[str, Any]:
        """Move a control as the user would; sends the value if active.

        Args:
            index: Position of the control in the layout
            value: New value, clamped into the control's range

        Returns:
            dict with 'success', 'control', 'sent' and optional 'error'
        """
        try:
            control = self._control_at(index)
            sent = self.bank.move(control, int(value))
            return self._ok(control=self._control_info(index, control), sent=sent)
        except UnknownControlError as e:
            return self._fail(str(e), kind=NOT_FOUND)
        except (TypeError, ValueError) as e:
            return self._fail(f"Invalid value: {value}", kind=INVALID, detail=str(e))

    def set_active(self, index: int, active: bool) -> Dict[str, Any]:
        """Activate or deactivate a control.

        Returns:
            dict with 'success', 'control' and optional 'error'
        """
        try:
            control = self._control_at(index)
            self.bank.set_active(control, active)
            state = 'activated' if active else 'deactivated'
            return self._ok(f"CC# {control.cc_number} {state}.",
                            control=self._control_info(index, control))
        except UnknownControlError as e:
            return self._fail(str(e), kind=NOT_FOUND)

    # --- Port and channel ---

    def list_ports(self) -> Dict[str, Any]:
        """List MIDI output ports.

        Returns:
            dict with 'success', 'ports', 'open_port' and optional 'error'
        """
        ports = self.output.list_ports()
        if self.output.init_error:
            return self._fail(f"MIDI init error: {self.output.init_error}", ports=[])
        return self._ok(ports=ports, open_port=self.output.port_name)

    def select_port(self, index: Optional[int] = None, name: Optional[str] = None) -> Dict[str, Any]:
        """Close the current output port and open another.

        Args:
            index: Position in the port list
            name: Port name (used when index is None)

        Returns:
            dict with 'success', 'status', 'port' and optional 'error'
        """
        try:
            ports = self.output.list_ports()
            if self.output.init_error:
                return self._fail(f"MIDI init error: {self.output.init_error}")
            if not ports:
                return self._fail("No MIDI output ports found.")
            if index is not None:
                if not 0 <= int(index) < len(ports):
                    raise InvalidPortError(f"Invalid port index: {index}")
                name = ports[int(index)]
            if name is None:
                return self._fail("No MIDI port given.", kind=INVALID)
            if name not in ports:
                raise InvalidPortError(f"Unknown MIDI output port: {name}")

            self.output.close()
            if self.output.open(name):
                return self._ok(f"Opened MIDI port: {name}", port=name)
            return self._fail("Error: failed to open MIDI port.")
        except InvalidPortError as e:
            return self._fail(str(e), kind=INVALID)
        except Exception as e:
            logger.error(f"Error selecting MIDI port: {e}")
            return self._fail(str(e))

    def select_channel(self, number: int) -> Dict[str, Any]:
        """Select the output channel by display number (1-16)."""
        try:
            self.session.channel.select_number(number)
        except (TypeError, ValueError) as e:
            return self._fail(f"Invalid MIDI channel: {number}", kind=INVALID, detail=str(e))
        return self._ok(f"MIDI Channel set to {self.session.channel.number}",
                        channel=self.session.channel.number)

    def get_status(self) -> Dict[str, Any]:
        """Get session status."""
        return {
            'success': True,
            'status': self.session.status,
            'state': self.bank.state.value,
            'controls': len(self.bank),
            'active_controls': sum(1 for c in self.bank.controls if c.active),
            'channel': self.session.channel.number,
            'port': self.output.port_name,
            'port_open': self.output.is_open,
            'directories': {k: str(v) for k, v in self.session.last_directories.items()},
        }
