"""Exceptions raised by the CC editor core.

Only conditions that abort a whole requested operation get an exception;
malformed lines in layout or preset files are logged and skipped instead.
"""


class CCEditorError(Exception):
    """Base class for all CC editor errors."""


class EditorFileError(CCEditorError):
    """A layout or preset file could not be opened, read or written."""

    def __init__(self, path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path
        self.message = message


class LayoutFileError(EditorFileError):
    """The layout file could not be opened or read."""


class PresetFileError(EditorFileError):
    """The preset file could not be opened for reading or writing."""


class PortNotOpenError(CCEditorError):
    """No MIDI output port is open to transmit to."""


class InvalidPortError(CCEditorError):
    """The requested MIDI output port does not exist."""


class ConfigError(CCEditorError):
    """The configuration file could not be parsed."""
