"""Central session state for the CC editor.

Holds what belongs to the running session rather than to any control:
the selected MIDI channel, the last directory used for each file type
and the latest status message. Nothing here is written to disk.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..logic.channel import MidiChannelContext

logger = logging.getLogger('cceditor.state')

LAYOUT_FILES = 'layout'
PRESET_FILES = 'preset'


class EditorSession:
    """Per-session state shared by all actions."""

    def __init__(self, channel: Optional[MidiChannelContext] = None,
                 directories: Optional[Dict[str, Union[str, Path]]] = None):
        self.channel = channel if channel is not None else MidiChannelContext()
        self.last_directories: Dict[str, Path] = {
            kind: Path(directory) for kind, directory in (directories or {}).items()
        }
        self.status = "Status: Initializing..."

    def update_status(self, message: str) -> str:
        self.status = message
        logger.info(f"Status: {message}")
        return message

    def resolve_path(self, kind: str, path: Union[str, Path]) -> Path:
        """Resolve a user-supplied path against the last directory for kind.

        Absolute paths are returned unchanged.
        """
        path = Path(path).expanduser()
        if path.is_absolute():
            return path
        base = self.last_directories.get(kind)
        return base / path if base is not None else path

    def remember(self, kind: str, path: Union[str, Path]) -> None:
        """Record the directory of a file that was just used."""
        self.last_directories[kind] = Path(path).parent
