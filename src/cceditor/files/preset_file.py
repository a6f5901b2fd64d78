"""Preset file reader and writer.

A preset stores a value and an activation flag per CC number:

    CC#;Value;Active
    74;100;1
    71;20;0

Presets written before activation existed have only two columns
(CC#;Value); those rows load as active. The reader tells the two apart
per line by the presence of a third field.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..errors import PresetFileError
from ..util.midi import is_data_value, parse_int

logger = logging.getLogger('cceditor.preset')

DELIMITER = ';'
HEADER_TOKEN = 'CC#'
HEADER = DELIMITER.join((HEADER_TOKEN, 'Value', 'Active'))
ACTIVE_FLAGS = {'1': True, '0': False}


@dataclass(frozen=True)
class PresetEntry:
    """One row of a preset file."""

    cc_number: int
    value: int
    active: bool = True


def is_header_line(line: str) -> bool:
    """Return True for a header row, e.g. one left mid-file by a migration."""
    first = line.split(DELIMITER, 1)[0].strip()
    return first.upper() == HEADER_TOKEN


def parse_preset_line(line: str) -> Optional[PresetEntry]:
    """Parse one data row.

    Args:
        line: Row without line terminator

    Returns:
        The entry, or None if the row was rejected
    """
    fields = line.split(DELIMITER)
    try:
        if len(fields) < 2:
            raise ValueError(f"expected at least 2 fields, got {len(fields)}")
        cc_number = parse_int(fields[0])
        value = parse_int(fields[1])
        active = True
        if len(fields) > 2:
            flag = fields[2].strip()
            if flag:
                if flag not in ACTIVE_FLAGS:
                    raise ValueError(f"invalid active flag '{flag}'")
                active = ACTIVE_FLAGS[flag]
    except ValueError as e:
        logger.warning(f"Error parsing MIDI preset line '{line}': {e}")
        return None

    if not (is_data_value(cc_number) and is_data_value(value)):
        logger.warning(f"Invalid data in preset line, skipping: {line}")
        return None
    return PresetEntry(cc_number, value, active)


def parse_preset(lines: Iterable[str]) -> Dict[int, PresetEntry]:
    """Decode preset rows into a mapping keyed by CC number.

    The first line is always treated as the header. Duplicate CC numbers
    keep the last row.
    """
    entries: Dict[int, PresetEntry] = {}
    iterator = iter(lines)
    if next(iterator, None) is None:
        return entries

    for raw in iterator:
        line = raw.rstrip('\n').replace('\r', '')
        if not line.strip():
            continue
        if is_header_line(line):
            logger.debug(f"Skipping header row: {line}")
            continue
        entry = parse_preset_line(line)
        if entry is not None:
            entries[entry.cc_number] = entry
    return entries


def read_preset(path: Union[str, Path]) -> Dict[int, PresetEntry]:
    """Read a preset file.

    Raises:
        PresetFileError: If the file cannot be opened or read
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
            entries = parse_preset(f)
    except OSError as e:
        logger.error(f"Could not open MIDI preset file {path}: {e}")
        raise PresetFileError(path, "Could not open MIDI preset file") from e
    logger.info(f"Read {len(entries)} entries from preset {path}")
    return entries


def format_preset_row(item) -> str:
    """Format a control (or PresetEntry) as a "cc;value;active" row."""
    flag = '1' if item.active else '0'
    return DELIMITER.join((str(item.cc_number), str(item.value), flag))


def write_preset(path: Union[str, Path], controls: Iterable) -> int:
    """Write a preset file with the three-column header.

    Args:
        path: Destination file
        controls: Items exposing cc_number, value and active, in the
            order they should be written

    Returns:
        Number of rows written

    Raises:
        PresetFileError: If the file cannot be created or written
    """
    path = Path(path)
    rows = 0
    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(HEADER + '\n')
            for item in controls:
                f.write(format_preset_row(item) + '\n')
                rows += 1
    except OSError as e:
        logger.error(f"Could not create/open MIDI preset file for writing {path}: {e}")
        raise PresetFileError(path, "Could not create/open MIDI preset file for writing") from e
    logger.info(f"Wrote {rows} rows to preset {path}")
    return rows
