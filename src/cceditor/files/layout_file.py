"""Layout file reader.

A layout file is ';'-separated text. The first line is a header and is
ignored; every other line describes one slider:

    Description;CC#;Range
    Cutoff;74;0-127
    Resonance;71;0-100

Older layouts put the CC number first (CC#;Description;Range). That
order is only read when asked for explicitly with CC_FIRST.

Bad lines are logged and skipped. Only a file that cannot be opened
is an error.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..errors import LayoutFileError
from ..logic.controls import ControlDescriptor
from ..util.midi import is_data_value, parse_int

logger = logging.getLogger('cceditor.layout')

DELIMITER = ';'
RANGE_SEPARATOR = '-'

LABEL_FIRST = 'label_first'
CC_FIRST = 'cc_first'
FIELD_ORDERS = (LABEL_FIRST, CC_FIRST)


def parse_range(text: str) -> Tuple[int, int]:
    """Parse a "min-max" range field.

    Raises:
        ValueError: If the separator is missing or a bound is not a number
    """
    if RANGE_SEPARATOR not in text:
        raise ValueError(f"invalid range format '{text}', expected 'min-max'")
    low, high = text.split(RANGE_SEPARATOR, 1)
    return parse_int(low), parse_int(high)


def _split_fields(line: str, field_order: str) -> Tuple[str, str, str]:
    fields = line.split(DELIMITER)
    if len(fields) < 3:
        raise ValueError(f"expected 3 fields, got {len(fields)}")
    if field_order == CC_FIRST:
        cc_text, label, range_text = fields[:3]
    else:
        label, cc_text, range_text = fields[:3]
    return label, cc_text, range_text


def parse_layout_line(line: str, field_order: str = LABEL_FIRST) -> Optional[ControlDescriptor]:
    """Parse one data line into a descriptor.

    Args:
        line: Line without its trailing newline
        field_order: LABEL_FIRST or CC_FIRST

    Returns:
        The descriptor, or None if the line was rejected
    """
    try:
        label, cc_text, range_text = _split_fields(line, field_order)
        cc_number = parse_int(cc_text)
        min_value, max_value = parse_range(range_text)
    except ValueError as e:
        logger.warning(f"Error parsing layout line '{line}': {e}")
        return None

    if not (is_data_value(cc_number) and is_data_value(min_value)
            and is_data_value(max_value) and min_value <= max_value):
        logger.warning(f"Invalid data in layout line, skipping: {line}")
        return None

    return ControlDescriptor(cc_number, label, min_value, max_value)


def parse_layout(lines: Iterable[str], field_order: str = LABEL_FIRST) -> List[ControlDescriptor]:
    """Parse layout text into descriptors, in file order.

    Args:
        lines: Lines of the layout file, header first
        field_order: LABEL_FIRST (current) or CC_FIRST (legacy)

    Returns:
        Descriptors for every valid line; empty when there is no data
    """
    if field_order not in FIELD_ORDERS:
        raise ValueError(f"unknown layout field order: {field_order!r}")

    descriptors: List[ControlDescriptor] = []
    iterator = iter(lines)
    # Header
    if next(iterator, None) is None:
        return descriptors

    for raw in iterator:
        line = raw.rstrip('\n').replace('\r', '')
        if not line:
            continue
        descriptor = parse_layout_line(line, field_order)
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors


def read_layout(path: Union[str, Path], field_order: str = LABEL_FIRST) -> List[ControlDescriptor]:
    """Read and parse a layout file.

    Args:
        path: Layout file path
        field_order: LABEL_FIRST (current) or CC_FIRST (legacy)

    Returns:
        Descriptors for every valid line

    Raises:
        LayoutFileError: If the file cannot be opened or read
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
            descriptors = parse_layout(f, field_order)
    except OSError as e:
        logger.error(f"Could not open MIDI layout file {path}: {e}")
        raise LayoutFileError(path, "Could not open MIDI layout file") from e
    logger.info(f"Read {len(descriptors)} controls from layout {path}")
    return descriptors
