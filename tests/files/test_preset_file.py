"""Tests for files.preset_file."""

from __future__ import annotations

from pathlib import Path

import pytest

from cceditor.errors import PresetFileError
from cceditor.files.layout_file import parse_layout
from cceditor.files.preset_file import (
    HEADER,
    PresetEntry,
    is_header_line,
    parse_preset,
    parse_preset_line,
    read_preset,
    write_preset,
)
from cceditor.logic.bank import ControlBank
from cceditor.logic.channel import MidiChannelContext


def test_two_field_line_loads_as_active() -> None:
    assert parse_preset_line("10;64") == PresetEntry(10, 64, True)


def test_three_field_line_reads_active_flag() -> None:
    assert parse_preset_line("10;64;0") == PresetEntry(10, 64, False)
    assert parse_preset_line("10;64;1") == PresetEntry(10, 64, True)


def test_empty_third_field_defaults_to_active() -> None:
    assert parse_preset_line("10;64;") == PresetEntry(10, 64, True)


@pytest.mark.parametrize(
    "line",
    ["128;0", "10;128", "-1;5", "x;5", "10;y", "10", "10;64;yes", "1_0;5", "10;\u0665"],
)
def test_malformed_lines_are_rejected(line: str) -> None:
    assert parse_preset_line(line) is None


def test_mixed_legacy_and_current_rows() -> None:
    entries = parse_preset([
        "CC#;Value",
        "1;10",
        "7;100;0",
        "74;64;1",
    ])

    assert entries == {
        1: PresetEntry(1, 10, True),
        7: PresetEntry(7, 100, False),
        74: PresetEntry(74, 64, True),
    }


def test_header_rows_mid_file_are_skipped() -> None:
    entries = parse_preset([
        "CC#;Value",
        "1;10",
        "",
        "CC#;Value;Active",
        "cc#;value;active",
        "2;20;0",
    ])

    assert entries == {1: PresetEntry(1, 10, True), 2: PresetEntry(2, 20, False)}


def test_is_header_line() -> None:
    assert is_header_line(HEADER)
    assert is_header_line(" CC# ;Value")
    assert not is_header_line("10;64")


def test_duplicate_cc_last_wins() -> None:
    entries = parse_preset(["CC#;Value;Active", "5;1;1", "5;2;0"])

    assert entries == {5: PresetEntry(5, 2, False)}


def test_bad_rows_do_not_abort_the_load() -> None:
    entries = parse_preset(["CC#;Value;Active\r\n", "999;1;1\r\n", "oops\r\n", "3;4;1\r\n"])

    assert entries == {3: PresetEntry(3, 4, True)}


def test_header_only_and_empty_sources() -> None:
    assert parse_preset([]) == {}
    assert parse_preset([HEADER]) == {}


def test_write_preset_format(tmp_path: Path) -> None:
    path = tmp_path / "p.csv"

    rows = write_preset(path, [PresetEntry(74, 100, True), PresetEntry(7, 5, False)])

    assert rows == 2
    assert path.read_text(encoding="utf-8") == "CC#;Value;Active\n74;100;1\n7;5;0\n"


def test_write_to_unwritable_destination_fails(tmp_path: Path) -> None:
    with pytest.raises(PresetFileError):
        write_preset(tmp_path / "missing_dir" / "p.csv", [])


def test_read_missing_preset_fails(tmp_path: Path) -> None:
    with pytest.raises(PresetFileError):
        read_preset(tmp_path / "missing.csv")


def test_legacy_file_on_disk(tmp_path: Path) -> None:
    path = tmp_path / "old.csv"
    path.write_text("CC#;Value\n10;64\n", encoding="utf-8")

    assert read_preset(path) == {10: PresetEntry(10, 64, True)}


def test_save_then_load_reproduces_bank_state(tmp_path: Path) -> None:
    layout = parse_layout([
        "Description;CC#;Range",
        "Modulation;1;0-127",
        "Volume;7;10-100",
        "Cutoff;74;0-127",
    ])
    bank = ControlBank(MidiChannelContext())
    bank.load_layout(layout)
    bank.control_for(1).set_value(12)
    bank.control_for(7).set_value(99)
    bank.set_active(bank.control_for(7), False)
    bank.control_for(74).set_value(127)
    path = tmp_path / "round.csv"

    write_preset(path, bank.controls)
    fresh = ControlBank(MidiChannelContext())
    fresh.load_layout(layout)
    updated = fresh.apply_preset(read_preset(path))

    assert updated == 3
    assert [(c.value, c.active) for c in fresh.controls] == [
        (c.value, c.active) for c in bank.controls
    ]
