"""Tests for configuration loading and controller setup in master.main."""

from __future__ import annotations

from pathlib import Path

import mido
import pytest

from cceditor.errors import ConfigError
from cceditor.master.main import EditorController, load_config
from cceditor.master.state import EditorSession, LAYOUT_FILES, PRESET_FILES
from cceditor.outputs.midi_output import MidiOutput


class DummyOutPort:
    def __init__(self, name: str) -> None:
        self.name = name
        self.closed = False

    def send(self, msg: mido.Message) -> None:
        pass

    def close(self) -> None:
        self.closed = True


def test_defaults_without_file(tmp_path: Path) -> None:
    config = load_config(str(tmp_path / "absent.yaml"))

    assert config["midi"]["channel"] == 1
    assert config["layout"]["field_order"] == "label_first"
    assert config["web"]["port"] == 5000


def test_yaml_overrides_merge_with_defaults(tmp_path: Path) -> None:
    path = tmp_path / "editor.yaml"
    path.write_text(
        "midi:\n  channel: 5\nlayout:\n  field_order: cc_first\npreset:\n",
        encoding="utf-8",
    )

    config = load_config(str(path))

    assert config["midi"] == {"output_port": None, "channel": 5}
    assert config["layout"]["field_order"] == "cc_first"
    assert config["preset"] == {"directory": None}


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("midi: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.parametrize("text", ["preset: presets\n", "midi: 5\n", "web: [1, 2]\n"])
def test_scalar_section_raises(tmp_path: Path, text: str) -> None:
    path = tmp_path / "editor.yaml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


def test_unknown_field_order_is_rejected() -> None:
    config = load_config(None)
    config["layout"]["field_order"] = "sideways"

    with pytest.raises(ConfigError):
        EditorController(config, midi_output=MidiOutput())


def test_setup_applies_channel_port_and_layout(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    layout = tmp_path / "legacy.csv"
    layout.write_text("CC#;Description;Range\n74;Cutoff;0-127\n", encoding="utf-8")
    monkeypatch.setattr(mido, "get_output_names", lambda: ["First", "Second"])
    monkeypatch.setattr(mido, "open_output", lambda name: DummyOutPort(name))
    config = load_config(None)
    config["midi"].update(channel=12, output_port="Second")
    config["layout"].update(file=str(layout), field_order="cc_first")
    config["preset"]["directory"] = str(tmp_path)

    controller = EditorController(config, midi_output=MidiOutput())
    controller.setup()

    assert controller.session.channel.number == 12
    assert controller.midi_output.port_name == "Second"
    assert [c.cc_number for c in controller.bank.controls] == [74]
    assert controller.session.last_directories[PRESET_FILES] == tmp_path
    assert controller.session.last_directories[LAYOUT_FILES] == tmp_path


def test_setup_without_ports_reports_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mido, "get_output_names", lambda: [])
    controller = EditorController(load_config(None), midi_output=MidiOutput())

    controller.setup()

    assert controller.session.status == "No MIDI output ports found."
    assert controller.midi_output.is_open is False


def test_stop_closes_port_and_clears_bank() -> None:
    port = DummyOutPort("A")
    controller = EditorController(load_config(None), midi_output=MidiOutput(port=port, port_name="A"))
    controller.running = True

    controller.stop()

    assert port.closed is True
    assert len(controller.bank) == 0


def test_session_path_resolution(tmp_path: Path) -> None:
    session = EditorSession(directories={PRESET_FILES: tmp_path})

    assert session.resolve_path(PRESET_FILES, "a.csv") == tmp_path / "a.csv"
    assert session.resolve_path(PRESET_FILES, tmp_path / "b.csv") == tmp_path / "b.csv"
    assert session.resolve_path(LAYOUT_FILES, "c.csv") == Path("c.csv")

    session.remember(LAYOUT_FILES, tmp_path / "sub" / "layout.csv")
    assert session.last_directories[LAYOUT_FILES] == tmp_path / "sub"
