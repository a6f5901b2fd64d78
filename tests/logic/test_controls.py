"""Tests for logic.controls and logic.channel."""

from __future__ import annotations

import pytest

from cceditor.logic.channel import MidiChannelContext
from cceditor.logic.controls import ControlDescriptor, ControlState


class RecordingTransport:
    def __init__(self) -> None:
        self.sent: list[tuple[int, int, int]] = []
        self.is_open = True

    def send_cc(self, channel: int, cc_number: int, value: int) -> bool:
        self.sent.append((channel, cc_number, value))
        return True


def test_descriptor_rejects_out_of_range_fields() -> None:
    with pytest.raises(ValueError):
        ControlDescriptor(128, "Too high")
    with pytest.raises(ValueError):
        ControlDescriptor(1, "Bad range", 0, 200)
    with pytest.raises(ValueError):
        ControlDescriptor(1, "Inverted", 100, 10)


def test_descriptor_range_text() -> None:
    assert ControlDescriptor(74, "Cutoff", 10, 100).range_text == "10-100"


def test_new_control_starts_at_min_and_active() -> None:
    control = ControlState(ControlDescriptor(74, "Cutoff", 20, 100))

    assert control.value == 20
    assert control.active is True
    assert control.tooltip == "CC# 74"


@pytest.mark.parametrize("requested", [-1000, -1, 0, 9, 10, 55, 90, 91, 127, 10_000])
def test_set_value_always_within_range(requested: int) -> None:
    control = ControlState(ControlDescriptor(7, "Volume", 10, 90))

    stored = control.set_value(requested)

    assert 10 <= control.value <= 90
    assert stored == control.value


def test_set_value_never_transmits() -> None:
    transport = RecordingTransport()
    control = ControlState(ControlDescriptor(7, "Volume"))

    control.set_value(64)
    control.set_active(False)
    control.set_active(True)

    assert transport.sent == []


def test_user_change_sends_on_current_channel() -> None:
    transport = RecordingTransport()
    channel = MidiChannelContext(0)
    control = ControlState(ControlDescriptor(74, "Cutoff"))

    channel.select(9)
    assert control.user_change(100, channel, transport) is True

    assert transport.sent == [(9, 74, 100)]


def test_user_change_on_inactive_control_updates_value_only() -> None:
    transport = RecordingTransport()
    control = ControlState(ControlDescriptor(74, "Cutoff"))
    control.set_active(False)

    assert control.user_change(100, MidiChannelContext(), transport) is False

    assert control.value == 100
    assert transport.sent == []


def test_configure_reclamps_value() -> None:
    control = ControlState(ControlDescriptor(74, "Cutoff"))
    control.set_value(120)

    control.configure(ControlDescriptor(74, "Cutoff", 0, 100))

    assert control.value == 100


def test_channel_context_bounds() -> None:
    channel = MidiChannelContext()
    assert channel.value == 0
    assert channel.number == 1

    channel.select_number(16)
    assert channel.value == 15

    with pytest.raises(ValueError):
        channel.select(16)
    with pytest.raises(ValueError):
        channel.select_number(0)
    assert channel.value == 15
