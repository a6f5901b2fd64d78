"""MIDI output transport."""
