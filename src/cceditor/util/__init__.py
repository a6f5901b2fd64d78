"""Shared helpers: logging setup and MIDI message utilities."""
