"""MIDI Control-Change editor.

Loads a bank of CC sliders from a layout file, sends their values to a
MIDI output and stores them as presets.
"""

__version__ = "0.6.0"
