"""Layout and preset file formats."""
