"""Data access layer for filestuff."""
