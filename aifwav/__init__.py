"""Convert AIFF audio files to WAV, keeping instrument and loop metadata."""

__version__ = "0.1.0"