"""
Epilogue - An atmospheric EPUB reading companion.

This package keeps the reading "atmosphere" consistent across sessions:
- Background media, color overlay and ambient audio
- Typography and layout flow of the reader
- Named presets, plus an automatic session snapshot
- A library of recent books with reading progress
"""

__version__ = "0.1.0"

# Make key components available at package level
from epilogue.core import ApplicationPreferences, LibraryEntry, Preset
from epilogue.io import PersistenceBackend, PersistenceError

__all__ = [
    "ApplicationPreferences",
    "LibraryEntry",
    "PersistenceBackend",
    "PersistenceError",
    "Preset",
]
