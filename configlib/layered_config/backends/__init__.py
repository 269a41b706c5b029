"""
__init__.py für backends Modul.
"""

from .base import ConfigBackend, Visitor
from .file_backend import FileBackend
from .memory_backend import MemoryBackend

__all__ = [
    "ConfigBackend",
    "Visitor",
    "FileBackend",
    "MemoryBackend",
]
