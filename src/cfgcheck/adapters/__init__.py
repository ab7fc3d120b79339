"""
Adapters layer for cfgcheck.

Contains the infrastructure implementations; currently the filesystem.
"""

from cfgcheck.adapters.fs import FileSystemAdapter

__all__ = [
    "FileSystemAdapter",
]
