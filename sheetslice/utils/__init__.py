"""
Utils module for sheetslice
Contains utility functions for file loading, settings and diagnostics
"""

from .diagnostics import ImportLog, LogConfig
from .file_loader import load_description, load_descriptions, find_description_files
from .settings import SettingsManager

__all__ = [
    'ImportLog',
    'LogConfig',
    'load_description',
    'load_descriptions',
    'find_description_files',
    'SettingsManager',
]
