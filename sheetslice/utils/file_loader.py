"""
File Loader
Utilities for loading sheet description (.ssdata) files
"""

import glob
import json
import os
from typing import Dict, List, Optional

from ..core.data_structures import SheetDescription
from ..core.errors import ConfigurationError
from .diagnostics import ImportLog, resolve_log


def load_description(ssdata_path: str) -> SheetDescription:
    """
    Load a sheet description from a .ssdata JSON file

    Args:
        ssdata_path: Path to the .ssdata file

    Returns:
        The parsed description, identified by its path

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    try:
        with open(ssdata_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error loading sheet description: {e}", ssdata_path) from e
    return SheetDescription.from_dict(data, os.path.normpath(ssdata_path))


def find_description_files(directory: str) -> List[str]:
    """.ssdata files directly inside directory, sorted"""
    return sorted(glob.glob(os.path.join(directory, '*.ssdata')))


def load_descriptions(directory: str, log: Optional[ImportLog] = None,
                      errors: Optional[Dict[str, ConfigurationError]] = None) -> List[SheetDescription]:
    """
    Load every description in a directory, skipping files that fail to parse

    Failures are logged and, when errors is given, recorded in it by path.
    """
    log = resolve_log(log)
    descriptions = []
    for path in find_description_files(directory):
        log.verbose(f"Attempting to load .ssdata file from path \"{path}\"", category="resolve")
        try:
            descriptions.append(load_description(path))
        except ConfigurationError as e:
            log.error(str(e), category="resolve", description_id=path)
            if errors is not None:
                errors[os.path.normpath(path)] = e
    return descriptions
