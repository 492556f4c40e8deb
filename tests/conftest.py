"""Shared pytest fixtures for sheetslice tests."""

import pytest

from sheetslice.core import SheetDescription, SlicingConfig
from sheetslice.utils import ImportLog, LogConfig


# =============================================================================
# Description Fixtures
# =============================================================================


def description_data(**overrides) -> dict:
    """On-disk style description data for a 4x2 sheet of 32px frames."""
    data = {
        "baseObjectName": "obj",
        "imageFile": "hero.png",
        "spriteWidth": 32,
        "spriteHeight": 32,
        "paddingWidth": 0,
        "paddingHeight": 0,
        "numColumns": 4,
        "numRows": 2,
        "animations": [],
        "materialData": [],
        "stills": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_description():
    """Factory building a SheetDescription from on-disk field overrides."""
    def factory(source_path: str = "sheets/hero.ssdata", **overrides) -> SheetDescription:
        return SheetDescription.from_dict(description_data(**overrides), source_path)
    return factory


@pytest.fixture
def walk_description(make_description) -> SheetDescription:
    """Two stills followed by a three frame walk."""
    return make_description(
        stills=[{"frame": 0, "rotation": 0}, {"frame": 1, "rotation": 0}],
        animations=[{
            "name": "walk", "startFrame": 2, "numFrames": 3,
            "frameRate": 10, "frameSkip": 0, "rotation": 90,
        }],
    )


@pytest.fixture
def config() -> SlicingConfig:
    """Defaults without name formatting, so names are easy to read."""
    return SlicingConfig(format_file_names=False)


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture
def log() -> ImportLog:
    """Log that records everything and echoes nothing."""
    return ImportLog(LogConfig(minimum_severity="VERBOSE", echo=False))
