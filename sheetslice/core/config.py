"""
Slicing configuration
Per-description importer settings and the project level defaults they fall back on
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping, Optional, Protocol, Tuple

from .data_structures import PivotPlacement
from .errors import ConfigurationError

CONFIG_VERSION = 1


class CustomPivotMode(Enum):
    TILEMAP = "tilemap"


class StillsSubdivision(Enum):
    """How still frames are enumerated when sprites are subdivided"""
    # Still count is multiplied by the sub-cell count; index i addresses effective cell i
    MULTIPLY_COUNT = "multiply_count"
    # Each still expands into its own sub-cells, named per still
    PER_CELL = "per_cell"


@dataclass(frozen=True)
class ProjectDefaults:
    """Project wide preferences used when a description has no stored settings"""
    create_animations: bool = True
    place_animations_in_subfolders: bool = True
    animation_subfolder_name_format: str = "Animation - {anim}"
    slice_secondary_textures: bool = False
    slice_unidentified_textures: bool = True
    format_file_names: bool = True
    log_level: str = "INFO"


class DefaultsProvider(Protocol):
    def project_defaults(self) -> ProjectDefaults:
        ...


@dataclass(frozen=True)
class SlicingConfig:
    """Importer settings for one sheet description"""
    create_animations: bool = True
    place_animations_in_subfolders: bool = True
    trim_individual_sprites: bool = False
    trim_alpha_threshold: float = 0.0
    slice_secondary_textures: bool = False
    slice_unidentified_textures: bool = True
    subdivide_sprites: bool = False
    subdivisions: Tuple[int, int] = (1, 1)
    pivot_placement: PivotPlacement = PivotPlacement.CENTER
    custom_pivot_mode: Any = CustomPivotMode.TILEMAP
    tilemap_grid_size: Tuple[float, float] = (1.0, 1.0)
    pixels_per_unit: float = 100.0
    format_file_names: bool = True
    animation_subfolder_name_format: str = "Animation - {anim}"
    stills_subdivision: StillsSubdivision = StillsSubdivision.MULTIPLY_COUNT

    @property
    def subdivision_counts(self) -> Tuple[int, int]:
        """(columns, rows) per frame; (1, 1) when subdivision is off"""
        if not self.subdivide_sprites:
            return 1, 1
        return int(self.subdivisions[0]), int(self.subdivisions[1])

    def validate(self, description_id: Optional[str] = None) -> "SlicingConfig":
        if not 0.0 <= self.trim_alpha_threshold <= 1.0:
            raise ConfigurationError(
                f"Trim alpha threshold must be within [0, 1], got {self.trim_alpha_threshold}",
                description_id,
            )
        if self.subdivide_sprites and min(self.subdivisions) < 1:
            raise ConfigurationError(
                f"Subdivisions must be at least 1x1, got {self.subdivisions[0]}x{self.subdivisions[1]}",
                description_id,
            )
        return self

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            data[f.name] = value
        data['version'] = CONFIG_VERSION
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SlicingConfig":
        """Read stored settings, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        try:
            if 'pivot_placement' in values:
                values['pivot_placement'] = PivotPlacement(values['pivot_placement'])
            if 'stills_subdivision' in values:
                values['stills_subdivision'] = StillsSubdivision(values['stills_subdivision'])
            if 'custom_pivot_mode' in values:
                values['custom_pivot_mode'] = CustomPivotMode(values['custom_pivot_mode'])
        except ValueError as exc:
            raise ConfigurationError(f"Invalid importer setting: {exc}") from exc
        for key in ('subdivisions', 'tilemap_grid_size'):
            if key in values:
                values[key] = tuple(values[key])
        return cls(**values)


# Settings that follow the project defaults for descriptions imported before versioning
_PROJECT_LEVEL_KEYS = (
    'create_animations',
    'place_animations_in_subfolders',
    'animation_subfolder_name_format',
    'slice_secondary_textures',
    'slice_unidentified_textures',
    'format_file_names',
)


def apply_project_defaults(config: SlicingConfig, defaults: ProjectDefaults) -> SlicingConfig:
    return replace(config, **{key: getattr(defaults, key) for key in _PROJECT_LEVEL_KEYS})


def migrate_config(stored: Optional[Mapping[str, Any]],
                   defaults_provider: DefaultsProvider) -> SlicingConfig:
    """
    Resolve the effective settings for a description

    Unversioned settings (nothing stored, or no 'version' key) take the project
    defaults for every project level key. Versioned settings are used as stored.

    Args:
        stored: Previously stored settings, if any
        defaults_provider: Source of the project defaults

    Returns:
        The resolved configuration
    """
    if stored and 'version' in stored:
        return SlicingConfig.from_dict(stored)

    config = SlicingConfig.from_dict(stored or {})
    return apply_project_defaults(config, defaults_provider.project_defaults())
