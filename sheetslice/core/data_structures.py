"""
Data structures for sheetslice
Defines the geometry types, the parsed sheet description and the derived slices
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class IntRect:
    """Integer pixel rectangle, origin at the bottom left"""
    x: int
    y: int
    w: int
    h: int

    @property
    def x_max(self) -> int:
        return self.x + self.w

    @property
    def y_max(self) -> int:
        return self.y + self.h

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def contains(self, other: "IntRect") -> bool:
        return (
            other.x >= self.x and other.y >= self.y
            and other.x_max <= self.x_max and other.y_max <= self.y_max
        )

    def to_rect(self) -> "Rect":
        return Rect(float(self.x), float(self.y), float(self.w), float(self.h))


@dataclass(frozen=True)
class Rect:
    """Float rectangle as stored in sprite metadata"""
    x: float
    y: float
    w: float
    h: float

    @property
    def x_max(self) -> float:
        return self.x + self.w

    @property
    def y_max(self) -> float:
        return self.y + self.h

    def to_int_rect(self) -> IntRect:
        # Truncates like a plain int cast; every rect built here is integer valued
        return IntRect(int(self.x), int(self.y), int(self.w), int(self.h))


class Role(Enum):
    PRIMARY = "albedo"
    MASK = "mask_unity"
    NORMAL = "normal_unity"
    UNRECOGNIZED = "unrecognized"


_ROLE_NAMES = {
    "albedo": Role.PRIMARY,
    "mask_unity": Role.MASK,
    "normal_unity": Role.NORMAL,
}


def parse_role(raw: Optional[str]) -> Role:
    """Map a raw role string to a Role; unknown strings are UNRECOGNIZED"""
    if not raw:
        return Role.UNRECOGNIZED
    return _ROLE_NAMES.get(raw, Role.UNRECOGNIZED)


@dataclass(frozen=True)
class MaterialRef:
    """A texture file listed in the description's materialData"""
    name: str
    file: str
    role: str = ""

    @property
    def material_role(self) -> Role:
        return parse_role(self.role)

    @property
    def is_secondary(self) -> bool:
        return self.material_role in (Role.MASK, Role.NORMAL)

    @property
    def is_unidentified(self) -> bool:
        return self.material_role is Role.UNRECOGNIZED


@dataclass(frozen=True)
class AnimationDef:
    """Animation information"""
    name: str
    start_frame: int
    num_frames: int
    frame_rate: float
    frame_skip: int = 0
    rotation: float = 0.0

    @property
    def end_frame(self) -> int:
        """One past the last source frame"""
        return self.start_frame + self.num_frames


@dataclass(frozen=True)
class StillDef:
    frame: int
    rotation: float = 0.0


def _require_int(data: Dict[str, Any], key: str, source: str, minimum: int = 0,
                 default: Optional[int] = None) -> int:
    value = data.get(key, default)
    if value is None:
        raise ConfigurationError(f"Missing required field '{key}'", source)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise ConfigurationError(f"Field '{key}' must be an integer, got {value!r}", source)
    value = int(value)
    if value < minimum:
        raise ConfigurationError(f"Field '{key}' must be >= {minimum}, got {value}", source)
    return value


def _require_number(data: Dict[str, Any], key: str, source: str,
                    default: Optional[float] = None) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"Field '{key}' must be a number, got {value!r}", source)
    return float(value)


def _require_list(data: Dict[str, Any], key: str, source: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f"Field '{key}' must be a list", source)
    for entry in value:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Entries of '{key}' must be objects", source)
    return value


@dataclass(frozen=True)
class SheetDescription:
    """One parsed sprite sheet description; identity is its source path"""
    id: str
    base_name: str
    frame_width: int
    frame_height: int
    num_columns: int
    num_rows: int
    padding_width: int = 0
    padding_height: int = 0
    image_file: Optional[str] = None
    materials: Tuple[MaterialRef, ...] = field(default_factory=tuple)
    animations: Tuple[AnimationDef, ...] = field(default_factory=tuple)
    stills: Tuple[StillDef, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source_path: str) -> "SheetDescription":
        """
        Build a description from the decoded .ssdata JSON object

        Args:
            data: Decoded JSON object using the on-disk field names
            source_path: Path of the .ssdata file, used as identity

        Returns:
            The parsed description

        Raises:
            ConfigurationError: If any field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Sheet description must be a JSON object", source_path)

        base_name = data.get('baseObjectName')
        if not isinstance(base_name, str) or not base_name:
            raise ConfigurationError("Field 'baseObjectName' must be a non-empty string", source_path)

        image_file = data.get('imageFile') or None
        if image_file is not None and not isinstance(image_file, str):
            raise ConfigurationError("Field 'imageFile' must be a string", source_path)

        materials = tuple(
            MaterialRef(
                name=str(entry.get('name') or ''),
                file=str(entry.get('file') or ''),
                role=str(entry.get('role') or ''),
            )
            for entry in _require_list(data, 'materialData', source_path)
        )
        for material in materials:
            if not material.file:
                raise ConfigurationError(
                    f"Material '{material.name}' does not name a file", source_path
                )

        animations = []
        for entry in _require_list(data, 'animations', source_path):
            name = entry.get('name')
            if not isinstance(name, str) or not name:
                raise ConfigurationError("Every animation needs a name", source_path)
            frame_rate = _require_number(entry, 'frameRate', source_path)
            if frame_rate <= 0:
                raise ConfigurationError(
                    f"Animation '{name}' has non-positive frame rate {frame_rate:g}", source_path
                )
            animations.append(AnimationDef(
                name=name,
                start_frame=_require_int(entry, 'startFrame', source_path),
                num_frames=_require_int(entry, 'numFrames', source_path, minimum=1),
                frame_rate=frame_rate,
                frame_skip=_require_int(entry, 'frameSkip', source_path, default=0),
                rotation=_require_number(entry, 'rotation', source_path, default=0.0),
            ))

        stills = tuple(
            StillDef(
                frame=_require_int(entry, 'frame', source_path),
                rotation=_require_number(entry, 'rotation', source_path, default=0.0),
            )
            for entry in _require_list(data, 'stills', source_path)
        )

        return cls(
            id=source_path,
            base_name=base_name,
            image_file=image_file,
            frame_width=_require_int(data, 'spriteWidth', source_path),
            frame_height=_require_int(data, 'spriteHeight', source_path),
            padding_width=_require_int(data, 'paddingWidth', source_path, default=0),
            padding_height=_require_int(data, 'paddingHeight', source_path, default=0),
            num_columns=_require_int(data, 'numColumns', source_path),
            num_rows=_require_int(data, 'numRows', source_path),
            materials=materials,
            animations=tuple(animations),
            stills=stills,
        )

    @property
    def directory(self) -> str:
        return os.path.dirname(self.id)

    @property
    def frame_count(self) -> int:
        return self.num_columns * self.num_rows

    def resolve_path(self, file: str) -> str:
        """Image paths in a description are relative to the description file"""
        return os.path.normpath(os.path.join(self.directory, file))

    def references(self, image_file_name: str) -> bool:
        if self.image_file == image_file_name:
            return True
        return any(material.file == image_file_name for material in self.materials)

    def max_frame_index(self) -> int:
        """Largest frame index referenced by any still or animation, -1 if none"""
        highest = len(self.stills) - 1
        for animation in self.animations:
            highest = max(highest, animation.end_frame - 1)
        return highest


class PivotPlacement(Enum):
    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP_CENTER = "top_center"
    TOP_RIGHT = "top_right"
    LEFT_CENTER = "left_center"
    RIGHT_CENTER = "right_center"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_CENTER = "bottom_center"
    BOTTOM_RIGHT = "bottom_right"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FrameSlice:
    """One named sub-rectangle of a sheet texture"""
    name: str
    rect: Rect
    pivot: Tuple[float, float] = (0.5, 0.5)
    alignment: PivotPlacement = PivotPlacement.CENTER
    source_frame_index: int = 0

    def same_geometry(self, other: "FrameSlice") -> bool:
        """Structural comparison used for change detection"""
        return (
            self.name == other.name
            and self.rect == other.rect
            and tuple(self.pivot) == tuple(other.pivot)
            and self.alignment == other.alignment
        )


@dataclass(frozen=True)
class CurveSample:
    time: float
    slice_index: int


@dataclass(frozen=True)
class AnimationFrameCurve:
    """Time keyed slice references for one animation clip"""
    clip_name: str
    frame_rate: float
    samples: Tuple[CurveSample, ...]
    animation_name: str = ""
    rotation: float = 0.0
    grouped: bool = False

    @property
    def duration(self) -> float:
        """Time of the last sample, 0 for an empty curve"""
        return self.samples[-1].time if self.samples else 0.0


@dataclass(frozen=True)
class SecondaryTexture:
    """A mask or normal map paired to the primary texture"""
    name: str
    file: str
