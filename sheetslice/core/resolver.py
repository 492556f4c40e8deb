"""
Description resolution
Decides which description owns an image and checks a description's materials
"""

import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..utils.diagnostics import ImportLog, resolve_log
from .config import SlicingConfig
from .data_structures import MaterialRef, Role, SecondaryTexture, SheetDescription
from .errors import AmbiguityError, ConfigurationError, RoleCardinalityError

# Texture property names the secondary roles are bound to
SECONDARY_TEXTURE_NAMES = {
    Role.MASK: "_MaskTex",
    Role.NORMAL: "_NormalMap",
}


@dataclass(frozen=True)
class RoleReport:
    """Materials of a validated description, grouped by role"""
    primary: Optional[MaterialRef] = None
    mask: Optional[MaterialRef] = None
    normal: Optional[MaterialRef] = None
    unrecognized: Tuple[MaterialRef, ...] = field(default_factory=tuple)


def materials_with_role(description: SheetDescription, role: Role) -> List[MaterialRef]:
    return [material for material in description.materials if material.material_role is role]


def validate_material_roles(description: SheetDescription,
                            log: Optional[ImportLog] = None) -> RoleReport:
    """
    Check role cardinality of a description's materials

    Exactly one primary material is required unless imageFile names the main
    image; mask and normal maps are optional but unique. Materials with an
    unknown role are allowed and reported for manual setup.

    Raises:
        RoleCardinalityError: If a role has the wrong number of materials
    """
    log = resolve_log(log)
    primaries = materials_with_role(description, Role.PRIMARY)
    masks = materials_with_role(description, Role.MASK)
    normals = materials_with_role(description, Role.NORMAL)
    others = materials_with_role(description, Role.UNRECOGNIZED)

    if len(primaries) > 1 or (not primaries and not description.image_file):
        raise RoleCardinalityError(description.id, "albedo", len(primaries), "exactly 1")
    if len(masks) > 1:
        raise RoleCardinalityError(description.id, "mask", len(masks), "at most 1")
    if len(normals) > 1:
        raise RoleCardinalityError(description.id, "normal", len(normals), "at most 1")

    if others:
        log.warning(
            f"Data file {description.id} references {len(others)} materials of unknown purpose. "
            "These will need to be configured manually.",
            category="resolve", description_id=description.id,
            extra={"files": [material.file for material in others]},
        )

    report = RoleReport(
        primary=primaries[0] if primaries else None,
        mask=masks[0] if masks else None,
        normal=normals[0] if normals else None,
        unrecognized=tuple(others),
    )
    log.verbose(f"Asset has mask material texture: {report.mask is not None}",
                category="resolve", description_id=description.id)
    log.verbose(f"Asset has normal material texture: {report.normal is not None}",
                category="resolve", description_id=description.id)
    return report


def main_image_file(description: SheetDescription) -> str:
    """The texture animations are built from, relative to the description"""
    if description.image_file:
        return description.image_file
    primaries = materials_with_role(description, Role.PRIMARY)
    if len(primaries) == 1:
        return primaries[0].file
    raise ConfigurationError("Sheet description has no definitive main texture", description.id)


def textures_to_slice(description: SheetDescription, config: SlicingConfig,
                      log: Optional[ImportLog] = None) -> List[str]:
    """Files to slice, in import order: imageFile first, then the materials"""
    log = resolve_log(log)
    textures = []
    if description.image_file:
        textures.append(description.image_file)

    for material in description.materials:
        if material.is_secondary and not config.slice_secondary_textures:
            log.verbose(
                f"Asset \"{material.file}\" is a secondary texture and slicing of secondary "
                "textures is disabled; no action taken",
                category="resolve", description_id=description.id,
            )
            continue
        if material.is_unidentified and not config.slice_unidentified_textures:
            log.verbose(
                f"Asset \"{material.file}\" is an unidentified texture and slicing of "
                "unidentified textures is disabled; no action taken",
                category="resolve", description_id=description.id,
            )
            continue
        if material.file not in textures:
            textures.append(material.file)
    return textures


def secondary_textures(description: SheetDescription,
                       report: Optional[RoleReport] = None) -> List[SecondaryTexture]:
    """Mask then normal map, bound to the primary texture"""
    if report is None:
        report = validate_material_roles(description)
    paired = []
    for material in (report.mask, report.normal):
        if material is not None:
            paired.append(SecondaryTexture(
                name=SECONDARY_TEXTURE_NAMES[material.material_role],
                file=description.resolve_path(material.file),
            ))
    return paired


def secondary_textures_changed(new: Sequence[SecondaryTexture],
                               previous: Optional[Sequence[SecondaryTexture]]) -> bool:
    # Pairs are always built in the same order, so compare positionally
    if previous is None or len(new) != len(previous):
        return True
    return any(a != b for a, b in zip(new, previous))


class DescriptionResolver:
    """
    Finds the description owning an image and tracks descriptions already
    processed in the current batch

    The processed set is guarded by a lock so hosts may share one resolver
    across worker threads.
    """

    def __init__(self, log: Optional[ImportLog] = None):
        self.log = resolve_log(log)
        self._processed: Set[str] = set()
        self._lock = threading.Lock()

    def resolve_for_image(self, descriptions: Iterable[SheetDescription],
                          image_file_name: str) -> Optional[SheetDescription]:
        """
        Find the one description referencing an image

        Args:
            descriptions: Candidate descriptions
            image_file_name: Image file name as written in descriptions

        Returns:
            The matching description, or None if no description references the image

        Raises:
            AmbiguityError: If more than one description references the image
        """
        matches = {}
        for description in descriptions:
            if description.id in matches:
                continue
            if description.image_file == image_file_name:
                self.log.verbose(f"Data file {description.id} references image asset via imageFile field",
                                 category="resolve", description_id=description.id)
                matches[description.id] = description
            elif any(material.file == image_file_name for material in description.materials):
                self.log.verbose(f"Data file {description.id} references image asset via a material",
                                 category="resolve", description_id=description.id)
                matches[description.id] = description

        if len(matches) > 1:
            error = AmbiguityError(image_file_name, matches.keys())
            self.log.error(str(error), category="resolve", extra={"matches": list(matches)})
            raise error
        if not matches:
            self.log.verbose(f"Did not find a data file referencing {image_file_name}", category="resolve")
            return None

        description = next(iter(matches.values()))
        self.log.verbose(f"Found a matching data file at \"{description.id}\"",
                         category="resolve", description_id=description.id)
        return description

    def mark_processed(self, description_id: str):
        with self._lock:
            self._processed.add(description_id)

    def is_processed(self, description_id: str) -> bool:
        with self._lock:
            return description_id in self._processed

    def claim(self, description_id: str) -> bool:
        """Mark a description processed; False if it already was"""
        with self._lock:
            if description_id in self._processed:
                return False
            self._processed.add(description_id)
            return True

    def reset(self):
        with self._lock:
            self._processed.clear()
