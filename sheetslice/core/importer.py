"""
Sheet importer
Runs resolution, slicing and curve derivation for descriptions touched by an import
"""

import os
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..utils.diagnostics import ImportLog, resolve_log
from .animation_curves import clip_asset_path, derive_curves
from .config import SlicingConfig
from .data_structures import AnimationFrameCurve, FrameSlice, SecondaryTexture, SheetDescription
from .errors import ConfigurationError, SheetSliceError
from .resolver import (
    DescriptionResolver,
    main_image_file,
    secondary_textures,
    secondary_textures_changed,
    textures_to_slice,
    validate_material_roles,
)
from .slicer import SliceSetResult, slice_image
from .texture import PixelBuffer, probe_image_size

DESCRIPTION_EXTENSION = ".ssdata"


@dataclass(frozen=True)
class TextureState:
    """What the host currently stores for one texture"""
    slices: Tuple[FrameSlice, ...] = ()
    was_multiple: bool = True
    secondary_textures: Optional[Tuple[SecondaryTexture, ...]] = None


@dataclass
class SheetImportResult:
    description_id: str
    textures: Dict[str, SliceSetResult] = field(default_factory=dict)
    main_image: Optional[str] = None
    secondary_textures: List[SecondaryTexture] = field(default_factory=list)
    secondary_changed: bool = False
    clips: List[AnimationFrameCurve] = field(default_factory=list)
    clip_paths: Dict[str, str] = field(default_factory=dict)

    @property
    def changed_textures(self) -> List[str]:
        return [path for path, result in self.textures.items() if result.changed]

    def summary(self) -> str:
        message = f"Import of assets referenced in \"{self.description_id}\" completed successfully. "
        if self.secondary_textures:
            message += f"Configured {len(self.secondary_textures)} secondary textures. "
        if self.clips:
            message += f"Created or updated {len(self.clips)} animation clips. "
        return message.strip()


@dataclass
class BatchResult:
    results: Dict[str, SheetImportResult] = field(default_factory=dict)
    errors: Dict[str, SheetSliceError] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class SheetImporter:
    """Imports sheet descriptions using one set of slicing settings"""

    def __init__(self, config: SlicingConfig,
                 pixel_source: Optional[Callable[[str], PixelBuffer]] = None,
                 log: Optional[ImportLog] = None,
                 resolver: Optional[DescriptionResolver] = None,
                 size_source: Optional[Callable[[str], Tuple[int, int]]] = probe_image_size):
        self.config = config
        self.pixel_source = pixel_source
        self.size_source = size_source
        self.log = resolve_log(log)
        self.resolver = resolver or DescriptionResolver(self.log)

    def _pixels_for(self, description: SheetDescription, image_path: str) -> Optional[PixelBuffer]:
        if not self.config.trim_individual_sprites:
            return None
        if self.pixel_source is None:
            raise ConfigurationError("Trimming is enabled but no pixel source is configured", description.id)
        try:
            return self.pixel_source(image_path)
        except (OSError, ValueError, RuntimeError) as exc:
            raise ConfigurationError(f"Could not read pixels of {image_path}: {exc}", description.id) from exc

    def _size_for(self, image_path: str, pixels: Optional[PixelBuffer]) -> Optional[Tuple[int, int]]:
        if pixels is not None:
            return pixels.size
        if self.size_source is None:
            return None
        width, height = self.size_source(image_path)
        # (0, 0) means the texture could not be read
        return (width, height) if width > 0 and height > 0 else None

    def import_description(self, description: SheetDescription,
                           previous: Optional[Mapping[str, TextureState]] = None) -> SheetImportResult:
        """
        Slice every texture of a description and derive its animation curves

        Args:
            description: Sheet description
            previous: Stored state keyed by resolved texture path

        Returns:
            SheetImportResult for the description
        """
        previous = previous or {}
        self.config.validate(description.id)
        report = validate_material_roles(description, self.log)
        result = SheetImportResult(description_id=description.id)

        for texture in textures_to_slice(description, self.config, self.log):
            path = description.resolve_path(texture)
            state = previous.get(path)
            pixels = self._pixels_for(description, path)
            result.textures[path] = slice_image(
                description, path, self.config,
                pixels=pixels,
                previous=state.slices if state else None,
                was_multiple=state.was_multiple if state else True,
                texture_size=self._size_for(path, pixels),
                log=self.log,
            )

        result.main_image = description.resolve_path(main_image_file(description))
        if description.materials:
            result.secondary_textures = secondary_textures(description, report)
            state = previous.get(result.main_image)
            result.secondary_changed = secondary_textures_changed(
                result.secondary_textures, state.secondary_textures if state else None
            )
            if result.secondary_changed:
                self.log.verbose("A change has occurred in the secondary textures",
                                 category="texture", description_id=description.id)

        if self.config.create_animations and description.animations:
            primary = result.textures[result.main_image]
            result.clips = derive_curves(description, primary.slices, self.config, self.log)
            result.clip_paths = {
                curve.clip_name: clip_asset_path(description, curve, self.config)
                for curve in result.clips
            }

        self.log.info(result.summary(), category="general", description_id=description.id)
        return result

    def import_batch(self, changed_paths: Iterable[str], descriptions: Iterable[SheetDescription],
                     previous: Optional[Mapping[str, TextureState]] = None) -> BatchResult:
        """
        Process every description touched by a set of changed files

        Description files are matched by id; images are matched against the
        descriptions in their own directory. Each description is processed
        once per batch, and a failure only affects its own description.
        """
        catalog = {os.path.normpath(d.id): d for d in descriptions}
        batch = BatchResult()

        for path in changed_paths:
            path = os.path.normpath(path)
            try:
                description = self._description_for(path, catalog)
            except SheetSliceError as exc:
                self.log.error(str(exc), category="resolve")
                batch.errors[path] = exc
                continue

            if description is None:
                continue

            if not self.resolver.claim(description.id):
                self.log.verbose(
                    f"Spritesheet at path \"{description.id}\" has already been processed "
                    "in this import operation; skipping",
                    category="general", description_id=description.id,
                )
                batch.skipped.append(path)
                continue

            try:
                batch.results[description.id] = self.import_description(description, previous)
            except SheetSliceError as exc:
                self.log.error(str(exc), category="general", description_id=description.id)
                batch.errors[description.id] = exc

        return batch

    def _description_for(self, path: str,
                         catalog: Mapping[str, SheetDescription]) -> Optional[SheetDescription]:
        if path.endswith(DESCRIPTION_EXTENSION):
            return catalog.get(path)

        directory, file_name = os.path.split(path)
        siblings = [d for key, d in catalog.items() if os.path.dirname(key) == directory]
        self.log.verbose(
            f"There are {len(siblings)} {DESCRIPTION_EXTENSION} files in the image asset directory",
            category="resolve",
        )
        return self.resolver.resolve_for_image(siblings, file_name)
