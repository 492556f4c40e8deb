"""
Core module for sheetslice
Contains data structures, slicing geometry and description resolution
"""

from .data_structures import (
    IntRect,
    Rect,
    Role,
    parse_role,
    MaterialRef,
    AnimationDef,
    StillDef,
    SheetDescription,
    PivotPlacement,
    FrameSlice,
    CurveSample,
    AnimationFrameCurve,
    SecondaryTexture,
)
from .errors import (
    SheetSliceError,
    ConfigurationError,
    RoleCardinalityError,
    AmbiguityError,
    OutOfRangeError,
)
from .config import (
    CustomPivotMode,
    StillsSubdivision,
    ProjectDefaults,
    SlicingConfig,
    migrate_config,
)
from .texture import PixelBuffer, load_pixel_buffer, probe_image_size
from .trim import find_trim_region
from .frame_rect import effective_grid, grid_position, frame_index_at, derive_frame_slice
from .slicer import SliceSetResult, slice_image, slices_changed, format_name
from .animation_curves import clip_name, derive_curve, derive_curves, clip_asset_path
from .resolver import (
    DescriptionResolver,
    validate_material_roles,
    main_image_file,
    textures_to_slice,
    secondary_textures,
)
from .importer import SheetImporter, TextureState, SheetImportResult, BatchResult

__all__ = [
    'IntRect',
    'Rect',
    'Role',
    'parse_role',
    'MaterialRef',
    'AnimationDef',
    'StillDef',
    'SheetDescription',
    'PivotPlacement',
    'FrameSlice',
    'CurveSample',
    'AnimationFrameCurve',
    'SecondaryTexture',
    'SheetSliceError',
    'ConfigurationError',
    'RoleCardinalityError',
    'AmbiguityError',
    'OutOfRangeError',
    'CustomPivotMode',
    'StillsSubdivision',
    'ProjectDefaults',
    'SlicingConfig',
    'migrate_config',
    'PixelBuffer',
    'load_pixel_buffer',
    'probe_image_size',
    'find_trim_region',
    'effective_grid',
    'grid_position',
    'frame_index_at',
    'derive_frame_slice',
    'SliceSetResult',
    'slice_image',
    'slices_changed',
    'format_name',
    'clip_name',
    'derive_curve',
    'derive_curves',
    'clip_asset_path',
    'DescriptionResolver',
    'validate_material_roles',
    'main_image_file',
    'textures_to_slice',
    'secondary_textures',
    'SheetImporter',
    'TextureState',
    'SheetImportResult',
    'BatchResult',
]
