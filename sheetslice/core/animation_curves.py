"""
Animation curves
Turns animation definitions into time keyed references to the primary texture's slices
"""

import posixpath
from typing import List, Optional, Sequence

from ..utils.diagnostics import ImportLog, resolve_log
from .config import SlicingConfig
from .data_structures import (
    AnimationDef,
    AnimationFrameCurve,
    CurveSample,
    FrameSlice,
    SheetDescription,
)
from .errors import OutOfRangeError
from .slicer import format_name, format_rotation

CLIP_EXTENSION = ".anim"


def has_siblings(description: SheetDescription, animation: AnimationDef) -> bool:
    """True when another animation in the description shares this one's name"""
    return sum(1 for anim in description.animations if anim.name == animation.name) > 1


def clip_name(description: SheetDescription, animation: AnimationDef,
              format_names: bool = False) -> str:
    # Rotation is only part of the name when needed to tell clips apart
    name = f"{description.base_name}_{animation.name}"
    if has_siblings(description, animation):
        name += "_rot" + format_rotation(animation.rotation).rjust(3, "0")
    return format_name(name, format_names)


def derive_curve(description: SheetDescription, animation: AnimationDef,
                 primary_slices: Sequence[FrameSlice], format_names: bool = False,
                 log: Optional[ImportLog] = None) -> AnimationFrameCurve:
    """
    Build the frame curve of one animation

    Sample i sits at (i * (frameSkip + 1)) / frameRate seconds and shows slice
    startFrame + i of the primary texture.

    Raises:
        OutOfRangeError: If the animation runs past the primary slices
    """
    log = resolve_log(log)
    log.verbose(
        f"Creating animation clip with frame rate {animation.frame_rate:g}, frame skip "
        f"{animation.frame_skip}, and {animation.num_frames} total frames",
        category="animation", description_id=description.id,
    )

    samples = []
    for i in range(animation.num_frames):
        slice_index = animation.start_frame + i
        if slice_index >= len(primary_slices):
            raise OutOfRangeError(
                f"Animation '{animation.name}' frame {i} needs sprite {slice_index} but the "
                f"primary texture only has {len(primary_slices)}",
                description.id, index=slice_index, limit=len(primary_slices),
            )
        frame_offset = i * (animation.frame_skip + 1)
        samples.append(CurveSample(time=frame_offset / animation.frame_rate, slice_index=slice_index))

    return AnimationFrameCurve(
        clip_name=clip_name(description, animation, format_names),
        frame_rate=animation.frame_rate,
        samples=tuple(samples),
        animation_name=animation.name,
        rotation=animation.rotation,
        grouped=has_siblings(description, animation),
    )


def derive_curves(description: SheetDescription, primary_slices: Sequence[FrameSlice],
                  config: SlicingConfig, log: Optional[ImportLog] = None) -> List[AnimationFrameCurve]:
    """One curve per animation, in definition order"""
    log = resolve_log(log)
    log.verbose(
        f"Going to create or replace {len(description.animations)} animation clips",
        category="animation", description_id=description.id,
    )
    return [
        derive_curve(description, animation, primary_slices, config.format_file_names, log)
        for animation in description.animations
    ]


def clip_asset_path(description: SheetDescription, curve: AnimationFrameCurve,
                    config: SlicingConfig) -> str:
    """
    Path of the clip asset relative to the description's directory

    Clips that share an animation name go into a common subfolder when
    subfolders are enabled; a lone clip never gets one.
    """
    filename = curve.clip_name + CLIP_EXTENSION
    if not (curve.grouped and config.place_animations_in_subfolders):
        return filename

    subfolder = (
        config.animation_subfolder_name_format
        .replace("{anim}", format_name(curve.animation_name, config.format_file_names))
        .replace("{obj}", format_name(description.base_name, config.format_file_names))
    )
    return posixpath.join(subfolder, filename)
