"""Tests for animation curve derivation and clip naming."""

from dataclasses import replace

import pytest

from sheetslice.core import (
    OutOfRangeError,
    clip_asset_path,
    clip_name,
    derive_curve,
    derive_curves,
    slice_image,
)


@pytest.fixture
def two_angle_walk(make_description):
    return make_description(
        animations=[
            {"name": "walk", "startFrame": 0, "numFrames": 4, "frameRate": 10, "rotation": 0},
            {"name": "walk", "startFrame": 4, "numFrames": 4, "frameRate": 10, "rotation": 90},
        ],
    )


class TestClipName:
    def test_rotation_suffix_only_for_siblings(self, two_angle_walk):
        first, second = two_angle_walk.animations
        assert clip_name(two_angle_walk, first) == "obj_walk_rot000"
        assert clip_name(two_angle_walk, second) == "obj_walk_rot090"

    def test_single_animation_has_no_suffix(self, walk_description):
        assert clip_name(walk_description, walk_description.animations[0]) == "obj_walk"

    def test_formatting(self, make_description):
        description = make_description(
            baseObjectName="Big Hero",
            animations=[{"name": "Idle-Loop", "startFrame": 0, "numFrames": 1, "frameRate": 1}],
        )
        assert clip_name(description, description.animations[0], format_names=True) == "big_hero_idle_loop"


class TestDeriveCurve:
    def test_frame_skip_spacing(self, make_description, config):
        description = make_description(
            animations=[{"name": "walk", "startFrame": 0, "numFrames": 3, "frameRate": 10, "frameSkip": 1}],
        )
        slices = slice_image(description, "hero.png", config).slices
        curve = derive_curve(description, description.animations[0], slices)
        assert [s.time for s in curve.samples] == pytest.approx([0.0, 0.2, 0.4])
        assert [s.slice_index for s in curve.samples] == [0, 1, 2]
        assert curve.frame_rate == 10
        assert curve.duration == pytest.approx(0.4)

    def test_samples_reference_animation_slices(self, walk_description, config):
        slices = slice_image(walk_description, "hero.png", config).slices
        curve = derive_curve(walk_description, walk_description.animations[0], slices)
        assert [slices[s.slice_index].name for s in curve.samples] == [
            "obj_walk_rot90_0", "obj_walk_rot90_1", "obj_walk_rot90_2",
        ]

    def test_sample_count_and_monotonic_times(self, two_angle_walk, config):
        slices = slice_image(two_angle_walk, "hero.png", config).slices
        for animation in two_angle_walk.animations:
            curve = derive_curve(two_angle_walk, animation, slices)
            assert len(curve.samples) == animation.num_frames
            times = [s.time for s in curve.samples]
            assert all(a < b for a, b in zip(times, times[1:]))

    def test_animation_past_primary_slices(self, make_description, config):
        description = make_description(
            animations=[{"name": "walk", "startFrame": 5, "numFrames": 3, "frameRate": 10}],
        )
        slices = slice_image(description, "hero.png", config).slices
        with pytest.raises(OutOfRangeError) as exc_info:
            derive_curve(description, description.animations[0], slices)
        assert exc_info.value.index == 5
        assert exc_info.value.limit == 3
        assert "sheets/hero.ssdata" in str(exc_info.value)

    def test_derive_curves_keeps_order(self, two_angle_walk, config):
        slices = slice_image(two_angle_walk, "hero.png", config).slices
        curves = derive_curves(two_angle_walk, slices, config)
        assert [c.clip_name for c in curves] == ["obj_walk_rot000", "obj_walk_rot090"]
        assert all(c.grouped for c in curves)


class TestClipAssetPath:
    def test_grouped_clips_share_subfolder(self, two_angle_walk, config):
        slices = slice_image(two_angle_walk, "hero.png", config).slices
        curves = derive_curves(two_angle_walk, slices, config)
        assert [clip_asset_path(two_angle_walk, c, config) for c in curves] == [
            "Animation - walk/obj_walk_rot000.anim",
            "Animation - walk/obj_walk_rot090.anim",
        ]

    def test_single_clip_has_no_subfolder(self, walk_description, config):
        slices = slice_image(walk_description, "hero.png", config).slices
        curve = derive_curves(walk_description, slices, config)[0]
        assert clip_asset_path(walk_description, curve, config) == "obj_walk.anim"

    def test_subfolders_disabled(self, two_angle_walk, config):
        config = replace(config, place_animations_in_subfolders=False)
        slices = slice_image(two_angle_walk, "hero.png", config).slices
        curve = derive_curves(two_angle_walk, slices, config)[0]
        assert clip_asset_path(two_angle_walk, curve, config) == "obj_walk_rot000.anim"

    def test_custom_subfolder_format(self, two_angle_walk, config):
        config = replace(config, animation_subfolder_name_format="{obj}/{anim}")
        slices = slice_image(two_angle_walk, "hero.png", config).slices
        curve = derive_curves(two_angle_walk, slices, config)[1]
        assert clip_asset_path(two_angle_walk, curve, config) == "obj/walk/obj_walk_rot090.anim"
