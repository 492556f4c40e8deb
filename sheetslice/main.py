"""
sheetslice command line
Slices every sheet description in a directory and reports the result as JSON
"""

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .core import PivotPlacement, SheetImporter, SlicingConfig, load_pixel_buffer
from .core.config import apply_project_defaults
from .core.importer import BatchResult
from .utils import ImportLog, LogConfig, SettingsManager, load_descriptions


def parse_subdivisions(text: str):
    try:
        columns, rows = (int(part) for part in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected COLSxROWS, got {text!r}")
    return columns, rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetslice",
        description="Slice sprite sheets described by .ssdata files and derive animation clips.",
    )
    parser.add_argument("directory", type=Path, help="Directory holding .ssdata files and their images.")
    parser.add_argument("--settings", type=Path, help="INI file with project defaults.")
    parser.add_argument("--trim", type=float, metavar="THRESHOLD",
                        help="Trim each sprite, treating alpha at or below THRESHOLD as empty.")
    parser.add_argument("--subdivide", type=parse_subdivisions, metavar="COLSxROWS",
                        help="Split every frame into COLSxROWS sprites.")
    parser.add_argument("--pivot", choices=[p.value for p in PivotPlacement], default="center",
                        help="Pivot placement for every sprite.")
    parser.add_argument("--no-animations", action="store_true", help="Skip animation clip curves.")
    parser.add_argument("--log-level", default=None, choices=list(ImportLog.SEVERITY_ORDER),
                        help="Minimum severity echoed while importing.")
    parser.add_argument("-o", "--output", type=Path, help="Write the JSON report here instead of stdout.")
    return parser


def build_config(args: argparse.Namespace, settings: Optional[SettingsManager]) -> SlicingConfig:
    config = SlicingConfig()
    if settings is not None:
        config = apply_project_defaults(config, settings.project_defaults())
    overrides = {"pivot_placement": PivotPlacement(args.pivot)}
    if args.trim is not None:
        overrides.update(trim_individual_sprites=True, trim_alpha_threshold=args.trim)
    if args.subdivide is not None:
        overrides.update(subdivide_sprites=True, subdivisions=args.subdivide)
    if args.no_animations:
        overrides["create_animations"] = False
    return replace(config, **overrides)


def report(batch: BatchResult) -> dict:
    sheets = {}
    for description_id, result in batch.results.items():
        sheets[description_id] = {
            "textures": {
                path: {
                    "changed": texture.changed,
                    "slices": [
                        {
                            "name": s.name,
                            "rect": [s.rect.x, s.rect.y, s.rect.w, s.rect.h],
                            "pivot": list(s.pivot),
                        }
                        for s in texture.slices
                    ],
                }
                for path, texture in result.textures.items()
            },
            "secondary_textures": [
                {"name": t.name, "file": t.file} for t in result.secondary_textures
            ],
            "clips": [
                {
                    "name": clip.clip_name,
                    "path": result.clip_paths.get(clip.clip_name),
                    "frame_rate": clip.frame_rate,
                    "samples": [[sample.time, sample.slice_index] for sample in clip.samples],
                }
                for clip in result.clips
            ],
        }
    return {
        "sheets": sheets,
        "errors": {key: str(error) for key, error in batch.errors.items()},
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    if not args.directory.is_dir():
        raise SystemExit(f"Directory {args.directory} does not exist.")

    settings = SettingsManager.from_file(str(args.settings)) if args.settings else None
    level = args.log_level or (settings.project_defaults().log_level if settings else "INFO")
    log = ImportLog(LogConfig(minimum_severity=level), sink=lambda message, lvl: print(
        f"[sheetslice] [{lvl}] {message}", file=sys.stderr))

    config = build_config(args, settings)
    load_errors = {}
    descriptions = load_descriptions(str(args.directory), log, errors=load_errors)
    importer = SheetImporter(config, pixel_source=load_pixel_buffer, log=log)
    batch = importer.import_batch([d.id for d in descriptions], descriptions)
    batch.errors.update(load_errors)

    text = json.dumps(report(batch), indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        log.info(f"Wrote report to {os.fspath(args.output)}")
    else:
        print(text)
    return 0 if batch.ok else 1


if __name__ == '__main__':
    sys.exit(main())
