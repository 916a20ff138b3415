"""Command line interface: convert Radiance HDR pictures to RGBE8 PNG."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from . import config
from .codec import repack_rgbe8_to_rgb9e5
from .load import load_radiance_file, save_rgb9e5_raw_file, save_rgbe8_png_file
from .validate import validate_args


def _compress_level_type(x: str) -> int:
    v = int(x)
    if not 0 <= v <= 9:
        raise argparse.ArgumentTypeError("--compress-level must be in [0,9]")
    return v


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hdr2rgbe-png",
        description="Convert Radiance HDR pictures to RGBE8 PNG textures",
    )
    parser.add_argument("inputs", nargs="+", help="Radiance .hdr files")
    parser.add_argument("--out-dir", help="Output folder (default: next to each input)")
    parser.add_argument(
        "--compress-level",
        type=_compress_level_type,
        default=config.PNG_COMPRESS_LEVEL,
        help="PNG zlib level 0..9",
    )
    parser.add_argument(
        "--rgb9e5",
        action="store_true",
        help="Also write raw little-endian RGB9E5 words",
    )
    parser.add_argument(
        "--preset",
        action="append",
        default=[],
        help="YAML file with argument defaults (repeatable)",
    )
    parser.add_argument("--validate", action="store_true", help="Validate arguments and exit")
    parser.add_argument("-v", "--verbose", action="store_true")

    prelim, _ = parser.parse_known_args(argv)
    for path in prelim.preset:
        with open(path, "r", encoding="utf8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise SystemExit(f"preset {path} must contain a mapping")
        parser.set_defaults(**{k.replace("-", "_"): v for k, v in data.items()})

    return parser.parse_args(argv)


def _output_path(src: Path, out_dir: str | None, suffix: str) -> Path:
    folder = Path(out_dir) if out_dir else src.parent
    return folder / (src.stem + suffix)


def convert_file(
    src: Path,
    out_dir: str | None = None,
    compress_level: int | None = None,
    rgb9e5: bool = False,
) -> Path:
    """Convert one Radiance file, returning the written PNG path."""
    width, height, texels = load_radiance_file(src)
    dst = _output_path(src, out_dir, config.OUTPUT_SUFFIX)
    dst.parent.mkdir(parents=True, exist_ok=True)
    save_rgbe8_png_file(dst, width, height, texels, compress_level=compress_level)
    logging.info("wrote %s (%dx%d)", dst, width, height)
    if rgb9e5:
        raw = _output_path(src, out_dir, config.RGB9E5_SUFFIX)
        save_rgb9e5_raw_file(raw, repack_rgbe8_to_rgb9e5(texels))
        logging.info("wrote %s", raw)
    return dst


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    errs = validate_args(args)
    if errs:
        for e in errs:
            print(f"validation error: {e}", file=sys.stderr)
        raise SystemExit(1)
    if args.validate:
        return

    for name in args.inputs:
        src = Path(name)
        if src.suffix.lower() not in config.HDR_EXTS:
            logging.warning("%s does not look like a Radiance file", src)
        try:
            convert_file(
                src,
                out_dir=args.out_dir,
                compress_level=args.compress_level,
                rgb9e5=args.rgb9e5,
            )
        except ValueError as exc:
            raise SystemExit(f"failed to convert {src}: {exc}") from exc


if __name__ == "__main__":
    main()
