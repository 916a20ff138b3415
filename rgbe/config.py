"""Configuration defaults for rgbe.

Values can be overridden through environment variables; the command line
tool also accepts YAML presets on top of these defaults.
"""
from __future__ import annotations

import os

PNG_COMPRESS_LEVEL = int(os.environ.get("RGBE_PNG_COMPRESS_LEVEL") or 9)

# Suffixes replace the input extension, e.g. ``sky.hdr`` -> ``sky.rgbe.png``.
OUTPUT_SUFFIX = os.environ.get("RGBE_OUTPUT_SUFFIX") or ".rgbe.png"
RGB9E5_SUFFIX = ".rgb9e5"

HDR_EXTS = {".hdr", ".pic", ".rgbe"}
