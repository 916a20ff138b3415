"""Shared-exponent HDR texel formats: RGBE8, RGB9E5 and RGBA16F.

Intended use: store HDR textures as RGBE8 PNG files and convert them to
RGB9E5 for the GPU when loading.
"""

from .codec import (
    f32_to_rgba16f,
    pack_rgb9e5,
    pack_rgbe8,
    repack_rgbe8_to_rgb9e5,
    rgb9e5_to_rgba16f,
    rgba16f_to_rgb9e5,
    rgba16f_to_rgbe8,
    unpack_rgb9e5,
    unpack_rgbe8,
)
from .types import RGB9E5, RGBA16F, RGBE8

__all__ = [
    "RGB9E5",
    "RGBA16F",
    "RGBE8",
    "decode_radiance",
    "decode_radiance_as_rgb9e5",
    "decode_rgbe8_png",
    "decode_rgbe8_png_as_rgb9e5",
    "encode_rgbe8_png",
    "f32_to_rgba16f",
    "load_radiance_file",
    "load_rgbe8_png_file",
    "load_rgbe8_png_file_as_rgb9e5",
    "pack_rgb9e5",
    "pack_rgbe8",
    "repack_rgbe8_to_rgb9e5",
    "rgb9e5_to_rgba16f",
    "rgba16f_to_rgb9e5",
    "rgba16f_to_rgbe8",
    "save_rgb9e5_raw_file",
    "save_rgbe8_png_file",
    "unpack_rgb9e5",
    "unpack_rgbe8",
]

_LOAD_NAMES = {
    "decode_radiance",
    "decode_radiance_as_rgb9e5",
    "decode_rgbe8_png",
    "decode_rgbe8_png_as_rgb9e5",
    "encode_rgbe8_png",
    "load_radiance_file",
    "load_rgbe8_png_file",
    "load_rgbe8_png_file_as_rgb9e5",
    "save_rgb9e5_raw_file",
    "save_rgbe8_png_file",
}


def __getattr__(name):
    # Container I/O pulls in OpenCV and Pillow; import it on first use.
    if name in _LOAD_NAMES:
        from . import load

        return getattr(load, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
