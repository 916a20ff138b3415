"""Reading and writing RGBE texel containers.

Radiance ``.hdr`` pictures are decoded with OpenCV and RGBE8 PNG files are
handled by Pillow, which sees the texels as plain 8-bit RGBA pixels with the
shared exponent in the alpha channel.  This layer is the only part of the
package that can fail; the codec underneath is defined for every input.

All loaders return ``(width, height, texels)`` with ``texels`` a flat array
in row-major order: ``uint8`` of shape ``(width*height, 4)`` for RGBE8 and
``uint32`` of shape ``(width*height,)`` for RGB9E5.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Tuple, Union

import cv2
import numpy as np
from PIL import Image

from . import config
from .codec import pack_rgbe8, repack_rgbe8_to_rgb9e5

Source = Union[bytes, bytearray, BinaryIO]
PathLike = Union[str, Path]


def _read_source(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    return source.read()


def _require_file(path: PathLike, kind: str) -> Path:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"{kind} file not found: {p}")
    return p


def decode_radiance(source: Source) -> Tuple[int, int, np.ndarray]:
    """Decode Radiance picture data into RGBE8 texels.

    OpenCV expands the picture to ``float32`` BGR; each texel is packed back
    with :func:`rgbe.codec.pack_rgbe8`, which reproduces the stored bytes for
    every normalized texel.  Black texels keep the all-zero Radiance encoding.
    """
    data = _read_source(source)
    if not data:
        raise ValueError("empty Radiance data")
    img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_ANYDEPTH | cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("could not decode Radiance picture")
    if img.dtype != np.float32 or img.ndim != 3 or img.shape[2] != 3:
        raise ValueError(f"unexpected Radiance decode result {img.dtype} {img.shape}")
    height, width = img.shape[:2]
    rgb = img[:, :, ::-1].reshape(-1, 3)
    texels = pack_rgbe8(rgb)
    # Radiance stores black as all zero bytes.
    texels[~texels[:, :3].any(axis=1), 3] = 0
    logging.debug("decoded Radiance picture %dx%d", width, height)
    return width, height, texels


def decode_radiance_as_rgb9e5(source: Source) -> Tuple[int, int, np.ndarray]:
    """Decode Radiance picture data and repack it as RGB9E5 words."""
    width, height, texels = decode_radiance(source)
    return width, height, repack_rgbe8_to_rgb9e5(texels)


def load_radiance_file(path: PathLike) -> Tuple[int, int, np.ndarray]:
    """Load a Radiance ``.hdr`` file as RGBE8 texels."""
    p = _require_file(path, "Radiance")
    return decode_radiance(p.read_bytes())


def decode_rgbe8_png(source: Source) -> Tuple[int, int, np.ndarray]:
    """Decode an RGBA8 PNG whose pixels are RGBE8 texels."""
    with Image.open(io.BytesIO(_read_source(source))) as img:
        if img.format != "PNG":
            raise ValueError(f"expected a PNG container, got {img.format}")
        if img.mode != "RGBA":
            raise ValueError(f"RGBE8 PNG must be 8-bit RGBA, got mode {img.mode}")
        width, height = img.size
        texels = np.array(img, dtype=np.uint8).reshape(-1, 4)
    return width, height, texels


def decode_rgbe8_png_as_rgb9e5(source: Source) -> Tuple[int, int, np.ndarray]:
    """Decode an RGBE8 PNG and repack it as RGB9E5 words for GPU upload."""
    width, height, texels = decode_rgbe8_png(source)
    return width, height, repack_rgbe8_to_rgb9e5(texels)


def load_rgbe8_png_file(path: PathLike) -> Tuple[int, int, np.ndarray]:
    p = _require_file(path, "PNG")
    return decode_rgbe8_png(p.read_bytes())


def load_rgbe8_png_file_as_rgb9e5(path: PathLike) -> Tuple[int, int, np.ndarray]:
    """Load an RGBE8 PNG as RGB9E5 words, the usual path for HDR textures."""
    p = _require_file(path, "PNG")
    return decode_rgbe8_png_as_rgb9e5(p.read_bytes())


def encode_rgbe8_png(
    width: int,
    height: int,
    texels: np.ndarray,
    out: BinaryIO,
    compress_level: int | None = None,
) -> None:
    """Write RGBE8 texels to *out* as an RGBA8 PNG.

    PNG compression is slow at the default level, so this is meant for asset
    creation rather than runtime use.

    Parameters
    ----------
    width, height:
        Image dimensions; ``texels`` must hold exactly ``width * height``
        entries.
    texels:
        ``uint8`` array of shape ``(width*height, 4)``.
    out:
        Binary stream receiving the PNG bytes.
    compress_level:
        zlib level ``0..9``; defaults to :data:`rgbe.config.PNG_COMPRESS_LEVEL`.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid dimensions {width}x{height}")
    arr = np.asarray(texels, dtype=np.uint8)
    if arr.ndim != 2 or arr.shape[1] != 4:
        raise ValueError(f"expected RGBE8 texels of shape (N, 4), got {arr.shape}")
    if arr.shape[0] != width * height:
        raise ValueError(
            f"texel count {arr.shape[0]} does not match {width}x{height}"
        )
    level = config.PNG_COMPRESS_LEVEL if compress_level is None else compress_level
    img = Image.fromarray(np.ascontiguousarray(arr.reshape(height, width, 4)))
    img.save(out, format="PNG", compress_level=level)


def save_rgbe8_png_file(
    path: PathLike,
    width: int,
    height: int,
    texels: np.ndarray,
    compress_level: int | None = None,
) -> None:
    """Save RGBE8 texels as an RGBA8 PNG file with the exponent in alpha."""
    with open(path, "wb") as fh:
        encode_rgbe8_png(width, height, texels, fh, compress_level=compress_level)


def save_rgb9e5_raw_file(path: PathLike, texels: np.ndarray) -> None:
    """Dump RGB9E5 words as little-endian 32-bit values."""
    arr = np.asarray(texels, dtype=np.uint32)
    Path(path).write_bytes(arr.astype("<u4").tobytes())
