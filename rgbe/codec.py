"""Shared-exponent texel codecs.

Bulk pack/unpack routines for RGBE8, RGB9E5 and RGBA16F texels.  All
arithmetic runs in binary32 on ``numpy`` arrays and float bits are
reinterpreted through ``ndarray.view``, so packed words match the GPU and
Radiance layouts bit for bit.

Every function accepts arrays of any leading shape and is defined for every
numeric input: zero, negative, infinite, NaN and denormal channels are
clamped into range rather than rejected.
"""

from __future__ import annotations

import numpy as np

RGB9E5_EXP_BIAS = 15
RGBE8_EXP_BIAS = 128

# Largest value with a 9-bit mantissa at the top exponent, and the floor that
# maps to an exponent field of 0.
RGB9E5_MAX = np.float32(0x1FF << 7)
RGB9E5_MIN_NORM = np.float32(1.0 / (1 << 16))

FLT_MIN = np.float32(np.finfo(np.float32).tiny)

_EXP_MASK = np.uint32(0x7F800000)
_MANT9_MASK = np.uint32(0x1FF)


def _float_channels(values, channels: int, dtype=np.float32) -> np.ndarray:
    arr = np.asarray(values, dtype=dtype)
    if arr.ndim == 0 or arr.shape[-1] != channels:
        raise ValueError(
            f"expected an array with {channels} channels in the last axis, got shape {arr.shape}"
        )
    return arr


def _round_half_away(x: np.ndarray) -> np.ndarray:
    floor = np.floor(x)
    return floor + (x - floor >= 0.5)


def pack_rgb9e5(rgb) -> np.ndarray:
    """Clamp and pack RGB float triples into RGB9E5 words.

    Parameters
    ----------
    rgb:
        Array-like of shape ``(..., 3)``.
    Returns
    -------
    numpy.ndarray
        ``uint32`` array of shape ``(...)``.
    """
    arr = _float_channels(rgb, 3)
    flat = arr.reshape(-1, 3)
    with np.errstate(invalid="ignore"):
        clamped = np.clip(flat, np.float32(0.0), RGB9E5_MAX)

    # NaN channels do not take part in the shared exponent.
    max_channel = np.fmax(RGB9E5_MIN_NORM, np.fmax.reduce(clamped, axis=1))

    # Add 15 to the exponent of the largest channel and half a 9-bit ULP to its
    # mantissa, then drop the mantissa.  Adding this bias to a channel leaves
    # the leading bit and 8 mantissa bits, rounded, in the low 9 bits.
    bias_bits = (max_channel.view(np.uint32) + np.uint32(0x07804000)) & _EXP_MASK
    bias = bias_bits.view(np.float32)

    # Channels smaller than the maximum are shifted further right by the add.
    mantissas = (clamped + bias[:, None]).view(np.uint32) & _MANT9_MASK

    exponent = (bias_bits << np.uint32(4)) + np.uint32(0x10000000)
    words = (
        exponent
        | (mantissas[:, 2] << np.uint32(18))
        | (mantissas[:, 1] << np.uint32(9))
        | mantissas[:, 0]
    )
    return words.reshape(arr.shape[:-1])


def unpack_rgb9e5(words) -> np.ndarray:
    """Expand RGB9E5 words into ``float32`` RGB triples of shape ``(..., 3)``."""
    arr = np.asarray(words, dtype=np.uint32)
    flat = arr.reshape(-1)
    exponent = (flat >> np.uint32(27)).astype(np.int32) - RGB9E5_EXP_BIAS
    scale = np.ldexp(np.float32(1.0), exponent)
    mantissas = np.stack(
        [(flat >> np.uint32(shift)) & _MANT9_MASK for shift in (0, 9, 18)], axis=-1
    ).astype(np.float32)
    rgb = mantissas * scale[:, None] / np.float32(512.0)
    return rgb.reshape(arr.shape + (3,))


def pack_rgbe8(rgb) -> np.ndarray:
    """Pack RGB float triples into RGBE8 texels.

    The shared exponent is the next power of two above the largest channel
    once that channel is rounded to 8 bits of precision.  Mantissas are
    rounded half away from zero and clamped to ``[0, 255]``.

    Parameters
    ----------
    rgb:
        Array-like of shape ``(..., 3)``.
    Returns
    -------
    numpy.ndarray
        ``uint8`` array of shape ``(..., 4)`` laid out as ``r, g, b, e``.
    """
    arr = _float_channels(rgb, 3)
    flat = arr.reshape(-1, 3)
    max_channel = np.fmax(FLT_MIN, np.fmax.reduce(flat, axis=1))
    bias_bits = (max_channel.view(np.uint32) + np.uint32(0x00808000)) & _EXP_MASK
    bias = bias_bits.view(np.float32)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        scaled = (flat / bias[:, None]) * np.float32(256.0)
        mantissas = np.clip(_round_half_away(scaled), 0.0, 255.0)
    mantissas = np.nan_to_num(mantissas, nan=0.0)

    out = np.empty((flat.shape[0], 4), dtype=np.uint8)
    out[:, :3] = mantissas.astype(np.uint8)
    out[:, 3] = np.clip((bias_bits >> np.uint32(23)).astype(np.int32) + 1, 0, 255)
    return out.reshape(arr.shape[:-1] + (4,))


def unpack_rgbe8(texels) -> np.ndarray:
    """Expand RGBE8 texels of shape ``(..., 4)`` into ``float32`` RGB triples."""
    arr = np.asarray(texels, dtype=np.uint8)
    if arr.ndim == 0 or arr.shape[-1] != 4:
        raise ValueError(f"expected RGBE8 texels of shape (..., 4), got {arr.shape}")
    flat = arr.reshape(-1, 4)
    scale = np.ldexp(np.float32(1.0), flat[:, 3].astype(np.int32) - RGBE8_EXP_BIAS)
    rgb = (flat[:, :3].astype(np.float32) / np.float32(256.0)) * scale[:, None]
    return rgb.reshape(arr.shape[:-1] + (3,))


def repack_rgbe8_to_rgb9e5(texels) -> np.ndarray:
    """Convert RGBE8 texels to RGB9E5 words.

    When the signed exponent ``e - 128`` lies in ``[-15, 15]`` and the largest
    mantissa is at least 128, the 8-bit mantissas are moved into the 9-bit
    fields unchanged (shifted up one bit) and the exponent is rebiased.  The
    result is identical to :func:`pack_rgb9e5` of :func:`unpack_rgbe8`, which
    every other texel goes through; that path renormalizes small mantissas and
    saturates or flushes exponents RGB9E5 cannot represent.
    """
    arr = np.asarray(texels, dtype=np.uint8)
    if arr.ndim == 0 or arr.shape[-1] != 4:
        raise ValueError(f"expected RGBE8 texels of shape (..., 4), got {arr.shape}")
    flat = arr.reshape(-1, 4)
    exponent = flat[:, 3].astype(np.int32) - RGBE8_EXP_BIAS
    # Unnormalized mantissas would keep a larger exponent than pack_rgb9e5 picks.
    direct = (
        (exponent >= -RGB9E5_EXP_BIAS)
        & (exponent <= RGB9E5_EXP_BIAS)
        & (flat[:, :3].max(axis=1) >= 128)
    )

    channels = flat[:, :3].astype(np.uint32)
    e5 = np.clip(exponent + RGB9E5_EXP_BIAS, 0, 31).astype(np.uint32)
    words = (
        (e5 << np.uint32(27))
        | (channels[:, 2] << np.uint32(19))
        | (channels[:, 1] << np.uint32(10))
        | (channels[:, 0] << np.uint32(1))
    )
    if not direct.all():
        slow = ~direct
        words[slow] = pack_rgb9e5(unpack_rgbe8(flat[slow]))
    return words.reshape(arr.shape[:-1])


def f32_to_rgba16f(rgba) -> np.ndarray:
    """Narrow ``(..., 4)`` float channels to half precision."""
    arr = _float_channels(rgba, 4)
    with np.errstate(over="ignore"):
        return arr.astype(np.float16)


def rgba16f_to_rgb9e5(texels) -> np.ndarray:
    """Pack RGBA16F texels into RGB9E5 words, ignoring alpha."""
    arr = _float_channels(texels, 4, dtype=np.float16)
    return pack_rgb9e5(arr[..., :3].astype(np.float32))


def rgba16f_to_rgbe8(texels) -> np.ndarray:
    """Pack RGBA16F texels into RGBE8 texels, ignoring alpha."""
    arr = _float_channels(texels, 4, dtype=np.float16)
    return pack_rgbe8(arr[..., :3].astype(np.float32))


def rgb9e5_to_rgba16f(words) -> np.ndarray:
    """Expand RGB9E5 words to RGBA16F texels with alpha set to 1.0.

    Every RGB9E5 value is a multiple of ``2**-24`` with at most 9 significant
    bits and no larger than 65408, so the narrowing to half precision is exact.
    """
    rgb = unpack_rgb9e5(words)
    out = np.empty(rgb.shape[:-1] + (4,), dtype=np.float16)
    out[..., :3] = rgb.astype(np.float16)
    out[..., 3] = np.float16(1.0)
    return out
