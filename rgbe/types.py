"""Scalar texel value types.

Each type is a small frozen dataclass wrapping one texel.  The arithmetic
lives in :mod:`rgbe.codec`; these classes only move single values in and out
of it so scalar and bulk conversions always agree.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Sequence, Tuple

import numpy as np

from . import codec


@dataclass(frozen=True)
class RGBE8:
    """Radiance RGBE8 texel.

    ``r``, ``g`` and ``b`` are 8-bit mantissas and ``e`` is the shared
    exponent with a bias of 128, stored where PNG keeps alpha.
    """

    r: int
    g: int
    b: int
    e: int

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, (int, np.integer)):
                raise TypeError(f"RGBE8.{f.name} must be an integer, got {value!r}")
            if not 0 <= value <= 0xFF:
                raise ValueError(f"RGBE8.{f.name} must be within [0,255], got {value}")

    @classmethod
    def pack(cls, rgb: Sequence[float]) -> "RGBE8":
        r, g, b, e = (int(c) for c in codec.pack_rgbe8(rgb))
        return cls(r, g, b, e)

    def unpack(self) -> Tuple[float, float, float]:
        r, g, b = (float(c) for c in codec.unpack_rgbe8(self.to_array()))
        return r, g, b

    def repack_rgb9e5(self) -> "RGB9E5":
        return RGB9E5(int(codec.repack_rgbe8_to_rgb9e5(self.to_array())))

    def to_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b, self.e], dtype=np.uint8)

    def to_bytes(self) -> bytes:
        return bytes((self.r, self.g, self.b, self.e))

    @classmethod
    def from_bytes(cls, data: bytes) -> "RGBE8":
        if len(data) != 4:
            raise ValueError(f"RGBE8 texel needs 4 bytes, got {len(data)}")
        return cls(*data)


@dataclass(frozen=True)
class RGB9E5:
    """Packed ``rgb9e5ufloat`` texel.

    From LSB to MSB the word holds 9-bit red, green and blue mantissas
    followed by a 5-bit shared exponent with a bias of 15.
    """

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ValueError(f"RGB9E5 word must fit in 32 bits, got {self.value:#x}")

    @classmethod
    def pack(cls, rgb: Sequence[float]) -> "RGB9E5":
        """Clamp and pack an RGB float triple."""
        return cls(int(codec.pack_rgb9e5(rgb)))

    def unpack(self) -> Tuple[float, float, float]:
        r, g, b = (float(c) for c in codec.unpack_rgb9e5(self.value))
        return r, g, b

    @property
    def exponent(self) -> int:
        return self.value >> 27

    @property
    def mantissas(self) -> Tuple[int, int, int]:
        return self.value & 0x1FF, (self.value >> 9) & 0x1FF, (self.value >> 18) & 0x1FF

    def to_rgba16f(self) -> "RGBA16F":
        return RGBA16F.from_rgb9e5(self)

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(4, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> "RGB9E5":
        if len(data) != 4:
            raise ValueError(f"RGB9E5 texel needs 4 bytes, got {len(data)}")
        return cls(int.from_bytes(data, "little"))


@dataclass(frozen=True)
class RGBA16F:
    """Four half precision channels; alpha is carried but never packed."""

    r: np.float16
    g: np.float16
    b: np.float16
    a: np.float16 = np.float16(1.0)

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, np.float16(getattr(self, f.name)))

    @classmethod
    def from_f32(cls, rgba: Sequence[float]) -> "RGBA16F":
        return cls(*codec.f32_to_rgba16f(rgba))

    @classmethod
    def from_rgb9e5(cls, value: RGB9E5) -> "RGBA16F":
        return cls(*codec.rgb9e5_to_rgba16f(value.value))

    def to_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b, self.a], dtype=np.float16)

    def to_f32(self) -> Tuple[float, float, float, float]:
        r, g, b, a = (float(c) for c in self.to_array())
        return r, g, b, a

    def into_rgb9e5(self) -> RGB9E5:
        return RGB9E5(int(codec.rgba16f_to_rgb9e5(self.to_array())))

    def into_rgbe8(self) -> RGBE8:
        r, g, b, e = (int(c) for c in codec.rgba16f_to_rgbe8(self.to_array()))
        return RGBE8(r, g, b, e)
