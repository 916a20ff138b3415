from pathlib import Path

import numpy as np
import pytest


def _write_flat_hdr(path: Path, width: int, height: int, texels: np.ndarray) -> Path:
    """Write an uncompressed Radiance picture; readers only use RLE for width >= 8."""
    header = f"#?RADIANCE\nFORMAT=32-bit_rle_rgbe\n\n-Y {height} +X {width}\n"
    path.write_bytes(header.encode("ascii") + np.asarray(texels, dtype=np.uint8).tobytes())
    return path


@pytest.fixture
def write_hdr():
    return _write_flat_hdr


@pytest.fixture
def normalized_texels():
    """RGBE8 texels as a Radiance writer would store them (max mantissa >= 128)."""
    rng = np.random.default_rng(7)
    texels = rng.integers(0, 256, size=(4 * 3, 4), dtype=np.uint8)
    texels[:, 0] = rng.integers(128, 256, size=len(texels), dtype=np.uint8)
    texels[:, 3] = rng.integers(100, 160, size=len(texels), dtype=np.uint8)
    return texels
