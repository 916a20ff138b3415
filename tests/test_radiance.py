import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")
from rgbe.codec import repack_rgbe8_to_rgb9e5
from rgbe.load import decode_radiance, decode_radiance_as_rgb9e5, load_radiance_file


def test_load_radiance_keeps_stored_texels(tmp_path, write_hdr, normalized_texels):
    path = write_hdr(tmp_path / "sky.hdr", 4, 3, normalized_texels)
    width, height, texels = load_radiance_file(path)
    assert (width, height) == (4, 3)
    assert texels.shape == (12, 4)
    assert np.array_equal(texels, normalized_texels)


def test_decode_radiance_as_rgb9e5(tmp_path, write_hdr, normalized_texels):
    path = write_hdr(tmp_path / "sky.hdr", 4, 3, normalized_texels)
    width, height, words = decode_radiance_as_rgb9e5(path.read_bytes())
    assert (width, height) == (4, 3)
    assert np.array_equal(words, repack_rgbe8_to_rgb9e5(normalized_texels))


def test_decode_radiance_from_stream(tmp_path, write_hdr, normalized_texels):
    path = write_hdr(tmp_path / "sky.hdr", 4, 3, normalized_texels)
    with open(path, "rb") as fh:
        width, height, texels = decode_radiance(fh)
    assert (width, height) == (4, 3)
    assert np.array_equal(texels, normalized_texels)


def test_black_texels_keep_zero_bytes(tmp_path, write_hdr, normalized_texels):
    stored = normalized_texels.copy()
    stored[[0, 5]] = 0
    path = write_hdr(tmp_path / "black.hdr", 4, 3, stored)
    _, _, texels = load_radiance_file(path)
    assert texels[0].tolist() == [0, 0, 0, 0]
    assert np.array_equal(texels, stored)


def test_decode_radiance_rejects_garbage():
    with pytest.raises(ValueError):
        decode_radiance(b"")
    with pytest.raises(ValueError):
        decode_radiance(b"not a radiance picture at all")


def test_missing_radiance_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_radiance_file(tmp_path / "missing.hdr")
