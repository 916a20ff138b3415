import numpy as np

from rgbe.codec import pack_rgb9e5, repack_rgbe8_to_rgb9e5, unpack_rgb9e5, unpack_rgbe8


def _texels_for_exponents(exponents, seed=0):
    rng = np.random.default_rng(seed)
    e = np.repeat(np.asarray(exponents), 256).astype(np.uint8)
    r = np.tile(np.arange(256), len(exponents)).astype(np.uint8)
    g = rng.integers(0, 256, size=r.size, dtype=np.uint8)
    b = rng.integers(0, 256, size=r.size, dtype=np.uint8)
    return np.stack([r, g, b, e], axis=-1)


def test_direct_range_decodes_to_same_values():
    texels = _texels_for_exponents(range(128 - 15, 128 + 16))
    words = repack_rgbe8_to_rgb9e5(texels)
    assert np.array_equal(unpack_rgb9e5(words), unpack_rgbe8(texels))


def test_direct_range_matches_float_path_bit_for_bit():
    texels = _texels_for_exponents(range(128 - 15, 128 + 16), seed=1)
    fast = repack_rgbe8_to_rgb9e5(texels)
    slow = pack_rgb9e5(unpack_rgbe8(texels))
    assert np.array_equal(fast, slow)


def test_direct_range_boundaries():
    assert int(repack_rgbe8_to_rgb9e5([255, 0, 0, 128 + 15])) == (30 << 27) | (255 << 1)
    assert int(repack_rgbe8_to_rgb9e5([255, 0, 0, 128 - 15])) == 255 << 1
    assert int(repack_rgbe8_to_rgb9e5([128, 2, 3, 128])) == (15 << 27) | (3 << 19) | (2 << 10) | (128 << 1)


def test_zero_texel_in_direct_range_packs_to_zero_word():
    assert int(repack_rgbe8_to_rgb9e5([0, 0, 0, 128])) == 0


def test_small_mantissas_are_renormalized():
    # 1/256 at exponent 0 is 2**-8: mantissa 256 at exponent field 8.
    assert int(repack_rgbe8_to_rgb9e5([1, 0, 0, 128])) == (8 << 27) | 256
    for texel in ([0, 0, 51, 114], [127, 119, 102, 143], [127, 127, 127, 128]):
        assert int(repack_rgbe8_to_rgb9e5(texel)) == int(pack_rgb9e5(unpack_rgbe8(texel)))


def test_grid_over_direct_range_matches_float_path():
    levels = np.arange(0, 256, 17, dtype=np.uint8)
    r, g, b, e = np.meshgrid(levels, levels, levels, np.arange(113, 144, dtype=np.uint8), indexing="ij")
    texels = np.stack([r.ravel(), g.ravel(), b.ravel(), e.ravel()], axis=-1)
    assert np.array_equal(
        repack_rgbe8_to_rgb9e5(texels), pack_rgb9e5(unpack_rgbe8(texels))
    )


def test_outside_range_uses_float_path():
    exps = [e for e in range(256) if not 113 <= e <= 143]
    texels = _texels_for_exponents(exps, seed=2)
    assert np.array_equal(
        repack_rgbe8_to_rgb9e5(texels), pack_rgb9e5(unpack_rgbe8(texels))
    )


def test_outside_range_saturates_and_flushes():
    assert int(repack_rgbe8_to_rgb9e5([255, 255, 255, 128 + 20])) == 0xFFFFFFFF
    assert int(repack_rgbe8_to_rgb9e5([255, 255, 255, 128 - 40])) == 0
    # Just above the direct range the value is still representable.
    word = repack_rgbe8_to_rgb9e5([255, 0, 0, 128 + 16])
    assert unpack_rgb9e5(word).tolist() == [255 / 256 * 2.0**16, 0.0, 0.0]


def test_mixed_batch_keeps_shape_and_order():
    texels = np.array(
        [
            [[128, 0, 0, 128], [255, 255, 255, 200]],
            [[200, 100, 50, 100], [64, 32, 16, 140]],
        ],
        dtype=np.uint8,
    )
    words = repack_rgbe8_to_rgb9e5(texels)
    assert words.shape == (2, 2)
    for idx in np.ndindex(2, 2):
        assert words[idx] == repack_rgbe8_to_rgb9e5(texels[idx])
