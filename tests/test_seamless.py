import numpy as np
from helpers import ramp_image
from lapwarpkit.image.buffer import Image
from lapwarpkit.clone.seamless import SeamlessClone, paste

def interior_mask(w=12, h=10, margin=2):
    m = np.zeros((h, w), np.uint8)
    m[margin:h-margin, margin:w-margin] = 255
    return m

def test_whole_image_mask_with_identical_images_returns_target():
    img = Image(ramp_image())
    full = np.full((10, 12), 255, np.uint8)
    for mixed in (False, True):
        s = SeamlessClone(img, img, full, mixed=mixed)
        assert s.solve_image() == img
        assert len(s.anchors) == 1

def test_constant_brightness_shift_is_absorbed():
    tgt = ramp_image()
    src = np.clip(tgt.astype(int) + 40, 0, 255).astype(np.uint8)
    s = SeamlessClone(Image(src), Image(tgt), interior_mask())
    out = s.solve_image().data
    assert np.abs(out.astype(int) - tgt.astype(int)).max() <= 1
    assert s.anchors == []

def test_pixels_outside_omega_are_untouched():
    tgt = np.full((10, 12, 3), 90, np.uint8)
    src = np.zeros((10, 12, 3), np.uint8); src[4:6, 4:8] = 255
    out = SeamlessClone(Image(src), Image(tgt), interior_mask()).solve_image().data
    m = interior_mask() > 0
    assert (out[~m] == 90).all()
    assert out[m].max() > 90

def test_factorization_is_reused_across_inputs():
    tgt = Image(ramp_image())
    s = SeamlessClone(tgt.copy(), tgt, interior_mask())
    s.solve_image(); s.solve_image()
    assert s.rebuild_count == 1 and s.factorization_count == 3
    s.set_source(Image(255 - ramp_image()))
    s.solve_image()
    assert s.rebuild_count == 1 and s.factorization_count == 3
    s.set_offset(1, 0)
    assert s.state == "unbuilt"
    s.solve_image()
    assert s.rebuild_count == 2 and s.factorization_count == 6

def test_offset_clips_omega_to_target():
    tgt = Image(ramp_image())
    full = np.full((10, 12), 255, np.uint8)
    s = SeamlessClone(tgt, tgt, full, offset=(8, 0))
    s.solve_image()
    assert s.stats().unknowns == 4 * 10
    assert all(x >= 8 for x, _ in s.nodes)

def test_paste_copies_masked_pixels():
    src = np.full((4, 4, 3), 200, np.uint8)
    tgt = np.zeros((6, 6, 3), np.uint8)
    m = np.zeros((4, 4), np.uint8); m[1:3, 1:3] = 1
    out = paste(Image(src), Image(tgt), m, (2, 2)).data
    assert (out[3:5, 3:5] == 200).all()
    assert out.sum() == 200 * 3 * 4

def _edge_case():
    tgt = np.full((8, 10, 3), 50, np.uint8); tgt[:, 5:] = 200
    src = np.full((8, 10, 3), 50, np.uint8)
    m = np.zeros((8, 10), np.uint8); m[2:6, 2:8] = 255
    return Image(src), Image(tgt), m

def test_mixed_gradients_keep_strong_target_edge():
    src, tgt, m = _edge_case()
    out = SeamlessClone(src, tgt, m, mixed=True).solve_image().data
    assert (out[3, 2:8, 0] == [50, 50, 50, 200, 200, 200]).all()
    assert (out == tgt.data).all()

def test_plain_gradients_smooth_over_target_edge():
    src, tgt, m = _edge_case()
    row = SeamlessClone(src, tgt, m, mixed=False).solve_image().data[3, 2:8, 0].astype(int)
    assert (np.diff(row) > 0).all()
    assert np.diff(row).max() < 100
    assert row[0] > 50 and row[-1] < 200
