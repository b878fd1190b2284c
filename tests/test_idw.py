import numpy as np
from lapwarpkit.warp.idw import IDWWarper
from lapwarpkit.warp.points import ControlPoint

def make_points():
    return [ControlPoint(10,10,12,11), ControlPoint(50,10,48,15), ControlPoint(10,60,14,58),
            ControlPoint(50,60,55,62), ControlPoint(30,35,30,40)]

def test_idw_interpolates_control_points_exactly():
    w = IDWWarper(); pts = make_points()
    w.set_control_points(pts)
    for p in pts:
        assert w.warp(p.src_x, p.src_y) == (p.tar_x, p.tar_y)

def test_idw_single_point_is_translation():
    w = IDWWarper()
    w.set_control_points([ControlPoint(5,5,8,3)])
    assert np.allclose(w.warp(0,0), (3,-2))
    assert np.allclose(w.warp(20,7), (23,5))

def test_idw_vectorised_matches_scalar():
    w = IDWWarper(); w.set_control_points(make_points())
    xy = np.array([[0,0],[10,10],[25.5,33.2],[70,5]], dtype=float)
    vec = w.warp_points(xy)
    ref = np.array([w.warp(x, y) for x, y in xy])
    assert np.allclose(vec, ref)

def test_idw_coincident_sources_do_not_blow_up():
    w = IDWWarper()
    w.set_control_points([ControlPoint(5,5,6,6), ControlPoint(5,5,9,9), ControlPoint(20,5,20,5)])
    assert w.warp(5,5) == (6.0, 6.0)
    assert np.all(np.isfinite(w.warp(12,3)))
    assert np.allclose(w.T[0], np.eye(2))

def test_idw_unconfigured_is_identity():
    w = IDWWarper()
    assert w.warp(3.5, 4.0) == (3.5, 4.0)
    assert np.allclose(w.warp_points(np.array([[1.0, 2.0]])), [[1.0, 2.0]])

def test_idw_collinear_points_fall_back_to_identity_matrix():
    w = IDWWarper()
    w.set_control_points([ControlPoint(0,0,1,0), ControlPoint(10,0,11,0)])
    assert np.allclose(w.T[0], np.eye(2)) and np.allclose(w.T[1], np.eye(2))
