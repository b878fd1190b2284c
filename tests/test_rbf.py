import numpy as np
from lapwarpkit.warp.rbf import RBFWarper, fit_affine
from lapwarpkit.warp.points import ControlPoint

def test_rbf_single_point_is_pure_translation():
    w = RBFWarper()
    w.set_control_points([ControlPoint(10,20,13,18)])
    for x, y in [(0,0), (10,20), (100.5,-3.25)]:
        assert np.allclose(w.warp(x, y), (x+3, y-2))

def test_rbf_reproduces_targets():
    # uneven spacing: nearest-neighbour radii 5, 5, 55.9, 71.6, 72.8
    pts = [ControlPoint(0,0,2,1), ControlPoint(5,0,9,3), ControlPoint(60,10,55,14),
           ControlPoint(20,70,26,66), ControlPoint(90,90,84,95)]
    w = RBFWarper(mu=1.0)
    w.set_control_points(pts)
    for p in pts:
        assert np.allclose(w.warp(p.src_x, p.src_y), p.tar, atol=1e-3)

def test_rbf_affine_data_has_no_correction():
    src = np.array([[0,0],[10,0],[0,10],[10,10]], dtype=float)
    A = np.array([[1.2, 0.1],[-0.2, 0.9]]); b = np.array([3.0, -1.0])
    tar = src @ A.T + b
    w = RBFWarper()
    w.set_control_points([ControlPoint(*s, *t) for s, t in zip(src, tar)])
    assert np.allclose(w.A, A) and np.allclose(w.b, b)
    assert np.allclose(w.warp(5, 7), A @ [5, 7] + b, atol=1e-6)

def test_rbf_two_points_scale_and_translate():
    src = np.array([[0.0,0.0],[1.0,0.0]]); tar = np.array([[1.0,1.0],[3.0,1.0]])
    A, b = fit_affine(src, tar)
    assert np.allclose(A, 2*np.eye(2), atol=1e-5)
    assert np.allclose(b, [1, 1])

def test_rbf_clamps_to_image_bounds():
    w = RBFWarper(image_size=(50, 40))
    w.set_control_points([ControlPoint(10,10,30,10)])
    x, y = w.warp(45, 39)
    assert x == 49.0 and y == 39.0
    assert w.warp(-30, 5)[0] == 0.0

def test_rbf_unconfigured_returns_input():
    w = RBFWarper(image_size=(10, 10))
    assert w.warp(100.0, -4.0) == (100.0, -4.0)

def test_rbf_vectorised_matches_scalar_on_uneven_points():
    pts = [ControlPoint(0,0,2,1), ControlPoint(5,0,9,3), ControlPoint(60,10,55,14),
           ControlPoint(20,70,26,66), ControlPoint(90,90,84,95)]
    w = RBFWarper(mu=1.0, image_size=(100, 100))
    w.set_control_points(pts)
    src = np.array([p.src for p in pts]); tar = np.array([p.tar for p in pts])
    assert np.allclose(w.warp_points(src), tar, atol=1e-3)
    xy = np.array([[30.0, 40.0], [70.5, 3.0]])
    assert np.allclose(w.warp_points(xy), [w.warp(x, y) for x, y in xy])
