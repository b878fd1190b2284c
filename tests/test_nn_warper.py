import numpy as np
import pytest
from lapwarpkit.warp.points import ControlPoint

torch = pytest.importorskip("torch")
from lapwarpkit.warp.nn import NNWarper

def make_points():
    return [ControlPoint(10,10,12,12), ControlPoint(90,10,88,14), ControlPoint(10,90,14,86),
            ControlPoint(90,90,86,88), ControlPoint(50,50,52,50)]

def test_nn_warper_is_deterministic():
    a = NNWarper(image_size=(100,100), epochs=50, seed=3)
    b = NNWarper(image_size=(100,100), epochs=50, seed=3)
    a.set_control_points(make_points()); b.set_control_points(make_points())
    xy = np.array([[20.0,30.0],[70.0,60.0]])
    assert np.allclose(a.warp_points(xy), b.warp_points(xy))

def test_nn_warper_learns_rough_mapping():
    w = NNWarper(image_size=(100,100), hidden=16, epochs=1500, lr=1e-2, seed=0)
    w.set_control_points(make_points())
    x, y = w.warp(50, 50)
    assert np.isfinite(x) and np.isfinite(y)
    assert abs(x - 52) < 20 and abs(y - 50) < 20

def test_nn_warper_unconfigured_is_identity():
    w = NNWarper(image_size=(10,10))
    assert w.warp(3.0, 4.0) == (3.0, 4.0)
