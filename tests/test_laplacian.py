import numpy as np
import pytest
from lapwarpkit.errors import FactorizationError, IllPosedSystemError
from lapwarpkit.solve.laplacian import DirichletLaplacian

def grid_problem(w=6, h=5, c=42.0):
    nodes = [(x, y) for y in range(h) for x in range(w)]
    ring = {(x, y) for (x, y) in nodes if x in (0, w-1) or y in (0, h-1)}
    free = [n for n in nodes if n not in ring]
    def neighbors(n):
        x, y = n
        for dx, dy in ((0,-1),(0,1),(-1,0),(1,0)):
            if 0 <= x+dx < w and 0 <= y+dy < h:
                yield (x+dx, y+dy), 1.0
    return free, neighbors, {r: [c] for r in ring}

def test_constant_boundary_gives_constant_solution():
    free, nbrs, fixed = grid_problem(c=42.0)
    sol = DirichletLaplacian(free, nbrs, fixed).solve()
    assert np.allclose(sol[0], 42.0)

def test_linear_boundary_is_reproduced():
    free, nbrs, fixed = grid_problem(w=7, h=6)
    fixed = {n: [2.0*n[0] - n[1]] for n in fixed}
    s = DirichletLaplacian(free, nbrs, fixed)
    sol = s.solve()[0]
    expect = np.array([2.0*x - y for x, y in s.nodes])
    assert np.allclose(sol, expect)

def test_second_solve_reuses_factorization():
    free, nbrs, fixed = grid_problem()
    s = DirichletLaplacian(free, nbrs, fixed)
    assert s.state == "unbuilt"
    a = s.solve()[0].copy()
    assert s.state == "solved"
    b = s.solve()[0]
    assert np.array_equal(a, b)
    assert s.rebuild_count == 1 and s.factorization_count == 1

def test_new_boundary_values_keep_topology():
    free, nbrs, fixed = grid_problem(c=1.0)
    s = DirichletLaplacian(free, nbrs, fixed)
    s.solve()
    s.set_fixed({k: [7.0] for k in fixed})
    assert np.allclose(s.solve()[0], 7.0)
    assert s.rebuild_count == 1 and s.factorization_count == 1

def test_invalidate_forces_rebuild():
    free, nbrs, fixed = grid_problem()
    s = DirichletLaplacian(free, nbrs, fixed, channels=2)
    s.solve()
    assert s.factorization_count == 2
    s.invalidate()
    s.solve()
    assert s.rebuild_count == 2 and s.factorization_count == 4
    assert s.stats().version == 2

def test_insertion_order_is_stable():
    free, nbrs, fixed = grid_problem()
    s = DirichletLaplacian(free, nbrs, fixed)
    s.build_system()
    assert s.nodes == free
    assert all(s.index[n] == i for i, n in enumerate(free))

def test_unreachable_component_raises():
    free, nbrs, _ = grid_problem()
    with pytest.raises(IllPosedSystemError):
        DirichletLaplacian(free, nbrs, {}).solve()

def test_anchor_mode_pins_floating_component():
    nodes = ["a", "b", "c"]
    adj = {"a": [("b", 1.0)], "b": [("a", 1.0), ("c", 1.0)], "c": [("b", 1.0)]}
    s = DirichletLaplacian(nodes, lambda n: adj[n], {}, floating="anchor")
    sol = s.solve()[0]
    assert s.anchors == [0]
    assert np.allclose(sol, 0.0)

def test_singular_matrix_reports_factorization_error():
    adj = {"a": [("b", 1.0), ("f", 1.0)], "b": [("a", 4.0), ("f", -2.0)]}
    s = DirichletLaplacian(["a", "b"], lambda n: adj[n], {"f": [1.0]})
    with pytest.raises(FactorizationError):
        s.solve()

def test_empty_free_set_solves_to_nothing():
    s = DirichletLaplacian([], lambda n: [], {})
    assert s.solve()[0].size == 0 and s.factorization_count == 0
