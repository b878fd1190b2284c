import numpy as np
from lapwarpkit.mesh.halfedge import HalfedgeMesh

def grid_mesh(n=4, bump=0.0):
    """n x n vertex grid in the z=0 plane, two CCW triangles per cell; interior z raised by bump."""
    pts = []
    for y in range(n):
        for x in range(n):
            inner = 0 < x < n-1 and 0 < y < n-1
            pts.append((float(x), float(y), bump if inner else 0.0))
    idx = lambda x, y: y*n + x
    faces = []
    for y in range(n-1):
        for x in range(n-1):
            a, b, c, d = idx(x,y), idx(x+1,y), idx(x+1,y+1), idx(x,y+1)
            faces += [(a,b,c), (a,c,d)]
    return HalfedgeMesh(pts, faces)

def tetrahedron():
    pts = [(0,0,0), (1,0,0), (0,1,0), (0,0,1)]
    faces = [(0,2,1), (0,1,3), (1,2,3), (0,3,2)]
    return HalfedgeMesh(pts, faces)

def ramp_image(w=12, h=10):
    ys, xs = np.mgrid[0:h, 0:w]
    img = np.stack([xs*10, ys*10, (xs+ys)*5], axis=2)
    return np.clip(img, 0, 255).astype(np.uint8)
