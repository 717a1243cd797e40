"""
Triply periodic minimal surface (TPMS) lattices.

A lattice keeps the part of a solid where a periodic field falls below
an iso value. The field is sampled on a regular grid over the solid's
bounding box and meshed with marching cubes.
"""

from __future__ import annotations

from typing import Callable, Tuple
import math

import numpy as np
from skimage import measure

from .mesh import Mesh, outward

Field = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]

# Ray jitter that keeps parity rays off mesh edges and vertices.
_JITTER = (1.0 / math.e * 1e-7, 1.0 / math.pi * 1e-7)


def gyroid(x, y, z):
    return (np.sin(x) * np.cos(y)
            + np.sin(y) * np.cos(z)
            + np.sin(z) * np.cos(x))


def schwarz_p(x, y, z):
    return np.cos(x) + np.cos(y) + np.cos(z)


def schwarz_d(x, y, z):
    sx, sy, sz = np.sin(x), np.sin(y), np.sin(z)
    cx, cy, cz = np.cos(x), np.cos(y), np.cos(z)
    return sx * sy * sz + sx * cy * cz + cx * sy * cz + cx * cy * sz


FIELDS = {
    "gyroid": gyroid,
    "schwarz_p": schwarz_p,
    "schwarz_d": schwarz_d,
}


def sample_grid(mesh: Mesh, resolution: int) -> Tuple[np.ndarray, float, Tuple[int, int, int]]:
    """
    Grid covering the bounding box of ``mesh`` padded by one cell.

    Returns ``(origin, step, shape)``; ``resolution`` is the sample count
    along the longest axis of the box.
    """
    if resolution < 2:
        raise ValueError("lattice resolution must be at least 2")
    lo, hi = mesh.bounding_box()
    extent = hi - lo
    longest = float(extent.max())
    if longest <= 0.0:
        raise ValueError("lattice input has no volume")
    step = longest / (resolution - 1)
    counts = [max(2, int(math.ceil(e / step - 1e-9)) + 1) for e in extent]
    shape = tuple(c + 2 for c in counts)
    return lo - step, step, shape


def inside_mask(mesh: Mesh, xs: np.ndarray, ys: np.ndarray, zs: np.ndarray) -> np.ndarray:
    """
    Boolean ``(len(xs), len(ys), len(zs))`` array, True where the grid
    point lies inside ``mesh``.

    Casts one +x ray per (y, z) column and counts surface crossings
    beyond each sample.
    """
    tris = mesh.triangles()
    mask = np.zeros((len(xs), len(ys), len(zs)), dtype=bool)
    if len(tris) == 0:
        return mask
    a, b, c = tris[:, 0], tris[:, 1], tris[:, 2]
    d = (b - a)[:, 1:]
    e = (c - a)[:, 1:]
    denom = d[:, 0] * e[:, 1] - d[:, 1] * e[:, 0]
    usable = np.abs(denom) > 1e-15
    a, b, c, d, e, denom = a[usable], b[usable], c[usable], d[usable], e[usable], denom[usable]

    gy, gz = np.meshgrid(ys + _JITTER[0], zs + _JITTER[1], indexing="ij")
    points = np.stack([gy.ravel(), gz.ravel()], axis=1)
    w = points[:, None, :] - a[None, :, 1:]
    s = (w[..., 0] * e[None, :, 1] - w[..., 1] * e[None, :, 0]) / denom[None, :]
    t = (d[None, :, 0] * w[..., 1] - d[None, :, 1] * w[..., 0]) / denom[None, :]
    hit = (s >= 0.0) & (t >= 0.0) & (s + t <= 1.0)
    x_hit = a[None, :, 0] + s * (b - a)[None, :, 0] + t * (c - a)[None, :, 0]

    for index in range(len(points)):
        hits = np.sort(x_hit[index][hit[index]])
        beyond = len(hits) - np.searchsorted(hits, xs, side="right")
        j, k = divmod(index, len(zs))
        mask[:, j, k] = (beyond % 2) == 1
    return mask


def lattice(mesh: Mesh, field: Field, resolution: int, period: float,
            iso: float, fill: float = 1.0) -> Mesh:
    """
    Intersect ``mesh`` with the region ``field < iso`` of a TPMS with
    cell size ``period``.
    """
    if period <= 0.0:
        raise ValueError("lattice period must be positive")
    if fill <= 0.0:
        raise ValueError("lattice fill value must be positive")
    origin, step, shape = sample_grid(mesh, resolution)
    xs = origin[0] + step * np.arange(shape[0])
    ys = origin[1] + step * np.arange(shape[1])
    zs = origin[2] + step * np.arange(shape[2])
    k = 2.0 * math.pi / period
    gx, gy, gz = np.meshgrid(xs, ys, zs, indexing="ij")
    values = field(k * gx, k * gy, k * gz) - iso
    volume = np.where(inside_mask(mesh, xs, ys, zs), values, fill)
    if volume.min() >= 0.0:
        raise ValueError("lattice surface is empty at this iso value and resolution")
    verts, faces, _, _ = measure.marching_cubes(volume, level=0.0, spacing=(step, step, step))
    verts = verts + origin
    return outward(Mesh.from_faces(verts, faces).polygons)
