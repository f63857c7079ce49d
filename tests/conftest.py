"""Shared pytest fixtures for meshmaker tests."""

from pathlib import Path

import numpy as np
import pytest


def sphere_density(shape: tuple[int, int, int] = (24, 24, 24)) -> np.ndarray:
    """Density in (nz, ny, nx) order: 1.0 at the centre falling to 0.0 at radius 10."""
    nz, ny, nx = shape
    z, y, x = np.mgrid[0:nz, 0:ny, 0:nx].astype(np.float32)
    r = np.sqrt((x - nx / 2) ** 2 + (y - ny / 2) ** 2 + (z - nz / 2) ** 2)
    return np.clip(1.0 - r / 10.0, 0.0, 1.0).astype(np.float32)


def write_mrc(path: Path, density: np.ndarray, voxel_size: float = 1.0) -> Path:
    """Write ``density`` (nz, ny, nx) as a little-endian mode-2 MRC file."""
    nz, ny, nx = density.shape
    header = np.zeros(256, dtype="<i4")
    floats = header.view("<f4")
    header[0:3] = (nx, ny, nz)
    header[3] = 2  # float32
    header[7:10] = (nx, ny, nz)
    floats[10:13] = (nx * voxel_size, ny * voxel_size, nz * voxel_size)
    floats[13:16] = (90.0, 90.0, 90.0)
    header[16:19] = (1, 2, 3)
    floats[19:22] = (density.min(), density.max(), density.mean())
    header[22] = 1
    header[52] = np.frombuffer(b"MAP ", dtype="<i4")[0]
    header[53] = np.frombuffer(b"\x44\x41\x00\x00", dtype="<i4")[0]
    with open(path, "wb") as f:
        f.write(header.tobytes())
        f.write(np.ascontiguousarray(density, dtype="<f4").tobytes())
    return path


@pytest.fixture
def sample_map_file(tmp_path: Path) -> Path:
    """A 24^3 MRC map containing a soft sphere."""
    return write_mrc(tmp_path / "sphere.map", sphere_density())


@pytest.fixture
def sample_volume():
    """A pyvista.ImageData with a sphere density as active point scalars."""
    pv = pytest.importorskip("pyvista")
    grid = pv.ImageData(dimensions=(24, 24, 24))
    center = np.array([12.0, 12.0, 12.0])
    r = np.linalg.norm(grid.points - center, axis=1)
    grid.point_data["density"] = np.clip(1.0 - r / 10.0, 0.0, 1.0).astype(np.float32)
    grid.set_active_scalars("density")
    return grid


@pytest.fixture
def sample_surface(sample_volume):
    """Polygon surface of ``sample_volume`` at level 0.5."""
    return sample_volume.contour(isosurfaces=[0.5], method="contour")
