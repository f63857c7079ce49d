"""Decode stage: read an MRC/MAP density map into a regular scalar grid."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, ClassVar

import numpy as np

from meshmaker.core.contracts import StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)

HEADER_BYTES = 1024

# MRC mode -> bytes per voxel
MODE_SIZES = {0: 1, 1: 2, 2: 4, 3: 4, 4: 8, 6: 2, 12: 2}


def check_mrc_header(path: Path) -> tuple[int, int, int]:
    """Validate the MRC header against the file size and return (nx, ny, nz).

    Raises ``ValueError`` for a file that is too short, has an unknown mode
    or non-positive dimensions, or holds fewer voxel bytes than its header
    promises. VTK's reader zero-fills or aborts on such files instead of
    reporting an error.
    """
    size = path.stat().st_size
    if size < HEADER_BYTES:
        raise ValueError(f"{path} is too short for an MRC header ({size} bytes)")

    with open(path, "rb") as f:
        raw = f.read(HEADER_BYTES)
    # machine stamp 0x11 marks big-endian files, everything else is read little-endian
    byte_order = ">" if raw[212] == 0x11 else "<"
    words = np.frombuffer(raw, dtype=f"{byte_order}i4")

    nx, ny, nz, mode = (int(v) for v in words[0:4])
    nsymbt = int(words[23])
    if min(nx, ny, nz) <= 0:
        raise ValueError(f"{path}: invalid MRC dimensions {nx} x {ny} x {nz}")
    if mode not in MODE_SIZES:
        raise ValueError(f"{path}: unsupported MRC mode {mode}")
    if nsymbt < 0:
        raise ValueError(f"{path}: invalid extended header size {nsymbt}")

    expected = HEADER_BYTES + nsymbt + nx * ny * nz * MODE_SIZES[mode]
    if size < expected:
        raise ValueError(
            f"{path} is truncated: header describes {expected} bytes, file has {size}"
        )
    return nx, ny, nz


def read_volume(path: Path):
    """Read ``path`` with VTK's MRC reader and wrap the result as ``pyvista.ImageData``."""
    check_mrc_header(path)

    import pyvista as pv
    from vtkmodules.vtkIOImage import vtkMRCReader

    reader = vtkMRCReader()
    reader.SetFileName(str(path))
    with pv.VtkErrorCatcher(raise_errors=True):
        reader.Update()
    grid = pv.wrap(reader.GetOutput())
    if grid is None or grid.n_points == 0:
        raise RuntimeError(f"No volume data decoded from {path}")
    return grid


class DecodeStage(BaseStage):
    name: ClassVar[StageName] = StageName.DECODE

    def params(self) -> dict[str, Any]:
        return {"input_path": self.config.input_path}

    def validate_inputs(self, data: Any) -> bool:
        path = Path(self.config.input_path)
        if not path.is_file():
            raise FileNotFoundError(f"MRC/MAP file not found: {path}")
        return True

    def run(self, data: Any):
        logger.info(f"Reading MRC/MAP file...{self.config.input_path}")
        grid = read_volume(Path(self.config.input_path))
        logger.info(f"Volume dimensions {grid.dimensions}, spacing {grid.spacing}")
        return grid
