"""Write stage: serialise the final mesh as STL, legacy VTK or XML VTP.

The mesh is first written to a ``.part`` sibling of the output path and
renamed into place only after the writer reports success, so a failed run
never leaves a truncated output file behind.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, ClassVar

from meshmaker.core.contracts import MeshMakerConfig, OutputFormat, StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)


def _stl_writer(config: MeshMakerConfig):
    from vtkmodules.vtkIOGeometry import vtkSTLWriter

    writer = vtkSTLWriter()
    if config.ascii:
        writer.SetFileTypeToASCII()
    else:
        writer.SetFileTypeToBinary()
    return writer


def _vtk_writer(config: MeshMakerConfig):
    from vtkmodules.vtkIOLegacy import vtkPolyDataWriter

    writer = vtkPolyDataWriter()
    if config.ascii:
        writer.SetFileTypeToASCII()
    else:
        writer.SetFileTypeToBinary()
    return writer


def _vtp_writer(config: MeshMakerConfig):
    from vtkmodules.vtkIOXML import vtkXMLPolyDataWriter

    writer = vtkXMLPolyDataWriter()
    if config.narrow_indices:
        writer.SetIdTypeToInt32()
    else:
        writer.SetIdTypeToInt64()
    if config.ascii:
        writer.SetDataModeToAscii()
    else:
        writer.SetDataModeToBinary()
    if config.wide_headers:
        logger.info("Using UInt64 headers...")
        writer.SetHeaderTypeToUInt64()
    else:
        logger.info("Using UInt32 headers...")
        writer.SetHeaderTypeToUInt32()
    return writer


WRITERS = {
    OutputFormat.STL: _stl_writer,
    OutputFormat.VTK: _vtk_writer,
    OutputFormat.VTP: _vtp_writer,
}


def make_writer(config: MeshMakerConfig):
    """Return a configured VTK writer for ``config.output_format``."""
    return WRITERS[config.output_format](config)


def narrow_cell_storage(mesh):
    """Copy of ``mesh`` with every cell array stored as 32-bit offsets/connectivity.

    VTK 9 stores connectivity in 64-bit arrays, which the XML writer's id
    type setting does not narrow.
    """
    narrowed = mesh.copy()
    for cells in (
        narrowed.GetVerts(),
        narrowed.GetLines(),
        narrowed.GetPolys(),
        narrowed.GetStrips(),
    ):
        if cells is not None and not cells.ConvertTo32BitStorage():
            raise ValueError("Mesh has too many points for 32-bit indices")
    return narrowed


class WriteStage(BaseStage):
    name: ClassVar[StageName] = StageName.WRITE

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "format": self.config.output_format.value,
            "ascii": self.config.ascii,
            "path": self.config.output_path,
        }
        if self.config.output_format is OutputFormat.VTP:
            params["id_type"] = "Int32" if self.config.narrow_indices else "Int64"
            params["header_type"] = "UInt64" if self.config.wide_headers else "UInt32"
        return params

    def run(self, data: Any):
        output_path = Path(self.config.output_path)
        partial_path = output_path.with_name(output_path.name + ".part")
        logger.info(f"Writing output to '{output_path}'...")

        writer = make_writer(self.config)
        writer.SetFileName(str(partial_path))
        if self.config.output_format is OutputFormat.VTP and self.config.narrow_indices:
            writer.SetInputData(narrow_cell_storage(data))
        else:
            writer.SetInputData(data)
        try:
            if writer.Write() != 1 or not partial_path.is_file():
                raise OSError(f"Could not write mesh to {output_path}")
            partial_path.replace(output_path)
        finally:
            partial_path.unlink(missing_ok=True)
        return data
