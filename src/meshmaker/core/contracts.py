"""Pydantic models shared by the option builder and the pipeline stages."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class OutputFormat(str, Enum):
    """Mesh file formats the writer stage can produce."""

    STL = "stl"
    VTK = "vtk"
    VTP = "vtp"

    @property
    def extension(self) -> str:
        return self.value


class StageName(str, Enum):
    DECODE = "decode"
    EXTRACT = "extract"
    TRIANGULATE = "triangulate"
    SMOOTH = "smooth"
    DECIMATE = "decimate"
    STRIP = "strip"
    WRITE = "write"


class MeshMakerConfig(BaseModel):
    """Fully resolved processing options for one volume-to-mesh run.

    Instances are frozen: stages read the config but never modify it.
    ``output_path`` is derived from the prefix and the format and cannot be set.
    """

    model_config = ConfigDict(frozen=True)

    input_path: str = Field(..., min_length=1, description="MRC/MAP volume to read")
    contour_level: float = Field(0.0, description="Isovalue at which the surface is built")
    output_prefix: str = Field("out", description="Output filename prefix (extension added)")
    output_format: OutputFormat = Field(OutputFormat.VTP, description="Output mesh format")
    decimate: bool = Field(False, description="Run progressive decimation")
    target_reduction: float = Field(0.9, description="Fraction of polygons to remove, in (0, 1)")
    smooth: bool = Field(False, description="Run Laplacian smoothing")
    smooth_iterations: int = Field(20, description="Number of smoothing iterations")
    ascii: bool = Field(False, description="Write ASCII instead of binary")
    wide_headers: bool = Field(False, description="VTP headers as UInt64 instead of UInt32")
    narrow_indices: bool = Field(False, description="VTP ids as Int32 instead of Int64")
    verbose: bool = Field(False, description="Log stage progress")

    @model_validator(mode="after")
    def _check_target_reduction(self) -> "MeshMakerConfig":
        if self.decimate and not target_reduction_in_range(self.target_reduction):
            raise ValueError(
                f"target_reduction must lie in (0, 1) when decimating, got {self.target_reduction}"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def output_path(self) -> str:
        return f"{self.output_prefix}.{self.output_format.extension}"


def target_reduction_in_range(value: float) -> bool:
    """True when ``value`` lies strictly inside (0, 1). NaN is out of range."""
    return not math.isnan(value) and 0.0 < value < 1.0


class StageMeta(BaseModel):
    """Record of one executed stage, kept for the run summary."""

    stage: StageName
    elapsed_seconds: float = 0.0
    params: dict[str, Any] = Field(default_factory=dict)
    num_points: int = 0
    num_cells: int = 0


class PipelineResult(BaseModel):
    output_path: str
    stages: list[StageMeta] = Field(default_factory=list)

    @property
    def stage_names(self) -> list[StageName]:
        return [meta.stage for meta in self.stages]
