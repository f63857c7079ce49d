"""Pipeline assembler: decide which stages run, in what order, and run them."""

from __future__ import annotations

import importlib
import logging
from typing import Any

from .contracts import MeshMakerConfig, PipelineResult, StageName
from .stage_base import BaseStage

logger = logging.getLogger(__name__)

STAGE_PACKAGE = "meshmaker.stages"


def assemble_stages(config: MeshMakerConfig) -> list[StageName]:
    """Ordered stage chain for ``config``.

    Decode and Extract always run, Strip and Write always close the chain.
    Triangulate runs only when smoothing or decimation is enabled, and
    Smooth always comes before Decimate.
    """
    stages = [StageName.DECODE, StageName.EXTRACT]
    if config.decimate or config.smooth:
        stages.append(StageName.TRIANGULATE)
        if config.smooth:
            stages.append(StageName.SMOOTH)
        if config.decimate:
            stages.append(StageName.DECIMATE)
    stages += [StageName.STRIP, StageName.WRITE]
    return stages


def import_stage_class(stage: StageName) -> type[BaseStage]:
    """Import the stage class for ``stage`` from ``meshmaker.stages.<name>``.

    Looks for a ``BaseStage`` subclass whose ``name`` matches.
    """
    module = importlib.import_module(f"{STAGE_PACKAGE}.{stage.value}")
    for attr_name in dir(module):
        attr = getattr(module, attr_name)
        if (
            isinstance(attr, type)
            and issubclass(attr, BaseStage)
            and attr is not BaseStage
            and getattr(attr, "name", None) is stage
        ):
            return attr
    raise ImportError(f"No Stage class found in {STAGE_PACKAGE}.{stage.value}")


def build_pipeline(config: MeshMakerConfig) -> list[BaseStage]:
    """Instantiate the assembled stages, all sharing the same frozen config."""
    return [import_stage_class(stage)(config) for stage in assemble_stages(config)]


def describe_stages(config: MeshMakerConfig) -> list[tuple[StageName, dict[str, Any]]]:
    """(stage, collaborator parameters) for each stage in the chain."""
    return [(stage.name, stage.params()) for stage in build_pipeline(config)]


def run_pipeline(config: MeshMakerConfig) -> PipelineResult:
    """Run every assembled stage, feeding each output to the next stage.

    Raises ``StageError`` from the first stage that fails; later stages do
    not run.
    """
    stages = build_pipeline(config)
    logger.info(
        f"Pipeline with {len(stages)} stages: "
        + " -> ".join(stage.name.value for stage in stages)
    )

    result = PipelineResult(output_path=config.output_path)
    data: Any = None
    for stage in stages:
        logger.debug(f"--- Stage: {stage.name.value} ---")
        data, meta = stage.execute(data)
        result.stages.append(meta)

    logger.info(f"Pipeline complete: {config.output_path}")
    return result
