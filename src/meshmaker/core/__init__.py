"""meshmaker core: option builder, pipeline assembler, base stage, shared contracts."""

from .contracts import MeshMakerConfig, OutputFormat, PipelineResult, StageMeta, StageName
from .errors import ConfigurationError, HelpRequested, StageError
from .logging import setup_logging
from .options import BuildResult, build_config, parse_args
from .pipeline import assemble_stages, run_pipeline
from .stage_base import BaseStage

__all__ = [
    "BaseStage",
    "BuildResult",
    "ConfigurationError",
    "HelpRequested",
    "MeshMakerConfig",
    "OutputFormat",
    "PipelineResult",
    "StageError",
    "StageMeta",
    "StageName",
    "assemble_stages",
    "build_config",
    "parse_args",
    "run_pipeline",
    "setup_logging",
]
