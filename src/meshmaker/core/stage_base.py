"""Base class for all mesh pipeline stages.

A stage takes the data produced by the previous stage (a volume for the
first stage after decoding, a polygon mesh afterwards), owns it for the
duration of ``run``, and returns a new object for the next stage. Stages
read the frozen ``MeshMakerConfig`` but never modify it.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .contracts import MeshMakerConfig, StageMeta, StageName
from .errors import StageError

logger = logging.getLogger(__name__)


class BaseStage(ABC):
    """Abstract base for pipeline stages.

    Subclasses must:
    1. Set the ``name`` class variable to their ``StageName``
    2. Implement run()
    3. Optionally override validate_inputs() and params()

    Example:
        class SmoothStage(BaseStage):
            name = StageName.SMOOTH

            def params(self) -> dict: return {"iterations": self.config.smooth_iterations}
            def run(self, data): return data.smooth(n_iter=self.config.smooth_iterations)
    """

    name: ClassVar[StageName]

    def __init__(self, config: MeshMakerConfig):
        self.config = config

    @abstractmethod
    def run(self, data: Any) -> Any:
        """Execute this stage. Returns the data handed to the next stage."""
        ...

    def validate_inputs(self, data: Any) -> bool:
        """Check that the incoming data is usable. Stages override as needed."""
        return True

    def params(self) -> dict[str, Any]:
        """Collaborator parameters taken from the config, for logging and the run summary."""
        return {}

    def execute(self, data: Any) -> tuple[Any, StageMeta]:
        """Run with logging, timing, and validation.

        Any failure is re-raised as ``StageError`` naming this stage.
        """
        stage_name = self.name.value
        logger.debug(f"[{stage_name}] Validating inputs...")
        try:
            if not self.validate_inputs(data):
                raise ValueError("Input validation failed")
            t0 = time.time()
            result = self.run(data)
            elapsed = time.time() - t0
        except StageError:
            raise
        except Exception as exc:
            logger.error(f"[{stage_name}] Failed: {exc}")
            raise StageError(stage_name, exc) from exc

        num_points = int(getattr(result, "n_points", 0) or 0)
        num_cells = int(getattr(result, "n_cells", 0) or 0)
        logger.info(
            f"[{stage_name}] Done in {elapsed:.1f}s "
            f"({num_points} points, {num_cells} cells)"
        )
        meta = StageMeta(
            stage=self.name,
            elapsed_seconds=elapsed,
            params=self.params(),
            num_points=num_points,
            num_cells=num_cells,
        )
        return result, meta
