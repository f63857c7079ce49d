"""Smooth stage: Laplacian relaxation of vertex positions, topology unchanged."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from meshmaker.core.contracts import StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)


class SmoothStage(BaseStage):
    name: ClassVar[StageName] = StageName.SMOOTH

    def params(self) -> dict[str, Any]:
        return {"iterations": self.config.smooth_iterations}

    def run(self, data: Any):
        n_iter = self.config.smooth_iterations
        logger.info(f"Running smoothing filter with {n_iter} iterations...")
        return data.smooth(n_iter=n_iter)
