"""Decimate stage: progressive, topology-preserving polygon reduction."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from meshmaker.core.contracts import StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)

PRESERVE_TOPOLOGY = True


class DecimateStage(BaseStage):
    name: ClassVar[StageName] = StageName.DECIMATE

    def params(self) -> dict[str, Any]:
        return {
            "target_reduction": self.config.target_reduction,
            "preserve_topology": PRESERVE_TOPOLOGY,
        }

    def validate_inputs(self, data: Any) -> bool:
        # vtkDecimatePro only accepts triangles
        return data.n_cells == 0 or data.is_all_triangles

    def run(self, data: Any):
        reduction = self.config.target_reduction
        logger.info(
            f"Running progressive decimation filter with {reduction} target reduction..."
        )
        before = data.n_cells
        result = data.decimate_pro(reduction, preserve_topology=PRESERVE_TOPOLOGY)
        logger.debug(f"Decimation: {before} -> {result.n_cells} cells")
        return result
