"""Extract stage: isosurface of the volume at the configured contour level."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from meshmaker.core.contracts import StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)


class ExtractStage(BaseStage):
    name: ClassVar[StageName] = StageName.EXTRACT

    def params(self) -> dict[str, Any]:
        return {"contour_level": self.config.contour_level}

    def validate_inputs(self, data: Any) -> bool:
        return data is not None and data.n_points > 0

    def run(self, data: Any):
        level = self.config.contour_level
        logger.info(f"Running contour filter at level {level}...")
        surface = data.contour(isosurfaces=[level], method="contour")
        if surface.n_cells == 0:
            low, high = data.get_data_range()
            logger.warning(
                f"Contour level {level} produced an empty surface "
                f"(volume range {low:g} to {high:g})"
            )
        return surface
