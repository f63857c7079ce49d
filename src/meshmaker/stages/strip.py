"""Strip stage: reorganise triangles into triangle strips."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from meshmaker.core.contracts import StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)

MAX_STRIP_LENGTH = 1000


class StripStage(BaseStage):
    name: ClassVar[StageName] = StageName.STRIP

    def params(self) -> dict[str, Any]:
        return {"max_length": MAX_STRIP_LENGTH}

    def run(self, data: Any):
        logger.info("Generating triangle strips...")
        return data.strip(max_length=MAX_STRIP_LENGTH)
