"""Triangulate stage: split every polygon into triangles."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from meshmaker.core.contracts import StageName
from meshmaker.core.stage_base import BaseStage

logger = logging.getLogger(__name__)


class TriangulateStage(BaseStage):
    name: ClassVar[StageName] = StageName.TRIANGULATE

    def run(self, data: Any):
        logger.info("Running triangle filter...")
        return data.triangulate()
