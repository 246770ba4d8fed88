"""
块高度测量器 - 基于字体度量的 measureBlock 实现

测量结果即排版器在 scale=1 下的块高度（含上下外边距）。
测不出高度时直接失败，不使用默认高度兜底（兜底会导致悄无声息的溢出）。
"""

from __future__ import annotations

from ..interfaces import IBlockMeasurer, MeasurementError
from ..models import ContentBlock
from ..render.typesetter import BlockTypesetter


class FontMetricsMeasurer(IBlockMeasurer):
    """字体度量测量器"""

    def __init__(self, typesetter: BlockTypesetter):
        self.typesetter = typesetter

    def measure_block(self, block: ContentBlock) -> float:
        try:
            height = self.typesetter.layout(block, scale=1.0).height
        except Exception as e:
            raise MeasurementError(
                f"内容块高度测量失败: #{block.index} ({block.kind.value}): {e}"
            ) from e

        if height <= 0:
            raise MeasurementError(f"内容块高度无效: #{block.index} = {height}")
        return height
