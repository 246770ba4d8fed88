"""
栅格化器 - 单页内容块独立渲染为固定分辨率位图

职责：
1. 在与真实版面同宽的暂存画布上，只渲染本页的内容块子集
2. 页首块按分页结果抑制上外边距
3. 以固定过采样倍数（默认2x）输出，保证打印质量

测试要点：
- test_rasterize_dimensions: 位图宽 = 内容宽 * 倍数
- test_staging_cleared_between_pages: 上一页内容不会残留到下一页
- test_render_failure_raises: 渲染异常 → RasterizationError
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ..interfaces import IRasterizer, RasterizationError
from ..models import RasterImage

if TYPE_CHECKING:
    import threading

    from ..models import Page
    from .staging import StagingArea
    from .typesetter import BlockTypesetter

logger = logging.getLogger(__name__)


class PageRasterizer(IRasterizer):
    """页栅格化器实现"""

    def __init__(self, typesetter: BlockTypesetter, scale: float = 2.0):
        self.typesetter = typesetter
        self.scale = scale

    @property
    def raster_width_px(self) -> int:
        return math.ceil(self.typesetter.content_width_px * self.scale)

    def rasterize(
        self,
        page: Page,
        staging: StagingArea,
        abort: threading.Event | None = None,
    ) -> RasterImage:
        """在暂存画布上独立渲染一页（abort 置位后在下一块之前放弃）"""
        try:
            layouts = [self.typesetter.layout(block, self.scale) for block in page.blocks]
            heights = [
                layout.placed_height(block.suppress_top_margin)
                for layout, block in zip(layouts, page.blocks)
            ]
            total_height = max(1.0, sum(heights))

            draw = staging.clear(total_height)
            y = 0.0
            for layout, block, height in zip(layouts, page.blocks, heights):
                if abort is not None and abort.is_set():
                    raise RasterizationError(f"第{page.index + 1}页渲染已中止")
                top = y + (0.0 if block.suppress_top_margin else layout.margin_top)
                self.typesetter.draw(draw, layout, top)
                y += height

            image = staging.snapshot(total_height)
        except RasterizationError:
            raise
        except Exception as e:
            raise RasterizationError(f"第{page.index + 1}页渲染失败: {e}") from e

        logger.debug(
            f"第{page.index + 1}页栅格化完成: {len(page.blocks)}块, "
            f"{image.width}x{image.height}px"
        )
        return RasterImage(
            page_index=page.index,
            image=image,
            width_px=image.width,
            height_px=image.height,
            scale=self.scale,
        )
