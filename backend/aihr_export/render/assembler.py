"""
文档装配器 - 每页一张位图，组装为固定页面尺寸的PDF

职责：
1. 按页序添加物理页（第一页之前不额外加页）
2. 位图按文档全宽缩放（保持宽高比），向下偏移上边距，避开页眉区域
3. 延迟落页：页面状态先缓存，待总页数确定后由页眉页脚盖章统一落页

依赖：
- reportlab: PDF画布、图片嵌入
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, BinaryIO, Callable

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..interfaces import AssemblyError, IDocumentAssembler

if TYPE_CHECKING:
    from ..config.runtime_config import PageGeometryConfig
    from ..models import RasterImage

logger = logging.getLogger(__name__)


class DeferredPageCanvas(canvas.Canvas):
    """延迟落页画布：showPage 只缓存页面状态，flush 时逐页回放"""

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._deferred_pages: list[dict] = []

    def showPage(self) -> None:
        self._deferred_pages.append(dict(self.__dict__))
        self._startPage()

    @property
    def deferred_count(self) -> int:
        return len(self._deferred_pages)

    def flush(self, on_page: Callable[[DeferredPageCanvas, int, int], None]) -> int:
        """逐页回放并回调 on_page(canvas, 页码, 总页数)，返回落页数"""
        pages = self._deferred_pages
        total = len(pages)
        for number, state in enumerate(pages, start=1):
            self.__dict__.update(state)
            on_page(self, number, total)
            canvas.Canvas.showPage(self)
        self._deferred_pages = []
        return total


class DocumentAssembler(IDocumentAssembler):
    """文档装配器实现"""

    def __init__(self, geometry: PageGeometryConfig):
        self.geometry = geometry
        self.page_width = geometry.width_mm * mm
        self.page_height = geometry.height_mm * mm

    def assemble(self, rasters: list[RasterImage], target: BinaryIO) -> DeferredPageCanvas:
        """放置所有页位图，返回尚未盖章的画布"""
        pdf = DeferredPageCanvas(target, pagesize=(self.page_width, self.page_height))
        pdf.setCreator("AIHR Studio")

        try:
            for i, raster in enumerate(rasters):
                if i > 0:
                    pdf.showPage()
                self._place_image(pdf, raster)
            if rasters:
                pdf.showPage()
        except Exception as e:
            raise AssemblyError(f"PDF装配失败: {e}") from e

        logger.debug(f"已装配 {pdf.deferred_count} 页")
        return pdf

    def _place_image(self, pdf: DeferredPageCanvas, raster: RasterImage) -> None:
        """位图按全宽缩放，顶部对齐到上边距下方"""
        if raster.width_px <= 0 or raster.height_px <= 0:
            raise AssemblyError(f"第{raster.page_index + 1}页位图尺寸无效")
        image_width = self.page_width
        image_height = raster.height_px * image_width / raster.width_px
        y = self.page_height - self.geometry.margin_top_mm * mm - image_height
        pdf.drawImage(
            ImageReader(raster.image),
            0,
            y,
            width=image_width,
            height=image_height,
            mask=None,
        )
