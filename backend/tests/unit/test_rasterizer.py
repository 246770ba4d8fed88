"""
栅格化器单元测试
"""

import math
import threading

import pytest

from aihr_export.config.runtime_config import FontConfig
from aihr_export.interfaces import RasterizationError
from aihr_export.models import BlockKind, ContentBlock, Page
from aihr_export.render import BlockTypesetter, PageRasterizer, StagingArea


@pytest.fixture
def typesetter() -> BlockTypesetter:
    return BlockTypesetter(FontConfig(), 794)


@pytest.fixture
def rasterizer(typesetter: BlockTypesetter) -> PageRasterizer:
    return PageRasterizer(typesetter, scale=2.0)


def _page(index: int, blocks: list[ContentBlock]) -> Page:
    page = Page(index=index, budget_px=952.8)
    for i, block in enumerate(blocks):
        block.rendered_height = 1.0
        block.suppress_top_margin = i == 0
        page.add(block)
    return page


def _text_page() -> Page:
    return _page(0, [
        ContentBlock(index=0, kind=BlockKind.SECTION_HEADER, content="Technical"),
        ContentBlock(index=1, kind=BlockKind.PARAGRAPH, content="Explain the **cache** design."),
        ContentBlock(index=2, kind=BlockKind.LIST_ITEM, content="Look for TTL trade-offs"),
    ])


class TestRasterize:
    """单页栅格化测试"""

    def test_raster_dimensions(self, rasterizer: PageRasterizer, typesetter: BlockTypesetter):
        """位图宽 = 内容宽 * 倍数；高 = 各块放置高度之和"""
        page = _text_page()
        expected = sum(
            typesetter.layout(b, 2.0).placed_height(b.suppress_top_margin) for b in page.blocks
        )
        with StagingArea(rasterizer.raster_width_px) as staging:
            raster = rasterizer.rasterize(page, staging)
        assert rasterizer.raster_width_px == 1588
        assert raster.width_px == 1588
        assert raster.height_px == math.ceil(expected)
        assert raster.scale == 2.0
        assert raster.page_index == 0

    def test_text_is_drawn(self, rasterizer: PageRasterizer):
        with StagingArea(rasterizer.raster_width_px) as staging:
            raster = rasterizer.rasterize(_text_page(), staging)
        assert raster.image.getextrema() != ((255, 255), (255, 255), (255, 255))

    def test_staging_cleared_between_pages(self, rasterizer: PageRasterizer):
        """共享暂存画布：下一页不残留上一页内容"""
        blank = _page(1, [ContentBlock(index=3, kind=BlockKind.SPACER, role="guide-end")])
        with StagingArea(rasterizer.raster_width_px) as staging:
            rasterizer.rasterize(_text_page(), staging)
            raster = rasterizer.rasterize(blank, staging)
            assert staging.clear_count == 2
        assert raster.image.getextrema() == ((255, 255), (255, 255), (255, 255))

    def test_render_failure_raises(self, rasterizer: PageRasterizer):
        """暂存画布未获取 → RasterizationError"""
        staging = StagingArea(rasterizer.raster_width_px)
        with pytest.raises(RasterizationError):
            rasterizer.rasterize(_text_page(), staging)

    def test_abort_stops_before_next_block(self, rasterizer: PageRasterizer):
        """中止标记已置位 → 不再绘制后续块，画布仍由调用方持有"""
        abort = threading.Event()
        abort.set()
        with StagingArea(rasterizer.raster_width_px) as staging:
            with pytest.raises(RasterizationError, match="中止"):
                rasterizer.rasterize(_text_page(), staging, abort)
            assert staging.acquired
