"""
分页器 - 单遍贪心装箱

算法：
    for block in blocks:
        若 当前高度 + 块高 > 预算 且 当前页非空 → 关闭当前页，新页只含该块
        否则 → 追加到当前页
    循环结束后当前页非空则关闭

策略（必须保留）：
- 自身高度超过预算的块不丢弃、不截断，独占一页，该页允许超出预算
  （"不丢内容" 优先于 "不溢出页面"）
- 页顺序 = 块顺序，不重排，不跨页交错
- 同一块序列 + 同一预算 → 分页结果恒定
- 每页首块的上外边距在栅格化前被抑制，避免与页面上边距叠加

测试要点：
- test_scenario_a: [200, 300, 250] / 500 → [[200, 300], [250]]
- test_scenario_b: [900] / 500 → [[900]]
- test_conservation: 块不丢失、不重复、不重排
"""

from __future__ import annotations

import logging

from ..interfaces import IPaginator, MeasurementError
from ..models import ContentBlock, Page

logger = logging.getLogger(__name__)


class Paginator(IPaginator):
    """贪心分页器实现"""

    def paginate(self, blocks: list[ContentBlock], budget_px: float) -> list[Page]:
        """按页预算贪心分组"""
        pages: list[Page] = []
        current = Page(index=0, budget_px=budget_px)

        for block in blocks:
            if block.rendered_height is None:
                raise MeasurementError(f"内容块未测量高度: #{block.index} ({block.kind.value})")

            height = block.rendered_height
            if current.cumulative_height + height > budget_px and current.blocks:
                pages.append(current)
                current = Page(index=len(pages), budget_px=budget_px)
            current.add(block)

        if current.blocks:
            pages.append(current)

        for page in pages:
            self._suppress_leading_margin(page)
            if page.overflow:
                logger.warning(
                    f"第{page.index + 1}页单块超高: {page.cumulative_height:.1f}px > "
                    f"{budget_px:.1f}px（整块保留，不截断）"
                )

        return pages

    @staticmethod
    def _suppress_leading_margin(page: Page) -> None:
        """页首块不保留上外边距"""
        for i, block in enumerate(page.blocks):
            block.suppress_top_margin = i == 0
