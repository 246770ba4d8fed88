"""
页预算计算器 - 由页面几何推导每页可用内容高度（像素）

pixels_per_mm = content_area_px_width / width_mm
budget_px     = (height_mm - margin_top_mm - margin_bottom_mm - safety_margin_mm) * pixels_per_mm

safety_margin_mm 用于吸收亚像素取整和字体度量差异：
内容在脱离原页面上下文单独重渲染时，没有它会悄悄溢出到页边距区域。
每个导出任务计算一次，所有页复用。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..interfaces import ConfigError

if TYPE_CHECKING:
    from ..config.runtime_config import PageGeometryConfig


class PageBudgetCalculator:
    """页预算计算器"""

    def __init__(self, geometry: PageGeometryConfig):
        self.geometry = geometry

    def pixels_per_mm(self, content_area_px_width: float) -> float:
        if content_area_px_width <= 0 or self.geometry.width_mm <= 0:
            raise ConfigError(
                f"内容区宽度无效: {content_area_px_width}px / {self.geometry.width_mm}mm"
            )
        return content_area_px_width / self.geometry.width_mm

    def usable_height_mm(self) -> float:
        g = self.geometry
        return g.height_mm - g.margin_top_mm - g.margin_bottom_mm - g.safety_margin_mm

    def compute(self, content_area_px_width: float) -> float:
        """计算每页可用内容高度（像素）"""
        usable_mm = self.usable_height_mm()
        if usable_mm <= 0:
            raise ConfigError(f"页面可用高度无效: {usable_mm}mm")
        return usable_mm * self.pixels_per_mm(content_area_px_width)
