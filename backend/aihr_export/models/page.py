"""
页模型 - 分页结果与单页栅格结果
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .block import ContentBlock


class Page(BaseModel):
    """单页：有序内容块 + 累计高度"""
    index: int
    blocks: list[ContentBlock] = Field(default_factory=list)
    cumulative_height: float = 0.0
    budget_px: float

    @property
    def overflow(self) -> bool:
        """单个超高块独占一页且超出预算"""
        return len(self.blocks) == 1 and self.cumulative_height > self.budget_px

    @property
    def block_indices(self) -> list[int]:
        return [b.index for b in self.blocks]

    def add(self, block: ContentBlock) -> None:
        """追加内容块（调用方需已完成测量）"""
        self.blocks.append(block)
        self.cumulative_height += block.rendered_height or 0.0


class RasterImage(BaseModel):
    """单页位图（Pillow Image）"""
    page_index: int
    image: Any  # PIL.Image.Image
    width_px: int
    height_px: int
    scale: float

    model_config = {"arbitrary_types_allowed": True}
