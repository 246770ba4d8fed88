"""
内容块模型 - 原子、不可拆分的可视单元

内容块是分页的最小单位：一个块永远不会被拆到两页上。
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BlockKind(str, Enum):
    """内容块类型"""
    SECTION_HEADER = "section-header"
    SUBSECTION_HEADER = "subsection-header"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list-item"
    NUMBERED_ITEM = "numbered-item"
    RULE = "rule"
    SPACER = "spacer"
    TABLE_ROW = "table-row-equivalent"


class BlockTone(str, Enum):
    """块配色"""
    NORMAL = "normal"
    DANGER = "danger"    # 风险条目
    ACCENT = "accent"    # 指标/摘要强调


class CellStyle(str, Enum):
    """单元格文字样式"""
    BODY = "body"
    STRONG = "strong"
    MUTED = "muted"
    TITLE = "title"
    SCORE = "score"


class BlockCell(BaseModel):
    """表格行等价块中的单元格（12栅格）"""
    text: str = ""
    label: str | None = None  # 文字上方的小标签
    note: str | None = None  # 文字下方的小注
    span: int = Field(12, ge=1, le=12)
    align: str = "left"
    style: CellStyle = CellStyle.BODY


class ContentBlock(BaseModel):
    """内容块"""
    index: int = Field(..., description="在枚举序列中的位置")
    kind: BlockKind
    content: str = Field("", description="行内富文本（支持 **粗体**）")
    role: str | None = Field(None, description="语义标记(document-header/metadata/risk/metric等)")
    cells: list[BlockCell] = Field(default_factory=list)
    tone: BlockTone = BlockTone.NORMAL
    boxed: bool = False  # 浅色底+边框
    ruled: bool = False  # 块底部分隔线

    # 测量与分页阶段写入
    rendered_height: float | None = Field(None, description="渲染高度px（含上下外边距）")
    suppress_top_margin: bool = False

    @property
    def is_measured(self) -> bool:
        return self.rendered_height is not None
