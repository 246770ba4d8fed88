"""
文档模型 - 一次导出的页序列与元数据

每次导出新建，装配完成后不可变，产出文件后即丢弃（不持久化）。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .page import Page


class DocumentType(str, Enum):
    """导出文档类型"""
    REPORT = "report"
    GUIDE = "guide"


class DocumentMeta(BaseModel):
    """文档元数据"""
    document_type: DocumentType
    subject_name: str = ""
    job_title: str = ""
    score: float | None = None
    generated_at: datetime = Field(default_factory=datetime.now)
    language: str = "zh"

    model_config = {"frozen": True}


class Document(BaseModel):
    """文档：有序页 + 元数据"""
    meta: DocumentMeta
    pages: tuple[Page, ...] = ()

    model_config = {"frozen": True}

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def overflow_pages(self) -> set[int]:
        """超高页（1起始页码）"""
        return {i + 1 for i, p in enumerate(self.pages) if p.overflow}

    def partition(self) -> list[list[int]]:
        """块到页的分配（块序号），用于确定性比较"""
        return [p.block_indices for p in self.pages]
