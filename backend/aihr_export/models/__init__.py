"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- ContentBlock: 原子内容块
- Page / RasterImage: 分页结果与单页位图
- Document / DocumentMeta: 一次导出的文档
- ExportJob: 导出任务状态与生命周期
- Candidate / ExportRequest: 上游提供的导出输入
"""

from .block import BlockCell, BlockKind, BlockTone, CellStyle, ContentBlock
from .candidate import (
    AnalysisResult,
    Candidate,
    ExportRequest,
    JobConfig,
    Metric,
    MetricDetail,
    format_score,
)
from .document import Document, DocumentMeta, DocumentType
from .job import ExportJob, JobProgress, JobStatus
from .page import Page, RasterImage

__all__ = [
    "BlockCell",
    "BlockKind",
    "BlockTone",
    "CellStyle",
    "ContentBlock",
    "AnalysisResult",
    "Candidate",
    "ExportRequest",
    "JobConfig",
    "Metric",
    "MetricDetail",
    "format_score",
    "Document",
    "DocumentMeta",
    "DocumentType",
    "ExportJob",
    "JobProgress",
    "JobStatus",
    "Page",
    "RasterImage",
]
