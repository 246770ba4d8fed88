"""
流水线模块 - 导出任务编排与执行

子模块：
- stages: 导出各阶段定义
- executor: 导出执行器
- job_manager: 任务管理
"""

from .stages import EXPORT_STAGES, PipelineStage, StageEnum
from .executor import ExportExecutor, count_pdf_pages
from .job_manager import ExportJobManager

__all__ = [
    "EXPORT_STAGES",
    "PipelineStage",
    "StageEnum",
    "ExportExecutor",
    "count_pdf_pages",
    "ExportJobManager",
]
