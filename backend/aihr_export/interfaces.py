"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换（例如用固定高度的测量器替代字体测量）

使用方式：
    from aihr_export.interfaces import IBlockMeasurer

    class FixedMeasurer(IBlockMeasurer):
        def measure_block(self, block: ContentBlock) -> float:
            return 40.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from .models import (
        ContentBlock,
        DocumentMeta,
        ExportRequest,
        Page,
        RasterImage,
    )
    import threading

    from .render.assembler import DeferredPageCanvas
    from .render.staging import StagingArea


# ============================================================================
# 布局模块接口
# ============================================================================

class IContentEnumerator(ABC):
    """内容块枚举器接口 - 将内容流展平为原子内容块序列"""

    @abstractmethod
    def enumerate(self, request: ExportRequest) -> list[ContentBlock]:
        """
        枚举导出请求中的全部内容块

        Args:
            request: 导出请求（文档类型/候选人/岗位/指标）

        Returns:
            有序内容块列表（空内容流返回空列表，不报错）
        """
        ...


class IBlockMeasurer(ABC):
    """块高度测量接口 - measureBlock(block) -> heightPx"""

    @abstractmethod
    def measure_block(self, block: ContentBlock) -> float:
        """
        测量单个内容块的渲染高度（像素，含上下外边距）

        Raises:
            MeasurementError: 无法确定高度（不允许使用默认高度兜底）
        """
        ...

    def measure_all(self, blocks: list[ContentBlock]) -> list[ContentBlock]:
        """逐块测量并写回 rendered_height"""
        for block in blocks:
            block.rendered_height = self.measure_block(block)
        return blocks


class IPaginator(ABC):
    """分页器接口"""

    @abstractmethod
    def paginate(self, blocks: list[ContentBlock], budget_px: float) -> list[Page]:
        """
        按页预算贪心分组

        Args:
            blocks: 已测量高度的内容块
            budget_px: 每页可用内容高度（像素）

        Returns:
            有序页列表
        """
        ...


# ============================================================================
# 渲染模块接口
# ============================================================================

class IRasterizer(ABC):
    """栅格化器接口 - 单页内容块独立渲染为位图"""

    @abstractmethod
    def rasterize(
        self,
        page: Page,
        staging: StagingArea,
        abort: threading.Event | None = None,
    ) -> RasterImage:
        """
        在暂存画布上独立渲染一页

        Args:
            page: 页（有序内容块子集）
            staging: 已获取的暂存画布（渲染前会被完全清空）
            abort: 中止标记，块与块之间检查；置位后尽快放弃并抛出 RasterizationError

        Returns:
            固定分辨率位图

        Raises:
            RasterizationError: 渲染失败
        """
        ...


class IDocumentAssembler(ABC):
    """文档装配器接口"""

    @abstractmethod
    def assemble(self, rasters: list[RasterImage], target: BinaryIO) -> DeferredPageCanvas:
        """每页放置一张位图，返回尚未盖章的画布"""
        ...


class IChromeStamper(ABC):
    """页眉页脚盖章接口"""

    @abstractmethod
    def stamp(self, canvas: DeferredPageCanvas, meta: DocumentMeta, overflow_pages: set[int]) -> int:
        """
        在装配完成后为每一物理页绘制页眉/页脚/页码

        Returns:
            实际盖章的页数
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class AIHRExportError(Exception):
    """基础异常"""
    pass


class ConfigError(AIHRExportError):
    """配置错误（页面几何无效等）"""
    pass


class MeasurementError(AIHRExportError):
    """高度测量错误"""
    pass


class RasterizationError(AIHRExportError):
    """栅格化错误"""
    pass


class StagingError(AIHRExportError):
    """暂存画布使用错误"""
    pass


class AssemblyError(AIHRExportError):
    """装配/保存错误"""
    pass


class EmptyDocumentError(AIHRExportError):
    """空文档（0页）"""
    pass


class ExportBusyError(AIHRExportError):
    """已有导出任务在执行"""
    pass


class ExportCancelledError(AIHRExportError):
    """导出任务被取消"""
    pass
