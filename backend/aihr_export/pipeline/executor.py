"""
导出执行器 - 编排一次导出任务的全部阶段

职责：
1. 枚举 → 等待样式稳定 → 测量 → 计算页预算 → 分页
2. 逐页栅格化（串行共享一块暂存画布，或按并发度每任务独占一块）
3. 装配PDF → 页眉页脚盖章 → 保存 → 校验页数
4. 更新任务进度；失败时标记任务、记录日志、删除残缺文件并上抛

并发约束：
- 同一执行器同一时刻只运行一个任务（重入 → ExportBusyError）
- 每页栅格化是一个挂起点，受 page_render_sec 超时约束
- 超时或协程被取消时先置位中止标记并等待渲染线程退出，之后才释放暂存画布
- 取消为协作式：页与页之间检查任务的取消标记

测试要点：
- test_empty_document_rejected: 空内容流 → EmptyDocumentError，不产出文件
- test_deterministic_partition: 同一输入两次导出分页一致
- test_failure_removes_partial_file: 保存后校验失败 → 不保留残缺文件
"""

from __future__ import annotations

import asyncio
import io
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from PyPDF2 import PdfReader

from ..config import get_config, get_labels
from ..interfaces import (
    AssemblyError,
    EmptyDocumentError,
    ExportBusyError,
    ExportCancelledError,
    RasterizationError,
)
from ..layout import ContentBlockEnumerator, FontMetricsMeasurer, PageBudgetCalculator, Paginator
from ..models import Document, DocumentMeta
from ..render import (
    BlockTypesetter,
    ChromeStamper,
    DocumentAssembler,
    FileNamer,
    PageRasterizer,
    StagingArea,
)
from .stages import EXPORT_STAGES, StageEnum

if TYPE_CHECKING:
    from ..config import RuntimeConfig
    from ..interfaces import IBlockMeasurer
    from ..models import ExportJob, ExportRequest, Page, RasterImage

logger = logging.getLogger(__name__)


def count_pdf_pages(pdf_path: Path) -> int:
    """统计PDF页数"""
    if not pdf_path.exists():
        raise AssemblyError(f"PDF文件不存在: {pdf_path}")
    reader = PdfReader(str(pdf_path))
    return len(reader.pages)


class ExportExecutor:
    """导出执行器"""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        measurer: IBlockMeasurer | None = None,
    ):
        self.config = config or get_config()
        geometry = self.config.geometry

        self.typesetter = BlockTypesetter(self.config.fonts, geometry.content_width_px)
        self.measurer = measurer or FontMetricsMeasurer(self.typesetter)
        self.budget_calculator = PageBudgetCalculator(geometry)
        self.paginator = Paginator()
        self.rasterizer = PageRasterizer(self.typesetter, geometry.scale)
        self.assembler = DocumentAssembler(geometry)
        self.stamper = ChromeStamper(geometry)
        self.file_namer = FileNamer()

        self._running = False
        self._partial_path: Path | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(
        self,
        job: ExportJob,
        request: ExportRequest,
        allow_empty: bool | None = None,
    ) -> Document:
        """执行一次导出，返回分页后的文档"""
        if self._running:
            raise ExportBusyError("已有导出任务在执行，请等待完成后再试")
        self._running = True
        self._partial_path = None
        if allow_empty is None:
            allow_empty = self.config.output.allow_empty

        try:
            return await self._execute(job, request, allow_empty)
        except (ExportCancelledError, asyncio.CancelledError):
            logger.warning(f"导出已取消: {job.job_id}")
            job.mark_cancelled()
            self._remove_partial()
            raise
        except Exception as e:
            logger.exception(f"导出失败: {job.job_id} ({request.candidate.name})")
            job.mark_failed(str(e))
            job.progress.message = f"导出失败: {e}"
            self._remove_partial()
            raise
        finally:
            self._running = False

    async def _execute(self, job: ExportJob, request: ExportRequest, allow_empty: bool) -> Document:
        if request.language is None:
            request = request.model_copy(update={"language": self.config.language})
        job.mark_running(StageEnum.ENUMERATE.value)
        meta = self._build_meta(request)

        # 枚举
        self._enter_stage(job, StageEnum.ENUMERATE)
        blocks = ContentBlockEnumerator(get_labels(request.language)).enumerate(request)
        logger.info(f"[{job.job_id}] 枚举得到 {len(blocks)} 个内容块")
        await asyncio.sleep(self.config.timeouts.settle_sec)

        # 测量
        self._enter_stage(job, StageEnum.MEASURE)
        self.measurer.measure_all(blocks)
        logger.debug(f"[{job.job_id}] 已测量 {len(blocks)} 个内容块")

        # 分页
        self._enter_stage(job, StageEnum.PAGINATE)
        budget_px = self.budget_calculator.compute(self.config.geometry.content_width_px)
        pages = self.paginator.paginate(blocks, budget_px)
        document = Document(meta=meta, pages=tuple(pages))
        job.partition = document.partition()
        job.progress.total_pages = document.page_count
        logger.info(
            f"[{job.job_id}] 页预算 {budget_px:.1f}px，分为 {document.page_count} 页"
        )
        for page_number in sorted(document.overflow_pages):
            job.add_flag(f"page_overflow:{page_number}")

        if document.page_count == 0:
            if not allow_empty:
                raise EmptyDocumentError("没有可导出的内容（0页）")
            logger.warning(f"[{job.job_id}] 空文档，未生成文件")
            job.add_flag("empty_document")
            job.mark_succeeded()
            return document

        # 栅格化
        self._enter_stage(job, StageEnum.RASTERIZE)
        rasters = await self._rasterize_all(job, document.pages)

        # 装配 + 盖章
        self._enter_stage(job, StageEnum.ASSEMBLE)
        buffer = io.BytesIO()
        pdf = self.assembler.assemble(rasters, buffer)
        self._enter_stage(job, StageEnum.STAMP)
        stamped = self.stamper.stamp(pdf, meta, document.overflow_pages)
        pdf.save()
        if stamped != document.page_count:
            raise AssemblyError(f"盖章页数不符: {stamped} != {document.page_count}")

        # 保存 + 校验
        self._enter_stage(job, StageEnum.SAVE)
        output_path = self.config.output.output_dir / self.file_namer.build(meta)
        self._partial_path = output_path
        await asyncio.to_thread(self._write_file, output_path, buffer.getvalue())
        saved_pages = await asyncio.to_thread(count_pdf_pages, output_path)
        if saved_pages != document.page_count:
            raise AssemblyError(
                f"保存后页数不符: {saved_pages} != {document.page_count}"
            )
        self._partial_path = None

        job.output_path = output_path
        job.page_count = saved_pages
        job.progress.message = f"已导出 {saved_pages} 页"
        job.mark_succeeded()
        logger.info(f"[{job.job_id}] 导出完成: {output_path.name} ({saved_pages}页)")
        return document

    def _build_meta(self, request: ExportRequest) -> DocumentMeta:
        analysis = request.candidate.analysis
        score = analysis.total_score if analysis is not None else None
        return DocumentMeta(
            document_type=request.document_type,
            subject_name=request.candidate.name,
            job_title=request.job.title,
            score=score,
            generated_at=request.generated_at,
            language=request.language,
        )

    async def _rasterize_all(self, job: ExportJob, pages: tuple[Page, ...]) -> list[RasterImage]:
        """按页序栅格化全部页"""
        concurrency = max(1, self.config.render.concurrency)
        if concurrency == 1:
            return await self._rasterize_sequential(job, pages)
        return await self._rasterize_parallel(job, pages, concurrency)

    async def _rasterize_sequential(self, job: ExportJob, pages: tuple[Page, ...]) -> list[RasterImage]:
        rasters: list[RasterImage] = []
        with self._new_staging() as staging:
            for page in pages:
                self._check_cancel(job)
                rasters.append(await self._rasterize_page(page, staging))
                self._page_done(job, len(rasters), len(pages))
        return rasters

    async def _rasterize_parallel(
        self, job: ExportJob, pages: tuple[Page, ...], concurrency: int
    ) -> list[RasterImage]:
        semaphore = asyncio.Semaphore(concurrency)
        done = 0

        async def render_one(page: Page) -> RasterImage:
            nonlocal done
            async with semaphore:
                self._check_cancel(job)
                # 每个并发任务独占暂存画布与字体缓存
                rasterizer = PageRasterizer(
                    BlockTypesetter(self.config.fonts, self.config.geometry.content_width_px),
                    self.rasterizer.scale,
                )
                with self._new_staging() as staging:
                    raster = await self._rasterize_page(page, staging, rasterizer)
                done += 1
                self._page_done(job, done, len(pages))
                return raster

        tasks = [asyncio.ensure_future(render_one(page)) for page in pages]
        try:
            rasters = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return sorted(rasters, key=lambda r: r.page_index)

    async def _rasterize_page(
        self, page: Page, staging: StagingArea, rasterizer: PageRasterizer | None = None
    ) -> RasterImage:
        rasterizer = rasterizer or self.rasterizer
        timeout = self.config.timeouts.page_render_sec
        abort = threading.Event()
        worker = asyncio.ensure_future(
            asyncio.to_thread(rasterizer.rasterize, page, staging, abort)
        )
        try:
            return await asyncio.wait_for(asyncio.shield(worker), timeout=timeout)
        except asyncio.TimeoutError as e:
            await self._join_worker(worker, abort)
            raise RasterizationError(
                f"第{page.index + 1}页渲染超时（>{timeout}s）"
            ) from e
        except asyncio.CancelledError:
            await self._join_worker(worker, abort)
            raise

    @staticmethod
    async def _join_worker(worker: asyncio.Future, abort: threading.Event) -> None:
        """通知渲染线程中止并等待其退出，暂存画布须在此之后才能释放"""
        abort.set()
        results = await asyncio.gather(worker, return_exceptions=True)
        if isinstance(results[0], BaseException):
            logger.debug(f"渲染线程已中止: {results[0]}")

    def _new_staging(self) -> StagingArea:
        return StagingArea(self.rasterizer.raster_width_px, self.config.render.background)

    def _check_cancel(self, job: ExportJob) -> None:
        if job.cancel_requested:
            raise ExportCancelledError(f"任务已取消: {job.job_id}")

    def _enter_stage(self, job: ExportJob, stage: StageEnum) -> None:
        entry = EXPORT_STAGES[stage]
        job.progress.stage = entry.name
        job.progress.percent = entry.progress_start
        logger.debug(f"[{job.job_id}] 开始阶段: {entry.name}")

    def _page_done(self, job: ExportJob, done: int, total: int) -> None:
        job.progress.current_page = done
        job.progress.percent = EXPORT_STAGES[StageEnum.RASTERIZE].percent_at(done, total)
        job.progress.message = f"栅格化中 ({done}/{total})"

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def _remove_partial(self) -> None:
        """删除残缺输出文件"""
        path, self._partial_path = self._partial_path, None
        if path is not None and path.exists():
            path.unlink()
            logger.info(f"已删除残缺文件: {path}")
