"""
任务管理器 - 导出任务创建/查询/取消/提交

职责：
1. 创建任务并分配ID
2. 同一时刻只允许一个活动任务（前一个未结束时拒绝提交）
3. 协作式取消：只设置取消标记，由执行器在页与页之间响应

任务只保存在内存中，不持久化。

测试要点：
- test_create_job: 创建任务
- test_submit_while_busy: 活动任务未结束时拒绝
- test_cancel_job: 取消任务
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from ..interfaces import ExportBusyError
from ..models import ExportJob, JobStatus
from .executor import ExportExecutor

if TYPE_CHECKING:
    from ..config import RuntimeConfig
    from ..models import Document, ExportRequest


class ExportJobManager:
    """导出任务管理器"""

    def __init__(self, config: RuntimeConfig | None = None, executor: ExportExecutor | None = None):
        self.executor = executor or ExportExecutor(config)
        self._jobs: dict[str, ExportJob] = {}

    def create_job(self, request: ExportRequest) -> ExportJob:
        """创建任务"""
        job = ExportJob(
            job_id=str(uuid.uuid4()),
            document_type=request.document_type,
            subject_name=request.candidate.name,
        )
        self._jobs[job.job_id] = job
        return job

    def get_job(self, job_id: str) -> ExportJob | None:
        return self._jobs.get(job_id)

    def active_job(self) -> ExportJob | None:
        """当前活动任务（排队或运行中）"""
        for job in self._jobs.values():
            if job.is_active:
                return job
        return None

    async def submit(self, request: ExportRequest, allow_empty: bool | None = None) -> tuple[ExportJob, Document]:
        """创建并执行一个导出任务（已有活动任务时拒绝）"""
        if self.active_job() is not None or self.executor.is_running:
            raise ExportBusyError("已有导出任务在执行，请等待完成后再试")
        job = self.create_job(request)
        document = await self.executor.run(job, request, allow_empty=allow_empty)
        return job, document

    def cancel_job(self, job_id: str) -> bool:
        """请求取消任务"""
        job = self.get_job(job_id)
        if not job:
            return False

        if job.status == JobStatus.QUEUED:
            job.mark_cancelled()
            return True
        if job.status == JobStatus.RUNNING:
            job.cancel_requested = True
            return True

        return False

    def list_jobs(
        self,
        status: JobStatus | None = None,
        limit: int = 100,
    ) -> list[ExportJob]:
        """列出任务"""
        jobs = list(self._jobs.values())

        if status:
            jobs = [j for j in jobs if j.status == status]

        # 按创建时间降序
        jobs.sort(key=lambda j: j.created_at, reverse=True)

        return jobs[:limit]
