"""
导出流水线阶段定义

枚举 → 测量 → 分页 → 栅格化 → 装配 → 盖章 → 保存
每个阶段占用一段进度区间（0-100），栅格化阶段按页细分进度。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """导出阶段枚举"""
    ENUMERATE = "ENUMERATE"
    MEASURE = "MEASURE"
    PAGINATE = "PAGINATE"
    RASTERIZE = "RASTERIZE"
    ASSEMBLE = "ASSEMBLE"
    STAMP = "STAMP"
    SAVE = "SAVE"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点

    def percent_at(self, done: int, total: int) -> int:
        """阶段内部进度换算为整体进度"""
        if total <= 0:
            return self.progress_end
        span = self.progress_end - self.progress_start
        return self.progress_start + span * min(done, total) // total


EXPORT_STAGES: dict[StageEnum, PipelineStage] = {
    StageEnum.ENUMERATE: PipelineStage(StageEnum.ENUMERATE.value, 0, 5),
    StageEnum.MEASURE: PipelineStage(StageEnum.MEASURE.value, 5, 15),
    StageEnum.PAGINATE: PipelineStage(StageEnum.PAGINATE.value, 15, 20),
    StageEnum.RASTERIZE: PipelineStage(StageEnum.RASTERIZE.value, 20, 85),
    StageEnum.ASSEMBLE: PipelineStage(StageEnum.ASSEMBLE.value, 85, 92),
    StageEnum.STAMP: PipelineStage(StageEnum.STAMP.value, 92, 95),
    StageEnum.SAVE: PipelineStage(StageEnum.SAVE.value, 95, 100),
}
