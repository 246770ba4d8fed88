"""
候选人与导出请求模型 - 上游分析流水线提供的输入

导出引擎只消费这些已定稿的数据，不关心它们如何产生。
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .document import DocumentType


class Metric(BaseModel):
    """评估指标"""
    id: str
    name: str
    description: str = ""
    weight: float = Field(0, description="权重百分比 0-100")


class MetricDetail(BaseModel):
    """指标深度分析（评分标准 + 亮点证据）"""
    criteria: str = ""
    highlight: str = ""


class AnalysisResult(BaseModel):
    """分析结果"""
    scores: dict[str, float] = Field(default_factory=dict)
    total_score: float = 0
    reasons: dict[str, str] = Field(default_factory=dict)
    summary: str = ""
    risks: list[str] = Field(default_factory=list)
    detailed_metrics: dict[str, MetricDetail] | None = None

    def detail_for(self, metric_id: str) -> MetricDetail | None:
        if not self.detailed_metrics:
            return None
        return self.detailed_metrics.get(metric_id)


class Candidate(BaseModel):
    """候选人"""
    id: str = ""
    name: str = ""
    age: str | None = None
    education: str | None = None
    company: str | None = None
    phone: str | None = None
    analysis: AnalysisResult | None = None
    interview_guide: str | None = None


class JobConfig(BaseModel):
    """岗位配置"""
    title: str = ""
    description: str = ""


class ExportRequest(BaseModel):
    """导出请求"""
    document_type: DocumentType
    candidate: Candidate
    job: JobConfig = Field(default_factory=JobConfig)
    metrics: list[Metric] = Field(default_factory=list)
    language: str | None = None  # 缺省时取运行配置 language
    generated_at: datetime = Field(default_factory=datetime.now)


def format_score(score: float | None) -> str:
    """分数显示：整数去掉小数位，缺省显示为0"""
    if score is None:
        return "0"
    value = float(score)
    if value.is_integer():
        return str(int(value))
    return f"{value:g}"
