"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(runtime_config, report_request):
        assert runtime_config.geometry.width_mm == 210
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from aihr_export.config import RuntimeConfig
from aihr_export.config.runtime_config import OutputConfig, TimeoutConfig
from aihr_export.interfaces import IBlockMeasurer
from aihr_export.models import (
    AnalysisResult,
    BlockKind,
    Candidate,
    ContentBlock,
    DocumentType,
    ExportRequest,
    JobConfig,
    Metric,
    MetricDetail,
)

GENERATED_AT = datetime(2024, 5, 1, 9, 30)


class FixedMeasurer(IBlockMeasurer):
    """固定高度测量器（按块序号指定高度，其余用默认值）"""

    def __init__(self, default: float = 40.0, heights: dict[int, float] | None = None):
        self.default = default
        self.heights = heights or {}

    def measure_block(self, block: ContentBlock) -> float:
        return self.heights.get(block.index, self.default)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config(tmp_path: Path) -> RuntimeConfig:
    """运行期配置（输出到临时目录，不等待样式稳定）"""
    return RuntimeConfig(
        output=OutputConfig(output_dir=tmp_path / "exports"),
        timeouts=TimeoutConfig(settle_sec=0.0, page_render_sec=30.0),
    )


# ============================================================================
# 测量 Fixtures
# ============================================================================

@pytest.fixture
def fixed_measurer() -> FixedMeasurer:
    return FixedMeasurer()


@pytest.fixture
def make_measurer() -> Callable[..., FixedMeasurer]:
    return FixedMeasurer


@pytest.fixture
def make_blocks() -> Callable[[list[float]], list[ContentBlock]]:
    """按高度列表构造已测量的段落块"""

    def _make(heights: list[float]) -> list[ContentBlock]:
        return [
            ContentBlock(index=i, kind=BlockKind.PARAGRAPH, content=f"block {i}",
                         rendered_height=h)
            for i, h in enumerate(heights)
        ]

    return _make


# ============================================================================
# 候选人/请求 Fixtures
# ============================================================================

@pytest.fixture
def sample_metrics() -> list[Metric]:
    return [
        Metric(id="m1", name="Technical Depth", description="System design", weight=40),
        Metric(id="m2", name="Communication", description="Clarity", weight=30),
        Metric(id="m3", name="Ownership", description="Delivery record", weight=30),
    ]


@pytest.fixture
def sample_analysis() -> AnalysisResult:
    return AnalysisResult(
        scores={"m1": 88, "m2": 75, "m3": 90},
        total_score=85,
        reasons={
            "m1": "Designed a **distributed cache** serving 20k QPS.",
            "m2": "Clear written reports, some hesitation in interviews.",
            "m3": "Led two releases end to end.",
        },
        summary="Strong backend engineer with **solid fundamentals** and steady delivery.",
        risks=["Short tenure at last employer", "Limited people management"],
    )


@pytest.fixture
def sample_candidate(sample_analysis: AnalysisResult) -> Candidate:
    return Candidate(
        id="c-001",
        name="Alice Zhang",
        age="29",
        education="Master",
        company="Acme Corp",
        analysis=sample_analysis,
        interview_guide=(
            "## Technical\n"
            "### Q1 Cache design\n"
            "Ask how the cache handles **invalidation**.\n"
            "\n"
            "- Look for TTL trade-offs\n"
            "1. Follow up on consistency\n"
            "---\n"
            "## Behaviour\n"
            "Discuss the short tenure."
        ),
    )


@pytest.fixture
def report_request(sample_candidate: Candidate, sample_metrics: list[Metric]) -> ExportRequest:
    return ExportRequest(
        document_type=DocumentType.REPORT,
        candidate=sample_candidate,
        job=JobConfig(title="Backend Engineer"),
        metrics=sample_metrics,
        language="en",
        generated_at=GENERATED_AT,
    )


@pytest.fixture
def enriched_request(report_request: ExportRequest) -> ExportRequest:
    """含深度分析（评分标准 + 亮点证据）的报告请求"""
    analysis = report_request.candidate.analysis.model_copy(
        update={
            "detailed_metrics": {
                "m1": MetricDetail(criteria="Scales systems beyond one node",
                                   highlight="Cache cluster redesign"),
                "m2": MetricDetail(criteria="Explains trade-offs", highlight="Design docs"),
                "m3": MetricDetail(criteria="Owns outcomes", highlight="Two launches"),
            }
        }
    )
    candidate = report_request.candidate.model_copy(update={"analysis": analysis})
    return report_request.model_copy(update={"candidate": candidate})


@pytest.fixture
def guide_request(sample_candidate: Candidate) -> ExportRequest:
    return ExportRequest(
        document_type=DocumentType.GUIDE,
        candidate=sample_candidate,
        job=JobConfig(title="Backend Engineer"),
        language="en",
        generated_at=GENERATED_AT,
    )


@pytest.fixture
def long_guide_request(guide_request: ExportRequest) -> ExportRequest:
    """足够长、必然分成多页的面试指南"""
    lines = []
    for i in range(1, 41):
        lines.append(f"### Question {i}")
        lines.append(f"Ask the candidate to describe project {i} in detail, "
                     f"including the **hardest decision** and its outcome.")
        lines.append("- Listen for concrete numbers")
        lines.append("")
    candidate = guide_request.candidate.model_copy(
        update={"interview_guide": "\n".join(lines)}
    )
    return guide_request.model_copy(update={"candidate": candidate})
