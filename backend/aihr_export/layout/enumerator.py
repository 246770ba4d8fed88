"""
内容块枚举器 - 将报告/面试指南展平为原子内容块序列

职责：
1. 报告：文档头、基本信息、综合评价、每条风险、每个指标评分卡各成一块
2. 指南：按物理行切分，每行按固定优先级分类为一块
3. 行内粗体（**text**）不在此处解析，由排版器在渲染时处理，不产生额外块

规则（指南行分类，按顺序检查）：
- "### " / "## "  → 小节标题 / 章节标题
- "---" / "***"   → 分隔线
- "- " / "* "     → 列表项
- "1. "           → 编号项
- 空行            → 固定高度间隔
- 其余            → 段落

测试要点：
- test_guide_scenario: "### Q1\\nText\\n\\n- tip" → 4块
- test_enriched_metric_single_block: 含深度分析的指标仍为单块
- test_empty_stream: 空内容流 → 0块
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..config import ExportLabels, get_labels
from ..interfaces import IContentEnumerator
from ..models import (
    BlockCell,
    BlockKind,
    BlockTone,
    CellStyle,
    ContentBlock,
    DocumentType,
    format_score,
)

if TYPE_CHECKING:
    from ..models import AnalysisResult, ExportRequest, Metric

NUMBERED_RE = re.compile(r"^\d+\.\s")


def classify_line(line: str) -> tuple[BlockKind, str]:
    """按固定优先级分类单行，返回 (块类型, 去掉标记后的内容)"""
    trimmed = line.strip()

    if trimmed.startswith("### "):
        return BlockKind.SUBSECTION_HEADER, re.sub(r"^###\s+", "", trimmed)
    if trimmed.startswith("## "):
        return BlockKind.SECTION_HEADER, re.sub(r"^##\s+", "", trimmed)
    if trimmed in ("---", "***"):
        return BlockKind.RULE, ""
    if trimmed.startswith("- ") or trimmed.startswith("* "):
        return BlockKind.LIST_ITEM, re.sub(r"^[-*]\s+", "", trimmed)
    if NUMBERED_RE.match(trimmed):
        return BlockKind.NUMBERED_ITEM, trimmed
    if trimmed == "":
        return BlockKind.SPACER, ""
    return BlockKind.PARAGRAPH, line


def enumerate_guide_text(text: str | None, start_index: int = 0) -> list[ContentBlock]:
    """面试指南文本逐行成块（空文本返回空列表）"""
    if not text or not text.strip():
        return []

    blocks = []
    for offset, line in enumerate(text.split("\n")):
        kind, content = classify_line(line)
        blocks.append(
            ContentBlock(
                index=start_index + offset,
                kind=kind,
                content=content,
                role="guide-line",
                ruled=kind == BlockKind.SECTION_HEADER,
            )
        )
    return blocks


class ContentBlockEnumerator(IContentEnumerator):
    """内容块枚举器实现"""

    def __init__(self, labels: ExportLabels | None = None):
        self._labels = labels

    def enumerate(self, request: ExportRequest) -> list[ContentBlock]:
        """枚举导出请求中的全部内容块"""
        labels = self._labels or get_labels(request.language or "zh")
        candidate = request.candidate
        analysis = candidate.analysis

        # 空内容流 → 0块（由调用方决定拒绝或容忍空文档）
        if request.document_type == DocumentType.REPORT and analysis is None:
            return []
        if request.document_type == DocumentType.GUIDE and not (
            candidate.interview_guide and candidate.interview_guide.strip()
        ):
            return []

        blocks: list[ContentBlock] = []
        self._append_header(blocks, request, labels)
        self._append_metadata(blocks, request, labels)

        if request.document_type == DocumentType.REPORT:
            self._append_summary(blocks, analysis, labels)

        if analysis is not None and analysis.risks:
            self._append_risks(blocks, analysis, labels)

        if request.document_type == DocumentType.REPORT:
            self._append_metrics(blocks, analysis, request.metrics, labels)
        else:
            blocks.extend(enumerate_guide_text(candidate.interview_guide, len(blocks)))
            self._push(blocks, BlockKind.SPACER, role="guide-end")

        return blocks

    # ------------------------------------------------------------------
    # 各语义段
    # ------------------------------------------------------------------

    def _append_header(
        self, blocks: list[ContentBlock], request: ExportRequest, labels: ExportLabels
    ) -> None:
        """文档头：导出标题 + 候选人姓名/公司"""
        title = (
            labels.report_title
            if request.document_type == DocumentType.REPORT
            else labels.guide_title
        )
        candidate = request.candidate
        self._push(
            blocks,
            BlockKind.TABLE_ROW,
            role="document-header",
            ruled=True,
            cells=[
                BlockCell(text=title, span=6, style=CellStyle.TITLE),
                BlockCell(text=candidate.name, span=6, align="right", style=CellStyle.STRONG),
                BlockCell(text=labels.assessment_subtitle, span=6, style=CellStyle.MUTED),
                BlockCell(
                    text=candidate.company or "", span=6, align="right", style=CellStyle.MUTED
                ),
            ],
        )

    def _append_metadata(
        self, blocks: list[ContentBlock], request: ExportRequest, labels: ExportLabels
    ) -> None:
        """基本信息：岗位/总分/年龄学历/日期"""
        candidate = request.candidate
        total = candidate.analysis.total_score if candidate.analysis else None
        self._push(
            blocks,
            BlockKind.TABLE_ROW,
            role="metadata",
            boxed=True,
            cells=[
                BlockCell(label=labels.job_position, text=request.job.title, span=6,
                          style=CellStyle.STRONG),
                BlockCell(label=labels.total_score, text=format_score(total), span=6,
                          style=CellStyle.SCORE),
                BlockCell(
                    label=labels.age_education,
                    text=f"{candidate.age or '-'} / {candidate.education or '-'}",
                    span=6,
                    style=CellStyle.STRONG,
                ),
                BlockCell(label=labels.date, text=request.generated_at.date().isoformat(),
                          span=6, style=CellStyle.STRONG),
            ],
        )

    def _append_summary(
        self, blocks: list[ContentBlock], analysis: AnalysisResult, labels: ExportLabels
    ) -> None:
        self._push(blocks, BlockKind.SECTION_HEADER, labels.summary_title,
                   role="summary-title", tone=BlockTone.ACCENT)
        self._push(blocks, BlockKind.PARAGRAPH, analysis.summary, role="summary")

    def _append_risks(
        self, blocks: list[ContentBlock], analysis: AnalysisResult, labels: ExportLabels
    ) -> None:
        """风险：标题 + 每条风险一块 + 段后间隔"""
        self._push(blocks, BlockKind.SECTION_HEADER, labels.risks_title,
                   role="risks-title", tone=BlockTone.DANGER, ruled=True)
        for risk in analysis.risks:
            self._push(blocks, BlockKind.LIST_ITEM, risk, role="risk", tone=BlockTone.DANGER)
        self._push(blocks, BlockKind.SPACER, role="risks-end")

    def _append_metrics(
        self,
        blocks: list[ContentBlock],
        analysis: AnalysisResult,
        metrics: list[Metric],
        labels: ExportLabels,
    ) -> None:
        """指标：每个指标一块评分卡（深度分析版或紧凑版）"""
        self._push(blocks, BlockKind.SECTION_HEADER, labels.metrics_title,
                   role="metrics-title", tone=BlockTone.ACCENT)

        if not analysis.detailed_metrics:
            self._push(
                blocks,
                BlockKind.TABLE_ROW,
                role="metric-table-head",
                boxed=True,
                cells=[
                    BlockCell(text=labels.metric_col, span=3, style=CellStyle.STRONG),
                    BlockCell(text=labels.score_weight_col, span=2, style=CellStyle.STRONG),
                    BlockCell(text=labels.assessment_col, span=7, style=CellStyle.STRONG),
                ],
            )

        for metric in metrics:
            score = format_score(analysis.scores.get(metric.id))
            weight = f"{format_score(metric.weight)}%"
            reason = analysis.reasons.get(metric.id, "")
            detail = analysis.detail_for(metric.id)

            if detail is not None:
                cells = [
                    BlockCell(text=metric.name, span=7, style=CellStyle.STRONG),
                    BlockCell(text=f"{labels.weight}: {weight}", span=3, align="right",
                              style=CellStyle.MUTED),
                    BlockCell(text=score, span=2, align="right", style=CellStyle.SCORE),
                    BlockCell(label=labels.criteria, text=detail.criteria),
                    BlockCell(label=labels.highlight, text=detail.highlight),
                    BlockCell(label=labels.brief, text=reason, style=CellStyle.MUTED),
                ]
                self._push(blocks, BlockKind.TABLE_ROW, metric.name, role="metric",
                           boxed=True, cells=cells)
            else:
                cells = [
                    BlockCell(text=metric.name, span=3, style=CellStyle.STRONG),
                    BlockCell(text=score, note=weight, span=2, style=CellStyle.SCORE),
                    BlockCell(text=reason, span=7),
                ]
                self._push(blocks, BlockKind.TABLE_ROW, metric.name, role="metric-compact",
                           ruled=True, cells=cells)

    @staticmethod
    def _push(
        blocks: list[ContentBlock],
        kind: BlockKind,
        content: str = "",
        **kwargs,
    ) -> None:
        blocks.append(ContentBlock(index=len(blocks), kind=kind, content=content, **kwargs))
