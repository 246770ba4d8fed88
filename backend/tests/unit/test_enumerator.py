"""
内容块枚举器单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_enumerator.py -v
"""

import pytest

from aihr_export.layout import ContentBlockEnumerator, classify_line, enumerate_guide_text
from aihr_export.models import BlockKind, BlockTone, DocumentType


class TestClassifyLine:
    """指南行分类测试"""

    @pytest.mark.parametrize(
        "line, kind, content",
        [
            ("### Q1", BlockKind.SUBSECTION_HEADER, "Q1"),
            ("## Technical", BlockKind.SECTION_HEADER, "Technical"),
            ("---", BlockKind.RULE, ""),
            ("***", BlockKind.RULE, ""),
            ("- tip", BlockKind.LIST_ITEM, "tip"),
            ("* tip", BlockKind.LIST_ITEM, "tip"),
            ("1. First", BlockKind.NUMBERED_ITEM, "1. First"),
            ("   ", BlockKind.SPACER, ""),
            ("Plain text", BlockKind.PARAGRAPH, "Plain text"),
        ],
    )
    def test_classify(self, line, kind, content):
        assert classify_line(line) == (kind, content)

    def test_precedence(self):
        """分类按固定优先级：### 先于 ##，列表先于编号"""
        assert classify_line("### ## x")[0] == BlockKind.SUBSECTION_HEADER
        assert classify_line("- 1. x")[0] == BlockKind.LIST_ITEM
        assert classify_line("#### deep")[0] == BlockKind.PARAGRAPH


class TestGuideText:
    """面试指南文本测试"""

    def test_guide_scenario(self):
        """'### Q1\\nText\\n\\n- tip' → 小节标题/段落/间隔/列表项"""
        blocks = enumerate_guide_text("### Q1\nText\n\n- tip")
        assert [b.kind for b in blocks] == [
            BlockKind.SUBSECTION_HEADER,
            BlockKind.PARAGRAPH,
            BlockKind.SPACER,
            BlockKind.LIST_ITEM,
        ]
        assert [b.index for b in blocks] == [0, 1, 2, 3]

    def test_inline_bold_does_not_split(self):
        """行内粗体不产生额外块"""
        blocks = enumerate_guide_text("A **bold** word")
        assert len(blocks) == 1
        assert blocks[0].content == "A **bold** word"

    @pytest.mark.parametrize("text", [None, "", "  \n \n"])
    def test_empty_stream(self, text):
        """空内容流 → 0块"""
        assert enumerate_guide_text(text) == []

    def test_section_header_ruled(self):
        blocks = enumerate_guide_text("## Section\n### Sub")
        assert blocks[0].ruled
        assert not blocks[1].ruled


class TestReportEnumeration:
    """报告枚举测试"""

    def test_report_structure(self, report_request):
        """文档头/基本信息/综合评价/风险/指标按序成块"""
        blocks = ContentBlockEnumerator().enumerate(report_request)
        roles = [b.role for b in blocks]
        assert roles[:4] == ["document-header", "metadata", "summary-title", "summary"]
        assert roles.count("risk") == 2
        assert "metric-table-head" in roles
        assert roles.count("metric-compact") == 3
        assert [b.index for b in blocks] == list(range(len(blocks)))

    def test_risk_blocks(self, report_request):
        """每条风险一块，使用警示配色"""
        blocks = ContentBlockEnumerator().enumerate(report_request)
        risks = [b for b in blocks if b.role == "risk"]
        assert [b.content for b in risks] == report_request.candidate.analysis.risks
        assert all(b.kind == BlockKind.LIST_ITEM for b in risks)
        assert all(b.tone == BlockTone.DANGER for b in risks)

    def test_enriched_metric_single_block(self, enriched_request):
        """含深度分析的指标（标题+评分标准+亮点+简评）仍为单块"""
        blocks = ContentBlockEnumerator().enumerate(enriched_request)
        metric_blocks = [b for b in blocks if b.role == "metric"]
        assert len(metric_blocks) == len(enriched_request.metrics)
        assert "metric-table-head" not in [b.role for b in blocks]
        first = metric_blocks[0]
        assert first.kind == BlockKind.TABLE_ROW
        assert [c.text for c in first.cells[3:5]] == [
            "Scales systems beyond one node",
            "Cache cluster redesign",
        ]

    def test_compact_metric_cells(self, report_request):
        """紧凑指标：名称/分数(权重)/评价"""
        blocks = ContentBlockEnumerator().enumerate(report_request)
        first = next(b for b in blocks if b.role == "metric-compact")
        assert [c.text for c in first.cells] == [
            "Technical Depth",
            "88",
            "Designed a **distributed cache** serving 20k QPS.",
        ]
        assert first.cells[1].note == "40%"

    def test_metadata_cells(self, report_request):
        blocks = ContentBlockEnumerator().enumerate(report_request)
        metadata = blocks[1]
        assert [c.text for c in metadata.cells] == [
            "Backend Engineer", "85", "29 / Master", "2024-05-01",
        ]

    def test_report_without_analysis_is_empty(self, report_request):
        """未完成分析的报告 → 0块"""
        candidate = report_request.candidate.model_copy(update={"analysis": None})
        request = report_request.model_copy(update={"candidate": candidate})
        assert ContentBlockEnumerator().enumerate(request) == []

    def test_language_labels(self, report_request):
        """标签随语言切换"""
        zh_request = report_request.model_copy(update={"language": "zh"})
        en_blocks = ContentBlockEnumerator().enumerate(report_request)
        zh_blocks = ContentBlockEnumerator().enumerate(zh_request)
        assert en_blocks[2].content == "Executive Summary"
        assert zh_blocks[2].content == "综合评价"


class TestGuideEnumeration:
    """指南枚举测试"""

    def test_guide_structure(self, guide_request):
        """文档头 + 基本信息 + 风险 + 指南行 + 结尾间隔"""
        blocks = ContentBlockEnumerator().enumerate(guide_request)
        roles = [b.role for b in blocks]
        assert roles[:2] == ["document-header", "metadata"]
        assert "summary" not in roles
        assert roles.count("risk") == 2
        assert roles[-1] == "guide-end"
        guide_lines = [b for b in blocks if b.role == "guide-line"]
        assert len(guide_lines) == len(guide_request.candidate.interview_guide.split("\n"))
        assert [b.index for b in blocks] == list(range(len(blocks)))

    def test_guide_without_text_is_empty(self, guide_request):
        candidate = guide_request.candidate.model_copy(update={"interview_guide": "  "})
        request = guide_request.model_copy(update={"candidate": candidate})
        assert request.document_type == DocumentType.GUIDE
        assert ContentBlockEnumerator().enumerate(request) == []
