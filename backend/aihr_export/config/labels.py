"""
中英文标签表 - 导出文档中的固定文案

职责：
- 提供报告/指南中各内容块的标题文案（随语言切换）
- 提供文件名前缀（简历分析/面试指南）
- 提供页眉页脚文案（两种语言下均为ASCII，避免底层绘字原语乱码）

使用方式：
    labels = get_labels("zh")
    labels.summary_title
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel


class ExportLabels(BaseModel):
    """导出文案"""

    language: str

    # 文档头
    report_title: str
    guide_title: str
    assessment_subtitle: str = "AIHR Studio Assessment"

    # 基本信息
    job_position: str
    total_score: str
    age_education: str
    date: str

    # 报告正文
    summary_title: str
    risks_title: str
    metrics_title: str
    metric_col: str
    score_weight_col: str
    assessment_col: str
    weight: str
    criteria: str
    highlight: str
    brief: str

    # 文件名
    report_file_kind: str
    guide_file_kind: str
    job_fallback: str = "Job"
    subject_fallback: str = "Candidate"

    # 页眉页脚（仅ASCII）
    chrome_report_title: str = "AIHR Studio Evaluation"
    chrome_guide_title: str = "AIHR Studio Interview Guide"
    chrome_report_label: str = "Report"
    chrome_guide_label: str = "Guide"
    chrome_page_format: str = "Page {page} of {total}"
    chrome_overflow_marker: str = "Content exceeds page height"


TRANSLATIONS: dict[str, dict[str, str]] = {
    "zh": {
        "report_title": "导出评估报告",
        "guide_title": "导出面试指南",
        "job_position": "应聘岗位",
        "total_score": "总分",
        "age_education": "年龄 / 学历",
        "date": "日期",
        "summary_title": "综合评价",
        "risks_title": "⚠️ 潜在风险 / 关注点",
        "metrics_title": "评估指标",
        "metric_col": "指标",
        "score_weight_col": "得分/权重",
        "assessment_col": "评价",
        "weight": "权重",
        "criteria": "评分标准 / Rule:",
        "highlight": "亮点证据 / Highlight:",
        "brief": "简评:",
        "report_file_kind": "简历分析",
        "guide_file_kind": "面试指南",
    },
    "en": {
        "report_title": "Export Report",
        "guide_title": "Export Guide",
        "job_position": "Job Position",
        "total_score": "Total Score",
        "age_education": "Age / Education",
        "date": "Date",
        "summary_title": "Executive Summary",
        "risks_title": "⚠️ Potential Risks / Key Concerns",
        "metrics_title": "Evaluation Metrics",
        "metric_col": "Metric",
        "score_weight_col": "Score/Weight",
        "assessment_col": "Assessment",
        "weight": "Weight",
        "criteria": "Criteria:",
        "highlight": "Highlights:",
        "brief": "Brief:",
        "report_file_kind": "Analysis",
        "guide_file_kind": "InterviewGuide",
    },
}


@lru_cache(maxsize=4)
def get_labels(language: str = "zh") -> ExportLabels:
    """获取语言对应的标签（未知语言回退为英文）"""
    lang = language if language in TRANSLATIONS else "en"
    return ExportLabels(language=lang, **TRANSLATIONS[lang])
