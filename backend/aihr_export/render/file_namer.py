"""
文件命名 - {类型}_{岗位}_{姓名}_{分数}.pdf

- 类型：简历分析/面试指南（zh），Analysis/InterviewGuide（en）
- 岗位/姓名缺失时使用 Job/Candidate 占位，分数缺失为 0
- 各段中的路径分隔符与文件系统保留字符替换为 "-"
- 不追加唯一性后缀，同名文件直接覆盖
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..config import get_labels
from ..models import DocumentType, format_score

if TYPE_CHECKING:
    from ..models import DocumentMeta

RESERVED_CHARS_RE = re.compile(r'[/\\:*?"<>|\x00-\x1f]')


def sanitize_component(text: str) -> str:
    return RESERVED_CHARS_RE.sub("-", text).strip()


class FileNamer:
    """导出文件命名"""

    def build(self, meta: DocumentMeta) -> str:
        labels = get_labels(meta.language)
        kind = (
            labels.report_file_kind
            if meta.document_type == DocumentType.REPORT
            else labels.guide_file_kind
        )
        job = sanitize_component(meta.job_title) or labels.job_fallback
        subject = sanitize_component(meta.subject_name) or labels.subject_fallback
        score = sanitize_component(format_score(meta.score))
        return f"{kind}_{job}_{subject}_{score}.pdf"
