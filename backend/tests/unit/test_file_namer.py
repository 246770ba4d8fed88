"""
文件命名单元测试
"""

from aihr_export.models import DocumentMeta, DocumentType
from aihr_export.render import FileNamer, sanitize_component


class TestFileNamer:
    """文件命名测试"""

    def test_zh_report(self):
        meta = DocumentMeta(document_type=DocumentType.REPORT, subject_name="张三",
                            job_title="后端工程师", score=85, language="zh")
        assert FileNamer().build(meta) == "简历分析_后端工程师_张三_85.pdf"

    def test_en_guide(self):
        meta = DocumentMeta(document_type=DocumentType.GUIDE, subject_name="Alice Zhang",
                            job_title="Backend Engineer", score=85.5, language="en")
        assert FileNamer().build(meta) == "InterviewGuide_Backend Engineer_Alice Zhang_85.5.pdf"

    def test_fallbacks(self):
        """岗位/姓名缺失用占位，分数缺失为0"""
        meta = DocumentMeta(document_type=DocumentType.REPORT, language="en")
        assert FileNamer().build(meta) == "Analysis_Job_Candidate_0.pdf"

    def test_reserved_characters_replaced(self):
        """路径分隔符与保留字符替换为 -"""
        meta = DocumentMeta(document_type=DocumentType.REPORT, subject_name="A/B:C",
                            job_title='QA*Lead?"<x>|', score=70, language="en")
        assert FileNamer().build(meta) == "Analysis_QA-Lead---x--_A-B-C_70.pdf"

    def test_sanitize_component(self):
        assert sanitize_component("a\\b") == "a-b"
        assert sanitize_component("  ok  ") == "ok"
