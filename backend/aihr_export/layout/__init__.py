"""
布局模块 - 内容块枚举、高度测量、页预算、分页

子模块：
- enumerator: 内容流 → 原子内容块
- measurer: 字体度量测量块高度
- budget: 页面几何 → 每页像素预算
- paginator: 贪心分页
"""

from .enumerator import ContentBlockEnumerator, classify_line, enumerate_guide_text
from .budget import PageBudgetCalculator
from .paginator import Paginator
from .measurer import FontMetricsMeasurer

__all__ = [
    "ContentBlockEnumerator",
    "classify_line",
    "enumerate_guide_text",
    "PageBudgetCalculator",
    "Paginator",
    "FontMetricsMeasurer",
]
