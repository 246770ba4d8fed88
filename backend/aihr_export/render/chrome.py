"""
页眉页脚盖章 - 在装配完成、总页数确定后为每页绘制固定装饰

职责：
1. 页眉：左侧导出类型，右侧通用标签 + 生成日期，下方分隔线
2. 页脚：分隔线 + 居中 "Page {i} of {N}"
3. 超高页在页脚右侧追加提示

约束：
- 直接绘制的文字只用 reportlab 内置 Helvetica，仅支持有限字符集；
  候选人姓名永远不进入页眉页脚，只出现在栅格化的页面位图里
- 所有页眉页脚文字经 chrome_safe 过滤为可打印ASCII

测试要点：
- test_page_numbers_monotonic: 页码 1..N 递增，N = 实际页数
- test_subject_name_absent: 页眉页脚中不出现姓名
"""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

from reportlab.lib.units import mm

from ..config import get_labels
from ..interfaces import IChromeStamper
from ..models import DocumentType

if TYPE_CHECKING:
    from ..config.runtime_config import PageGeometryConfig
    from ..models import DocumentMeta
    from .assembler import DeferredPageCanvas

CHROME_FONT = "Helvetica"
HEADER_FONT_SIZE = 9
FOOTER_FONT_SIZE = 8
TEXT_RGB = (100 / 255, 116 / 255, 139 / 255)    # slate-500
RULE_RGB = (226 / 255, 232 / 255, 240 / 255)    # slate-200
MARKER_RGB = (185 / 255, 28 / 255, 28 / 255)    # red-700

SIDE_MM = 10
HEADER_TEXT_MM = 12
HEADER_RULE_MM = 15
FOOTER_RULE_MM = 15
FOOTER_TEXT_MM = 10

_NON_PRINTABLE = re.compile(r"[^\x20-\x7e]")


def chrome_safe(text: str) -> str:
    """过滤为可打印ASCII（先做兼容分解，尽量保留带声调拉丁字母的基字母）"""
    decomposed = unicodedata.normalize("NFKD", text or "")
    ascii_text = decomposed.encode("ascii", "ignore").decode("ascii")
    ascii_text = re.sub(r"\s+", " ", ascii_text)
    return _NON_PRINTABLE.sub("", ascii_text).strip()


class ChromeStamper(IChromeStamper):
    """页眉页脚盖章实现"""

    def __init__(self, geometry: PageGeometryConfig):
        self.page_width = geometry.width_mm * mm
        self.page_height = geometry.height_mm * mm

    def header_texts(self, meta: DocumentMeta) -> tuple[str, str]:
        """页眉左右文字（不含姓名）"""
        labels = get_labels(meta.language)
        if meta.document_type == DocumentType.REPORT:
            left, kind = labels.chrome_report_title, labels.chrome_report_label
        else:
            left, kind = labels.chrome_guide_title, labels.chrome_guide_label
        right = f"{kind} | {meta.generated_at:%Y-%m-%d}"
        return chrome_safe(left), chrome_safe(right)

    def stamp(self, canvas: DeferredPageCanvas, meta: DocumentMeta,
              overflow_pages: set[int]) -> int:
        """逐页盖章并落页，返回页数"""
        labels = get_labels(meta.language)
        left, right = self.header_texts(meta)
        page_format = labels.chrome_page_format
        marker = chrome_safe(labels.chrome_overflow_marker)

        def on_page(c: DeferredPageCanvas, number: int, total: int) -> None:
            self._draw_header(c, left, right)
            self._draw_footer(c, chrome_safe(page_format.format(page=number, total=total)))
            if number in overflow_pages:
                self._draw_overflow_marker(c, marker)

        return canvas.flush(on_page)

    def _y(self, from_top_mm: float) -> float:
        return self.page_height - from_top_mm * mm

    def _draw_header(self, c: DeferredPageCanvas, left: str, right: str) -> None:
        c.saveState()
        c.setFont(CHROME_FONT, HEADER_FONT_SIZE)
        c.setFillColorRGB(*TEXT_RGB)
        c.drawString(SIDE_MM * mm, self._y(HEADER_TEXT_MM), left)
        c.drawRightString(self.page_width - SIDE_MM * mm, self._y(HEADER_TEXT_MM), right)
        c.setStrokeColorRGB(*RULE_RGB)
        c.line(SIDE_MM * mm, self._y(HEADER_RULE_MM),
               self.page_width - SIDE_MM * mm, self._y(HEADER_RULE_MM))
        c.restoreState()

    def _draw_footer(self, c: DeferredPageCanvas, page_text: str) -> None:
        c.saveState()
        c.setStrokeColorRGB(*RULE_RGB)
        footer_rule_y = FOOTER_RULE_MM * mm
        c.line(SIDE_MM * mm, footer_rule_y, self.page_width - SIDE_MM * mm, footer_rule_y)
        c.setFont(CHROME_FONT, FOOTER_FONT_SIZE)
        c.setFillColorRGB(*TEXT_RGB)
        c.drawCentredString(self.page_width / 2, FOOTER_TEXT_MM * mm, page_text)
        c.restoreState()

    def _draw_overflow_marker(self, c: DeferredPageCanvas, marker: str) -> None:
        c.saveState()
        c.setFont(CHROME_FONT, FOOTER_FONT_SIZE)
        c.setFillColorRGB(*MARKER_RGB)
        c.drawRightString(self.page_width - SIDE_MM * mm, FOOTER_TEXT_MM * mm, marker)
        c.restoreState()
