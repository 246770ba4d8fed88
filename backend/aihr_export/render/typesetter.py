"""
块排版器 - 内容块的版式计算（测量与栅格化共用）

职责：
1. 按块类型/语义角色解析样式（字号、行高、外边距、内边距）
2. 行内粗体解析 + 贪心断行（中日韩字符逐字可断，西文按空格断，超长词按字符断）
3. 生成相对块顶部的绘制指令（文字/线/矩形），高度含上下外边距

测量与栅格化使用同一套排版结果，保证测得的高度就是实际绘制高度。

依赖：
- Pillow: ImageFont 字体度量（truetype 或内置可缩放字体）
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from PIL import ImageDraw, ImageFont

from ..config.runtime_config import FontConfig
from ..models import BlockKind, BlockTone, CellStyle, ContentBlock

# Tailwind slate/red/indigo 色板
SLATE_800 = (30, 41, 59)
SLATE_700 = (51, 65, 85)
SLATE_600 = (71, 85, 105)
SLATE_500 = (100, 116, 139)
SLATE_400 = (148, 163, 184)
SLATE_200 = (226, 232, 240)
SLATE_100 = (241, 245, 249)
SLATE_50 = (248, 250, 252)
RED_800 = (153, 27, 27)
RED_700 = (185, 28, 28)
RED_200 = (254, 202, 202)
INDIGO_600 = (79, 70, 229)
INDIGO_500 = (99, 102, 241)

PAD_X = 48.0  # 块左右内边距（px-12）
BULLET = "•"
BULLET_GAP = 8.0
GRID_COLUMNS = 12
GRID_GAP = 16.0
ROW_GAP = 12.0
ACCENT_BAR = 4.0
ACCENT_GAP = 12.0

CJK_RANGES = r"\u2e80-\u9fff\uac00-\ud7af\uf900-\ufaff\uff00-\uffef"
TOKEN_RE = re.compile(rf"[{CJK_RANGES}]|[^\s{CJK_RANGES}]+|\s+")
INLINE_BOLD_RE = re.compile(r"(\*\*.*?\*\*)")


@dataclass(frozen=True)
class BlockStyle:
    """块样式（单位px，scale=1）"""
    font_size: float = 14.0
    bold: bool = False
    line_height: float = 1.625
    margin_top: float = 0.0
    margin_bottom: float = 4.0
    indent: float = 0.0
    padding: float = 0.0
    inset_top: float = 0.0
    inset_bottom: float = 0.0
    fixed_height: float | None = None
    accent_bar: bool = False


KIND_STYLES: dict[BlockKind, BlockStyle] = {
    BlockKind.SECTION_HEADER: BlockStyle(font_size=20, bold=True, line_height=1.4,
                                         margin_top=20, margin_bottom=12, inset_bottom=4),
    BlockKind.SUBSECTION_HEADER: BlockStyle(font_size=18, bold=True, line_height=1.4,
                                            margin_top=16, margin_bottom=8),
    BlockKind.PARAGRAPH: BlockStyle(),
    BlockKind.LIST_ITEM: BlockStyle(indent=8),
    BlockKind.NUMBERED_ITEM: BlockStyle(bold=True, margin_top=8, indent=8),
    BlockKind.RULE: BlockStyle(margin_top=16, margin_bottom=16, fixed_height=1),
    BlockKind.SPACER: BlockStyle(margin_bottom=0, fixed_height=8),
    BlockKind.TABLE_ROW: BlockStyle(line_height=1.5, margin_bottom=0),
}

ROLE_OVERRIDES: dict[str, dict] = {
    "document-header": {"inset_top": 48, "inset_bottom": 16, "margin_bottom": 24},
    "metadata": {"padding": 24, "margin_bottom": 32},
    "summary-title": {"font_size": 18, "margin_top": 16, "margin_bottom": 16,
                      "accent_bar": True},
    "summary": {"margin_bottom": 32},
    "risks-title": {"font_size": 16, "margin_top": 16, "margin_bottom": 8, "inset_bottom": 8},
    "risk": {"margin_bottom": 6},
    "risks-end": {"fixed_height": 32},
    "metrics-title": {"font_size": 18, "margin_top": 24, "margin_bottom": 8,
                      "accent_bar": True},
    "metric-table-head": {"padding": 12},
    "metric": {"padding": 16, "margin_bottom": 16},
    "metric-compact": {"padding": 12},
    "guide-end": {"fixed_height": 48},
}

CELL_FONT: dict[CellStyle, tuple[float, bool, tuple[int, int, int]]] = {
    CellStyle.BODY: (14, False, SLATE_600),
    CellStyle.STRONG: (14, True, SLATE_800),
    CellStyle.MUTED: (14, False, SLATE_500),
    CellStyle.TITLE: (24, True, SLATE_800),
    CellStyle.SCORE: (20, True, INDIGO_600),
}
LABEL_FONT = (12, False, SLATE_500)


def style_for(block: ContentBlock) -> BlockStyle:
    """按块类型 + 语义角色解析样式"""
    style = KIND_STYLES[block.kind]
    overrides = ROLE_OVERRIDES.get(block.role or "")
    if overrides:
        style = replace(style, **overrides)
    return style


def text_color(block: ContentBlock) -> tuple[int, int, int]:
    if block.tone == BlockTone.DANGER:
        return RED_800 if block.kind == BlockKind.LIST_ITEM else RED_700
    if block.kind in (BlockKind.SECTION_HEADER, BlockKind.SUBSECTION_HEADER,
                      BlockKind.NUMBERED_ITEM):
        return SLATE_800
    return SLATE_700


def parse_inline(text: str) -> list[tuple[str, bool]]:
    """解析行内粗体，返回 [(文本, 是否粗体)]"""
    spans = []
    for part in INLINE_BOLD_RE.split(text):
        if not part:
            continue
        if len(part) >= 4 and part.startswith("**") and part.endswith("**"):
            spans.append((part[2:-2], True))
        else:
            spans.append((part, False))
    return spans


# ----------------------------------------------------------------------------
# 绘制指令
# ----------------------------------------------------------------------------

@dataclass
class TextOp:
    x: float
    y: float  # 行垂直中心
    text: str
    font: ImageFont.FreeTypeFont
    fill: tuple[int, int, int]
    stroke: int = 0


@dataclass
class LineOp:
    x0: float
    y0: float
    x1: float
    y1: float
    fill: tuple[int, int, int]
    width: int = 1


@dataclass
class RectOp:
    x0: float
    y0: float
    x1: float
    y1: float
    fill: tuple[int, int, int] | None
    outline: tuple[int, int, int] | None = None
    width: int = 1


@dataclass
class BlockLayout:
    """单块排版结果（绘制指令坐标相对块内容顶部）"""
    margin_top: float
    body_height: float
    margin_bottom: float
    ops: list = field(default_factory=list)

    @property
    def height(self) -> float:
        return self.margin_top + self.body_height + self.margin_bottom

    def placed_height(self, suppress_top_margin: bool) -> float:
        return self.height - (self.margin_top if suppress_top_margin else 0.0)


@dataclass
class _Line:
    """一行已断好的文字片段 [(文本, 粗体, x偏移)]"""
    segments: list[tuple[str, bool, float]] = field(default_factory=list)
    width: float = 0.0


# ----------------------------------------------------------------------------
# 字体
# ----------------------------------------------------------------------------

class FontBook:
    """字体缓存（按像素字号 + 粗细）"""

    def __init__(self, fonts: FontConfig):
        self.fonts = fonts
        self._cache: dict[tuple[int, bool], ImageFont.FreeTypeFont] = {}

    def get(self, size: float, bold: bool) -> ImageFont.FreeTypeFont:
        px = max(1, round(size))
        key = (px, bold)
        if key not in self._cache:
            path = self.fonts.bold_path if bold and self.fonts.bold_path else self.fonts.regular_path
            if path:
                self._cache[key] = ImageFont.truetype(path, px)
            else:
                self._cache[key] = ImageFont.load_default(size=px)
        return self._cache[key]

    def stroke_for(self, size: float, bold: bool) -> int:
        """无粗体字体文件时用描边模拟粗体"""
        if bold and not self.fonts.bold_path:
            return max(1, round(size / 24))
        return 0


# ----------------------------------------------------------------------------
# 排版器
# ----------------------------------------------------------------------------

class BlockTypesetter:
    """块排版器"""

    def __init__(self, fonts: FontConfig, content_width_px: float):
        self.font_book = FontBook(fonts)
        self.content_width_px = content_width_px

    def layout(self, block: ContentBlock, scale: float = 1.0) -> BlockLayout:
        """排版单个内容块"""
        style = style_for(block)

        if block.kind in (BlockKind.SPACER, BlockKind.RULE):
            ops = []
            body = (style.fixed_height or 0.0) * scale
            if block.kind == BlockKind.RULE:
                ops.append(LineOp(PAD_X * scale, 0, (self.content_width_px - PAD_X) * scale, 0,
                                  SLATE_200, max(1, round(scale))))
            return BlockLayout(style.margin_top * scale, body, style.margin_bottom * scale, ops)

        if block.kind == BlockKind.TABLE_ROW:
            return self._layout_table_row(block, style, scale)

        return self._layout_text_block(block, style, scale)

    def draw(self, draw: ImageDraw.ImageDraw, layout: BlockLayout, top: float) -> None:
        """按排版结果在画布上绘制（top 为块内容顶部的y坐标）"""
        for op in layout.ops:
            if isinstance(op, RectOp):
                draw.rectangle((op.x0, top + op.y0, op.x1, top + op.y1), fill=op.fill,
                               outline=op.outline, width=op.width)
            elif isinstance(op, LineOp):
                draw.line((op.x0, top + op.y0, op.x1, top + op.y1), fill=op.fill,
                          width=op.width)
            else:
                draw.text((op.x, top + op.y), op.text, font=op.font, fill=op.fill,
                          anchor="lm", stroke_width=op.stroke, stroke_fill=op.fill)

    # ------------------------------------------------------------------
    # 文本块（标题/段落/列表/编号）
    # ------------------------------------------------------------------

    def _layout_text_block(self, block: ContentBlock, style: BlockStyle, scale: float) -> BlockLayout:
        size = style.font_size * scale
        line_px = size * style.line_height
        fill = text_color(block)
        ops: list = []

        x0 = (PAD_X + style.indent) * scale
        right = (self.content_width_px - PAD_X) * scale
        if style.accent_bar:
            ops.append(RectOp(PAD_X * scale, 0, (PAD_X + ACCENT_BAR) * scale, 0,
                              INDIGO_500))
            x0 += (ACCENT_BAR + ACCENT_GAP) * scale
        if block.kind == BlockKind.LIST_ITEM:
            bullet_color = RED_800 if block.tone == BlockTone.DANGER else SLATE_400
            bullet_font = self.font_book.get(size, False)
            ops.append(TextOp(x0, line_px / 2, BULLET, bullet_font, bullet_color))
            x0 += bullet_font.getlength(BULLET) + BULLET_GAP * scale

        lines = self.wrap(block.content, size, right - x0, base_bold=style.bold)
        y = style.inset_top * scale
        for line in lines:
            for text, bold, offset in line.segments:
                ops.append(TextOp(x0 + offset, y + line_px / 2, text,
                                  self.font_book.get(size, bold), fill,
                                  self.font_book.stroke_for(size, bold)))
            y += line_px
        body = y + style.inset_bottom * scale

        if style.accent_bar:
            ops[0].y1 = body
        if block.ruled:
            rule_color = RED_200 if block.tone == BlockTone.DANGER else SLATE_200
            ops.append(LineOp(PAD_X * scale, body, right, body, rule_color,
                              max(1, round(scale))))

        return BlockLayout(style.margin_top * scale, body, style.margin_bottom * scale, ops)

    # ------------------------------------------------------------------
    # 表格行等价块（12栅格单元格）
    # ------------------------------------------------------------------

    def _layout_table_row(self, block: ContentBlock, style: BlockStyle, scale: float) -> BlockLayout:
        pad = style.padding * scale
        left = PAD_X * scale
        right = (self.content_width_px - PAD_X) * scale
        inner_x0 = left + pad
        inner_w = right - left - 2 * pad
        col_unit = (inner_w + GRID_GAP * scale) / GRID_COLUMNS

        ops: list = []
        y = style.inset_top * scale + pad
        first_row_bottom = None
        for row in self._grid_rows(block):
            row_height = 0.0
            col = 0
            for cell in row:
                cell_x = inner_x0 + col * col_unit
                cell_w = cell.span * col_unit - GRID_GAP * scale
                cell_ops, cell_h = self._layout_cell(cell, cell_x, y, cell_w, style, scale)
                ops.extend(cell_ops)
                row_height = max(row_height, cell_h)
                col += cell.span
            y += row_height
            if first_row_bottom is None:
                first_row_bottom = y
            y += ROW_GAP * scale
        y -= ROW_GAP * scale if block.cells else 0
        body = y + pad + style.inset_bottom * scale

        if block.boxed:
            ops.insert(0, RectOp(left, 0, right, body, SLATE_50, SLATE_200, max(1, round(scale))))
        if block.role == "metric" and first_row_bottom is not None:
            sep_y = first_row_bottom + ROW_GAP * scale / 2
            ops.append(LineOp(inner_x0, sep_y, inner_x0 + inner_w, sep_y, SLATE_200,
                              max(1, round(scale))))
        if block.ruled:
            width = 2 if block.role == "document-header" else 1
            color = SLATE_800 if block.role == "document-header" else SLATE_100
            ops.append(LineOp(left, body, right, body, color, max(1, round(width * scale))))

        return BlockLayout(style.margin_top * scale, body, style.margin_bottom * scale, ops)

    @staticmethod
    def _grid_rows(block: ContentBlock) -> list[list]:
        """按12栅格把单元格分行"""
        rows: list[list] = []
        current: list = []
        used = 0
        for cell in block.cells:
            if current and used + cell.span > GRID_COLUMNS:
                rows.append(current)
                current, used = [], 0
            current.append(cell)
            used += cell.span
        if current:
            rows.append(current)
        return rows

    def _layout_cell(self, cell, x: float, top: float, width: float, style: BlockStyle,
                     scale: float) -> tuple[list, float]:
        ops: list = []
        y = top

        def place(text: str, size: float, bold: bool, fill, line_height: float) -> None:
            nonlocal y
            line_px = size * line_height
            for line in self.wrap(text, size, width, base_bold=bold):
                shift = width - line.width if cell.align == "right" else 0.0
                for seg, seg_bold, offset in line.segments:
                    ops.append(TextOp(x + shift + offset, y + line_px / 2, seg,
                                      self.font_book.get(size, seg_bold), fill,
                                      self.font_book.stroke_for(size, seg_bold)))
                y += line_px

        if cell.label:
            size, bold, fill = LABEL_FONT
            place(cell.label, size * scale, bold, fill, 1.5)
        size, bold, fill = CELL_FONT[cell.style]
        if cell.text:
            place(cell.text, size * scale, bold, fill, style.line_height)
        if cell.note:
            n_size, n_bold, n_fill = LABEL_FONT
            place(cell.note, n_size * scale, n_bold, SLATE_400, 1.5)
        return ops, y - top

    # ------------------------------------------------------------------
    # 断行
    # ------------------------------------------------------------------

    def wrap(self, text: str, size: float, max_width: float, base_bold: bool = False) -> list[_Line]:
        """贪心断行；显式换行符强制换行；空文本占一行"""
        lines: list[_Line] = []
        for raw in (text or "").split("\n"):
            lines.extend(self._wrap_paragraph(raw, size, max_width, base_bold))
        return lines or [_Line()]

    def _wrap_paragraph(self, text: str, size: float, max_width: float,
                        base_bold: bool) -> list[_Line]:
        lines = [_Line()]

        def push(token: str, bold: bool) -> None:
            font = self.font_book.get(size, bold)
            w = font.getlength(token)
            line = lines[-1]
            if token.isspace():
                if line.segments:
                    line.segments.append((" ", bold, line.width))
                    line.width += font.getlength(" ")
                return
            if line.segments and line.width + w > max_width:
                self._rstrip(line)
                lines.append(_Line())
                line = lines[-1]
            line.segments.append((token, bold, line.width))
            line.width += w

        for span, bold in parse_inline(text):
            bold = bold or base_bold
            for token in TOKEN_RE.findall(span):
                font = self.font_book.get(size, bold)
                if not token.isspace() and font.getlength(token) > max_width:
                    for ch in token:
                        push(ch, bold)
                else:
                    push(token, bold)

        self._rstrip(lines[-1])
        return lines

    @staticmethod
    def _rstrip(line: _Line) -> None:
        while line.segments and line.segments[-1][0] == " ":
            line.width = line.segments.pop()[2]
