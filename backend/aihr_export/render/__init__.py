"""
渲染模块 - 排版、暂存画布、栅格化、PDF装配、页眉页脚、文件命名

子模块：
- typesetter: 块排版（测量与栅格化共用同一套排版规则）
- staging: 离屏暂存画布
- rasterizer: 单页 → 位图
- assembler: 位图 → PDF页（延迟落页）
- chrome: 页眉/页脚/页码
- file_namer: 导出文件名
"""

from .typesetter import BlockLayout, BlockTypesetter, FontBook, parse_inline
from .staging import StagingArea
from .rasterizer import PageRasterizer
from .assembler import DeferredPageCanvas, DocumentAssembler
from .chrome import ChromeStamper, chrome_safe
from .file_namer import FileNamer, sanitize_component

__all__ = [
    "BlockLayout",
    "BlockTypesetter",
    "FontBook",
    "parse_inline",
    "StagingArea",
    "PageRasterizer",
    "DeferredPageCanvas",
    "DocumentAssembler",
    "ChromeStamper",
    "chrome_safe",
    "FileNamer",
    "sanitize_component",
]
