"""
暂存画布 - 离屏、可复用的单页渲染表面

使用纪律（作用域获取）：
    with StagingArea(width_px, background) as staging:
        for page in pages:
            canvas = staging.clear(height_px)   # 每页前完全清空
            ...绘制...
            image = staging.snapshot(height_px)
    # 任务结束（含异常路径）自动释放

共享一块画布时必须串行使用；并行渲染时每个任务各自持有一块。
"""

from __future__ import annotations

import logging
import math

from PIL import Image, ImageDraw

from ..interfaces import StagingError

logger = logging.getLogger(__name__)


class StagingArea:
    """离屏暂存画布"""

    def __init__(self, width_px: int, background: str = "#ffffff"):
        if width_px <= 0:
            raise StagingError(f"暂存画布宽度无效: {width_px}")
        self.width_px = width_px
        self.background = background
        self._image: Image.Image | None = None
        self._acquired = False
        self.clear_count = 0

    def __enter__(self) -> StagingArea:
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def acquired(self) -> bool:
        return self._acquired

    def acquire(self) -> None:
        """获取画布"""
        if self._acquired:
            raise StagingError("暂存画布已被占用")
        self._acquired = True
        self.clear_count = 0

    def release(self) -> None:
        """释放画布（可重复调用）"""
        if self._image is not None:
            self._image.close()
            self._image = None
        self._acquired = False

    def clear(self, height_px: float) -> ImageDraw.ImageDraw:
        """清空画布并返回绘图句柄（高度不足时重新分配）"""
        self._require_acquired()
        height = max(1, math.ceil(height_px))
        if self._image is None or self._image.height < height:
            if self._image is not None:
                self._image.close()
            self._image = Image.new("RGB", (self.width_px, height), self.background)
        else:
            self._image.paste(self.background, (0, 0, self._image.width, self._image.height))
        self.clear_count += 1
        return ImageDraw.Draw(self._image)

    def snapshot(self, height_px: float) -> Image.Image:
        """复制出画布顶部 height_px 高度的位图"""
        self._require_acquired()
        if self._image is None:
            raise StagingError("暂存画布尚未清空初始化")
        height = max(1, math.ceil(height_px))
        return self._image.crop((0, 0, self.width_px, height))

    def _require_acquired(self) -> None:
        if not self._acquired:
            raise StagingError("暂存画布未获取或已释放")
