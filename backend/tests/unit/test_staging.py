"""
暂存画布单元测试
"""

import pytest
from PIL import ImageDraw

from aihr_export.interfaces import StagingError
from aihr_export.render import StagingArea

WHITE = (255, 255, 255)


class TestStagingLifecycle:
    """获取/释放测试"""

    def test_context_manager_releases(self):
        with StagingArea(100) as staging:
            assert staging.acquired
            staging.clear(50)
        assert not staging.acquired

    def test_release_on_error(self):
        """异常路径也会释放"""
        staging = StagingArea(100)
        with pytest.raises(RuntimeError):
            with staging:
                raise RuntimeError("render failed")
        assert not staging.acquired

    def test_use_without_acquire(self):
        with pytest.raises(StagingError):
            StagingArea(100).clear(10)

    def test_double_acquire(self):
        staging = StagingArea(100)
        staging.acquire()
        with pytest.raises(StagingError):
            staging.acquire()
        staging.release()

    def test_invalid_width(self):
        with pytest.raises(StagingError):
            StagingArea(0)


class TestStagingClear:
    """清空测试"""

    def test_clear_wipes_previous_content(self):
        """上一页的内容不会残留"""
        with StagingArea(100) as staging:
            draw: ImageDraw.ImageDraw = staging.clear(80)
            draw.rectangle((0, 0, 99, 79), fill=(255, 0, 0))
            staging.clear(40)
            image = staging.snapshot(40)
            assert image.getextrema() == ((255, 255), (255, 255), (255, 255))
            assert staging.clear_count == 2

    def test_snapshot_size(self):
        with StagingArea(120) as staging:
            staging.clear(30.2)
            image = staging.snapshot(30.2)
            assert image.size == (120, 31)

    def test_grows_when_taller(self):
        with StagingArea(50) as staging:
            staging.clear(10)
            staging.clear(200)
            assert staging.snapshot(200).size == (50, 200)
