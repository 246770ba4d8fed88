"""
配置加载单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_config.py -v
"""

import logging

import pytest

from aihr_export.config import RuntimeConfig, get_labels, setup_logging
from aihr_export.config.runtime_config import LoggingConfig


class TestRuntimeConfig:
    """运行期配置测试"""

    def test_default_geometry(self):
        """默认A4页面几何"""
        config = RuntimeConfig()
        g = config.geometry
        assert (g.width_mm, g.height_mm) == (210, 297)
        assert (g.margin_top_mm, g.margin_bottom_mm, g.safety_margin_mm) == (20, 20, 5)
        assert g.content_width_px == 794
        assert g.scale == 2
        assert config.render.concurrency == 1

    def test_missing_yaml_uses_defaults(self, tmp_path):
        """配置文件不存在时使用默认值"""
        config = RuntimeConfig.from_yaml(tmp_path / "missing.yaml")
        assert config.language == "zh"
        assert config.timeouts.page_render_sec == 60

    def test_from_yaml_flattens_defaults(self, tmp_path):
        """{default: x} 与普通值都能读取"""
        yaml_path = tmp_path / "export_runtime.yaml"
        yaml_path.write_text(
            "runtime_options:\n"
            "  language: en\n"
            "  page_geometry:\n"
            "    height_mm: {default: 279}\n"
            "    safety_margin_mm: 4\n"
            "  render:\n"
            "    concurrency: {default: 2}\n"
            "  fonts:\n"
            "    regular_path: fonts/NotoSansSC-Regular.otf\n",
            encoding="utf-8",
        )
        config = RuntimeConfig.from_yaml(yaml_path)
        assert config.language == "en"
        assert config.geometry.height_mm == 279
        assert config.geometry.safety_margin_mm == 4
        assert config.geometry.width_mm == 210
        assert config.render.concurrency == 2
        # 字体路径相对配置文件目录解析
        assert config.fonts.regular_path == str(
            (tmp_path / "fonts/NotoSansSC-Regular.otf").resolve()
        )
        assert config.fonts.bold_path is None

    def test_env_override(self, monkeypatch):
        """环境变量覆盖（嵌套用 __ 分隔）"""
        monkeypatch.setenv("AIHR_RENDER__CONCURRENCY", "3")
        monkeypatch.setenv("AIHR_LANGUAGE", "en")
        config = RuntimeConfig()
        assert config.render.concurrency == 3
        assert config.language == "en"

    def test_ensure_dirs(self, runtime_config):
        """创建输出目录"""
        runtime_config.ensure_dirs()
        assert runtime_config.output.output_dir.is_dir()


class TestLabels:
    """中英文标签测试"""

    def test_zh_labels(self):
        labels = get_labels("zh")
        assert labels.report_file_kind == "简历分析"
        assert labels.guide_file_kind == "面试指南"

    def test_en_labels(self):
        labels = get_labels("en")
        assert labels.summary_title == "Executive Summary"
        assert labels.report_file_kind == "Analysis"
        assert labels.guide_file_kind == "InterviewGuide"

    def test_unknown_language_falls_back_to_en(self):
        assert get_labels("fr").language == "en"

    @pytest.mark.parametrize("language", ["zh", "en"])
    def test_chrome_labels_ascii(self, language):
        """页眉页脚文案两种语言下都是ASCII"""
        labels = get_labels(language)
        for text in (
            labels.chrome_report_title,
            labels.chrome_guide_title,
            labels.chrome_report_label,
            labels.chrome_guide_label,
            labels.chrome_page_format,
            labels.chrome_overflow_marker,
        ):
            assert text.isascii()


class TestLoggingSetup:
    """日志配置测试"""

    def test_file_handler(self, runtime_config):
        """开启文件日志后写入输出目录"""
        runtime_config.logging = LoggingConfig(log_level="DEBUG", log_to_file=True)
        setup_logging(runtime_config)
        root = logging.getLogger()
        try:
            logging.getLogger("aihr_export.test").info("hello")
            file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
            assert len(file_handlers) == 1
            file_handlers[0].flush()
            log_path = runtime_config.output.output_dir / "export.log"
            assert "hello" in log_path.read_text(encoding="utf-8")
            assert root.level == logging.DEBUG
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
