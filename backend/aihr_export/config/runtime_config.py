"""
运行期配置 - 读取 config/export_runtime.yaml

职责：
- 加载页面几何/字体/超时/渲染并发/输出目录等运行参数
- 提供环境变量覆盖机制（AIHR_ 前缀，嵌套用 __ 分隔）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class PageGeometryConfig(BaseModel):
    """页面几何（单位mm，整份文档固定一种）"""

    width_mm: float = 210.0
    height_mm: float = 297.0
    margin_top_mm: float = 20.0
    margin_bottom_mm: float = 20.0
    safety_margin_mm: float = 5.0  # 吸收亚像素取整与字体度量差异
    content_width_px: int = 794  # 210mm @ 96dpi
    scale: float = 2.0  # 栅格化过采样倍数


class FontConfig(BaseModel):
    """字体配置（未配置路径时使用Pillow内置字体，不含中文字形）"""

    regular_path: str | None = None
    bold_path: str | None = None


class TimeoutConfig(BaseModel):
    """超时配置"""

    settle_sec: float = 0.3  # 枚举完成后等待样式稳定
    page_render_sec: float = 60.0


class RenderConfig(BaseModel):
    """渲染配置"""

    concurrency: int = 1  # >1 时每个并发任务独占一块暂存画布
    background: str = "#ffffff"


class OutputConfig(BaseModel):
    """输出配置"""

    output_dir: Path = Path("exports")
    allow_empty: bool = False


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "export.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    language: str = "zh"

    geometry: PageGeometryConfig = Field(default_factory=PageGeometryConfig)
    fonts: FontConfig = Field(default_factory=FontConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "AIHR_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            language=runtime_opts.get("language", "zh"),
            geometry=PageGeometryConfig(**cls._extract(runtime_opts, "page_geometry")),
            fonts=FontConfig(**cls._extract(runtime_opts, "fonts")),
            timeouts=TimeoutConfig(**cls._extract(runtime_opts, "timeouts")),
            render=RenderConfig(**cls._extract(runtime_opts, "render")),
            output=OutputConfig(**cls._extract(runtime_opts, "output")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        for attr in ("regular_path", "bold_path"):
            value = getattr(self.fonts, attr)
            if value and not Path(value).is_absolute():
                setattr(self.fonts, attr, str((base_dir / value).resolve()))

    def ensure_dirs(self) -> None:
        """确保输出目录存在"""
        self.output.output_dir.mkdir(parents=True, exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/export_runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
