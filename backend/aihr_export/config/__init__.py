"""
配置层 - 运行期配置与导出文案

职责：
- 加载 config/export_runtime.yaml（运行期参数）
- 提供中英文标签表
- 初始化日志
"""

from .labels import ExportLabels, get_labels
from .logging_setup import setup_logging
from .runtime_config import RuntimeConfig, get_config, reload_config

__all__ = [
    "ExportLabels",
    "get_labels",
    "setup_logging",
    "RuntimeConfig",
    "get_config",
    "reload_config",
]
