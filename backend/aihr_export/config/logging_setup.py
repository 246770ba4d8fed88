"""日志配置 - 按运行期配置初始化根日志器"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runtime_config import RuntimeConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(config: RuntimeConfig) -> None:
    """
    配置日志（控制台 + 可选文件）

    文件日志写入输出目录下，用于导出失败后的运维排查。
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.logging.log_to_file:
        config.ensure_dirs()
        log_path = config.output.output_dir / config.logging.log_file
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=config.logging.log_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
