"""
模拟面试指南文本分页（只测量与分页，不栅格化），用于核对页预算与分页算法。

示例：
  python tools/simulate_pagination.py --text samples/guide.md
  python tools/simulate_pagination.py --text samples/guide.md --fixed-height 40
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate pagination of a guide text.")
    parser.add_argument("--text", required=True, help="Markdown风格的指南文本文件")
    parser.add_argument(
        "--config",
        default="config/export_runtime.yaml",
        help="运行期配置（默认：config/export_runtime.yaml）",
    )
    parser.add_argument(
        "--fixed-height",
        type=float,
        default=0.0,
        help="可选：所有块使用固定高度（px），绕过字体测量",
    )
    args = parser.parse_args()

    _add_backend_to_path()
    from aihr_export.config import reload_config  # type: ignore
    from aihr_export.layout import (  # type: ignore
        FontMetricsMeasurer,
        PageBudgetCalculator,
        Paginator,
        enumerate_guide_text,
    )
    from aihr_export.render import BlockTypesetter  # type: ignore

    config = reload_config(args.config)
    text = Path(args.text).read_text(encoding="utf-8")
    blocks = enumerate_guide_text(text)
    if not blocks:
        print("no content blocks")
        return 1

    if args.fixed_height > 0:
        for block in blocks:
            block.rendered_height = args.fixed_height
    else:
        typesetter = BlockTypesetter(config.fonts, config.geometry.content_width_px)
        FontMetricsMeasurer(typesetter).measure_all(blocks)

    budget = PageBudgetCalculator(config.geometry).compute(config.geometry.content_width_px)
    pages = Paginator().paginate(blocks, budget)

    print(f"blocks={len(blocks)} budget_px={budget:.1f} pages={len(pages)}")
    for page in pages:
        marker = "  OVERFLOW" if page.overflow else ""
        print(
            f"page {page.index + 1}: blocks={page.block_indices} "
            f"height={page.cumulative_height:.1f}{marker}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
