"""
从候选人JSON导出PDF（评估报告或面试指南）。

JSON结构与 ExportRequest 一致：
  {"document_type": "report", "language": "zh",
   "candidate": {...}, "job": {"title": "..."}, "metrics": [...]}

示例：
  python tools/export_candidate.py --input samples/candidate.json
  python tools/export_candidate.py --input samples/candidate.json --type guide --lang en
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Export a candidate report/guide to PDF.")
    parser.add_argument("--input", required=True, help="候选人JSON文件")
    parser.add_argument("--type", choices=["report", "guide"], default="", help="覆盖文档类型")
    parser.add_argument("--lang", choices=["zh", "en"], default="", help="覆盖语言（缺省依次取输入JSON、运行配置）")
    parser.add_argument(
        "--config",
        default="config/export_runtime.yaml",
        help="运行期配置（默认：config/export_runtime.yaml）",
    )
    parser.add_argument("--out-dir", default="", help="覆盖输出目录")
    parser.add_argument("--allow-empty", action="store_true", help="空内容不报错")
    args = parser.parse_args()

    _add_backend_to_path()
    from aihr_export.config import reload_config, setup_logging  # type: ignore
    from aihr_export.interfaces import AIHRExportError  # type: ignore
    from aihr_export.models import ExportRequest  # type: ignore
    from aihr_export.pipeline import ExportJobManager  # type: ignore

    config = reload_config(args.config)
    if args.out_dir:
        config.output.output_dir = Path(args.out_dir)
    setup_logging(config)

    data = json.loads(Path(args.input).read_text(encoding="utf-8"))
    if args.type:
        data["document_type"] = args.type
    if args.lang:
        data["language"] = args.lang
    request = ExportRequest.model_validate(data)

    manager = ExportJobManager(config)
    try:
        job, document = asyncio.run(
            manager.submit(request, allow_empty=args.allow_empty or None)
        )
    except AIHRExportError as e:
        print(f"[FAIL] {e}")
        return 1

    print(f"status={job.status.value} pages={document.page_count}")
    print(f"partition={document.partition()}")
    if job.flags:
        print(f"flags={job.flags}")
    if job.output_path:
        print(f"output={job.output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
