"""
AIHR Studio 分页文档导出引擎 - 后端核心模块

模块结构：
- config/     运行期配置与中英文标签
- models/     数据模型定义（内容块/页/文档/导出任务/候选人）
- layout/     内容块枚举、高度测量、页预算、分页
- render/     排版、暂存画布、栅格化、PDF装配、页眉页脚、文件命名
- pipeline/   导出任务编排与任务管理
"""

__version__ = "0.1.0"
