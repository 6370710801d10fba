"""
工具模块

提供日志配置和输出格式化功能。
"""

from .log import setup_logging
from .formatters import format_rows

__all__ = ["setup_logging", "format_rows"]
