"""
命令行接口模块

提供设置解析服务的诊断命令行工具。
"""

from .commands import main

__all__ = ["main"]
