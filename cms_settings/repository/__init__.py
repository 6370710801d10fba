"""
内容仓库模块

提供宿主内容库的抽象接口，以及用于测试和诊断的内存实现。
"""

from .base import (
    ContentRepository,
    ContentRootService,
    AncestorReferencesLoader,
    ContentNotFoundError,
    RootRegistrationError,
)
from .memory import InMemoryContentRepository, InMemoryContentRootService
from .loader import load_content_tree, dump_content_tree

__all__ = [
    # 抽象接口
    "ContentRepository",
    "ContentRootService",
    "AncestorReferencesLoader",
    "ContentNotFoundError",
    "RootRegistrationError",

    # 内存实现
    "InMemoryContentRepository",
    "InMemoryContentRootService",
    "load_content_tree",
    "dump_content_tree",
]
