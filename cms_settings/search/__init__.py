"""
设置搜索模块

提供设置实例的名称搜索和设置仓库描述。
"""

from .provider import SettingsSearchProvider, SearchResult
from .descriptor import SettingsRepositoryDescriptor

__all__ = [
    "SettingsSearchProvider",
    "SearchResult",
    "SettingsRepositoryDescriptor",
]
