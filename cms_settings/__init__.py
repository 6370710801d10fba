"""
CMS-Settings: 内容管理系统的分层设置解析

为应用声明的设置类型在保留的内容根节点下创建全局实例，
并按内容节点的祖先链解析最近的设置实例，未找到时回退到全局设置。
"""

__version__ = "0.1.0"

from .content.base import ContentReference, ContentNode, ContentFolder, SettingsBase
from .content.registry import SettingsTypeRegistry, settings_content_type, settings_registry
from .resolver.service import SettingsService
from .resolver.cache import GlobalSettingsCache
from .initialization import SettingsInitialization
from .search.provider import SettingsSearchProvider

__all__ = [
    "ContentReference",
    "ContentNode",
    "ContentFolder",
    "SettingsBase",
    "SettingsTypeRegistry",
    "settings_content_type",
    "settings_registry",
    "SettingsService",
    "GlobalSettingsCache",
    "SettingsInitialization",
    "SettingsSearchProvider",
]
