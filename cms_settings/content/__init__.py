"""
内容模块

提供内容引用、内容节点、设置基础类型和设置类型注册表。
"""

from .base import (
    ContentReference,
    ContentNode,
    ContentFolder,
    SettingsBase,
    SiteDefinition,
    VersionStatus,
    SaveAction,
)
from .registry import (
    SettingsTypeInfo,
    SettingsTypeRegistry,
    settings_content_type,
    settings_registry,
)

__all__ = [
    "ContentReference",
    "ContentNode",
    "ContentFolder",
    "SettingsBase",
    "SiteDefinition",
    "VersionStatus",
    "SaveAction",
    "SettingsTypeInfo",
    "SettingsTypeRegistry",
    "settings_content_type",
    "settings_registry",
]
