"""
基础内容类定义

定义宿主内容库中的内容引用、内容节点以及所有设置类型的基础结构。
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ContentReference:
    """内容引用（宿主内容库中的节点标识）"""
    id: int

    def __bool__(self) -> bool:
        return self.id > 0

    def __str__(self) -> str:
        return str(self.id)


ContentReference.EMPTY = ContentReference(0)


class VersionStatus(str, Enum):
    """内容版本状态"""
    NOT_CREATED = "not_created"
    CHECKED_OUT = "checked_out"
    CHECKED_IN = "checked_in"
    PUBLISHED = "published"
    PREVIOUSLY_PUBLISHED = "previously_published"
    DELAYED_PUBLISH = "delayed_publish"


class SaveAction(str, Enum):
    """保存动作"""
    SAVE = "save"
    PUBLISH = "publish"


@dataclass
class ContentNode:
    """内容节点基础类"""
    reference: Optional[ContentReference] = None
    parent: Optional[ContentReference] = None
    name: str = ""
    content_guid: uuid.UUID = field(default_factory=uuid.uuid4)
    content_type_name: str = ""  # 非类型化节点的内容类型名
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        """内容类型名称"""
        return self.content_type_name or type(self).__name__

    def get_property(self, name: str) -> Any:
        """
        读取属性值

        先查找动态属性表，再查找同名字段。

        Args:
            name: 属性名称

        Returns:
            属性值，不存在时返回None
        """
        if name in self.properties:
            return self.properties[name]
        if name.startswith("_"):
            return None
        return getattr(self, name, None)


@dataclass
class ContentFolder(ContentNode):
    """内容文件夹（用于设置根节点）"""


@dataclass
class SettingsBase(ContentNode):
    """所有设置类型的基础类"""
    status: VersionStatus = VersionStatus.NOT_CREATED
    is_pending_publish: bool = False
    start_publish: Optional[datetime] = None
    stop_publish: Optional[datetime] = None


@dataclass
class SiteDefinition:
    """站点定义：设置根节点的父节点"""
    global_assets_root: ContentReference
    site_assets_root: ContentReference
