"""
设置类型注册表

统一管理应用声明的所有设置类型，提供注册、查询以及设置引用属性映射功能。
"""

import threading
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type, Union

from .base import ContentNode, SettingsBase


@dataclass(frozen=True)
class SettingsTypeInfo:
    """设置类型元数据"""
    settings_class: Type[SettingsBase]
    settings_name: str  # 全局实例的显示名称
    settings_instance_guid: uuid.UUID  # 全局实例的稳定标识
    description: str = ""

    @property
    def type_name(self) -> str:
        return self.settings_class.__name__


class SettingsTypeRegistry:
    """设置类型注册表类"""

    def __init__(self):
        self._lock = threading.Lock()
        self._types: Dict[Type[SettingsBase], SettingsTypeInfo] = {}
        self._reference_properties: Dict[Tuple[str, Type[SettingsBase]], str] = {}

    def register(self, settings_class: Type[SettingsBase], settings_name: str,
                 settings_instance_guid: Union[str, uuid.UUID],
                 description: str = "") -> SettingsTypeInfo:
        """
        注册设置类型

        Args:
            settings_class: 设置类（必须继承SettingsBase）
            settings_name: 全局实例显示名称
            settings_instance_guid: 全局实例的稳定GUID
            description: 描述

        Returns:
            注册后的类型元数据
        """
        if not isinstance(settings_class, type) or not issubclass(settings_class, SettingsBase):
            raise TypeError(f"Settings type must subclass SettingsBase: {settings_class!r}")

        guid = settings_instance_guid
        if not isinstance(guid, uuid.UUID):
            guid = uuid.UUID(str(guid))

        info = SettingsTypeInfo(
            settings_class=settings_class,
            settings_name=settings_name,
            settings_instance_guid=guid,
            description=description,
        )

        with self._lock:
            existing = self._types.get(settings_class)
            if existing is not None:
                # 重复导入时允许相同注册
                if existing.settings_instance_guid != guid:
                    raise ValueError(
                        f"Settings type '{settings_class.__name__}' already registered "
                        f"with guid {existing.settings_instance_guid}"
                    )
                return existing

            for other in self._types.values():
                if other.settings_instance_guid == guid:
                    raise ValueError(
                        f"Settings guid {guid} already registered for '{other.type_name}'"
                    )
                if other.type_name == settings_class.__name__:
                    raise ValueError(
                        f"Settings type name '{other.type_name}' already registered"
                    )

            self._types[settings_class] = info
            return info

    def get(self, settings_class: Type[SettingsBase]) -> Optional[SettingsTypeInfo]:
        """获取设置类型元数据"""
        with self._lock:
            return self._types.get(settings_class)

    def get_by_name(self, type_name: str) -> Optional[SettingsTypeInfo]:
        """按类名获取设置类型元数据"""
        with self._lock:
            for info in self._types.values():
                if info.type_name == type_name:
                    return info
        return None

    def list_types(self) -> List[SettingsTypeInfo]:
        """获取所有已注册的设置类型（按注册顺序）"""
        with self._lock:
            return list(self._types.values())

    def is_registered(self, settings_class: Type[SettingsBase]) -> bool:
        with self._lock:
            return settings_class in self._types

    def unregister(self, settings_class: Type[SettingsBase]) -> bool:
        """
        注销设置类型

        Returns:
            是否成功注销
        """
        with self._lock:
            if settings_class not in self._types:
                return False
            del self._types[settings_class]
            self._reference_properties = {
                key: value for key, value in self._reference_properties.items()
                if key[1] is not settings_class
            }
            return True

    def clear(self) -> None:
        """清空所有注册"""
        with self._lock:
            self._types.clear()
            self._reference_properties.clear()

    def map_reference_property(self, content_type_name: str,
                               settings_class: Type[SettingsBase],
                               property_name: str) -> None:
        """
        为内容类型显式指定引用设置实例的属性名

        Args:
            content_type_name: 内容类型名称
            settings_class: 设置类
            property_name: 属性名称
        """
        with self._lock:
            self._reference_properties[(content_type_name, settings_class)] = property_name

    def reference_property(self, content: ContentNode,
                           settings_class: Type[SettingsBase]) -> str:
        """
        获取内容节点上引用设置实例的属性名

        未显式映射时使用设置类名作为属性名。
        """
        with self._lock:
            mapped = self._reference_properties.get((content.type_name, settings_class))
        return mapped or settings_class.__name__

    def __len__(self) -> int:
        with self._lock:
            return len(self._types)

    def __contains__(self, settings_class) -> bool:
        return self.is_registered(settings_class)


def settings_content_type(settings_name: str,
                          settings_instance_guid: Union[str, uuid.UUID],
                          *,
                          description: str = "",
                          registry: Optional[SettingsTypeRegistry] = None):
    """
    设置类型装饰器

    在模块导入时注册设置类型。

    Example:
        @settings_content_type("Theme settings", "0f6b1e6c-3a52-4c41-9d0b-4d9d0b7d3f10")
        @dataclass
        class Theme(SettingsBase):
            primary_color: str = "#005eb8"
    """
    def decorator(cls):
        target = registry if registry is not None else settings_registry
        target.register(cls, settings_name, settings_instance_guid, description=description)
        return cls
    return decorator


# 全局设置类型注册表实例
settings_registry = SettingsTypeRegistry()
