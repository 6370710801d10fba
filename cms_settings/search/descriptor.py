"""
设置仓库描述

向宿主导航界面描述设置内容仓库。
"""

from dataclasses import dataclass
from typing import Tuple, Type

from ..content.base import ContentFolder, ContentNode, ContentReference, SettingsBase
from ..resolver.service import SettingsService
from .provider import SettingsSearchProvider


@dataclass(frozen=True)
class SettingsRepositoryDescriptor:
    """设置仓库描述类"""
    roots: Tuple[ContentReference, ...]
    key: str = "dynamiccontent"
    name: str = "Settings"
    contained_types: Tuple[Type[ContentNode], ...] = (ContentFolder, SettingsBase)
    creatable_types: Tuple[Type[ContentNode], ...] = (SettingsBase,)
    main_navigation_types: Tuple[Type[ContentNode], ...] = (ContentFolder,)
    search_area: str = SettingsSearchProvider.AREA
    custom_select_title: str = "Select settings"
    sort_order: int = 1100

    @classmethod
    def from_service(cls, service: SettingsService) -> "SettingsRepositoryDescriptor":
        """根据已初始化的设置服务创建描述"""
        if not service.settings_root:
            raise ValueError("Settings service has not been initialized")
        return cls(roots=(service.settings_root,))
