"""
宿主内容库抽象

定义设置解析器依赖的宿主接口：内容仓库、内容根节点服务和祖先引用加载器。
"""

import uuid
from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional, Type, TypeVar

from ..content.base import (
    ContentFolder,
    ContentNode,
    ContentReference,
    SaveAction,
)

TContent = TypeVar("TContent", bound=ContentNode)

PublishedCallback = Callable[[ContentNode], None]


class ContentNotFoundError(LookupError):
    """内容不存在"""


class RootRegistrationError(ValueError):
    """内容根节点注册冲突"""


class ContentRepository(ABC):
    """内容仓库基础类"""

    @abstractmethod
    def get(self, reference: ContentReference) -> ContentNode:
        """
        加载内容

        Raises:
            ContentNotFoundError: 内容不存在
        """
        pass

    def try_get(self, reference: Optional[ContentReference],
                expected_type: Optional[Type[TContent]] = None) -> Optional[TContent]:
        """
        尝试加载内容

        Args:
            reference: 内容引用
            expected_type: 期望的内容类型

        Returns:
            内容实例，不存在或类型不匹配时返回None
        """
        if not reference:
            return None
        try:
            content = self.get(reference)
        except ContentNotFoundError:
            return None
        if expected_type is not None and not isinstance(content, expected_type):
            return None
        return content

    @abstractmethod
    def get_children(self, reference: ContentReference) -> List[ContentNode]:
        """获取直接子节点"""
        pass

    def get_descendants(self, reference: ContentReference) -> Iterator[ContentReference]:
        """获取所有后代节点引用（深度优先，父节点先于子节点）"""
        for child in self.get_children(reference):
            yield child.reference
            yield from self.get_descendants(child.reference)

    @abstractmethod
    def get_default(self, parent: ContentReference,
                    content_class: Type[TContent]) -> TContent:
        """创建一个未保存的默认内容实例"""
        pass

    @abstractmethod
    def save(self, content: ContentNode,
             action: SaveAction = SaveAction.PUBLISH) -> ContentReference:
        """
        保存内容

        Returns:
            保存后的内容引用
        """
        pass

    @abstractmethod
    def subscribe_published(self, callback: PublishedCallback) -> None:
        """订阅内容发布通知"""
        pass

    @abstractmethod
    def unsubscribe_published(self, callback: PublishedCallback) -> None:
        """取消订阅内容发布通知"""
        pass


class ContentRootService(ABC):
    """内容根节点服务基础类"""

    @abstractmethod
    def register(self, root_name: str, root_id: uuid.UUID, parent: ContentReference,
                 folder_class: Type[ContentFolder] = ContentFolder) -> None:
        """
        注册命名内容根节点

        相同名称、标识和父节点的重复注册不产生任何效果。

        Raises:
            RootRegistrationError: 名称或标识已绑定到不同的根节点
        """
        pass

    @abstractmethod
    def get(self, root_name: str) -> ContentReference:
        """
        获取命名内容根节点引用

        Raises:
            ContentNotFoundError: 根节点未注册
        """
        pass


class AncestorReferencesLoader(ABC):
    """祖先引用加载器基础类"""

    @abstractmethod
    def get_ancestors(self, reference: ContentReference) -> Iterator[ContentReference]:
        """按从近到远的顺序返回祖先节点引用"""
        pass
