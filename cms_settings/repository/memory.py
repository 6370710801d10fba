"""
内存内容仓库

宿主内容库接口的内存实现，用于测试、示例和诊断命令行。
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Type

from ..content.base import (
    ContentFolder,
    ContentNode,
    ContentReference,
    SaveAction,
    SettingsBase,
    SiteDefinition,
    VersionStatus,
)
from .base import (
    AncestorReferencesLoader,
    ContentNotFoundError,
    ContentRepository,
    ContentRootService,
    PublishedCallback,
    RootRegistrationError,
    TContent,
)

logger = logging.getLogger(__name__)


class InMemoryContentRepository(ContentRepository, AncestorReferencesLoader):
    """内存内容仓库（同时提供祖先引用加载）"""

    ROOT_NAME = "Root"

    def __init__(self, site_definition: Optional[SiteDefinition] = None):
        self._lock = threading.RLock()
        self._contents: Dict[int, ContentNode] = {}
        self._next_id = 1
        self._listeners: List[PublishedCallback] = []

        self.root = self.save(ContentFolder(name=self.ROOT_NAME), SaveAction.SAVE)
        self.site_definition = site_definition or SiteDefinition(
            global_assets_root=self.root,
            site_assets_root=self.root,
        )

    def get(self, reference: ContentReference) -> ContentNode:
        with self._lock:
            content = self._contents.get(reference.id) if reference else None
        if content is None:
            raise ContentNotFoundError(f"Content not found: {reference}")
        return content

    def get_children(self, reference: ContentReference) -> List[ContentNode]:
        with self._lock:
            children = [c for c in self._contents.values() if c.parent == reference]
        return sorted(children, key=lambda c: c.reference.id)

    def get_default(self, parent: ContentReference,
                    content_class: Type[TContent]) -> TContent:
        # 校验父节点存在
        self.get(parent)
        return content_class(parent=parent)

    def find_by_guid(self, content_guid: uuid.UUID) -> Optional[ContentNode]:
        """按GUID查找内容"""
        with self._lock:
            for content in self._contents.values():
                if content.content_guid == content_guid:
                    return content
        return None

    def save(self, content: ContentNode,
             action: SaveAction = SaveAction.PUBLISH) -> ContentReference:
        with self._lock:
            for other in self._contents.values():
                if other.content_guid != content.content_guid or other is content:
                    continue
                if not content.reference or other.reference != content.reference:
                    raise ValueError(
                        f"Content guid {content.content_guid} already used by content {other.reference}"
                    )

            if content.reference:
                owner = self._contents.get(content.reference.id)
                if owner is not None and owner is not content and owner.content_guid != content.content_guid:
                    raise ValueError(
                        f"Content reference {content.reference} already used by content {owner.content_guid}"
                    )

            if content.parent is None and self._contents:
                content.parent = self.root
            if content.parent is not None and content.parent.id not in self._contents:
                raise ContentNotFoundError(f"Parent content not found: {content.parent}")

            if not content.reference:
                content.reference = ContentReference(self._next_id)
            self._next_id = max(self._next_id, content.reference.id + 1)

            if action is SaveAction.PUBLISH and isinstance(content, SettingsBase):
                content.status = VersionStatus.PUBLISHED
                content.is_pending_publish = False
            elif isinstance(content, SettingsBase) and content.status is VersionStatus.NOT_CREATED:
                content.status = VersionStatus.CHECKED_OUT

            self._contents[content.reference.id] = content
            listeners = list(self._listeners)

        logger.debug("[Settings] Saved content %s (%s, %s)", content.reference, content.type_name, action.value)

        # 在释放仓库锁之后通知，订阅者可以回读仓库
        if action is SaveAction.PUBLISH:
            for callback in listeners:
                callback(content)

        return content.reference

    def delete(self, reference: ContentReference) -> bool:
        """
        删除单个内容（不级联删除子节点）

        Returns:
            是否删除成功
        """
        with self._lock:
            return self._contents.pop(reference.id, None) is not None

    def subscribe_published(self, callback: PublishedCallback) -> None:
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def unsubscribe_published(self, callback: PublishedCallback) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def get_ancestors(self, reference: ContentReference) -> Iterator[ContentReference]:
        with self._lock:
            content = self._contents.get(reference.id) if reference else None
        if content is None:
            return

        current = content.parent
        while current:
            yield current
            with self._lock:
                node = self._contents.get(current.id)
            if node is None:
                return
            current = node.parent

    def all_contents(self) -> List[ContentNode]:
        """获取所有内容（按引用排序）"""
        with self._lock:
            return [self._contents[key] for key in sorted(self._contents)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._contents)


@dataclass(frozen=True)
class _RootEntry:
    root_id: uuid.UUID
    parent: ContentReference
    reference: ContentReference


class InMemoryContentRootService(ContentRootService):
    """基于内存仓库的内容根节点服务"""

    def __init__(self, repository: InMemoryContentRepository):
        self._repository = repository
        self._lock = threading.Lock()
        self._roots: Dict[str, _RootEntry] = {}

    def register(self, root_name: str, root_id: uuid.UUID, parent: ContentReference,
                 folder_class: Type[ContentFolder] = ContentFolder) -> None:
        with self._lock:
            existing = self._roots.get(root_name)
            if existing is not None:
                if existing.root_id == root_id and existing.parent == parent:
                    return
                raise RootRegistrationError(
                    f"Root '{root_name}' is already registered with id {existing.root_id} "
                    f"under content {existing.parent}"
                )

            for name, entry in self._roots.items():
                if entry.root_id == root_id:
                    raise RootRegistrationError(
                        f"Root id {root_id} is already registered as '{name}'"
                    )

            # 仓库中已存在的根节点（例如从内容文件加载）直接复用
            folder = self._repository.find_by_guid(root_id)
            if folder is not None:
                if folder.parent != parent:
                    raise RootRegistrationError(
                        f"Root '{root_name}' exists under content {folder.parent}, not {parent}"
                    )
                reference = folder.reference
            else:
                folder = folder_class(parent=parent, name=root_name, content_guid=root_id)
                reference = self._repository.save(folder, SaveAction.SAVE)
                logger.info("[Settings] Created content root '%s' (%s)", root_name, reference)

            self._roots[root_name] = _RootEntry(root_id=root_id, parent=parent, reference=reference)

    def get(self, root_name: str) -> ContentReference:
        with self._lock:
            entry = self._roots.get(root_name)
        if entry is None:
            raise ContentNotFoundError(f"Content root not registered: {root_name}")
        return entry.reference
