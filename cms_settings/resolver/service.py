"""
设置解析服务

维护全局设置映射，初始化设置根节点和全局设置实例，
并按内容节点及其祖先链解析最近的设置实例。
"""

import logging
import uuid
from typing import Dict, Optional, Type, TypeVar

from ..content.base import (
    ContentNode,
    ContentReference,
    SaveAction,
    SettingsBase,
    SiteDefinition,
)
from ..content.registry import SettingsTypeInfo, SettingsTypeRegistry, settings_registry
from ..repository.base import (
    AncestorReferencesLoader,
    ContentRepository,
    ContentRootService,
    RootRegistrationError,
)
from .cache import GlobalSettingsCache

logger = logging.getLogger(__name__)

TSettings = TypeVar("TSettings", bound=SettingsBase)

GLOBAL_SETTINGS_ROOT_NAME = "Global Settings Root"
SETTINGS_ROOT_NAME = "Settings Root"
GLOBAL_SETTINGS_ROOT_GUID = uuid.UUID("98ed413d-d7b5-4fbf-92a6-120d850fe61a")
SETTINGS_ROOT_GUID = uuid.UUID("98ed413d-d7b5-4fbf-92a6-120d850fe61c")


class SettingsService:
    """设置解析服务主类"""

    def __init__(self,
                 repository: ContentRepository,
                 root_service: ContentRootService,
                 ancestor_loader: AncestorReferencesLoader,
                 registry: Optional[SettingsTypeRegistry] = None,
                 cache: Optional[GlobalSettingsCache] = None,
                 site_definition: Optional[SiteDefinition] = None):
        self.repository = repository
        self.root_service = root_service
        self.ancestor_loader = ancestor_loader
        self.registry = registry if registry is not None else settings_registry
        self.cache = cache if cache is not None else GlobalSettingsCache()
        self.site_definition = site_definition or getattr(repository, "site_definition", None)

        self.global_settings_root: Optional[ContentReference] = None
        self.settings_root: Optional[ContentReference] = None
        self._disposed = False

    @property
    def global_settings(self) -> Dict[Type[SettingsBase], SettingsBase]:
        """全局设置映射的快照"""
        return self.cache.snapshot()

    def init_settings(self) -> None:
        """
        初始化设置

        注册全局设置根节点和站点设置根节点，
        并为每个已注册的设置类型加载或创建全局实例。

        Raises:
            RootRegistrationError: 根节点已以不同标识或父节点注册
        """
        if self.site_definition is None:
            raise ValueError("A site definition is required to initialize settings")

        self.global_settings_root = self._register_root(
            GLOBAL_SETTINGS_ROOT_NAME,
            GLOBAL_SETTINGS_ROOT_GUID,
            self.site_definition.global_assets_root,
        )
        self.settings_root = self._register_root(
            SETTINGS_ROOT_NAME,
            SETTINGS_ROOT_GUID,
            self.site_definition.site_assets_root,
        )

        self._initialize_content_instances()

    def get_settings(self, settings_class: Type[TSettings]) -> Optional[TSettings]:
        """
        获取全局设置实例

        Args:
            settings_class: 设置类

        Returns:
            全局设置实例，未找到时返回None
        """
        self._check_settings_class(settings_class)

        settings = self.cache.get(settings_class)
        if settings is None:
            logger.warning("[Settings] No global settings registered for %s", settings_class.__name__)
        return settings

    def get_content_settings(self, settings_class: Type[TSettings],
                             content: Optional[ContentNode]) -> Optional[TSettings]:
        """
        获取内容节点适用的设置实例

        依次检查节点本身、由近到远的祖先节点，最后回退到全局设置。

        Args:
            settings_class: 设置类
            content: 内容节点

        Returns:
            最近的设置实例，content为None时返回None
        """
        self._check_settings_class(settings_class)

        if content is None:
            return None

        settings = self._try_get_settings_from_content(settings_class, content)
        if settings is not None:
            return settings

        if content.reference:
            for parent_reference in self.ancestor_loader.get_ancestors(content.reference):
                parent = self.repository.try_get(parent_reference)
                if parent is None:
                    logger.debug("[Settings] Skipping missing ancestor %s", parent_reference)
                    continue

                settings = self._try_get_settings_from_content(settings_class, parent)
                if settings is not None:
                    return settings

        return self.get_settings(settings_class)

    def update_settings(self, content: ContentNode) -> None:
        """
        更新全局设置实例

        只有内容类型已存在于全局设置映射中时才会替换，
        宿主在每次内容保存或发布时调用。

        Args:
            content: 已保存的内容
        """
        if content is None:
            raise TypeError("update_settings() requires a content instance")

        if self.cache.replace(type(content), content):
            logger.debug("[Settings] Updated global settings for %s", type(content).__name__)

    def dispose(self) -> None:
        """释放缓存锁，重复调用不产生效果"""
        if self._disposed:
            return
        self.cache.dispose()
        self._disposed = True

    def __enter__(self) -> "SettingsService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def _register_root(self, root_name: str, root_id: uuid.UUID,
                       parent: ContentReference) -> ContentReference:
        try:
            self.root_service.register(root_name, root_id, parent)
            return self.root_service.get(root_name)
        except RootRegistrationError as e:
            logger.error("[Settings] %s", e, exc_info=True)
            raise

    def _initialize_content_instances(self) -> None:
        existing_items = self.repository.get_children(self.global_settings_root)
        global_settings: Dict[Type[SettingsBase], SettingsBase] = {}

        for info in self.registry.list_types():
            existing = next(
                (item for item in existing_items
                 if item.content_guid == info.settings_instance_guid),
                None,
            )

            if existing is None:
                existing = self._create_global_instance(info)
            elif type(existing) is not info.settings_class:
                logger.error(
                    "[Settings] Content %s with guid %s is not a %s",
                    existing.reference, info.settings_instance_guid, info.type_name,
                )
                continue

            global_settings[info.settings_class] = existing

        self.cache.populate(global_settings)
        logger.info("[Settings] Initialized %d global settings", len(global_settings))

    def _create_global_instance(self, info: SettingsTypeInfo) -> SettingsBase:
        settings = self.repository.get_default(self.global_settings_root, info.settings_class)
        settings.name = info.settings_name
        settings.content_guid = info.settings_instance_guid

        self.repository.save(settings, SaveAction.PUBLISH)
        logger.info("[Settings] Created global settings '%s' (%s)", info.settings_name, settings.reference)
        return settings

    def _try_get_settings_from_content(self, settings_class: Type[TSettings],
                                       content: ContentNode) -> Optional[TSettings]:
        property_name = self.registry.reference_property(content, settings_class)
        reference = content.get_property(property_name)

        if not isinstance(reference, ContentReference) or not reference:
            return None

        settings = self.repository.try_get(reference, settings_class)
        if settings is None:
            logger.debug("[Settings] Settings reference %s on %s could not be loaded",
                         reference, content.reference)
        return settings

    @staticmethod
    def _check_settings_class(settings_class) -> None:
        if not isinstance(settings_class, type):
            raise TypeError(f"settings_class must be a class, got {settings_class!r}")

