"""
设置初始化模块

在宿主启动时初始化设置服务并订阅内容发布通知，在宿主关闭时撤销。
"""

import logging

from .repository.base import ContentRepository
from .resolver.service import SettingsService

logger = logging.getLogger(__name__)


class SettingsInitialization:
    """设置初始化类"""

    def __init__(self, service: SettingsService, repository: ContentRepository):
        self.service = service
        self.repository = repository
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """初始化设置并订阅发布事件（重复调用不产生效果）"""
        if self._initialized:
            return

        self.service.init_settings()
        self.repository.subscribe_published(self.service.update_settings)
        self._initialized = True
        logger.info("[Settings] Settings initialization complete")

    def uninitialize(self) -> None:
        """取消订阅并释放设置服务（重复调用不产生效果）"""
        if not self._initialized:
            return

        self.repository.unsubscribe_published(self.service.update_settings)
        self.service.dispose()
        self._initialized = False
