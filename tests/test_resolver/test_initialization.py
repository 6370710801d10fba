"""
测试设置初始化模块
"""

from cms_settings.content.base import SaveAction
from cms_settings.initialization import SettingsInitialization
from sample_types import Theme


class TestSettingsInitialization:
    """测试启动和关闭流程"""

    def test_published_content_updates_global_settings(self, service, repository):
        """测试发布内容后全局设置随之更新"""
        initialization = SettingsInitialization(service, repository)
        initialization.initialize()

        theme = service.get_settings(Theme)
        theme.primary_color = "#333333"
        repository.save(theme, SaveAction.PUBLISH)

        replacement = Theme(name="Theme settings v2", content_guid=theme.content_guid,
                            reference=theme.reference, parent=theme.parent)
        repository.save(replacement, SaveAction.PUBLISH)

        assert service.get_settings(Theme) is replacement

    def test_saved_draft_does_not_update(self, service, repository):
        """测试仅保存（未发布）不会触发更新"""
        initialization = SettingsInitialization(service, repository)
        initialization.initialize()
        theme = service.get_settings(Theme)

        draft = Theme(name="Draft", content_guid=theme.content_guid,
                      reference=theme.reference, parent=theme.parent)
        repository.save(draft, SaveAction.SAVE)

        assert service.get_settings(Theme) is theme

    def test_initialize_and_uninitialize_are_idempotent(self, service, repository):
        """测试重复初始化和撤销"""
        initialization = SettingsInitialization(service, repository)
        initialization.initialize()
        count = len(repository)
        initialization.initialize()

        assert initialization.initialized
        assert len(repository) == count

        initialization.uninitialize()
        initialization.uninitialize()

        assert not initialization.initialized
        assert service.cache.lock.disposed

        # 撤销后发布不再通知设置服务
        repository.save(Theme(name="After shutdown"), SaveAction.PUBLISH)
