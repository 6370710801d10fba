"""
测试设置解析服务

验证初始化幂等性、祖先链解析、全局回退、更新和并发读写
"""

import threading
import uuid
from dataclasses import dataclass

import pytest

from cms_settings.content.base import (
    ContentNode,
    ContentReference,
    SaveAction,
    SettingsBase,
    SiteDefinition,
    VersionStatus,
)
from cms_settings.content.registry import SettingsTypeRegistry
from cms_settings.repository.base import RootRegistrationError
from cms_settings.repository.memory import InMemoryContentRepository, InMemoryContentRootService
from cms_settings.resolver.cache import GlobalSettingsCache
from cms_settings.resolver.service import (
    GLOBAL_SETTINGS_ROOT_GUID,
    GLOBAL_SETTINGS_ROOT_NAME,
    SETTINGS_ROOT_GUID,
    SETTINGS_ROOT_NAME,
    SettingsService,
)
from sample_types import CONTACT_GUID, THEME_GUID, Contact, Theme


@dataclass
class Unregistered(SettingsBase):
    pass


@dataclass
class BrandTheme(Theme):
    logo_text: str = ""


def _local_theme(repository, name, color):
    """在根节点下创建一个本地主题设置"""
    theme = Theme(name=name, primary_color=color)
    repository.save(theme)
    return theme


class TestInitSettings:
    """测试设置初始化"""

    def test_creates_roots(self, initialized_service, repository, root_service):
        """测试创建全局设置根节点和站点设置根节点"""
        service = initialized_service

        assert service.global_settings_root == root_service.get(GLOBAL_SETTINGS_ROOT_NAME)
        assert service.settings_root == root_service.get(SETTINGS_ROOT_NAME)
        assert repository.get(service.global_settings_root).content_guid == GLOBAL_SETTINGS_ROOT_GUID
        assert repository.get(service.settings_root).content_guid == SETTINGS_ROOT_GUID

    def test_provisions_one_instance_per_type(self, initialized_service, repository):
        """测试每个设置类型创建一个全局实例"""
        service = initialized_service
        children = repository.get_children(service.global_settings_root)

        assert len(children) == 2
        assert set(service.global_settings) == {Theme, Contact}

        theme = service.get_settings(Theme)
        assert isinstance(theme, Theme)
        assert theme.name == "Theme settings"
        assert theme.content_guid == uuid.UUID(THEME_GUID)
        assert theme.parent == service.global_settings_root
        assert theme.status is VersionStatus.PUBLISHED

        contact = service.get_settings(Contact)
        assert contact.content_guid == uuid.UUID(CONTACT_GUID)
        assert contact.email == "info@example.com"

    def test_second_init_is_idempotent(self, initialized_service, repository):
        """测试重复初始化不会创建新实例"""
        service = initialized_service
        count = len(repository)
        theme = service.get_settings(Theme)

        service.init_settings()

        assert len(repository) == count
        assert service.get_settings(Theme) is theme

    def test_restart_reuses_existing_instances(self, initialized_service, repository):
        """测试重启后复用已持久化的实例"""
        theme = initialized_service.get_settings(Theme)
        count = len(repository)

        restarted = SettingsService(repository, InMemoryContentRootService(repository), repository)
        restarted.init_settings()

        assert len(repository) == count
        assert restarted.get_settings(Theme) is theme
        restarted.dispose()

    def test_root_conflict_is_fatal(self, repository, root_service, site_tree, caplog):
        """测试根节点注册冲突时初始化失败"""
        root_service.register(GLOBAL_SETTINGS_ROOT_NAME, GLOBAL_SETTINGS_ROOT_GUID, site_tree["start"].reference)
        service = SettingsService(repository, root_service, repository)

        with pytest.raises(RootRegistrationError):
            service.init_settings()

        assert "[Settings]" in caplog.text
        assert service.global_settings == {}
        service.dispose()

    def test_uses_site_definition_parents(self, repository, root_service, site_tree):
        """测试根节点创建在站点定义的父节点下"""
        start = site_tree["start"].reference
        section = site_tree["section"].reference
        service = SettingsService(
            repository, root_service, repository,
            site_definition=SiteDefinition(global_assets_root=start, site_assets_root=section),
        )
        service.init_settings()

        assert repository.get(service.global_settings_root).parent == start
        assert repository.get(service.settings_root).parent == section
        service.dispose()

    def test_injected_cache_is_used(self, repository, root_service):
        """测试使用注入的全局设置缓存"""
        cache = GlobalSettingsCache()
        service = SettingsService(repository, root_service, repository, cache=cache)
        service.init_settings()

        assert service.cache is cache
        assert cache.get(Theme) is service.get_settings(Theme)

        service.dispose()
        assert cache.lock.disposed

    def test_explicit_registry(self, repository, root_service):
        """测试使用指定的注册表"""
        registry = SettingsTypeRegistry()
        registry.register(Unregistered, "Only one", uuid.uuid4())
        service = SettingsService(repository, root_service, repository, registry=registry)
        service.init_settings()

        assert list(service.global_settings) == [Unregistered]
        assert service.get_settings(Theme) is None
        service.dispose()

    def test_subclass_instance_is_skipped(self, repository, root_service, caplog):
        """测试GUID匹配但类型为子类的已有实例被跳过"""
        root_service.register(GLOBAL_SETTINGS_ROOT_NAME, GLOBAL_SETTINGS_ROOT_GUID, repository.root)
        branded = BrandTheme(
            name="Brand theme",
            parent=root_service.get(GLOBAL_SETTINGS_ROOT_NAME),
            content_guid=uuid.UUID(THEME_GUID),
        )
        repository.save(branded)

        service = SettingsService(repository, root_service, repository)
        service.init_settings()

        assert Theme not in service.global_settings
        assert BrandTheme not in service.global_settings
        assert service.get_settings(Contact) is not None
        assert "is not a Theme" in caplog.text

        # 子类实例的发布不会进入全局设置映射
        service.update_settings(branded)
        assert service.get_settings(Theme) is None
        service.dispose()


class TestGetSettings:
    """测试全局设置查询"""

    def test_missing_type_returns_none(self, initialized_service, caplog):
        """测试未注册类型返回None并记录日志"""
        assert initialized_service.get_settings(Unregistered) is None
        assert "Unregistered" in caplog.text

    def test_before_init_returns_none(self, service):
        """测试初始化前查询"""
        assert service.get_settings(Theme) is None

    def test_non_class_argument_fails_fast(self, initialized_service):
        """测试非类参数视为调用错误"""
        with pytest.raises(TypeError):
            initialized_service.get_settings(None)
        with pytest.raises(TypeError):
            initialized_service.get_settings("Theme")
        with pytest.raises(TypeError):
            initialized_service.get_content_settings(None, ContentNode())


class TestGetContentSettings:
    """测试按内容节点解析设置"""

    def test_none_content_returns_none(self, initialized_service, repository, monkeypatch):
        """测试content为None时直接返回None且不遍历"""
        def fail(*args, **kwargs):
            raise AssertionError("ancestors should not be loaded")

        monkeypatch.setattr(repository, "get_ancestors", fail)
        assert initialized_service.get_content_settings(Theme, None) is None

    def test_falls_back_to_global(self, initialized_service, site_tree):
        """测试无本地设置时回退到全局设置"""
        service = initialized_service
        for node in site_tree.values():
            assert service.get_content_settings(Theme, node) is service.get_settings(Theme)

    def test_own_property_wins(self, initialized_service, repository, site_tree):
        """测试节点自身的设置优先"""
        own = _local_theme(repository, "Article theme", "#ff0000")
        parent = _local_theme(repository, "Section theme", "#00ff00")
        site_tree["article"].properties["Theme"] = own.reference
        site_tree["section"].properties["Theme"] = parent.reference

        assert initialized_service.get_content_settings(Theme, site_tree["article"]) is own

    def test_nearest_ancestor_wins(self, initialized_service, repository, site_tree):
        """测试最近的祖先设置优先于更远的祖先和全局设置"""
        near = _local_theme(repository, "Section theme", "#00ff00")
        far = _local_theme(repository, "Start theme", "#0000ff")
        site_tree["section"].properties["Theme"] = near.reference
        site_tree["start"].properties["Theme"] = far.reference

        service = initialized_service
        assert service.get_content_settings(Theme, site_tree["article"]) is near
        assert service.get_content_settings(Theme, site_tree["section"]) is near
        assert service.get_content_settings(Theme, site_tree["start"]) is far

    def test_override_is_per_type(self, initialized_service, repository, site_tree):
        """测试本地设置只影响对应的设置类型"""
        service = initialized_service
        site_tree["start"].properties["Theme"] = _local_theme(repository, "Start theme", "#000").reference

        assert service.get_content_settings(Contact, site_tree["article"]) is service.get_settings(Contact)

    def test_invalid_references_are_skipped(self, initialized_service, repository, site_tree):
        """测试无效引用被跳过"""
        far = _local_theme(repository, "Start theme", "#0000ff")
        contact = Contact(name="Local contact")
        repository.save(contact)

        site_tree["article"].properties["Theme"] = ContentReference(999)
        site_tree["section"].properties["Theme"] = contact.reference
        site_tree["start"].properties["Theme"] = far.reference

        assert initialized_service.get_content_settings(Theme, site_tree["article"]) is far

    def test_empty_and_non_reference_values_are_ignored(self, initialized_service, site_tree):
        """测试空值和非引用值被忽略"""
        service = initialized_service
        site_tree["article"].properties["Theme"] = ContentReference.EMPTY
        site_tree["section"].properties["Theme"] = "not a reference"

        assert service.get_content_settings(Theme, site_tree["article"]) is service.get_settings(Theme)

    def test_missing_ancestor_is_skipped(self, initialized_service, repository, site_tree):
        """测试缺失的祖先节点被跳过"""
        theme = _local_theme(repository, "Section theme", "#00ff00")
        site_tree["section"].properties["Theme"] = theme.reference

        class GappedLoader:
            def get_ancestors(self, reference):
                yield ContentReference(404)
                yield site_tree["section"].reference

        service = SettingsService(
            repository, InMemoryContentRootService(repository), GappedLoader()
        )
        service.init_settings()

        assert service.get_content_settings(Theme, site_tree["article"]) is theme
        service.dispose()

    def test_explicit_property_mapping(self, initialized_service, repository, site_tree):
        """测试显式映射的引用属性"""
        registry = SettingsTypeRegistry()
        registry.register(Theme, "Theme settings", THEME_GUID)
        registry.map_reference_property("SectionPage", Theme, "section_theme")

        theme = _local_theme(repository, "Mapped theme", "#abcdef")
        site_tree["section"].properties["section_theme"] = theme.reference
        site_tree["start"].properties["Theme"] = _local_theme(repository, "Start theme", "#000").reference

        service = SettingsService(
            repository, InMemoryContentRootService(repository), repository, registry=registry
        )
        service.init_settings()

        assert service.get_content_settings(Theme, site_tree["article"]) is theme
        service.dispose()

    def test_typed_attribute_reference(self, initialized_service, repository):
        """测试通过同名字段引用设置"""
        @dataclass
        class ProductPage(ContentNode):
            Theme: ContentReference = ContentReference.EMPTY

        theme = _local_theme(repository, "Product theme", "#123456")
        page = ProductPage(name="Product", Theme=theme.reference)
        repository.save(page)

        assert initialized_service.get_content_settings(Theme, page) is theme


class TestUpdateSettings:
    """测试全局设置更新"""

    def test_update_replaces_value(self, initialized_service):
        """测试更新已有类型"""
        service = initialized_service
        new_theme = Theme(name="Updated", primary_color="#ffffff")

        service.update_settings(new_theme)

        assert service.get_settings(Theme) is new_theme

    def test_update_unknown_type_is_ignored(self, initialized_service):
        """测试未知类型不会加入映射"""
        service = initialized_service
        before = service.global_settings

        service.update_settings(Unregistered(name="Other"))
        service.update_settings(ContentNode(name="Page"))

        assert service.global_settings == before
        assert Unregistered not in service.global_settings

    def test_update_none_fails_fast(self, initialized_service):
        """测试None视为调用错误"""
        with pytest.raises(TypeError):
            initialized_service.update_settings(None)

    def test_update_visible_to_other_threads(self, initialized_service):
        """测试更新对其他线程立即可见"""
        service = initialized_service
        new_theme = Theme(name="Updated")
        service.update_settings(new_theme)

        seen = []
        t = threading.Thread(target=lambda: seen.append(service.get_settings(Theme)))
        t.start()
        t.join(timeout=5)

        assert seen == [new_theme]
        assert seen[0] is new_theme

    def test_concurrent_readers_and_writer(self, initialized_service):
        """测试并发读写不会读到中间状态或死锁"""
        service = initialized_service
        original = service.get_settings(Theme)
        versions = [Theme(name=f"Theme {i}") for i in range(200)]
        allowed = {id(original)} | {id(v) for v in versions}
        errors = []
        start = threading.Event()

        def reader():
            start.wait()
            for _ in range(500):
                value = service.get_settings(Theme)
                if id(value) not in allowed:
                    errors.append(value)

        def writer():
            start.wait()
            for version in versions:
                service.update_settings(version)

        threads = [threading.Thread(target=reader) for _ in range(8)]
        threads.append(threading.Thread(target=writer))
        for t in threads:
            t.start()
        start.set()
        for t in threads:
            t.join(timeout=30)

        assert all(not t.is_alive() for t in threads)
        assert errors == []
        assert service.get_settings(Theme) is versions[-1]


class TestEndToEnd:
    """端到端测试"""

    def test_theme_and_contact(self):
        """测试初始化、查询和更新的完整流程"""
        repository = InMemoryContentRepository()
        with SettingsService(repository, InMemoryContentRootService(repository), repository) as service:
            service.init_settings()

            theme = service.get_settings(Theme)
            assert theme.name == "Theme settings"

            theme.primary_color = "#222222"
            repository.save(theme, SaveAction.PUBLISH)
            service.update_settings(theme)
            assert service.get_settings(Theme).primary_color == "#222222"

            replacement = Theme(name="Replacement")
            service.update_settings(replacement)
            assert service.get_settings(Theme) is replacement

    def test_dispose_is_idempotent(self, service):
        """测试重复释放"""
        service.dispose()
        service.dispose()

        assert service.cache.lock.disposed
