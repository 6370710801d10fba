"""
pytest配置文件

定义测试的全局配置和fixture。
"""

import pytest
import sys
from pathlib import Path

# 添加项目根目录和测试目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from cms_settings.content.base import ContentNode
from cms_settings.repository.memory import InMemoryContentRepository, InMemoryContentRootService
from cms_settings.resolver.service import SettingsService
from sample_types import Contact, Theme  # noqa: F401  注册示例设置类型


@pytest.fixture
def repository():
    """内存内容仓库"""
    return InMemoryContentRepository()


@pytest.fixture
def root_service(repository):
    """内容根节点服务"""
    return InMemoryContentRootService(repository)


@pytest.fixture
def service(repository, root_service):
    """未初始化的设置服务"""
    settings_service = SettingsService(repository, root_service, repository)
    yield settings_service
    settings_service.dispose()


@pytest.fixture
def initialized_service(service):
    """已初始化的设置服务"""
    service.init_settings()
    return service


@pytest.fixture
def site_tree(repository):
    """示例站点树: 首页 -> 栏目 -> 文章"""
    start = ContentNode(name="Start", content_type_name="StartPage")
    repository.save(start)
    section = ContentNode(name="News", content_type_name="SectionPage", parent=start.reference)
    repository.save(section)
    article = ContentNode(name="Article", content_type_name="ArticlePage", parent=section.reference)
    repository.save(article)
    return {"start": start, "section": section, "article": article}
