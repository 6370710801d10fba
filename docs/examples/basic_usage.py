#!/usr/bin/env python3
"""
CMS-Settings 基本使用示例

演示如何初始化全局设置、按内容节点解析设置以及更新全局设置。
"""

import sys
import os

# 添加项目根目录和示例目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, os.path.dirname(__file__))

from cms_settings import ContentNode, SettingsService
from cms_settings.content.base import SaveAction
from cms_settings.repository import InMemoryContentRepository, InMemoryContentRootService
from site_settings import Contact, Theme


def main():
    """主函数"""
    print("=== CMS-Settings 基本使用示例 ===\n")

    # 1. 创建内容仓库和设置服务
    repository = InMemoryContentRepository()
    service = SettingsService(
        repository=repository,
        root_service=InMemoryContentRootService(repository),
        ancestor_loader=repository,
    )

    with service:
        # 2. 初始化：创建设置根节点和全局设置实例
        service.init_settings()
        print("全局设置:")
        for settings_class, settings in service.global_settings.items():
            print(f"  - {settings_class.__name__}: {settings.name} ({settings.reference})")
        print()

        # 3. 创建内容树，栏目引用一个本地主题
        campaign_theme = Theme(name="Campaign theme", primary_color="#e4002b")
        repository.save(campaign_theme)

        start = ContentNode(name="Start", content_type_name="StartPage")
        repository.save(start)
        section = ContentNode(name="Campaigns", content_type_name="SectionPage",
                              parent=start.reference,
                              properties={"Theme": campaign_theme.reference})
        repository.save(section)
        article = ContentNode(name="Summer sale", content_type_name="ArticlePage",
                              parent=section.reference)
        repository.save(article)

        # 4. 按祖先链解析设置
        print(f"文章主题: {service.get_content_settings(Theme, article).name}")
        print(f"首页主题: {service.get_content_settings(Theme, start).name}")
        print(f"文章联系方式: {service.get_content_settings(Contact, article).email}")
        print()

        # 5. 发布后更新全局设置
        contact = service.get_settings(Contact)
        contact.email = "support@example.com"
        repository.save(contact, SaveAction.PUBLISH)
        service.update_settings(contact)
        print(f"更新后的联系方式: {service.get_settings(Contact).email}")

    print("\n=== 示例完成 ===")


if __name__ == "__main__":
    main()
