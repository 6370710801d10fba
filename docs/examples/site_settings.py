"""
示例设置类型

用于命令行演示：cms-settings -m site_settings -c content_tree.json show Theme --content 4
"""

from dataclasses import dataclass

from cms_settings import SettingsBase, settings_content_type


@settings_content_type("Theme settings", "8c1f5a70-2b7e-4c59-9d0e-6f3a1b2c4d01",
                       description="站点主题")
@dataclass
class Theme(SettingsBase):
    primary_color: str = "#005eb8"
    dark_mode: bool = False


@settings_content_type("Contact settings", "8c1f5a70-2b7e-4c59-9d0e-6f3a1b2c4d02",
                       description="联系方式")
@dataclass
class Contact(SettingsBase):
    email: str = "info@example.com"
    phone: str = ""
