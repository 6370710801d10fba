"""
全局系统设置

定义系统级配置参数和默认值，支持环境变量和 .env 文件覆盖。
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """系统设置类"""

    model_config = SettingsConfigDict(
        env_prefix="CMS_SETTINGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 日志配置
    log_level: str = Field(default="INFO", description="日志级别")
    log_file: Optional[str] = Field(default=None, description="日志文件路径")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="日志格式",
    )

    # 输出配置
    default_output_format: str = Field(default="table", description="默认输出格式")

    # 搜索配置
    search_min_query_length: int = Field(default=2, ge=1, description="搜索关键词最小长度")
    search_max_results: int = Field(default=10, ge=1, description="默认最大搜索结果数")

    # 内容文件
    content_file: Optional[str] = Field(default=None, description="默认内容文件路径")


class ConfigManager:
    """配置管理器"""

    def __init__(self):
        self._settings: Optional[Settings] = None

    def get_settings(self) -> Settings:
        """获取设置实例（单例模式）"""
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def update_settings(self, **kwargs) -> None:
        """更新设置"""
        settings = self.get_settings()

        for key, value in kwargs.items():
            if key not in Settings.model_fields:
                raise ValueError(f"Unknown setting: {key}")
            setattr(settings, key, value)

    def reset(self) -> None:
        """丢弃缓存的设置，下次访问时重新加载"""
        self._settings = None


# 全局配置管理器实例
config_manager = ConfigManager()


def get_settings() -> Settings:
    """获取全局设置"""
    return config_manager.get_settings()
