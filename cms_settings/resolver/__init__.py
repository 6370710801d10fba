"""
设置解析模块

提供全局设置缓存、读写锁以及按祖先链解析设置实例的核心服务。
"""

from .lock import (
    ReaderWriterLock,
    LockRecursionError,
    LockDisposedError,
    SynchronizationLockError,
)
from .cache import GlobalSettingsCache
from .service import (
    SettingsService,
    GLOBAL_SETTINGS_ROOT_NAME,
    SETTINGS_ROOT_NAME,
    GLOBAL_SETTINGS_ROOT_GUID,
    SETTINGS_ROOT_GUID,
)

__all__ = [
    "ReaderWriterLock",
    "LockRecursionError",
    "LockDisposedError",
    "SynchronizationLockError",
    "GlobalSettingsCache",
    "SettingsService",
    "GLOBAL_SETTINGS_ROOT_NAME",
    "SETTINGS_ROOT_NAME",
    "GLOBAL_SETTINGS_ROOT_GUID",
    "SETTINGS_ROOT_GUID",
]
