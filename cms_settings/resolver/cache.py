"""
全局设置缓存

保存设置类型到全局设置实例的映射，所有读写都经过读写锁。
"""

from typing import Dict, List, Mapping, Optional, Type

from ..content.base import SettingsBase
from .lock import ReaderWriterLock


class GlobalSettingsCache:
    """
    全局设置缓存类

    映射的键集合只在初始化时由 populate() 确定，
    运行期间 replace() 只替换已有键的值。
    """

    def __init__(self, lock: Optional[ReaderWriterLock] = None):
        self._lock = lock or ReaderWriterLock()
        self._settings: Dict[Type[SettingsBase], SettingsBase] = {}

    @property
    def lock(self) -> ReaderWriterLock:
        return self._lock

    def get(self, settings_class: Type[SettingsBase]) -> Optional[SettingsBase]:
        """读取全局设置实例，不存在时返回None"""
        with self._lock.read_locked():
            return self._settings.get(settings_class)

    def replace(self, settings_class: Type[SettingsBase], content: SettingsBase) -> bool:
        """
        替换已有键的全局设置实例

        Returns:
            是否发生替换（键不存在时不做任何修改）
        """
        with self._lock.write_locked():
            if settings_class not in self._settings:
                return False
            self._settings[settings_class] = content
            return True

    def populate(self, settings: Mapping[Type[SettingsBase], SettingsBase]) -> None:
        """整体替换映射（仅用于初始化）"""
        snapshot = dict(settings)
        with self._lock.write_locked():
            self._settings = snapshot

    def snapshot(self) -> Dict[Type[SettingsBase], SettingsBase]:
        """获取映射副本"""
        with self._lock.read_locked():
            return dict(self._settings)

    def keys(self) -> List[Type[SettingsBase]]:
        with self._lock.read_locked():
            return list(self._settings)

    def dispose(self) -> None:
        self._lock.dispose()

    def __contains__(self, settings_class) -> bool:
        with self._lock.read_locked():
            return settings_class in self._settings

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._settings)
