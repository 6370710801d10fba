"""
设置搜索

在设置根节点和全局设置根节点下按名称搜索设置实例。
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from ..config.settings import Settings, get_settings
from ..content.base import ContentReference, SettingsBase
from ..repository.base import ContentRepository
from ..resolver.service import SettingsService


@dataclass(frozen=True)
class SearchResult:
    """搜索结果"""
    title: str
    preview_text: str
    reference: ContentReference
    area: str
    type_name: str
    category: str


class SettingsSearchProvider:
    """设置搜索提供者"""

    AREA = "Settings/settings"
    category = "Settings"

    def __init__(self, service: SettingsService, repository: ContentRepository,
                 config: Optional[Settings] = None):
        self.service = service
        self.repository = repository
        self.config = config or get_settings()

    def search(self, query: Optional[str], max_results: Optional[int] = None) -> List[SearchResult]:
        """
        按名称搜索设置实例（不区分大小写）

        Args:
            query: 搜索关键词
            max_results: 最大结果数，默认使用系统设置

        Returns:
            搜索结果列表
        """
        text = (query or "").strip()
        if len(text) < self.config.search_min_query_length:
            return []

        limit = max_results if max_results is not None else self.config.search_max_results
        if limit <= 0:
            return []

        needle = text.lower()
        results: List[SearchResult] = []

        for settings in self._iter_settings():
            if needle not in settings.name.lower():
                continue

            results.append(self.create_search_result(settings))
            if len(results) >= limit:
                break

        return results

    def create_search_result(self, settings: SettingsBase) -> SearchResult:
        return SearchResult(
            title=settings.name,
            preview_text=self.create_preview_text(settings),
            reference=settings.reference,
            area=self.AREA,
            type_name=settings.type_name,
            category=self.category,
        )

    @staticmethod
    def create_preview_text(settings: Optional[SettingsBase]) -> str:
        if settings is None:
            return ""
        return f"{settings.name} settings"

    def _iter_settings(self) -> Iterator[SettingsBase]:
        seen = set()
        for root in (self.service.settings_root, self.service.global_settings_root):
            if not root:
                continue
            for reference in self.repository.get_descendants(root):
                if reference.id in seen:
                    continue
                seen.add(reference.id)

                settings = self.repository.try_get(reference, SettingsBase)
                if settings is not None:
                    yield settings
