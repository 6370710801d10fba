"""
内容文件读写

从JSON内容文件构建内存内容仓库，以及将仓库内容写回文件。
"""

import dataclasses
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..content.base import (
    ContentFolder,
    ContentNode,
    ContentReference,
    SaveAction,
    SettingsBase,
    VersionStatus,
)
from ..content.registry import SettingsTypeRegistry, settings_registry
from .memory import InMemoryContentRepository

logger = logging.getLogger(__name__)

FOLDER_TYPE = "folder"
REF_KEY = "$ref"

_BASE_FIELDS = {f.name for f in dataclasses.fields(SettingsBase)}


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict) and set(value) == {REF_KEY}:
        return ContentReference(int(value[REF_KEY]))
    return value


def _encode_value(value: Any) -> Any:
    if isinstance(value, ContentReference):
        return {REF_KEY: value.id}
    return value


def _build_node(entry: Dict[str, Any], registry: SettingsTypeRegistry,
                parent: ContentReference) -> ContentNode:
    type_name = entry.get("type", "")
    kwargs = {
        "reference": ContentReference(int(entry["id"])),
        "parent": parent,
        "name": entry.get("name", ""),
        "properties": {k: _decode_value(v) for k, v in (entry.get("properties") or {}).items()},
    }
    if entry.get("guid"):
        kwargs["content_guid"] = uuid.UUID(entry["guid"])

    if type_name == FOLDER_TYPE:
        return ContentFolder(**kwargs)

    info = registry.get_by_name(type_name)
    if info is not None:
        fields = {k: _decode_value(v) for k, v in (entry.get("fields") or {}).items()}
        content = info.settings_class(**kwargs, **fields)
        if entry.get("status"):
            content.status = VersionStatus(entry["status"])
        return content

    return ContentNode(content_type_name=type_name, **kwargs)


def load_content_tree(path: Union[str, Path],
                      registry: Optional[SettingsTypeRegistry] = None) -> InMemoryContentRepository:
    """
    从JSON文件加载内容树

    Args:
        path: 内容文件路径
        registry: 设置类型注册表，默认为全局注册表

    Returns:
        加载完成的内存内容仓库
    """
    registry = registry if registry is not None else settings_registry
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    repository = InMemoryContentRepository()
    pending: List[Dict[str, Any]] = list(data.get("nodes", []))

    seen_ids = set()
    for entry in pending:
        content_id = int(entry["id"])
        if content_id == repository.root.id:
            raise ValueError(f"Content id {repository.root.id} is reserved for the root node")
        if content_id in seen_ids:
            raise ValueError(f"Duplicate content id in content file: {content_id}")
        seen_ids.add(content_id)

    # 父节点可能出现在子节点之后，循环直到全部加载
    while pending:
        remaining = []
        for entry in pending:
            parent_id = entry.get("parent")
            parent = ContentReference(int(parent_id)) if parent_id else repository.root
            if repository.try_get(parent) is None:
                remaining.append(entry)
                continue
            repository.save(_build_node(entry, registry, parent), SaveAction.SAVE)

        if len(remaining) == len(pending):
            missing = sorted({str(e.get("parent")) for e in remaining})
            raise ValueError(f"Content file references unknown parents: {', '.join(missing)}")
        pending = remaining

    logger.info("[Settings] Loaded %d content nodes from %s", len(repository) - 1, path)
    return repository


def dump_content_tree(repository: InMemoryContentRepository, path: Union[str, Path]) -> None:
    """
    将内容树写入JSON文件

    Args:
        repository: 内存内容仓库
        path: 输出文件路径
    """
    nodes = []
    for content in repository.all_contents():
        if content.reference == repository.root:
            continue

        entry: Dict[str, Any] = {
            "id": content.reference.id,
            "name": content.name,
            "type": FOLDER_TYPE if isinstance(content, ContentFolder) else content.type_name,
            "parent": content.parent.id if content.parent else None,
            "guid": str(content.content_guid),
        }
        if content.properties:
            entry["properties"] = {k: _encode_value(v) for k, v in content.properties.items()}
        if isinstance(content, SettingsBase):
            entry["status"] = content.status.value
            fields = {
                f.name: _encode_value(getattr(content, f.name))
                for f in dataclasses.fields(content)
                if f.name not in _BASE_FIELDS
            }
            if fields:
                entry["fields"] = fields
        nodes.append(entry)

    with open(path, "w", encoding="utf-8") as f:
        json.dump({"nodes": nodes}, f, indent=2, ensure_ascii=False, default=str)
