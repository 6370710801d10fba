"""
数据格式化工具

将设置类型、全局设置、解析结果和搜索结果格式化为表格、JSON或CSV。
"""

import csv
import dataclasses
import io
import json
from typing import Any, Dict, List, Sequence

from tabulate import tabulate

from ..content.base import ContentReference, SettingsBase


def settings_to_dict(settings: SettingsBase) -> Dict[str, Any]:
    """
    将设置实例转换为字典

    Args:
        settings: 设置实例

    Returns:
        可序列化的字典
    """
    base_fields = {f.name for f in dataclasses.fields(SettingsBase)}
    fields = {
        f.name: _plain(getattr(settings, f.name))
        for f in dataclasses.fields(settings)
        if f.name not in base_fields
    }
    return {
        "type": settings.type_name,
        "name": settings.name,
        "reference": _plain(settings.reference),
        "guid": str(settings.content_guid),
        "status": settings.status.value,
        "fields": fields,
    }


def format_rows(rows: List[Dict[str, Any]], format_type: str = "table") -> str:
    """
    格式化行数据

    Args:
        rows: 行数据（字典列表）
        format_type: 输出格式 ("table", "json", "csv")

    Returns:
        格式化后的字符串
    """
    if format_type == "json":
        return json.dumps(rows, indent=2, ensure_ascii=False, default=str)

    if not rows:
        return "无数据"

    headers = list(rows[0].keys())

    if format_type == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(headers)
        for row in rows:
            writer.writerow([_cell(row.get(h)) for h in headers])
        return buffer.getvalue().rstrip("\n")

    table_data = [[_cell(row.get(h)) for h in headers] for row in rows]
    return tabulate(table_data, headers=headers, tablefmt="grid")


def format_settings_types(types: Sequence) -> List[Dict[str, Any]]:
    """设置类型元数据转换为行"""
    return [
        {
            "type": info.type_name,
            "settings_name": info.settings_name,
            "guid": str(info.settings_instance_guid),
            "description": info.description,
        }
        for info in types
    ]


def format_global_settings(global_settings: Dict[type, SettingsBase]) -> List[Dict[str, Any]]:
    """全局设置映射转换为行"""
    rows = []
    for settings_class, settings in global_settings.items():
        row = settings_to_dict(settings)
        row["type"] = settings_class.__name__
        rows.append(row)
    return rows


def format_search_results(results: Sequence) -> List[Dict[str, Any]]:
    """搜索结果转换为行"""
    return [
        {
            "title": r.title,
            "type": r.type_name,
            "category": r.category,
            "reference": _plain(r.reference),
            "preview": r.preview_text,
        }
        for r in results
    ]


def _plain(value: Any) -> Any:
    if isinstance(value, ContentReference):
        return value.id
    return value


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items())
    return str(value)
