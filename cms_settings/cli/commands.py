"""
CLI命令实现

提供设置解析服务的诊断命令：查看设置类型、初始化全局设置、解析设置和搜索设置。
"""

import importlib
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from .. import __version__
from ..config.settings import get_settings
from ..content.base import ContentReference
from ..content.registry import settings_registry
from ..repository.loader import dump_content_tree, load_content_tree
from ..repository.memory import InMemoryContentRepository, InMemoryContentRootService
from ..resolver.service import SettingsService
from ..search.provider import SettingsSearchProvider
from ..utils.formatters import (
    format_global_settings,
    format_rows,
    format_search_results,
    format_settings_types,
    settings_to_dict,
)
from ..utils.log import setup_logging

FORMAT_CHOICES = click.Choice(["table", "json", "csv"])


@click.group()
@click.version_option(version=__version__, prog_name="cms-settings")
@click.option("--content-file", "-c", type=click.Path(dir_okay=False), help="内容文件路径 (JSON)")
@click.option("--module", "-m", "modules", multiple=True, help="导入以注册设置类型的模块，可重复")
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
@click.pass_context
def cli(ctx: click.Context, content_file: Optional[str], modules: Tuple[str, ...], verbose: bool):
    """设置解析诊断工具

    按内容树解析分层设置，查看全局设置并搜索设置实例。
    """
    settings = get_settings()
    # 未写入日志文件时，标准错误只输出警告及以上
    if verbose:
        level = "DEBUG"
    elif settings.log_file:
        level = None
    else:
        level = "WARNING"
    setup_logging(settings, level=level)

    # 允许导入当前目录下的模块
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    for module in modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            _fail(f"无法导入模块 {module}: {e}")

    ctx.obj = {
        "settings": settings,
        "content_file": content_file or settings.content_file,
    }


def _fail(message: str) -> None:
    click.echo(f"错误: {message}", err=True)
    sys.exit(1)


def _output_format(ctx: click.Context, format: Optional[str]) -> str:
    return format or ctx.obj["settings"].default_output_format


def _load_service(ctx: click.Context) -> Tuple[SettingsService, InMemoryContentRepository]:
    """加载内容文件并初始化设置服务"""
    content_file = ctx.obj["content_file"]
    if content_file and Path(content_file).exists():
        repository = load_content_tree(content_file)
    else:
        repository = InMemoryContentRepository()

    service = SettingsService(
        repository=repository,
        root_service=InMemoryContentRootService(repository),
        ancestor_loader=repository,
    )
    service.init_settings()
    return service, repository


@cli.command("list-types")
@click.option("--format", "-f", type=FORMAT_CHOICES, help="输出格式")
@click.pass_context
def list_types(ctx: click.Context, format: Optional[str]):
    """列出已注册的设置类型"""
    rows = format_settings_types(settings_registry.list_types())
    click.echo(format_rows(rows, _output_format(ctx, format)))


@cli.command()
@click.option("--save", is_flag=True, help="将初始化后的内容树写回内容文件")
@click.option("--format", "-f", type=FORMAT_CHOICES, help="输出格式")
@click.pass_context
def init(ctx: click.Context, save: bool, format: Optional[str]):
    """初始化设置根节点和全局设置实例"""
    try:
        service, repository = _load_service(ctx)
        with service:
            rows = format_global_settings(service.global_settings)

        if save:
            content_file = ctx.obj["content_file"]
            if not content_file:
                raise click.UsageError("--save requires --content-file")
            dump_content_tree(repository, content_file)
            click.echo(f"内容树已保存到: {content_file}")

        click.echo(format_rows(rows, _output_format(ctx, format)))
    except click.UsageError:
        raise
    except Exception as e:
        _fail(str(e))


@cli.command()
@click.argument("type_name")
@click.option("--content", "content_id", type=int, help="内容节点ID（按祖先链解析）")
@click.option("--format", "-f", type=FORMAT_CHOICES, help="输出格式")
@click.pass_context
def show(ctx: click.Context, type_name: str, content_id: Optional[int], format: Optional[str]):
    """显示设置类型的全局实例或内容节点适用的实例"""
    info = settings_registry.get_by_name(type_name)
    if info is None:
        _fail(f"未注册的设置类型: {type_name}")

    try:
        service, repository = _load_service(ctx)
        with service:
            if content_id is None:
                settings = service.get_settings(info.settings_class)
            else:
                content = repository.try_get(ContentReference(content_id))
                if content is None:
                    raise LookupError(f"Content not found: {content_id}")
                settings = service.get_content_settings(info.settings_class, content)
    except Exception as e:
        _fail(str(e))

    if settings is None:
        click.echo(f"未找到 {type_name} 设置")
        return

    click.echo(format_rows([settings_to_dict(settings)], _output_format(ctx, format)))


@cli.command()
@click.argument("query")
@click.option("--max-results", "-n", type=click.IntRange(min=1), help="最大结果数")
@click.option("--format", "-f", type=FORMAT_CHOICES, help="输出格式")
@click.pass_context
def search(ctx: click.Context, query: str, max_results: Optional[int], format: Optional[str]):
    """按名称搜索设置实例"""
    try:
        service, repository = _load_service(ctx)
        with service:
            provider = SettingsSearchProvider(service, repository, ctx.obj["settings"])
            results = provider.search(query, max_results=max_results)
    except Exception as e:
        _fail(str(e))

    click.echo(format_rows(format_search_results(results), _output_format(ctx, format)))


def main():
    """主程序入口"""
    cli()


if __name__ == "__main__":
    main()
