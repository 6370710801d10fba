"""
日志配置

根据系统设置配置 cms_settings 日志记录器。
"""

import logging
from typing import Optional

from ..config.settings import Settings, get_settings

LOGGER_NAME = "cms_settings"

_HANDLER_MARK = "_cms_settings_handler"


def setup_logging(settings: Optional[Settings] = None,
                  level: Optional[str] = None) -> logging.Logger:
    """
    配置包日志记录器

    重复调用时替换之前添加的处理器，不会重复输出。

    Args:
        settings: 系统设置，默认为全局设置
        level: 覆盖设置中的日志级别

    Returns:
        包日志记录器
    """
    settings = settings or get_settings()
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
            handler.close()

    if settings.log_file:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(settings.log_format))
    setattr(handler, _HANDLER_MARK, True)

    logger.addHandler(handler)
    logger.setLevel((level or settings.log_level).upper())
    return logger
