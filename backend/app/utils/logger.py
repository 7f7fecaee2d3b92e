"""日志配置"""
import logging
import sys

from app.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level_name: str) -> int:
    """日志级别名称转换，未知名称回退到 INFO"""
    return getattr(logging, (level_name or "INFO").upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """获取分析引擎使用的日志记录器"""
    level = resolve_level(get_settings().log_level)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 根记录器已配置时交给根处理，避免重复输出
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
