"""
统一日志配置模块

控制台彩色输出、JSON 结构化日志、文件轮转
"""

import os
import sys
import logging
import time
import orjson
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


# 日志目录（默认为当前工作目录下的 logs）
LOG_DIR = Path(os.getenv('CANTOINPUT_LOG_DIR', 'logs'))

# 是否写入日志文件
LOG_TO_FILE = os.getenv('CANTOINPUT_LOG_TO_FILE', '0') == '1'


class JsonFormatter(logging.Formatter):
    """JSON 格式日志（便于日志分析工具解析）"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if hasattr(record, 'request_id'):
            log_data['request_id'] = record.request_id
        if hasattr(record, 'duration_ms'):
            log_data['duration_ms'] = record.duration_ms
        if hasattr(record, 'extra_data'):
            log_data['data'] = record.extra_data

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return orjson.dumps(log_data).decode('utf-8')


class ColorFormatter(logging.Formatter):
    """彩色控制台输出"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '')
        levelname = record.levelname
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(
    name: str = 'cantoinput',
    level: str = 'INFO',
    log_to_file: Optional[bool] = None,
    log_to_console: bool = True,
    json_format: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    配置日志系统

    Args:
        name: 日志器名称
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: 是否写入文件（默认读取 CANTOINPUT_LOG_TO_FILE）
        log_to_console: 是否输出到控制台
        json_format: 是否使用 JSON 格式
        max_bytes: 单个日志文件最大大小
        backup_count: 保留的日志文件数量

    Returns:
        配置好的 Logger 实例
    """
    if log_to_file is None:
        log_to_file = LOG_TO_FILE

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # 清除已有 handlers（避免重复添加）
    logger.handlers.clear()

    detailed_format = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'
    simple_format = '%(asctime)s | %(levelname)-8s | %(message)s'

    if log_to_console:
        # stderr 留给日志，stdout 留给 CLI 输出
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)

        if json_format:
            console_handler.setFormatter(JsonFormatter())
        elif sys.stderr.isatty():
            console_handler.setFormatter(ColorFormatter(simple_format))
        else:
            console_handler.setFormatter(logging.Formatter(simple_format))

        logger.addHandler(console_handler)

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            LOG_DIR / f'{name}.log',
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        if json_format:
            file_handler.setFormatter(JsonFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(detailed_format))
        logger.addHandler(file_handler)

        # 错误日志单独文件
        error_handler = RotatingFileHandler(
            LOG_DIR / f'{name}_error.log',
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(detailed_format))
        logger.addHandler(error_handler)

    return logger


def get_logger(name: str = 'cantoinput') -> logging.Logger:
    """获取已配置的 logger（如果未配置则自动配置）"""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logging(name, level=os.getenv('LOG_LEVEL', 'INFO'))
    return logger


def log_execution_time(logger: Optional[logging.Logger] = None):
    """装饰器：记录函数执行时间"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or get_logger()
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                log.debug(f"{func.__name__} 执行完成, 耗时: {elapsed:.2f}ms")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                log.error(f"{func.__name__} 执行失败, 耗时: {elapsed:.2f}ms, 错误: {e}")
                raise
        return wrapper
    return decorator


def set_log_level(level: str, names=('cantoinput.engine', 'cantoinput.api')):
    """调整已配置 logger 的级别（handlers 保持 DEBUG，由 logger 过滤）"""
    for name in names:
        get_logger(name).setLevel(getattr(logging, level.upper(), logging.INFO))


def get_api_logger() -> logging.Logger:
    """获取 API 日志器"""
    return get_logger('cantoinput.api')


def get_engine_logger() -> logging.Logger:
    """获取引擎日志器"""
    return get_logger('cantoinput.engine')
