from .config import (EngineConfig, EngineOutput, InputMethod, Charset, Mode, Command,
                     PAGE_SIZE, DATA_DIR)
from .core import InputEngine
from .dictionary import Dictionary, load_dictionary, lookup_prefix
from .conversion import ConversionTable, load_conversion_table, load_punctuation_map, convert
from .resolver import resolve
from .pager import (PagingState, PageView, FIRST_OF_PAGE, total_pages, advance, retreat,
                    page, select, paginate, format_choices)
from .session import (SessionState, SessionContext, KeystrokeResult, SpecialKey, Modifier,
                      handle_keystroke, initial_state)
from .logging import setup_logging, set_log_level, get_logger, get_api_logger, get_engine_logger


def create_engine(config: EngineConfig = None) -> InputEngine:
    """
    创建引擎

    Args:
        config: 引擎配置（默认使用包内数据目录）

    Returns:
        InputEngine 实例
    """
    return InputEngine(config)


__all__ = [
    # 引擎
    'InputEngine',
    'create_engine',
    'EngineConfig',
    'EngineOutput',
    'InputMethod',
    'Charset',
    'Mode',
    'Command',
    'PAGE_SIZE',
    'DATA_DIR',
    # 词典
    'Dictionary',
    'load_dictionary',
    'lookup_prefix',
    # 转换
    'ConversionTable',
    'load_conversion_table',
    'load_punctuation_map',
    'convert',
    # 解析 / 分页
    'resolve',
    'PagingState',
    'PageView',
    'FIRST_OF_PAGE',
    'total_pages',
    'advance',
    'retreat',
    'page',
    'select',
    'paginate',
    'format_choices',
    # 会话
    'SessionState',
    'SessionContext',
    'KeystrokeResult',
    'SpecialKey',
    'Modifier',
    'handle_keystroke',
    'initial_state',
    # 日志
    'setup_logging',
    'set_log_level',
    'get_logger',
    'get_api_logger',
    'get_engine_logger',
]
