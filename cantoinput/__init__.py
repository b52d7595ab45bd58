"""
CantoInput - 粤语 / 普通话拼音输入法引擎

耶鲁、粤拼、汉语拼音三种方案，前缀查询 + 保序去重 + 9 个一页
"""

__version__ = "1.10.0"

from cantoinput.engine import (
    InputEngine,
    create_engine,
    EngineConfig,
    EngineOutput,
    InputMethod,
    Charset,
    Mode,
    Command,
    Dictionary,
    load_dictionary,
    lookup_prefix,
    ConversionTable,
    load_conversion_table,
    convert,
    resolve,
    PageView,
    paginate,
    SessionState,
    SessionContext,
    KeystrokeResult,
    SpecialKey,
    Modifier,
    handle_keystroke,
    initial_state,
)

__all__ = [
    "__version__",
    # 引擎
    "InputEngine",
    "create_engine",
    "EngineConfig",
    "EngineOutput",
    "InputMethod",
    "Charset",
    "Mode",
    "Command",
    # 词典 / 转换
    "Dictionary",
    "load_dictionary",
    "lookup_prefix",
    "ConversionTable",
    "load_conversion_table",
    "convert",
    # 解析 / 分页
    "resolve",
    "PageView",
    "paginate",
    # 会话
    "SessionState",
    "SessionContext",
    "KeystrokeResult",
    "SpecialKey",
    "Modifier",
    "handle_keystroke",
    "initial_state",
]
