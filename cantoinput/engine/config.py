"""
引擎配置与输出结构
"""

import logging
import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


# 包内数据目录
DATA_DIR = Path(__file__).parent.parent / 'data'

# 每页候选数量
PAGE_SIZE = 9


class InputMethod(Enum):
    """输入法（拼写方案）"""
    YALE = "yale"            # 粤语耶鲁拼音
    JYUTPING = "jyutping"    # 粤拼
    PINYIN = "pinyin"        # 普通话拼音

    @property
    def data_file(self) -> str:
        return f"input-{self.value}.txt"


class Charset(Enum):
    """输出字形"""
    TRADITIONAL = "traditional"
    SIMPLIFIED = "simplified"


class Mode(Enum):
    """会话模式"""
    COMPOSITION = "composition"    # 中文输入
    PASSTHROUGH = "passthrough"    # 英文直通


class Command(Enum):
    """引擎命令（代替菜单文字比较）"""
    USE_YALE = "use_yale"
    USE_JYUTPING = "use_jyutping"
    USE_PINYIN = "use_pinyin"
    USE_TRADITIONAL = "use_traditional"
    USE_SIMPLIFIED = "use_simplified"
    TOGGLE_INPUT_MODE = "toggle_input_mode"


TRAD_SIMP_FILE = "trad-simp.txt"
PUNCT_FILE = "punct.txt"


def _parse_enum(enum_cls, value):
    """按值或名称解析枚举（大小写不敏感）"""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for member in enum_cls:
        if text.lower() in (member.value, member.name.lower()):
            return member
    raise ValueError(f"无效的 {enum_cls.__name__}: {value!r}")


def _parse_int(name: str, value: Any) -> int:
    # 偏好文件里的数字可能是字符串
    if isinstance(value, bool):
        raise ValueError(f"{name} 必须为整数: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} 必须为整数: {value!r}") from None


@dataclass
class EngineConfig:
    """引擎配置（用户偏好在构造时注入）"""
    method: InputMethod = InputMethod.YALE
    charset: Charset = Charset.TRADITIONAL
    data_dir: str = str(DATA_DIR)
    page_size: int = PAGE_SIZE
    cache_size: int = 2000
    phrases_first: bool = False            # 多字词排在单字之前
    passthrough_punctuation: bool = True   # 直通模式下也替换全角标点
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        self.method = _parse_enum(InputMethod, self.method)
        self.charset = _parse_enum(Charset, self.charset)
        self.page_size = _parse_int("page_size", self.page_size)
        self.cache_size = _parse_int("cache_size", self.cache_size)
        if self.page_size < 1:
            raise ValueError(f"page_size 必须为正数: {self.page_size}")
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"无效的日志级别: {self.log_level!r}")

    @classmethod
    def from_dict(cls, prefs: Mapping[str, Any]) -> "EngineConfig":
        """从偏好字典构建配置，忽略未知字段"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in prefs.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method.value,
            'charset': self.charset.value,
            'data_dir': self.data_dir,
            'page_size': self.page_size,
            'cache_size': self.cache_size,
            'phrases_first': self.phrases_first,
            'passthrough_punctuation': self.passthrough_punctuation,
            'log_level': self.log_level,
        }


@dataclass
class EngineOutput:
    """按键处理后的渲染结果"""
    consumed: bool = False
    commit_text: Optional[str] = None
    mode: Mode = Mode.COMPOSITION
    input_buffer: str = ""
    candidates: List[str] = field(default_factory=list)    # 当前页
    page_label: str = ""
    total_pages: int = 0
    has_match: bool = False
    metadata: Dict = field(default_factory=dict)
