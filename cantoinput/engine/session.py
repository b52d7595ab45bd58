"""
输入会话状态机

每次按键: (状态, 按键, 修饰键, 上下文) → (是否吞键, 上屏文字, 新状态)

状态是不可变值，由调用方持有并逐键传递；本模块不保存任何全局状态。
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from . import pager
from .cache import LRUCache
from .config import PAGE_SIZE, Charset, Mode
from .conversion import ConversionTable
from .dictionary import Dictionary
from .pager import FIRST_OF_PAGE, PagingState
from .resolver import resolve


class SpecialKey(Enum):
    """非字符按键"""
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Modifier(Enum):
    SHIFT = "shift"
    CTRL = "ctrl"
    ALT = "alt"


Key = Union[str, SpecialKey]

# 控制字符 → 特殊键
_CONTROL_CHARS = {
    '\b': SpecialKey.BACKSPACE,
    '\x7f': SpecialKey.BACKSPACE,
    '\n': SpecialKey.ENTER,
    '\r': SpecialKey.ENTER,
    '\x1b': SpecialKey.ESCAPE,
}

# 翻页键（有候选时生效）
NEXT_PAGE_KEYS = frozenset({SpecialKey.PAGE_DOWN, SpecialKey.RIGHT, SpecialKey.DOWN,
                            '=', '+', '.', '>', ']', '}'})
PREV_PAGE_KEYS = frozenset({SpecialKey.PAGE_UP, SpecialKey.LEFT, SpecialKey.UP,
                            '-', '_', ',', '<', '[', '{'})


@dataclass(frozen=True)
class SessionState:
    """会话状态"""
    mode: Mode = Mode.COMPOSITION
    input_buffer: str = ""
    candidates: Optional[Tuple[str, ...]] = None
    paging: PagingState = PagingState()

    @property
    def has_candidates(self) -> bool:
        return self.candidates is not None

    @property
    def page_index(self) -> int:
        return self.paging.page_index

    def view(self) -> pager.PageView:
        return pager.paginate(self.candidates, self.paging.page_index, self.paging.page_size)


@dataclass(frozen=True)
class KeystrokeResult:
    """按键处理结果"""
    consumed: bool
    commit_text: Optional[str]
    state: SessionState


@dataclass
class SessionContext:
    """
    当前方案的只读快照：词典、转换表、标点表及选项

    cache 为可选的解析缓存，随快照一起替换。
    """
    dictionary: Dictionary
    charset: Charset = Charset.TRADITIONAL
    conversion_table: Optional[ConversionTable] = None
    punctuation: Mapping[str, str] = field(default_factory=dict)
    page_size: int = PAGE_SIZE
    phrases_first: bool = False
    passthrough_punctuation: bool = True
    cache: Optional[LRUCache] = None

    def resolve(self, buffer: str) -> Optional[Tuple[str, ...]]:
        if not buffer:
            return None
        if self.cache is not None:
            cached = self.cache.get(buffer, _MISSING)
            if cached is not _MISSING:
                return cached
        found = resolve(buffer, self.dictionary, self.charset,
                        self.conversion_table, self.phrases_first)
        result = tuple(found) if found is not None else None
        if self.cache is not None:
            self.cache.put(buffer, result)
        return result


_MISSING = object()


def initial_state(mode: Mode = Mode.COMPOSITION, page_size: int = PAGE_SIZE) -> SessionState:
    """空缓冲、无候选"""
    return SessionState(mode=mode, paging=PagingState(page_size=page_size))


def with_buffer(state: SessionState, buffer: str, context: SessionContext) -> SessionState:
    """替换输入缓冲并重新解析候选，页码归零"""
    candidates = context.resolve(buffer)
    return dataclasses.replace(
        state,
        input_buffer=buffer,
        candidates=candidates,
        paging=PagingState(
            page_index=0,
            page_size=context.page_size,
            total_count=len(candidates) if candidates else 0,
        ),
    )


def _consume(state: SessionState, commit_text: Optional[str] = None) -> KeystrokeResult:
    return KeystrokeResult(True, commit_text, state)


def _propagate(state: SessionState) -> KeystrokeResult:
    return KeystrokeResult(False, None, state)


def _reset(state: SessionState, context: SessionContext) -> SessionState:
    return initial_state(state.mode, context.page_size)


def _with_page(state: SessionState, page_index: int) -> SessionState:
    return dataclasses.replace(state, paging=dataclasses.replace(state.paging, page_index=page_index))


# ===== 各按键规则 =====
# 返回 None 表示本规则不处理，交给标点替换/直通

def _append_letter(state, letter, context):
    return _consume(with_buffer(state, state.input_buffer + letter, context))


def _backspace(state, key, context):
    if not state.input_buffer:
        return _propagate(state)
    return _consume(with_buffer(state, state.input_buffer[:-1], context))


def _escape(state, key, context):
    if not state.input_buffer:
        return _propagate(state)
    return _consume(_reset(state, context))


def _enter(state, key, context):
    # 有输入时吞掉回车，不上屏
    if not state.input_buffer:
        return _propagate(state)
    return _consume(state)


def _next_page(state, key, context):
    if not state.has_candidates:
        return None
    paging = state.paging
    return _consume(_with_page(state, pager.advance(paging.page_index, paging.total_count, paging.page_size)))


def _prev_page(state, key, context):
    if not state.has_candidates:
        return None
    return _consume(_with_page(state, pager.retreat(state.paging.page_index)))


def _select_digit(state, key, context):
    if not state.has_candidates:
        return None
    text = pager.select(state.candidates, state.paging.page_index, int(key), state.paging.page_size)
    if text is None:
        # 越界也吞键，避免数字混入正文
        return _consume(state)
    return _consume(_reset(state, context), text)


def _commit_first(state, key, context):
    if not state.has_candidates:
        return None
    text = pager.select(state.candidates, state.paging.page_index, FIRST_OF_PAGE, state.paging.page_size)
    if text is None:
        return _consume(state)
    return _consume(_reset(state, context), text)


Handler = Callable[[SessionState, Key, SessionContext], Optional[KeystrokeResult]]

_SPECIAL_KEY_HANDLERS: Dict[SpecialKey, Handler] = {
    SpecialKey.BACKSPACE: _backspace,
    SpecialKey.ESCAPE: _escape,
    SpecialKey.ENTER: _enter,
}


def _composition_handler(key: Key) -> Optional[Handler]:
    if key in NEXT_PAGE_KEYS:
        return _next_page
    if key in PREV_PAGE_KEYS:
        return _prev_page
    if isinstance(key, SpecialKey):
        return _SPECIAL_KEY_HANDLERS.get(key)
    if '1' <= key <= '9':
        return _select_digit
    if key == ' ':
        return _commit_first
    return None


def _substitute_punctuation(state: SessionState, key: Key, context: SessionContext) -> KeystrokeResult:
    if isinstance(key, str) and key in context.punctuation:
        return _consume(state, context.punctuation[key])
    return _propagate(state)


def normalize_key(key: Union[Key, int]) -> Key:
    """把控制字符和键名统一为 SpecialKey，普通字符原样返回"""
    if isinstance(key, SpecialKey):
        return key
    if isinstance(key, str):
        if len(key) == 1:
            return _CONTROL_CHARS.get(key, key)
        try:
            return SpecialKey(key.lower())
        except ValueError:
            pass
    raise ValueError(f"无法识别的按键: {key!r}")


def normalize_modifiers(modifiers: Iterable[Union[Modifier, str]] = ()) -> FrozenSet[Modifier]:
    return frozenset(m if isinstance(m, Modifier) else Modifier(str(m).lower()) for m in modifiers)


def handle_keystroke(
    state: SessionState,
    key: Key,
    modifiers: Iterable[Union[Modifier, str]] = (),
    context: Optional[SessionContext] = None,
) -> KeystrokeResult:
    """
    处理一次按键

    Args:
        state: 当前会话状态
        key: 单个字符或 SpecialKey
        modifiers: 修饰键集合
        context: 当前词典快照

    Returns:
        KeystrokeResult(consumed, commit_text, state)
    """
    if context is None:
        raise ValueError("缺少会话上下文")
    key = normalize_key(key)
    mods = normalize_modifiers(modifiers)
    shortcut = Modifier.CTRL in mods or Modifier.ALT in mods

    # Ctrl+Enter 切换中英文
    if key is SpecialKey.ENTER and Modifier.CTRL in mods:
        mode = Mode.PASSTHROUGH if state.mode is Mode.COMPOSITION else Mode.COMPOSITION
        return _consume(initial_state(mode, context.page_size))

    # 快捷键（Ctrl/Alt 组合）一律放行
    if shortcut:
        return _propagate(state)

    if state.mode is Mode.PASSTHROUGH:
        if context.passthrough_punctuation:
            return _substitute_punctuation(state, key, context)
        return _propagate(state)

    if isinstance(key, str) and key.isascii() and key.isalpha():
        return _append_letter(state, key.lower(), context)

    handler = _composition_handler(key)
    if handler is not None:
        result = handler(state, key, context)
        if result is not None:
            return result

    return _substitute_punctuation(state, key, context)
