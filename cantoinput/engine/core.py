import os
import time
from typing import Callable, Dict, Iterable, List, Optional, Union

from .cache import LRUCache
from .config import (PUNCT_FILE, TRAD_SIMP_FILE, Charset, Command, EngineConfig,
                     EngineOutput, InputMethod, Mode)
from .conversion import ConversionTable, load_conversion_table, load_punctuation_map
from .dictionary import Dictionary, load_dictionary
from .logging import get_engine_logger, log_execution_time, set_log_level
from .pager import PageView, paginate
from .session import (Key, Modifier, SessionContext, SessionState, handle_keystroke,
                      initial_state, with_buffer)

logger = get_engine_logger()


class InputEngine:
    """
    输入法引擎

    持有当前方案的快照（词典 / 转换表 / 标点表）与会话状态；
    切换方案或字形时整体替换快照并重置会话。
    """

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()
        set_log_level(self.config.log_level)

        self.punctuation: Dict[str, str] = {}
        self.dictionary: Optional[Dictionary] = None
        self.conversion_table: Optional[ConversionTable] = None
        self.context: Optional[SessionContext] = None
        self.state: SessionState = initial_state(page_size=self.config.page_size)

        # 统计
        self.stats = {'keys': 0, 'resolves': 0, 'commits': 0, 'total_ms': 0.0}

        # 命令分发表
        self._commands: Dict[Command, Callable[[], None]] = {
            Command.USE_YALE: lambda: self.switch_method(InputMethod.YALE),
            Command.USE_JYUTPING: lambda: self.switch_method(InputMethod.JYUTPING),
            Command.USE_PINYIN: lambda: self.switch_method(InputMethod.PINYIN),
            Command.USE_TRADITIONAL: lambda: self.switch_charset(Charset.TRADITIONAL),
            Command.USE_SIMPLIFIED: lambda: self.switch_charset(Charset.SIMPLIFIED),
            Command.TOGGLE_INPUT_MODE: self.toggle_input_mode,
        }

        self._init_modules()

    def _path(self, filename: str) -> str:
        return os.path.join(self.config.data_dir, filename)

    def _init_modules(self):
        """加载标点表与当前方案"""
        self.punctuation = load_punctuation_map(self._path(PUNCT_FILE))
        self._load_snapshot()
        self._log_status()

    @log_execution_time(logger)
    def _load_snapshot(self):
        """按当前配置重建词典快照并重置会话"""
        self.dictionary = load_dictionary(self._path(self.config.method.data_file))
        if self.config.charset is Charset.SIMPLIFIED:
            self.conversion_table = load_conversion_table(self._path(TRAD_SIMP_FILE))
        else:
            self.conversion_table = None

        self.context = SessionContext(
            dictionary=self.dictionary,
            charset=self.config.charset,
            conversion_table=self.conversion_table,
            punctuation=self.punctuation,
            page_size=self.config.page_size,
            phrases_first=self.config.phrases_first,
            passthrough_punctuation=self.config.passthrough_punctuation,
            cache=LRUCache(self.config.cache_size),
        )
        self.reset(self.state.mode)

    def _log_status(self):
        logger.info("=" * 50)
        logger.info("CantoInput 引擎")
        logger.info(f"  方案: {self.config.method.value} ({len(self.dictionary)} 条)")
        logger.info(f"  字形: {self.config.charset.value}")
        logger.info(f"  标点: {len(self.punctuation)} 条")
        logger.info("=" * 50)

    # ===== 命令 =====

    def execute(self, command: Union[Command, str]):
        """执行引擎命令"""
        if not isinstance(command, Command):
            command = Command(command)
        logger.debug(f"执行命令: {command.value}")
        self._commands[command]()

    def switch_method(self, method: InputMethod):
        self.config.method = method
        self._load_snapshot()
        logger.info(f"切换方案: {method.value} ({len(self.dictionary)} 条)")

    def switch_charset(self, charset: Charset):
        self.config.charset = charset
        self._load_snapshot()
        logger.info(f"切换字形: {charset.value}")

    def toggle_input_mode(self):
        mode = Mode.PASSTHROUGH if self.state.mode is Mode.COMPOSITION else Mode.COMPOSITION
        self.reset(mode)
        logger.info(f"切换模式: {mode.value}")

    def reset(self, mode: Mode = Mode.COMPOSITION):
        self.state = initial_state(mode, self.config.page_size)

    # ===== 查询 =====

    def resolve(self, buffer: str) -> Optional[List[str]]:
        """解析候选（带缓存）"""
        self.stats['resolves'] += 1
        result = self.context.resolve(buffer)
        return list(result) if result is not None else None

    def paginate(self, candidates: Optional[List[str]], page_index: int = 0) -> PageView:
        return paginate(candidates, page_index, self.config.page_size)

    def set_buffer(self, buffer: str) -> EngineOutput:
        """直接设置输入缓冲（用于外部预填）"""
        if buffer and not all('a' <= c <= 'z' for c in buffer):
            raise ValueError(f"输入缓冲只能包含 a-z: {buffer!r}")
        if buffer:
            self.state = with_buffer(self.state, buffer, self.context)
        else:
            self.reset(self.state.mode)
        return self._build_output(False, None, 0.0)

    # ===== 按键 =====

    def process_key(self, key: Key, modifiers: Iterable[Union[Modifier, str]] = ()) -> EngineOutput:
        """处理一次按键，更新会话并返回渲染结果"""
        start = time.perf_counter()
        self.stats['keys'] += 1

        result = handle_keystroke(self.state, key, modifiers, self.context)
        self.state = result.state
        if result.commit_text:
            self.stats['commits'] += 1
            logger.debug(f"上屏: {result.commit_text!r}")

        elapsed = (time.perf_counter() - start) * 1000
        self.stats['total_ms'] += elapsed
        return self._build_output(result.consumed, result.commit_text, elapsed)

    def process(self, keys: Iterable[Key]) -> List[EngineOutput]:
        """依次处理多个按键"""
        return [self.process_key(k) for k in keys]

    def _build_output(self, consumed: bool, commit_text: Optional[str], elapsed_ms: float) -> EngineOutput:
        view = self.state.view()
        return EngineOutput(
            consumed=consumed,
            commit_text=commit_text,
            mode=self.state.mode,
            input_buffer=self.state.input_buffer,
            candidates=view.visible,
            page_label=view.page_label,
            total_pages=view.total_pages,
            has_match=self.state.has_candidates,
            metadata={
                'elapsed_ms': round(elapsed_ms, 3),
                'cache_rate': round(self.context.cache.hit_rate, 3),
            },
        )

    def get_stats(self) -> Dict:
        """获取统计"""
        keys = self.stats['keys'] or 1
        return {
            'method': self.config.method.value,
            'charset': self.config.charset.value,
            'dictionary_size': len(self.dictionary),
            'total_keys': self.stats['keys'],
            'total_resolves': self.stats['resolves'],
            'total_commits': self.stats['commits'],
            'cache_hit_rate': self.context.cache.hit_rate,
            'avg_latency_ms': self.stats['total_ms'] / keys,
        }
