"""
词典模块

数据文件格式（UTF-8，每行一条）:
    <键><空白><候选1 候选2 ...>

- 键为第一个空白分隔的词元，值为行内剩余部分（去除首尾空白）
- 没有值的行跳过；坏行逐行跳过，不影响后续行
- 重复的键按文件顺序合并（以空格连接），不重新排序
"""

import os
from bisect import bisect_left
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .logging import get_engine_logger

logger = get_engine_logger()

Source = Union[str, os.PathLike, Iterable[str]]


def read_source(source: Source, label: str = "词典") -> List[str]:
    """
    读取数据源的全部行

    source 为路径时按 UTF-8 读取（容忍 BOM，非法字节替换为 U+FFFD）；
    文件缺失或不可读时返回空列表并记录警告。
    """
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        try:
            with open(path, 'r', encoding='utf-8-sig', errors='replace') as f:
                # 只按换行符断行，U+2028 等分隔符保留在值内
                return [line.rstrip('\r') for line in f.read().split('\n')]
        except OSError as e:
            logger.warning(f"{label}文件不可读，使用空表: {path} ({e})")
            return []
    return list(source)


def iter_entries(lines: Iterable[str]) -> Iterator[Tuple[str, str]]:
    """逐行解析出 (键, 值)，跳过空行与无值行"""
    for lineno, line in enumerate(lines, 1):
        if not isinstance(line, str):
            logger.debug(f"跳过第 {lineno} 行: 非文本 {type(line).__name__}")
            continue
        parts = line.strip().split(None, 1)
        if len(parts) < 2:
            if parts:
                logger.debug(f"跳过第 {lineno} 行: 缺少候选 {parts[0]!r}")
            continue
        key, value = parts
        yield key, value.strip()


class Dictionary:
    """
    拼音 → 候选 词典（只读快照）

    键空间在加载时排序，之后不可变；前缀查询使用二分定位 + 顺序扫描。
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None, name: str = ""):
        self.name = name
        self._entries: Dict[str, str] = dict(entries or {})
        self._keys: List[str] = sorted(self._entries)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"Dictionary(name={self.name!r}, entries={len(self)})"

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(self._keys)

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def lookup_prefix(self, prefix: str) -> List[Tuple[str, str]]:
        """
        返回所有以 prefix 开头的 (键, 值)，按键升序

        只接受非空前缀。
        """
        if not prefix:
            raise ValueError("前缀不能为空")

        keys = self._keys
        result = []
        i = bisect_left(keys, prefix)
        while i < len(keys) and keys[i].startswith(prefix):
            result.append((keys[i], self._entries[keys[i]]))
            i += 1
        return result


def load_dictionary(source: Source, name: str = "") -> Dictionary:
    """加载词典，重复键按文件顺序合并"""
    entries: Dict[str, str] = {}
    for key, value in iter_entries(read_source(source)):
        if key in entries:
            entries[key] = entries[key] + " " + value
        else:
            entries[key] = value

    if not name and isinstance(source, (str, os.PathLike)):
        name = os.path.basename(os.fspath(source))

    dictionary = Dictionary(entries, name=name)
    logger.debug(f"词典加载完成: {dictionary.name or '<lines>'} ({len(dictionary)} 条)")
    return dictionary


def lookup_prefix(dictionary: Dictionary, prefix: str) -> List[Tuple[str, str]]:
    """前缀范围查询"""
    return dictionary.lookup_prefix(prefix)
