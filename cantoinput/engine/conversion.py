"""
单字替换表：繁→简转换、全角标点
"""

import os
from typing import Dict, Optional

from .dictionary import Source, iter_entries, read_source
from .logging import get_engine_logger

logger = get_engine_logger()


class ConversionTable:
    """单字 → 替换串 映射（只读快照），未收录的字原样保留"""

    def __init__(self, mapping: Optional[Dict[str, str]] = None, name: str = ""):
        self.name = name
        self._mapping: Dict[str, str] = dict(mapping or {})

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, char: str) -> bool:
        return char in self._mapping

    def __repr__(self) -> str:
        return f"ConversionTable(name={self.name!r}, entries={len(self)})"

    def get(self, char: str, default: Optional[str] = None) -> Optional[str]:
        return self._mapping.get(char, default)

    def items(self):
        return self._mapping.items()

    def convert(self, text: str) -> str:
        # 按 Unicode 码位逐字替换
        mapping = self._mapping
        return ''.join(mapping.get(ch, ch) for ch in text)


def _load_single_char_map(source: Source, label: str) -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for key, value in iter_entries(read_source(source, label)):
        if len(key) != 1:
            logger.debug(f"{label}: 跳过多字符键 {key!r}")
            continue
        # 重复键以第一次出现为准
        mapping.setdefault(key, value.split()[0])
    return mapping


def load_conversion_table(source: Source, name: str = "") -> ConversionTable:
    """加载繁简转换表"""
    mapping = _load_single_char_map(source, "转换表")
    if not name and isinstance(source, (str, os.PathLike)):
        name = os.path.basename(os.fspath(source))
    table = ConversionTable(mapping, name=name)
    logger.debug(f"转换表加载完成: {table.name or '<lines>'} ({len(table)} 条)")
    return table


def load_punctuation_map(source: Source) -> Dict[str, str]:
    """加载标点映射：ASCII 标点 → 全角标点（取值的首字符）"""
    return {key: value[0] for key, value in _load_single_char_map(source, "标点表").items()}


def convert(text: str, table: Optional[ConversionTable]) -> str:
    """逐字替换；table 为空时原样返回"""
    if not table:
        return text
    return table.convert(text)
