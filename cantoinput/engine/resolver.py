"""
候选解析

输入缓冲 → 前缀查询 → 拆分候选 → (繁→简) → 保序去重
"""

from typing import List, Optional

from .config import Charset
from .conversion import ConversionTable, convert
from .dictionary import Dictionary


def resolve(
    buffer: str,
    dictionary: Dictionary,
    direction: Charset = Charset.TRADITIONAL,
    table: Optional[ConversionTable] = None,
    phrases_first: bool = False,
) -> Optional[List[str]]:
    """
    解析候选列表

    Args:
        buffer: 非空输入缓冲
        dictionary: 当前词典
        direction: 输出字形，SIMPLIFIED 时用 table 逐字转换
        table: 繁简转换表
        phrases_first: 多字词排在单字之前（组内保持原顺序）

    Returns:
        去重后的候选列表；没有任何键以 buffer 开头时返回 None
    """
    if not buffer:
        raise ValueError("输入缓冲不能为空")

    entries = dictionary.lookup_prefix(buffer)
    if not entries:
        return None

    simplified = direction is Charset.SIMPLIFIED

    # 键升序遍历：完全匹配先于更长的前缀匹配
    candidates = []
    seen = set()
    for _, value in entries:
        for token in value.split():
            if simplified:
                token = convert(token, table)
            if token in seen:
                continue
            seen.add(token)
            candidates.append(token)

    if phrases_first:
        candidates = ([c for c in candidates if len(c) > 1] +
                      [c for c in candidates if len(c) <= 1])

    return candidates
