"""
汉语拼音词典构建脚本

功能：从字 / 词列表生成 input-pinyin.txt 格式的词典
      键为无声调拼音（连写、仅 a-z），值为按输入顺序排列的字词

输入：每行一个字词；也可以直接给出已有的词典文件（取每行的值部分）

使用方法:
    python scripts/build_pinyin_dict.py words.txt --out cantoinput/data/input-pinyin.txt
    python scripts/build_pinyin_dict.py cantoinput/data/input-jyutping.txt --from-dict
"""

import argparse
import re
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterable, List

import pypinyin


def word_to_key(word: str) -> str:
    """字词 → 连写无调拼音键（非 a-z 字符去掉）"""
    pys = pypinyin.lazy_pinyin(word, style=pypinyin.Style.NORMAL)
    return re.sub(r'[^a-z]', '', ''.join(pys).lower())


def words_from_dict_lines(lines: Iterable[str]) -> List[str]:
    """从词典行中取出所有候选字词"""
    words = []
    for line in lines:
        parts = line.strip().split(None, 1)
        if len(parts) == 2:
            words.extend(parts[1].split())
    return words


def build_entries(words: Iterable[str]) -> Dict[str, List[str]]:
    """按拼音键分组，组内保持输入顺序并去重"""
    entries: Dict[str, List[str]] = OrderedDict()
    for word in words:
        word = word.strip()
        if not word:
            continue
        key = word_to_key(word)
        if not key:
            continue
        group = entries.setdefault(key, [])
        if word not in group:
            group.append(word)
    return entries


def format_entries(entries: Dict[str, List[str]]) -> List[str]:
    return [f"{key} {' '.join(words)}" for key, words in sorted(entries.items())]


def main():
    parser = argparse.ArgumentParser(description="生成汉语拼音词典")
    parser.add_argument('source', type=Path, help="字词列表或词典文件")
    parser.add_argument('--from-dict', action='store_true', help="source 为词典格式")
    parser.add_argument('--out', type=Path, default=None, help="输出路径（默认打印到标准输出）")
    args = parser.parse_args()

    with open(args.source, 'r', encoding='utf-8-sig', errors='replace') as f:
        lines = f.read().splitlines()

    words = words_from_dict_lines(lines) if args.from_dict else lines
    output = format_entries(build_entries(words))

    if args.out:
        args.out.write_text('\n'.join(output) + '\n', encoding='utf-8')
        print(f"✓ {len(output)} 条 → {args.out}")
    else:
        print('\n'.join(output))


if __name__ == '__main__':
    main()
