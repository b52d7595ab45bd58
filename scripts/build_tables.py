"""
繁简转换表构建脚本

功能：扫描词典文件中出现的所有汉字，用 OpenCC (t2s) 逐字转换，
      生成 / 补全 trad-simp.txt（每行 "<繁> <简>"）

使用方法:
    python scripts/build_tables.py
    python scripts/build_tables.py --dicts a.txt b.txt --out trad-simp.txt
"""

import argparse
from pathlib import Path
from typing import Dict, Iterable, List

from opencc import OpenCC

from cantoinput.engine import load_conversion_table
from cantoinput.engine.dictionary import read_source

# ============ 路径配置 ============
SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
DATA_DIR = PROJECT_ROOT / 'cantoinput' / 'data'
OUTPUT_PATH = DATA_DIR / 'trad-simp.txt'


def collect_chars(lines: Iterable[str]) -> List[str]:
    """收集词典值中出现的汉字（按首次出现顺序）"""
    seen = set()
    chars = []
    for line in lines:
        parts = line.strip().split(None, 1)
        if len(parts) < 2:
            continue
        for ch in parts[1]:
            if ch.isspace() or ch in seen:
                continue
            seen.add(ch)
            chars.append(ch)
    return chars


def build_mapping(chars: Iterable[str], converter=None) -> Dict[str, str]:
    """逐字 t2s 转换，只保留有变化的字"""
    converter = converter or OpenCC('t2s')
    mapping = {}
    for ch in chars:
        simp = converter.convert(ch)
        # 只接受单字到单字
        if simp != ch and len(simp) == 1:
            mapping[ch] = simp
    return mapping


def read_table(path: Path) -> Dict[str, str]:
    """按引擎的解析规则读取已有转换表（文件不存在时为空）"""
    if not path.exists():
        return {}
    return dict(load_conversion_table(path).items())


def merge_tables(existing: Dict[str, str], generated: Dict[str, str]) -> Dict[str, str]:
    """已有条目优先（人工修订不被覆盖）"""
    merged = dict(existing)
    for trad, simp in generated.items():
        merged.setdefault(trad, simp)
    return merged


def write_table(table: Dict[str, str], path: Path):
    with open(path, 'w', encoding='utf-8') as f:
        for trad, simp in table.items():
            f.write(f"{trad} {simp}\n")


def main():
    parser = argparse.ArgumentParser(description="生成繁简转换表")
    parser.add_argument('--dicts', nargs='*', type=Path,
                        default=sorted(DATA_DIR.glob('input-*.txt')),
                        help="词典文件（默认: 包内全部 input-*.txt）")
    parser.add_argument('--out', type=Path, default=OUTPUT_PATH, help="输出路径")
    args = parser.parse_args()

    chars = []
    for path in args.dicts:
        chars.extend(collect_chars(read_source(path)))
    print(f"  汉字: {len(set(chars))} 个")

    existing = read_table(args.out)
    generated = build_mapping(dict.fromkeys(chars))
    table = merge_tables(existing, generated)
    write_table(table, args.out)

    print(f"  已有: {len(existing)} 条, 新增: {len(table) - len(existing)} 条")
    print(f"✓ 输出: {args.out}")


if __name__ == '__main__':
    main()
