"""
候选分页

每页固定 9 个，页码从 0 开始；越界翻页/选择都是空操作。
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import PAGE_SIZE

# 空格键：选当前页第一个
FIRST_OF_PAGE = 1


@dataclass(frozen=True)
class PagingState:
    """分页状态"""
    page_index: int = 0
    page_size: int = PAGE_SIZE
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)


@dataclass
class PageView:
    """当前页的渲染数据"""
    visible: List[str] = field(default_factory=list)
    page_label: str = ""
    total_pages: int = 0
    page_index: int = 0


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """ceil(count / page_size)，空列表为 0 页"""
    if count <= 0:
        return 0
    return -(-count // page_size)


def advance(page_index: int, count: int, page_size: int = PAGE_SIZE) -> int:
    """下一页；已是最后一页时不变"""
    if (page_index + 1) * page_size < count:
        return page_index + 1
    return page_index


def retreat(page_index: int) -> int:
    """上一页；已是第一页时不变"""
    if page_index > 0:
        return page_index - 1
    return page_index


def page(candidates: Optional[Sequence[str]], page_index: int, page_size: int = PAGE_SIZE) -> List[str]:
    """取第 page_index 页的候选"""
    if not candidates:
        return []
    start = page_index * page_size
    return list(candidates[start:min(len(candidates), start + page_size)])


def select(
    candidates: Optional[Sequence[str]],
    page_index: int,
    slot: int = FIRST_OF_PAGE,
    page_size: int = PAGE_SIZE,
) -> Optional[str]:
    """
    按页内序号 (1-9) 取候选

    序号或下标越界均返回 None（不视为错误）。
    """
    if not candidates or not 1 <= slot <= page_size:
        return None
    index = page_index * page_size + (slot - 1)
    if 0 <= index < len(candidates):
        return candidates[index]
    return None


def paginate(candidates: Optional[Sequence[str]], page_index: int = 0, page_size: int = PAGE_SIZE) -> PageView:
    """生成当前页的可见候选与页码标签（如 "1/3"）"""
    if candidates is None:
        return PageView()
    pages = total_pages(len(candidates), page_size)
    if pages == 0:
        return PageView(page_label="0/0")
    page_index = max(0, min(page_index, pages - 1))
    return PageView(
        visible=page(candidates, page_index, page_size),
        page_label=f"{page_index + 1}/{pages}",
        total_pages=pages,
        page_index=page_index,
    )


def format_choices(view: PageView) -> str:
    """候选栏文字，如 "1. 你 2. 妳 3. 尼" """
    return " ".join(f"{i}. {text}" for i, text in enumerate(view.visible, 1))
