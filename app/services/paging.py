import math
from typing import Optional

from app.core.config import settings


def normalize_paging(page: Optional[int], size: Optional[int]) -> tuple[int, int]:
    page = page if page is not None and page >= 0 else 0
    size = size if size is not None and size > 0 else settings.DEFAULT_PAGE_SIZE
    return page, min(size, settings.MAX_PAGE_SIZE)


def build_page(content: list, total: int, page: int, size: int) -> dict:
    total_pages = math.ceil(total / size) if size else 0
    return {
        "content": content,
        "current_page": page,
        "total_pages": total_pages,
        "total_elements": total,
        "page_size": size,
        "is_first": page == 0,
        "is_last": page + 1 >= total_pages,
    }
