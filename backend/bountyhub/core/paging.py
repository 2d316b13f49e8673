from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def page_window(page: int | None, limit: int | None, *, max_limit: int = MAX_LIMIT) -> tuple[int, int, int]:
    """Clamp page/limit and return ``(page, limit, offset)``."""
    safe_page = max(1, page or 1)
    safe_limit = max(1, min(limit or DEFAULT_LIMIT, max_limit))
    return safe_page, safe_limit, (safe_page - 1) * safe_limit


def build_paged_response(
    *,
    items: list[T],
    total: int,
    page: int,
    limit: int,
    serializer: Callable[[T], dict] | None = None,
) -> dict:
    if serializer is None:
        serialized = items
    else:
        serialized = [serializer(item) for item in items]
    return {
        "items": serialized,
        "total": total,
        "page": page,
        "limit": limit,
        "pages": (total + limit - 1) // limit if limit else 0,
    }
