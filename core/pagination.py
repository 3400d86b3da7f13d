from typing import Any, Dict, Tuple

MAX_PAGE_SIZE = 100


def parse_pagination(query_params, default_limit: int = 10) -> Tuple[int, int]:
    """
    Read page/limit query parameters.
    Raises ValueError on non-numeric input.
    """
    page = max(int(query_params.get("page", 1) or 1), 1)
    limit = int(query_params.get("limit", default_limit) or default_limit)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    return page, limit


def paginate(queryset, page: int, limit: int) -> Tuple[Any, Dict[str, int]]:
    """Slice a queryset and build the listing meta block"""
    total = queryset.count()
    start = (page - 1) * limit
    meta = {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }
    return queryset[start : start + limit], meta
