"""Uniform response envelope and pagination used by every router."""
import math
from typing import Any, Optional
from sqlalchemy.orm import Query
from app.core.config import settings


def api_response(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    """
    Build a success envelope.

    Only keys with a value are emitted, so a plain read returns
    ``{"success": true, "data": ...}`` and list endpoints add
    count/page/limit/totalPages.
    """
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    for key, value in extra.items():
        if value is not None:
            body[key] = value
    return body


def clamp_page(page: Optional[int], limit: Optional[int]):
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else settings.default_page_size
    return page, min(limit, settings.max_page_size)


def paginate(query: Query, page: Optional[int] = None, limit: Optional[int] = None):
    """
    Run ``query`` for one page.

    Returns:
        (items, meta) where meta holds count, page, limit and totalPages
        ready to be splatted into api_response.
    """
    page, limit = clamp_page(page, limit)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    meta = {
        "count": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if total else 0,
    }
    return items, meta
