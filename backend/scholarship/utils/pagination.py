"""
Pagination Utility Module

Provides standardized pagination helpers for the admin listings.
"""
import math
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

MAX_PAGE_SIZE = 100


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    page_size: int = 10,
    count_query: Optional[Select] = None
) -> dict:
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        db: Database session
        query: Base SQLAlchemy query (already ordered)
        page: Page number (1-indexed)
        page_size: Items per page
        count_query: Optional custom count query

    Returns:
        Dictionary with items, total, page, page_size, total_pages
    """
    page = max(1, page)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))

    if count_query is None:
        count_query = select(func.count()).select_from(query.subquery())
    total = await db.scalar(count_query) or 0

    result = await db.execute(query.offset((page - 1) * page_size).limit(page_size))

    return {
        "items": list(result.scalars().all()),
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if total > 0 else 1,
    }
