from fastapi import Query

from prophyt.core.config import get_settings
from prophyt.services.filters import Pagination, build_pagination

settings = get_settings()

# Largest value a BIGINT LIMIT/OFFSET clause accepts.
MAX_SQL_INT = 2**63 - 1


def pagination_params(default_limit: int):
    """Dependency factory for ``limit``/``offset`` query parameters."""

    async def _dependency(
        limit: int = Query(default_limit, ge=0, le=MAX_SQL_INT),
        offset: int = Query(0, ge=0, le=MAX_SQL_INT),
    ) -> Pagination:
        return build_pagination(limit, offset, max_limit=settings.api_max_page_size)

    return _dependency
