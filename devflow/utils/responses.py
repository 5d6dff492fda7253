from typing import Any, Optional

from devflow.schemas.common_schema import Pagination


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def paginated_response(items: list, page: int, limit: int, total: int) -> dict:
    return {
        "success": True,
        "data": items,
        "pagination": Pagination.build(page, limit, total),
    }
