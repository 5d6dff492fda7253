from pydantic import BaseModel

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, totalPages=(total + limit - 1) // limit)


def reject_null(value):
    """
    Partial updates may omit a required column but never set it to null.
    Used from "after" field validators, which only run on values the client sent.
    """
    if value is None:
        raise ValueError("Field cannot be null")
    return value
