from dataclasses import dataclass
from typing import Callable, Dict
from app.exceptions import BadRequestError

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number, page size and ordering for a listing."""

    page: int = 0
    size: int = 10
    sort_by: str = "created_at"
    direction: str = "desc"

    def __post_init__(self):
        if self.page < 0:
            raise BadRequestError("Page index must not be negative")
        if self.size < 1:
            raise BadRequestError("Page size must be at least 1")
        if self.direction not in SORT_DIRECTIONS:
            raise BadRequestError(
                f"Invalid sort direction '{self.direction}'. Must be one of: {list(SORT_DIRECTIONS)}"
            )

    @classmethod
    def from_args(cls, args, size=10, sort_by="created_at", direction="desc"):
        """Build from request query args, falling back to the given defaults."""
        try:
            page = int(args.get("page", 0))
            size = int(args.get("size", size))
        except (TypeError, ValueError):
            raise BadRequestError("Page and size must be integers")
        return cls(
            page=page,
            size=size,
            sort_by=args.get("sort_by", sort_by),
            direction=args.get("sort_dir", direction).lower(),
        )


def paginate(query, page_request: PageRequest, sortable: Dict[str, object], tiebreaker=None):
    """Order ``query`` by the requested column and fetch one page of it.

    ``sortable`` maps public sort names to model columns; anything else is
    rejected so clients cannot order by arbitrary attributes.
    """
    column = sortable.get(page_request.sort_by)
    if column is None:
        raise BadRequestError(
            f"Cannot sort by '{page_request.sort_by}'. Must be one of: {sorted(sortable)}"
        )
    ordering = [column.asc() if page_request.direction == "asc" else column.desc()]
    if tiebreaker is not None:
        ordering.append(tiebreaker.asc())
    return query.order_by(*ordering).paginate(
        page=page_request.page + 1,
        per_page=page_request.size,
        error_out=False,
    )


def page_to_dict(pagination, serialize: Callable) -> dict:
    return {
        "content": [serialize(item) for item in pagination.items],
        "page": pagination.page - 1,
        "size": pagination.per_page,
        "total_elements": pagination.total,
        "total_pages": pagination.pages,
    }
