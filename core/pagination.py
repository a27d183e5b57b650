# ABOUTME: Pagination and sort handling shared by post and comment listings
# ABOUTME: Sort keys are resolved against allow-lists before any SQL is built

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from core.errors import ValidationError
from utils.input_validation import validator

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
POSTS_PAGE_SIZE = 10
DEFAULT_SORT = "created_at"
DEFAULT_ORDER = "desc"

# Accepted sortBy values -> column of the listing query
POST_SORT_COLUMNS: dict[str, str] = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "title": "title",
    "points": "points",
    "comment_count": "comment_count",
    "commentCount": "comment_count",
}

COMMENT_SORT_COLUMNS: dict[str, str] = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "points": "points",
    "reply_count": "reply_count",
    "replyCount": "reply_count",
}


@dataclass(frozen=True)
class PageRequest:
    """Validated list parameters. ``sort_by`` is always a column from an allow-list."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = DEFAULT_SORT
    order: str = DEFAULT_ORDER

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(
        cls,
        args: Mapping[str, Any],
        sortable: Mapping[str, str],
        fixed_limit: int | None = None,
    ) -> "PageRequest":
        """Build a PageRequest from raw query parameters.

        Args:
            args: Query string mapping (page, limit, sortBy, order)
            sortable: Sort allow-list for the resource
            fixed_limit: Page size that overrides any client-supplied limit

        Raises:
            ValidationError: Unknown sort key or order, or page/limit out of range
        """
        result = validator.validate_all(
            page=args.get("page"),
            limit=None if fixed_limit is not None else args.get("limit"),
            sort_by=args.get("sortBy"),
            order=args.get("order"),
            sortable=sortable,
            default_limit=fixed_limit if fixed_limit is not None else DEFAULT_LIMIT,
        )
        if not result.is_valid:
            raise ValidationError(result.first_error(), is_form_error=False)

        values = result.sanitized_values
        return cls(page=values["page"], limit=values["limit"], sort_by=values["sort_by"], order=values["order"])


@dataclass
class Page:
    """One page of results.

    ``has_more`` is true when the page came back full. A total that is an exact
    multiple of the limit therefore reports one extra, empty page; counting
    rows would cost a second query per listing.
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def has_more(self) -> bool:
        return len(self.items) == self.limit

    def pagination(self) -> dict[str, Any]:
        return {"page": self.page, "limit": self.limit, "hasMore": self.has_more}
