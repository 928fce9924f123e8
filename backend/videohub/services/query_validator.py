import enum
from dataclasses import dataclass
from typing import Any, Optional
from videohub.core.config import settings
from videohub.core.errors import MissingParameterError, ValidationError


class PublishedFilter(str, enum.Enum):
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"
    ALL = "all"


class SortDirection(str, enum.Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


# Public sort keys mapped to Video columns
SORT_FIELDS = {
    "date": "created_at",
    "views": "view_count",
    "title": "title",
    "duration": "duration_seconds",
}

_SORT_DIRECTIONS = {
    "1": SortDirection.ASCENDING,
    "asc": SortDirection.ASCENDING,
    "ascending": SortDirection.ASCENDING,
    "-1": SortDirection.DESCENDING,
    "desc": SortDirection.DESCENDING,
    "descending": SortDirection.DESCENDING,
}

_PUBLISHED_FILTERS = {
    "true": PublishedFilter.PUBLISHED,
    "published": PublishedFilter.PUBLISHED,
    "false": PublishedFilter.UNPUBLISHED,
    "unpublished": PublishedFilter.UNPUBLISHED,
    "all": PublishedFilter.ALL,
}

# Row offsets are passed to the database as signed 64-bit integers
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class CatalogQuery:
    owner_id: str
    published_filter: PublishedFilter
    sort_field: str
    sort_direction: SortDirection
    page: int
    limit: int


def _normalize(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip().lower()


def _positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    if number < 1:
        raise ValidationError(f"{field} must be at least 1", field=field)
    if number > MAX_OFFSET:
        raise ValidationError(f"{field} is too large", field=field)
    return number


def validate_catalog_query(
    owner_id: Optional[str],
    page: Any = None,
    limit: Any = None,
    sort_by: Any = None,
    sort_type: Any = None,
    is_published: Any = None,
    max_limit: Optional[int] = None,
) -> CatalogQuery:
    """
    Normalize raw catalog parameters into a CatalogQuery.

    None means "not supplied" and selects the default. Raises ValidationError
    naming the offending field, or MissingParameterError when owner_id is
    absent.
    """
    if owner_id is None or not str(owner_id).strip():
        raise MissingParameterError("userId")

    if max_limit is None:
        max_limit = settings.catalog_max_limit

    page_number = 1 if page is None else _positive_int(page, "page")
    page_size = settings.catalog_default_limit if limit is None else _positive_int(limit, "limit")
    page_size = min(page_size, max_limit)
    if (page_number - 1) * page_size > MAX_OFFSET:
        raise ValidationError(f"page {page_number} is beyond the last addressable row", field="page")

    sort_key = "date" if sort_by is None else _normalize(sort_by)
    if sort_key not in SORT_FIELDS:
        raise ValidationError(f"Invalid sortBy: {sort_by!r}", field="sortBy")

    direction = SortDirection.ASCENDING
    if sort_type is not None:
        direction = _SORT_DIRECTIONS.get(_normalize(sort_type))
        if direction is None:
            raise ValidationError(f"Invalid sortType: {sort_type!r}", field="sortType")

    published = PublishedFilter.PUBLISHED
    if is_published is not None:
        published = _PUBLISHED_FILTERS.get(_normalize(is_published))
        if published is None:
            raise ValidationError(f"Invalid isPublished: {is_published!r}", field="isPublished")

    return CatalogQuery(
        owner_id=str(owner_id).strip(),
        published_filter=published,
        sort_field=SORT_FIELDS[sort_key],
        sort_direction=direction,
        page=page_number,
        limit=page_size,
    )
