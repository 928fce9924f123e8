"""
Tests for catalog query parameter validation.
"""
import pytest
from videohub.core.errors import MissingParameterError, ValidationError
from videohub.services.query_validator import (
    MAX_OFFSET,
    PublishedFilter,
    SortDirection,
    validate_catalog_query,
)


def test_defaults():
    """Only the owner is required; everything else has a default."""
    query = validate_catalog_query(owner_id="u1")
    assert query.owner_id == "u1"
    assert query.page == 1
    assert query.limit == 10
    assert query.sort_field == "created_at"
    assert query.sort_direction is SortDirection.ASCENDING
    assert query.published_filter is PublishedFilter.PUBLISHED


@pytest.mark.parametrize("owner_id", [None, "", "   "])
def test_missing_owner(owner_id):
    with pytest.raises(MissingParameterError) as exc_info:
        validate_catalog_query(owner_id=owner_id)
    assert exc_info.value.field == "userId"
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize(
    "sort_by, field",
    [("date", "created_at"), ("views", "view_count"), (" Title ", "title"), ("DURATION", "duration_seconds")],
)
def test_sort_by_maps_to_column(sort_by, field):
    assert validate_catalog_query(owner_id="u1", sort_by=sort_by).sort_field == field


@pytest.mark.parametrize(
    "sort_type, direction",
    [
        (1, SortDirection.ASCENDING),
        ("1", SortDirection.ASCENDING),
        ("asc", SortDirection.ASCENDING),
        (-1, SortDirection.DESCENDING),
        ("-1", SortDirection.DESCENDING),
        ("Descending", SortDirection.DESCENDING),
    ],
)
def test_sort_type_forms(sort_type, direction):
    assert validate_catalog_query(owner_id="u1", sort_type=sort_type).sort_direction is direction


@pytest.mark.parametrize(
    "is_published, expected",
    [
        ("true", PublishedFilter.PUBLISHED),
        (True, PublishedFilter.PUBLISHED),
        ("unpublished", PublishedFilter.UNPUBLISHED),
        ("false", PublishedFilter.UNPUBLISHED),
        ("ALL", PublishedFilter.ALL),
    ],
)
def test_published_filter_forms(is_published, expected):
    assert validate_catalog_query(owner_id="u1", is_published=is_published).published_filter is expected


def test_limit_is_clamped():
    assert validate_catalog_query(owner_id="u1", limit=1000).limit == 100
    assert validate_catalog_query(owner_id="u1", limit="50", max_limit=20).limit == 20


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"page": 0}, "page"),
        ({"page": "abc"}, "page"),
        ({"limit": -5}, "limit"),
        ({"limit": "1.5"}, "limit"),
        ({"sort_by": "likes"}, "sortBy"),
        ({"sort_type": 0}, "sortType"),
        ({"sort_type": "sideways"}, "sortType"),
        ({"is_published": "maybe"}, "isPublished"),
    ],
)
def test_invalid_values_name_the_field(kwargs, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_catalog_query(owner_id="u1", **kwargs)
    assert exc_info.value.field == field
    assert exc_info.value.errors == [{"field": field, "message": exc_info.value.message}]


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"page": "100000000000000000000", "limit": "5"}, "page"),
        ({"page": 2**62, "limit": 10}, "page"),
        ({"limit": "100000000000000000000"}, "limit"),
    ],
)
def test_offsets_beyond_64_bits_are_rejected(kwargs, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_catalog_query(owner_id="u1", **kwargs)
    assert exc_info.value.field == field


def test_last_addressable_page_is_accepted():
    query = validate_catalog_query(owner_id="u1", page=MAX_OFFSET // 5 + 1, limit=5)
    assert (query.page - 1) * query.limit <= MAX_OFFSET
