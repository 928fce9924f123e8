"""
Tests for the catalog query engine.
"""
import math
import uuid
import pytest
from videohub.core.errors import NotFoundError, ValidationError
from videohub.services.catalog import CatalogQueryEngine, build_predicate
from videohub.services.query_validator import validate_catalog_query


@pytest.fixture
def catalog(db_session):
    return CatalogQueryEngine(db_session)


@pytest.fixture
def twelve_videos(make_video):
    """Twelve published videos for u1 with distinct view counts, plus noise."""
    videos = [make_video(owner_id="u1", view_count=(i + 1) * 10) for i in range(12)]
    make_video(owner_id="u1", view_count=999, is_published=False)
    make_video(owner_id="u2", view_count=500)
    return videos


def test_predicate_omits_published_for_all():
    assert build_predicate(validate_catalog_query("u1", is_published="all")) == {"owner_id": "u1"}
    assert build_predicate(validate_catalog_query("u1", is_published="false")) == {
        "owner_id": "u1",
        "is_published": False,
    }


def test_second_page_by_views_descending(catalog, twelve_videos):
    query = validate_catalog_query("u1", page=2, limit=5, sort_by="views", sort_type=-1, is_published="true")
    result = catalog.page(query)

    ranked = sorted(twelve_videos, key=lambda v: (-v.view_count, v.id))
    assert [v.id for v in result.items] == [v.id for v in ranked[5:10]]
    assert result.total_count == 12
    assert result.total_pages == 3
    assert result.has_next is True
    assert result.has_prev is True


@pytest.mark.parametrize("limit", [1, 4, 5, 7, 12, 20])
def test_page_bounds_are_consistent(catalog, twelve_videos, limit):
    total_pages = math.ceil(12 / limit)
    for page in range(1, total_pages + 2):
        result = catalog.page(validate_catalog_query("u1", page=page, limit=limit))
        assert len(result.items) <= limit
        assert result.total_pages == total_pages
        assert result.has_next == (page < total_pages)
        assert result.has_prev == (page > 1)
    last = catalog.page(validate_catalog_query("u1", page=total_pages + 1, limit=limit))
    assert last.items == []


def test_ties_broken_by_id(catalog, make_video):
    """Equal sort values page without duplicates or gaps."""
    videos = [make_video(owner_id="u1", view_count=7) for _ in range(7)]
    seen = []
    for page in (1, 2, 3):
        result = catalog.page(validate_catalog_query("u1", page=page, limit=3, sort_by="views", sort_type=-1))
        seen.extend(v.id for v in result.items)
    assert seen == sorted(v.id for v in videos)


def test_published_filter(catalog, twelve_videos):
    unpublished = catalog.page(validate_catalog_query("u1", is_published="false"))
    assert unpublished.total_count == 1
    assert unpublished.items[0].view_count == 999
    assert catalog.page(validate_catalog_query("u1", is_published="all")).total_count == 13


def test_sorted_by_title_ascending(catalog, make_video):
    for title in ("banana", "apple", "cherry"):
        make_video(owner_id="u3", title=title)
    result = catalog.page(validate_catalog_query("u3", sort_by="title"))
    assert [v.title for v in result.items] == ["apple", "banana", "cherry"]


def test_empty_catalog(catalog):
    result = catalog.page(validate_catalog_query("nobody"))
    assert result.items == []
    assert result.total_count == 0
    assert result.total_pages == 0
    assert result.has_next is False
    assert result.has_prev is False


def test_get_video(catalog, make_video):
    video = make_video()
    assert catalog.get_video(video.id).id == video.id
    with pytest.raises(NotFoundError):
        catalog.get_video(uuid.uuid4())


def test_far_page_is_empty(catalog, twelve_videos):
    result = catalog.page(validate_catalog_query("u1", page=2**60, limit=5))
    assert result.items == []
    assert result.total_count == 12
    assert result.has_next is False
    assert result.has_prev is True


def test_unaddressable_page_never_reaches_the_database(catalog, twelve_videos):
    with pytest.raises(ValidationError) as exc_info:
        catalog.page(validate_catalog_query("u1", page="100000000000000000000", limit="5"))
    assert exc_info.value.field == "page"
