# tests/test_services/test_discovery.py
import pytest
from core.services.discovery import (
    DiscoveryFilters, DiscoveryService, build_conditions, parse_flag, resolve_sort
)


@pytest.fixture
def catalog(make_edition):
    """Five editions across types, languages and flags"""
    make_edition(id="a1", isbn="1", type="audiobook", format="mp3", language="en",
                 explicit=True, abridged=False, runtime="10:00:00", page_count=None,
                 release_date="2021-05-04", genres="Sci-Fi, Space", publisher="Audible")
    make_edition(id="a2", asin="B2", type="audiobook", format="mp3", language="en",
                 explicit=None, abridged=True, runtime="05:00:00",
                 release_date="2019-01-01", genres="Fantasy", tags="award")
    make_edition(id="p1", isbn="3", type="print", format="hardcover", language="en",
                 explicit=False, page_count=480, release_date="2021-05-04", genres="Sci-Fi")
    make_edition(id="p2", isbn="4", type="print", format="paperback", language="de",
                 page_count=200, release_date="2015-03-03", series_name="Bobiverse")
    make_edition(id="e1", asin="B5", type="ebook", format="epub", language="en",
                 page_count=300, release_date="2023-07-07", tags="award, bestseller")


@pytest.fixture
def service(db_session):
    return DiscoveryService(db_session)


def ids(page):
    return [e.id for e in page.results]


def test_no_filters_matches_everything(service, catalog):
    page = service.discover(DiscoveryFilters())
    assert page.total == 5
    assert len(page.results) == 5


def test_filters_are_conjunctive(service, catalog):
    filters = DiscoveryFilters.from_params({"type": "audiobook", "language": "en", "genres": "Sci"})
    page = service.discover(filters)
    assert ids(page) == ["a1"]
    assert page.total == 1


def test_equality_is_exact(service, catalog):
    assert service.discover(DiscoveryFilters(type="audio")).total == 0
    assert service.discover(DiscoveryFilters(series_name="Bobiverse")).total == 1


def test_true_flag_matches_flagged_only(service, catalog):
    assert ids(service.discover(DiscoveryFilters.from_params({"explicit": "true"}))) == ["a1"]


def test_false_flag_matches_false_and_missing(service, catalog):
    page = service.discover(DiscoveryFilters.from_params({"explicit": "no"}), sort="release_date", order="asc")
    assert sorted(ids(page)) == ["a2", "e1", "p1", "p2"]


def test_substring_filters(service, catalog):
    assert sorted(ids(service.discover(DiscoveryFilters(tags="award")))) == ["a2", "e1"]
    assert ids(service.discover(DiscoveryFilters(genres="%"))) == []


def test_sort_defaults_to_release_date_desc(service, catalog):
    page = service.discover(DiscoveryFilters())
    assert page.sort == "release_date"
    assert page.order == "desc"
    # Ties on release date fall back to id
    assert ids(page) == ["e1", "p1", "a1", "a2", "p2"]


def test_unknown_sort_field_falls_back(service, catalog):
    page = service.discover(DiscoveryFilters(), sort="title; DROP TABLE editions", order="asc")
    assert page.sort == "release_date"
    assert ids(page) == ["p2", "a2", "a1", "p1", "e1"]


def test_sort_by_page_count_ascending(service, catalog):
    page = service.discover(DiscoveryFilters(type="print"), sort="page_count", order="ASC")
    assert ids(page) == ["p2", "p1"]


def test_pagination_metadata_matches_slice(service, catalog):
    first = service.discover(DiscoveryFilters(), limit=2, offset=0)
    rest = service.discover(DiscoveryFilters(), limit=2, offset=4)

    assert first.total == rest.total == 5
    assert len(first.results) == 2
    assert len(rest.results) == 1
    assert (first.limit, first.offset) == (2, 0)


def test_limit_zero_still_counts(service, catalog):
    page = service.discover(DiscoveryFilters(type="print"), limit=0)
    assert page.total == 2
    assert page.results == []


def test_results_are_normalized(service, catalog):
    page = service.discover(DiscoveryFilters(type="audiobook"), sort="runtime", order="asc")
    first = page.results[0]
    assert first.id == "a2"
    assert first.abridged is True
    assert first.explicit is False
    assert first.tags == ["award"]


def test_from_params_drops_empty_values_and_unknown_keys():
    filters = DiscoveryFilters.from_params({"type": "  ", "format": "mp3", "abridged": "", "color": "red"})
    assert filters.active() == {"format": "mp3", "abridged": False}


def test_parse_flag():
    assert parse_flag("true") is True
    assert parse_flag("TRUE") is True
    assert parse_flag("1") is False
    assert parse_flag(None) is None


def test_resolve_sort():
    assert resolve_sort("runtime", "asc") == ("runtime", "asc")
    assert resolve_sort("id", None) == ("release_date", "desc")
    assert resolve_sort(None, "sideways") == ("release_date", "desc")


def test_build_conditions_empty():
    assert build_conditions(DiscoveryFilters()) == []
