"""Tests for scraped record normalisation and request filters."""
from __future__ import annotations

import uuid

import pytest

pytest.importorskip("dateutil")
pytest.importorskip("bs4")

from jobrank.core.errors import IngestionRecordError
from jobrank.ingestion.records import parse_external_job
from jobrank.matching.filters import RankingFilters, matches_filters
from jobrank.matching.types import WorkMode


def test_camel_case_records_are_normalised(record_factory) -> None:
    """Scraper field names map onto the stored fields."""

    record = parse_external_job(record_factory(source="Greenhouse", skills="React, TypeScript, react"))

    assert record.source == "greenhouse"
    assert record.external_id == "gh-1"
    assert record.external_url == "https://boards.greenhouse.io/acme/jobs/1"
    assert record.skills == ["React", "TypeScript"]
    assert record.work_type is WorkMode.REMOTE
    assert record.salary_min == 140000
    assert record.posted_date is not None and record.posted_date.tzinfo is not None
    assert record.description == "Build our design system."


def test_salary_and_work_mode_are_inferred(record_factory) -> None:
    """Missing salary and work mode come from the description and location."""

    record = parse_external_job(
        record_factory(
            salaryMin=None,
            salaryMax=None,
            workType=None,
            location="London (Hybrid)",
            description="Pay: $120k - $150k.",
        )
    )

    assert (record.salary_min, record.salary_max) == (120000, 150000)
    assert record.work_type is WorkMode.HYBRID


def test_platform_records_get_a_generated_id(record_factory) -> None:
    """Internally authored postings need no scraper id."""

    record = parse_external_job(record_factory(source="platform", externalId=None))

    assert uuid.UUID(record.external_id)


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"externalId": None},
        {"skills": 12},
        {"workType": "spaceship"},
        {"salaryMin": "negotiable"},
    ],
)
def test_invalid_records_are_rejected(record_factory, overrides: dict) -> None:
    """Unusable records raise IngestionRecordError carrying their index."""

    with pytest.raises(IngestionRecordError) as info:
        parse_external_job(record_factory(**overrides), index=4)

    assert info.value.index == 4


def test_non_mapping_records_are_rejected() -> None:
    """Lists and strings are not job records."""

    with pytest.raises(IngestionRecordError):
        parse_external_job(["not", "a", "record"])  # type: ignore[arg-type]


def test_filter_signature_is_stable() -> None:
    """Equal filters hash equally; any changed value changes the hash."""

    assert RankingFilters(WorkMode.REMOTE, "Berlin").signature() == RankingFilters(WorkMode.REMOTE, "berlin").signature()
    assert RankingFilters(limit=10).signature() != RankingFilters(limit=20).signature()


def test_request_filters(make_job) -> None:
    """Work mode, location and salary floors narrow the pool; remote jobs pass any location."""

    onsite = make_job(work_mode=WorkMode.ONSITE, location="Austin, TX", salary_max=90000)
    remote = make_job(work_mode=WorkMode.REMOTE, location="Remote")

    assert not matches_filters(onsite, RankingFilters(work_mode=WorkMode.REMOTE))
    assert matches_filters(onsite, RankingFilters(location="austin"))
    assert not matches_filters(onsite, RankingFilters(location="Berlin"))
    assert matches_filters(remote, RankingFilters(location="Berlin"))
    assert not matches_filters(onsite, RankingFilters(min_salary=100000))
    assert matches_filters(remote, RankingFilters(min_salary=100000))
