"""Normalisation of externally scraped job records."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from dateutil import parser as date_parser

from jobrank.core.errors import IngestionRecordError, ValidationError
from jobrank.matching.types import PLATFORM_SOURCE, WorkMode
from jobrank.parsing.html import html_to_text
from jobrank.parsing.location import infer_work_mode
from jobrank.parsing.salary import coerce_salary, extract_salary_range
from jobrank.utils.text import dedupe_preserving_order, split_list

# camelCase names used by scraper payloads -> field names
_KEY_ALIASES: dict[str, str] = {
    "externalId": "external_id",
    "externalUrl": "external_url",
    "workType": "work_type",
    "workMode": "work_type",
    "work_mode": "work_type",
    "salaryMin": "salary_min",
    "salaryMax": "salary_max",
    "postedDate": "posted_date",
    "posted_at": "posted_date",
    "url": "external_url",
}


@dataclass(slots=True)
class ExternalJobInput:
    """One validated scraper record."""

    title: str
    company: str
    source: str
    external_id: str
    description: str = ""
    location: str | None = None
    requirements: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    work_type: WorkMode | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    external_url: str | None = None
    posted_date: datetime | None = None
    industry: str | None = None


def _coerce_datetime(value: Any) -> datetime | None:
    """Parse arbitrary date inputs into an aware UTC datetime."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = date_parser.parse(str(value))
        except (ValueError, TypeError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt


def _normalize_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in payload.items():
        target = _KEY_ALIASES.get(key, key)
        if normalized.get(target) in (None, "") or target == key:
            normalized[target] = value
    return normalized


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


def parse_external_job(payload: Mapping[str, Any], *, index: int | None = None) -> ExternalJobInput:
    """Validate and normalise one scraped record.

    Raises ``IngestionRecordError`` for records that cannot be stored:
    missing title, company or source, a missing external id on a
    non-platform record, or list fields of the wrong type.
    """

    if not isinstance(payload, Mapping):
        raise IngestionRecordError(f"record is {type(payload).__name__}, not an object", index=index)
    data = _normalize_keys(payload)

    title = _text(data, "title")
    company = _text(data, "company")
    source = _text(data, "source").lower()
    missing = [name for name, value in (("title", title), ("company", company), ("source", source)) if not value]
    if missing:
        raise IngestionRecordError(f"missing required fields: {', '.join(missing)}", index=index)

    external_id = _text(data, "external_id")
    if not external_id:
        if source != PLATFORM_SOURCE:
            raise IngestionRecordError(f"external record from {source!r} has no externalId", index=index)
        external_id = str(uuid.uuid4())

    try:
        skills = dedupe_preserving_order(split_list(data.get("skills")))
        requirements = split_list(data.get("requirements"))
        location = _text(data, "location") or None
        work_type = WorkMode.parse(data.get("work_type")) or WorkMode.parse(infer_work_mode(location))
        salary_min = coerce_salary(data.get("salary_min"))
        salary_max = coerce_salary(data.get("salary_max"))
    except (TypeError, ValueError, ValidationError) as exc:
        raise IngestionRecordError(str(exc), index=index) from exc

    description = html_to_text(_text(data, "description"))
    if salary_min is None and salary_max is None:
        detected = extract_salary_range(description)
        if detected:
            salary_min, salary_max = detected
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        salary_min, salary_max = salary_max, salary_min

    return ExternalJobInput(
        title=title,
        company=company,
        source=source,
        external_id=external_id,
        description=description,
        location=location,
        requirements=requirements,
        skills=skills,
        work_type=work_type,
        salary_min=salary_min,
        salary_max=salary_max,
        external_url=_text(data, "external_url") or None,
        posted_date=_coerce_datetime(data.get("posted_date")),
        industry=_text(data, "industry") or None,
    )
