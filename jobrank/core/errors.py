"""Error taxonomy shared by the matching core and its boundaries."""
from __future__ import annotations


class JobRankError(Exception):
    """Base class for all errors raised by jobrank."""


class ValidationError(JobRankError):
    """A candidate or job record is malformed."""


class RecordNotFound(JobRankError):
    """A requested candidate or job does not exist."""

    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class StorageUnavailable(JobRankError):
    """The persistence layer could not be reached or failed mid-operation."""


class IngestionRecordError(JobRankError):
    """A single record in an ingestion batch could not be processed.

    Always counted and logged by the deduplicator, never propagated out of a batch.
    """

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class CacheCorruption(JobRankError):
    """A cache entry failed validation; callers treat it as a miss."""
