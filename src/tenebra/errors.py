from __future__ import annotations


class TenebraError(Exception):
    """Base class for all tenebra errors."""


class ManifestError(TenebraError):
    """A manifest record could not be decoded."""


class IndexSyncError(TenebraError):
    """Index synchronisation failed; the run must not continue."""


class FetchError(TenebraError):
    """A single archive could not be downloaded."""


class ArchiveError(TenebraError):
    """A single archive could not be extracted."""


class UnsafeArchivePathError(ArchiveError):
    """An archive member resolves outside the extraction directory."""
